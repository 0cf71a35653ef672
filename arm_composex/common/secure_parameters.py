# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Secure parameters: placeholders for secrets, only given a value at deployment time.

Parameter names are derived from the resource names so that assembling the same configuration twice
always yields the same parameters. Two different secrets given the same name share one parameter: avoiding
such collisions is up to the configuration author.
"""

from __future__ import annotations

from dataclasses import dataclass

from arm_composex.common import unique_ordered
from arm_composex.common.arm_functions import Parameters
from arm_composex.common.logging import LOG

SECURE_STRING = "securestring"


@dataclass(frozen=True)
class SecureParameter:
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Secure parameters must have a non empty name. Got", self.name)

    @property
    def expression(self) -> Parameters:
        return Parameters(self.name)

    def __str__(self):
        return self.name


def registry_password_parameter(server: str) -> SecureParameter:
    """
    >>> registry_password_parameter("my-registry.azurecr.io").name
    'my-registry.azurecr.io-password'
    """
    return SecureParameter(f"{server}-password")


def sql_password_parameter(server_name: str) -> SecureParameter:
    """
    >>> sql_password_parameter("my-server").name
    'password-for-my-server'
    """
    return SecureParameter(f"password-for-{server_name}")


def allocate_parameters(configs: list) -> list:
    """
    Collects the names of the secure parameters every resource configuration requires.

    :param list configs: the resource configurations
    :return: the parameter names, in order of first encounter
    :rtype: list[str]
    """
    names = []
    for config in configs:
        for parameter in getattr(config, "secure_parameters", ()):
            names.append(parameter.name)
    allocated = unique_ordered(names)
    LOG.debug(f"Allocated secure parameters {allocated}")
    return allocated


def merge_parameters(explicit: list, allocated: list) -> list:
    """
    Union of the parameters declared by the user and the ones allocated for secrets.
    """
    return unique_ordered(list(explicit) + list(allocated))
