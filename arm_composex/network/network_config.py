# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Virtual network and network profile configuration values
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from ipaddress import IPv4Network
from typing import ClassVar, Tuple

from arm_composex.common.dependencies import (
    ResourceRef,
    implicit_dependency,
    linked_resource,
)
from arm_composex.exceptions import IncompatibleOptions
from arm_composex.network.network_params import (
    MOD_KEY,
    NETWORK_PROFILE_TYPE,
    VNET_TYPE,
)


def validate_cidr(cidr: str, owner: str) -> str:
    try:
        IPv4Network(cidr)
    except ValueError as error:
        raise ValueError(f"{owner} - {cidr} is not a valid IPv4 CIDR notation", error)
    return cidr


@dataclass(frozen=True)
class SubnetConfig:
    name: str
    prefix: str
    delegations: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Subnet name must be a non empty string", self.name)
        validate_cidr(self.prefix, self.name)
        object.__setattr__(self, "delegations", tuple(self.delegations))


@dataclass(frozen=True)
class VirtualNetworkConfig:
    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = "virtual_network"
    name: str
    address_spaces: Tuple[str, ...] = field(default_factory=tuple)
    subnets: Tuple[SubnetConfig, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Virtual network name must be a non empty string", self.name)
        for cidr in self.address_spaces:
            validate_cidr(cidr, self.name)
        object.__setattr__(self, "address_spaces", tuple(self.address_spaces))
        object.__setattr__(self, "subnets", tuple(self.subnets))

    def add_address_spaces(self, address_spaces: list) -> VirtualNetworkConfig:
        return replace(self, address_spaces=self.address_spaces + tuple(address_spaces))

    def add_subnets(self, subnets: list) -> VirtualNetworkConfig:
        return replace(self, subnets=self.subnets + tuple(subnets))

    @property
    def secure_parameters(self) -> tuple:
        return ()


@dataclass(frozen=True)
class NetworkProfileConfig:
    """
    Network profile for container groups deployed into a subnet.

    :ivar str vnet: name of a virtual network declared in the same template
    :ivar str linked_vnet: name of an existing virtual network
    :ivar str linked_vnet_resource_group: resource group of the existing virtual network
    :ivar str subnet: the subnet to deploy into
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = "network_profile"
    name: str
    vnet: str = None
    linked_vnet: str = None
    linked_vnet_resource_group: str = None
    subnet: str = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Network profile name must be a non empty string", self.name)
        if self.vnet and self.linked_vnet:
            raise IncompatibleOptions(
                f"{self.name} - vnet and linked_vnet are mutually exclusive",
                self.vnet,
                self.linked_vnet,
            )

    @property
    def vnet_name(self) -> str:
        return self.vnet or self.linked_vnet

    @property
    def vnet_ref(self) -> ResourceRef | None:
        if self.linked_vnet:
            return linked_resource(VNET_TYPE, self.linked_vnet, self.linked_vnet_resource_group)
        elif self.vnet:
            return implicit_dependency(VNET_TYPE, self.vnet)
        return None

    @property
    def ref(self) -> ResourceRef:
        return implicit_dependency(NETWORK_PROFILE_TYPE, self.name)

    @property
    def secure_parameters(self) -> tuple:
        return ()


def link_network_profile(name: str, resource_group: str = None) -> ResourceRef:
    """
    Reference to an existing network profile. Never creates a dependency.
    """
    return linked_resource(NETWORK_PROFILE_TYPE, name, resource_group)
