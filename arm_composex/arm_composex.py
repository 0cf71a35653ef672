# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Main module: assembles the resources configurations into one deployment document.

Every resource configuration names the module that expands it, via its ``mod_key`` and ``res_key``:
``arm_composex.<mod_key>.<mod_key>_template.expand_<res_key>(config, location)`` returns the ARM resources
of the configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from importlib import import_module
from typing import Callable, Tuple

from arm_composex.common.deployment import DeploymentDocument
from arm_composex.common.dependencies import DependencyGraph
from arm_composex.common.locations import DEFAULT_LOCATION, define_location
from arm_composex.common.logging import LOG
from arm_composex.common.secure_parameters import allocate_parameters, merge_parameters
from arm_composex.common.validation import validate_document
from arm_composex.exceptions import UnknownResourceType


def get_mod_function(module_name: str, function_name: str) -> Callable | None:
    """
    Function to get function in a given module name from function_name

    :param str module_name: the name of the module in arm_composex to find and try to import
    :param str function_name: name of the function to try to get
    :return: function, if found, from the module
    """
    composex_module_name = f"arm_composex.{module_name}"
    LOG.debug(composex_module_name)
    function = None
    try:
        res_module = import_module(composex_module_name)
        try:
            function = getattr(res_module, function_name)
        except AttributeError:
            LOG.debug(f"No {function_name} function found in {composex_module_name}")
    except ImportError as error:
        LOG.debug(f"Failure to process the module {composex_module_name}")
        LOG.debug(error)
    return function


def get_expand_function(config) -> Callable:
    """
    :param config: a resource configuration
    :return: the function expanding the configuration into ARM resources
    :raises UnknownResourceType: if no module handles that configuration
    """
    mod_key = getattr(config, "mod_key", None)
    res_key = getattr(config, "res_key", None)
    function = None
    if mod_key and res_key:
        function = get_mod_function(f"{mod_key}.{mod_key}_template", f"expand_{res_key}")
    if function is None:
        raise UnknownResourceType(
            f"Sorry, no module handles resources of type {type(config).__name__}", config
        )
    return function


@dataclass(frozen=True)
class ArmConfig:
    """
    Everything that goes into a deployment document

    :ivar tuple parameters: explicitly declared parameter names
    :ivar tuple variables: (name, value) pairs
    :ivar tuple outputs: (name, value) pairs
    :ivar tuple resources: resource configurations, in order
    """

    location: str = DEFAULT_LOCATION
    parameters: Tuple[str, ...] = field(default_factory=tuple)
    variables: Tuple[tuple, ...] = field(default_factory=tuple)
    outputs: Tuple[tuple, ...] = field(default_factory=tuple)
    resources: tuple = field(default_factory=tuple)

    def __post_init__(self):
        for setting in ("parameters", "resources"):
            object.__setattr__(self, setting, tuple(getattr(self, setting)))
        for setting in ("variables", "outputs"):
            object.__setattr__(
                self, setting, tuple(tuple(pair) for pair in getattr(self, setting))
            )


def assemble(arm_config: ArmConfig) -> DeploymentDocument:
    """
    Expands every resource configuration, resolves the dependencies and allocates the secure parameters.

    :param ArmConfig arm_config:
    :rtype: DeploymentDocument
    :raises UnknownResourceType: before any expansion, if a configuration cannot be expanded
    """
    expand_functions = [get_expand_function(config) for config in arm_config.resources]
    location = define_location(arm_config.location)
    resources = []
    for config, expand_function in zip(arm_config.resources, expand_functions):
        expanded = expand_function(config, location)
        LOG.info(
            f"{type(config).__name__} {getattr(config, 'name', '')} - {len(expanded)} resources"
        )
        resources += expanded
    DependencyGraph(resources).apply()
    parameters = merge_parameters(
        arm_config.parameters, allocate_parameters(arm_config.resources)
    )
    return DeploymentDocument(
        location=location,
        parameters=tuple(parameters),
        variables=arm_config.variables,
        outputs=arm_config.outputs,
        resources=tuple(resources),
    )


def generate_template(arm_config: ArmConfig) -> tuple:
    """
    Assembles and validates the deployment document

    :return: the document and its rendered template
    :rtype: tuple[DeploymentDocument, dict]
    """
    document = assemble(arm_config)
    template = validate_document(document)
    return document, template


class ArmBuilder:
    """
    Step by step definition of a deployment document.

    >>> document = ArmBuilder().location("eastus").add_parameter("foo").build()
    >>> document.parameters
    ('foo',)
    """

    def __init__(self, arm_config: ArmConfig = None):
        self.arm_config = arm_config if arm_config else ArmConfig()

    def location(self, location: str) -> ArmBuilder:
        self.arm_config = replace(self.arm_config, location=location)
        return self

    def add_parameter(self, name: str) -> ArmBuilder:
        return self.add_parameters([name])

    def add_parameters(self, names: list) -> ArmBuilder:
        self.arm_config = replace(
            self.arm_config, parameters=self.arm_config.parameters + tuple(names)
        )
        return self

    def add_variable(self, name: str, value) -> ArmBuilder:
        self.arm_config = replace(
            self.arm_config, variables=self.arm_config.variables + ((name, value),)
        )
        return self

    def output(self, name: str, value) -> ArmBuilder:
        self.arm_config = replace(
            self.arm_config, outputs=self.arm_config.outputs + ((name, value),)
        )
        return self

    def add_resource(self, config) -> ArmBuilder:
        return self.add_resources([config])

    def add_resources(self, configs: list) -> ArmBuilder:
        self.arm_config = replace(
            self.arm_config, resources=self.arm_config.resources + tuple(configs)
        )
        return self

    def build(self) -> DeploymentDocument:
        return assemble(self.arm_config)
