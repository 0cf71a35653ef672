# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM resources for virtual networks and network profiles
"""

from __future__ import annotations

from arm_composex.common import NONALPHANUM
from arm_composex.common.arm_functions import ResourceId
from arm_composex.common.arm_resources import (
    ArmProperty,
    ArmResource,
    NamedArmProperty,
    validate_unique,
)
from arm_composex.common.logging import LOG
from arm_composex.network.network_config import NetworkProfileConfig, VirtualNetworkConfig
from arm_composex.network.network_params import (
    INTERFACE_NAME,
    IP_CONFIGURATION_NAME,
    NETWORK_API_VERSION,
    NETWORK_PROFILE_TYPE,
    SUBNET_TYPE,
    VNET_TYPE,
)


class AddressSpace(ArmProperty):
    props = {"addressPrefixes": ([str], True)}


class Delegation(NamedArmProperty):
    props = {"serviceName": (str, True)}


class Subnet(NamedArmProperty):
    props = {
        "addressPrefix": (str, True),
        "delegations": ([Delegation], False),
    }


class VirtualNetwork(ArmResource):
    arm_type = VNET_TYPE
    api_version = NETWORK_API_VERSION
    props = {
        "addressSpace": (AddressSpace, True),
        "subnets": ([Subnet], False),
    }

    def validate(self):
        validate_unique(
            [subnet.name for subnet in self.properties.get("subnets", [])],
            "subnets",
            self.name,
        )


class SubnetReference(ArmProperty):
    props = {"id": (str, True)}


class IpConfiguration(NamedArmProperty):
    props = {"subnet": (SubnetReference, True)}


class ContainerNetworkInterfaceConfiguration(NamedArmProperty):
    props = {"ipConfigurations": ([IpConfiguration], True)}


class NetworkProfile(ArmResource):
    arm_type = NETWORK_PROFILE_TYPE
    api_version = NETWORK_API_VERSION
    props = {
        "containerNetworkInterfaceConfigurations": (
            [ContainerNetworkInterfaceConfiguration],
            True,
        )
    }


def expand_virtual_network(config: VirtualNetworkConfig, location: str) -> list:
    subnets = [
        Subnet(
            subnet.name,
            addressPrefix=subnet.prefix,
            delegations=[
                Delegation(NONALPHANUM.sub("", service), serviceName=service)
                for service in subnet.delegations
            ],
        )
        for subnet in config.subnets
    ]
    LOG.debug(f"{config.name} - virtual network with {len(subnets)} subnets")
    return [
        VirtualNetwork(
            config.name,
            location=location,
            addressSpace=AddressSpace(addressPrefixes=list(config.address_spaces)),
            subnets=subnets,
        )
    ]


def network_profile_dependencies(config: NetworkProfileConfig) -> list:
    vnet_ref = config.vnet_ref
    return [vnet_ref] if vnet_ref else []


def expand_network_profile(config: NetworkProfileConfig, location: str) -> list:
    if not config.vnet_name or not config.subnet:
        raise ValueError(
            f"Network profile {config.name} requires a virtual network and a subnet",
            {"vnet": config.vnet_name, "subnet": config.subnet},
        )
    subnet_id = ResourceId(
        SUBNET_TYPE,
        f"{config.vnet_name}/{config.subnet}",
        resource_group=config.linked_vnet_resource_group if config.linked_vnet else None,
    )
    interface = ContainerNetworkInterfaceConfiguration(
        INTERFACE_NAME,
        ipConfigurations=[
            IpConfiguration(
                IP_CONFIGURATION_NAME, subnet=SubnetReference(id=subnet_id)
            )
        ],
    )
    return [
        NetworkProfile(
            config.name,
            location=location,
            dependencies=network_profile_dependencies(config),
            containerNetworkInterfaceConfigurations=[interface],
        )
    ]
