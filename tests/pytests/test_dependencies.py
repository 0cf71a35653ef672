#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from arm_composex.arm_composex import ArmBuilder
from arm_composex.common.arm_functions import render_expression
from arm_composex.common.dependencies import (
    DependencyGraph,
    explicit_dependency,
    implicit_dependency,
    linked_resource,
)
from arm_composex.container_group.container_group_config import (
    ContainerGroupConfig,
    ContainerInstanceConfig,
)
from arm_composex.exceptions import IncompatibleOptions
from arm_composex.identity.identity_params import USER_ASSIGNED_IDENTITY_TYPE
from arm_composex.identity.identity_template import UserAssignedIdentityResource
from arm_composex.network.network_config import (
    NetworkProfileConfig,
    SubnetConfig,
    VirtualNetworkConfig,
    link_network_profile,
)
from arm_composex.network.network_params import CONTAINER_GROUPS_DELEGATION
from arm_composex.network.network_template import expand_network_profile
from arm_composex.storage.storage_params import STORAGE_ACCOUNT_TYPE
from arm_composex.storage.storage_template import StorageAccount

STORAGE_ID = "[resourceId('Microsoft.Storage/storageAccounts', 'storagea')]"
PROFILE_ID = "[resourceId('Microsoft.Network/networkProfiles', 'netprofile')]"


def rendered(depends_on: list) -> list:
    return [render_expression(dependency) for dependency in depends_on]


def test_typed_dependencies_dedup_and_self():
    storage = StorageAccount("storagea")
    identity = UserAssignedIdentityResource(
        "identityb",
        dependencies=[
            implicit_dependency(STORAGE_ACCOUNT_TYPE, "storagea"),
            implicit_dependency(STORAGE_ACCOUNT_TYPE, "storagea"),
            implicit_dependency(USER_ASSIGNED_IDENTITY_TYPE, "identityb"),
        ],
    )
    graph = DependencyGraph([storage, identity]).apply()
    assert rendered(identity.depends_on) == [STORAGE_ID]
    assert storage.depends_on == []
    assert graph.edges[identity.key] == [storage.key]


def test_typed_dependency_not_in_template():
    identity = UserAssignedIdentityResource(
        "identityb", dependencies=[implicit_dependency(STORAGE_ACCOUNT_TYPE, "elsewhere")]
    )
    DependencyGraph([identity]).apply()
    assert identity.depends_on == []


def test_linked_dependency_never_an_edge():
    storage = StorageAccount("storagea")
    identity = UserAssignedIdentityResource(
        "identityb",
        dependencies=[linked_resource(STORAGE_ACCOUNT_TYPE, "storagea", "other-rg")],
    )
    DependencyGraph([storage, identity]).apply()
    assert identity.depends_on == []


def test_explicit_dependencies():
    storage = StorageAccount("storagea")
    identity = UserAssignedIdentityResource(
        "identityb",
        dependencies=[
            explicit_dependency("StorageA"),
            explicit_dependency("external-thing"),
            explicit_dependency("external-thing"),
        ],
    )
    DependencyGraph([storage, identity]).apply()
    assert rendered(identity.depends_on) == [STORAGE_ID, "external-thing"]
    with raises(AttributeError):
        explicit_dependency("external-thing").resource_id


def test_topological_order():
    identity = UserAssignedIdentityResource(
        "identityb", dependencies=[implicit_dependency(STORAGE_ACCOUNT_TYPE, "storagea")]
    )
    storage = StorageAccount("storagea")
    graph = DependencyGraph([identity, storage]).apply()
    assert graph.topological_order() == [storage, identity]


def test_circular_dependencies():
    first = UserAssignedIdentityResource(
        "first", dependencies=[implicit_dependency(USER_ASSIGNED_IDENTITY_TYPE, "second")]
    )
    second = UserAssignedIdentityResource(
        "second", dependencies=[implicit_dependency(USER_ASSIGNED_IDENTITY_TYPE, "first")]
    )
    graph = DependencyGraph([first, second]).apply()
    with raises(ValueError):
        graph.topological_order()


def container_network():
    return VirtualNetworkConfig(
        "containernet",
        address_spaces=("10.30.0.0/16",),
        subnets=(
            SubnetConfig("ContainerSubnet", "10.30.41.0/24", (CONTAINER_GROUPS_DELEGATION,)),
        ),
    )


def container_group(network_profile):
    return ContainerGroupConfig(
        "privategroup",
        instances=(ContainerInstanceConfig("app", image="nginx").add_internal_ports([80]),),
        network_profile=network_profile,
    )


def test_network_profile_by_name_in_template():
    profile = NetworkProfileConfig("netprofile", vnet="containernet", subnet="ContainerSubnet")
    document = (
        ArmBuilder()
        .add_resources([container_network(), profile, container_group("netprofile")])
        .build()
    )
    profile_resource, group = document.resources[1], document.resources[2]
    assert rendered(profile_resource.depends_on) == [
        "[resourceId('Microsoft.Network/virtualNetworks', 'containernet')]"
    ]
    assert rendered(group.depends_on) == [PROFILE_ID]
    assert group.to_dict()["properties"]["networkProfile"] == {"id": PROFILE_ID}


def test_network_profile_config_reference():
    profile = NetworkProfileConfig("netprofile", vnet="containernet", subnet="ContainerSubnet")
    document = (
        ArmBuilder()
        .add_resources([container_network(), profile, container_group(profile)])
        .build()
    )
    assert rendered(document.resources[2].depends_on) == [PROFILE_ID]


def test_network_profile_not_in_template():
    document = ArmBuilder().add_resource(container_group("netprofile")).build()
    group = document.resources[0]
    assert group.depends_on == []
    assert group.to_dict()["properties"]["networkProfile"] == {"id": PROFILE_ID}


def test_network_profile_reference_needs_resource_type():
    with raises(TypeError):
        container_group(explicit_dependency("netprofile"))
    with raises(TypeError):
        ContainerGroupConfig("privategroup").with_network_profile(explicit_dependency("netprofile"))
    group = container_group(implicit_dependency("Microsoft.Network/networkProfiles", "netprofile"))
    document = ArmBuilder().add_resource(group).build()
    assert document.resources[0].to_dict()["properties"]["networkProfile"] == {"id": PROFILE_ID}


def test_linked_network_profile():
    profile = NetworkProfileConfig("netprofile", vnet="containernet", subnet="ContainerSubnet")
    document = (
        ArmBuilder()
        .add_resources(
            [profile, container_group(link_network_profile("netprofile", "network-rg"))]
        )
        .build()
    )
    group = document.resources[1]
    assert group.depends_on == []
    assert group.to_dict()["properties"]["networkProfile"] == {
        "id": "[resourceId('network-rg', 'Microsoft.Network/networkProfiles', 'netprofile')]"
    }


def test_network_profile_linked_vnet():
    profile = NetworkProfileConfig(
        "netprofile",
        linked_vnet="sharednet",
        linked_vnet_resource_group="network-rg",
        subnet="containers",
    )
    resource = expand_network_profile(profile, "eastus")[0]
    assert resource.dependencies[0].linked
    DependencyGraph([resource]).apply()
    assert resource.depends_on == []
    interface = resource.to_dict()["properties"]["containerNetworkInterfaceConfigurations"][0]
    assert interface == {
        "name": "eth0",
        "properties": {
            "ipConfigurations": [
                {
                    "name": "ipconfigprofile",
                    "properties": {
                        "subnet": {
                            "id": "[resourceId('network-rg', "
                            "'Microsoft.Network/virtualNetworks/subnets', 'sharednet', 'containers')]"
                        }
                    },
                }
            ]
        },
    }


def test_network_profile_options():
    with raises(IncompatibleOptions):
        NetworkProfileConfig("netprofile", vnet="containernet", linked_vnet="sharednet")
    with raises(ValueError):
        expand_network_profile(NetworkProfileConfig("netprofile", vnet="containernet"), "eastus")
    with raises(ValueError):
        SubnetConfig("subnet", "10.30.41.0/33")
    with raises(ValueError):
        VirtualNetworkConfig("vnet", address_spaces=("not-a-cidr",))


def test_virtual_network_rendering():
    network = ArmBuilder().add_resource(container_network()).build().resources[0]
    assert network.to_dict()["properties"] == {
        "addressSpace": {"addressPrefixes": ["10.30.0.0/16"]},
        "subnets": [
            {
                "name": "ContainerSubnet",
                "properties": {
                    "addressPrefix": "10.30.41.0/24",
                    "delegations": [
                        {
                            "name": "MicrosoftContainerInstancecontainerGroups",
                            "properties": {
                                "serviceName": "Microsoft.ContainerInstance/containerGroups"
                            },
                        }
                    ],
                },
            }
        ],
    }
    duplicated = container_network().add_subnets([SubnetConfig("ContainerSubnet", "10.30.42.0/24")])
    with raises(ValueError):
        ArmBuilder().add_resource(duplicated).build().resources[0].to_dict()
