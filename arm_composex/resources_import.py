# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to convert the resources definitions of the input files into resources configurations.

The definitions are expected to be valid against arm-compose-x.spec.json
"""

from __future__ import annotations

from compose_x_common.compose_x_common import keyisset, keypresent, set_else_none

from arm_composex.arm_composex import ArmConfig
from arm_composex.common.locations import DEFAULT_LOCATION
from arm_composex.common.logging import LOG
from arm_composex.common.secure_parameters import SecureParameter
from arm_composex.container_group.container_group_config import (
    ContainerGroupConfig,
    ContainerInstanceConfig,
    EnvVar,
    InitContainerConfig,
    ProbeConfig,
    RegistryCredential,
    SecretVolume,
    azure_file,
    empty_dir,
    git_repo,
)
from arm_composex.container_group.container_group_params import (
    ALWAYS_RESTART,
    DEFAULT_CPU_CORES,
    DEFAULT_MEMORY_GB,
    INTERNAL_PORT,
    LINUX,
    PUBLIC_PORT,
)
from arm_composex.cosmosdb.cosmosdb_config import (
    ConsistencyPolicy,
    CosmosContainerConfig,
    CosmosDbConfig,
    CosmosIndex,
    FailoverPolicy,
)
from arm_composex.cosmosdb.cosmosdb_params import DEFAULT_THROUGHPUT, HASH
from arm_composex.exceptions import UnknownResourceType
from arm_composex.identity.identity_config import (
    ManagedIdentity,
    UserAssignedIdentity,
    UserAssignedIdentityConfig,
)
from arm_composex.network.network_config import (
    NetworkProfileConfig,
    SubnetConfig,
    VirtualNetworkConfig,
    link_network_profile,
)
from arm_composex.sql.sql_config import SqlAzureConfig, SqlEdition
from arm_composex.sql.sql_params import DEFAULT_COLLATION, FREE
from arm_composex.storage.storage_config import StorageAccountConfig
from arm_composex.storage.storage_params import STANDARD_LRS
from arm_composex.web_app.web_app_config import WebAppConfig
from arm_composex.web_app.web_app_params import F1

PROBE_SETTINGS = [
    "period_seconds",
    "initial_delay_seconds",
    "failure_threshold",
    "success_threshold",
    "timeout_seconds",
]


def import_env_vars(definition: dict) -> list:
    env_vars = []
    for name, value in set_else_none("env_vars", definition, alt_value={}).items():
        if isinstance(value, dict):
            env_vars.append(EnvVar.create_secure(name, value["parameter"]))
        elif isinstance(value, bool):
            env_vars.append(EnvVar.create(name, str(value).lower()))
        else:
            env_vars.append(EnvVar.create(name, value))
    return env_vars


def import_probe(definition: dict) -> ProbeConfig | None:
    if not definition:
        return None
    settings = {key: definition[key] for key in PROBE_SETTINGS if keypresent(key, definition)}
    if keyisset("http", definition):
        return ProbeConfig.http(definition["http"], **settings)
    return ProbeConfig.exec(definition["exec"], **settings)


def import_instance(definition: dict) -> ContainerInstanceConfig:
    ports = [(port, PUBLIC_PORT) for port in set_else_none("public_ports", definition, [])]
    ports += [
        (port, INTERNAL_PORT) for port in set_else_none("internal_ports", definition, [])
    ]
    return ContainerInstanceConfig(
        definition["name"],
        image=set_else_none("image", definition, ""),
        cpu_cores=set_else_none("cpu_cores", definition, DEFAULT_CPU_CORES, eval_bool=True),
        memory_in_gb=set_else_none(
            "memory_in_gb", definition, DEFAULT_MEMORY_GB, eval_bool=True
        ),
        ports=tuple(ports),
        env_vars=tuple(import_env_vars(definition)),
        volume_mounts=tuple(set_else_none("volume_mounts", definition, {}).items()),
        command=tuple(set_else_none("command", definition, [])),
        liveness_probe=import_probe(set_else_none("liveness_probe", definition)),
        readiness_probe=import_probe(set_else_none("readiness_probe", definition)),
    )


def import_init_container(definition: dict) -> InitContainerConfig:
    return InitContainerConfig(
        definition["name"],
        image=set_else_none("image", definition, ""),
        command=tuple(set_else_none("command", definition, [])),
        env_vars=tuple(import_env_vars(definition)),
        volume_mounts=tuple(set_else_none("volume_mounts", definition, {}).items()),
    )


def import_volume(definition: dict):
    name = definition["name"]
    if keypresent("azure_file", definition):
        return azure_file(
            name,
            definition["azure_file"]["share_name"],
            definition["azure_file"]["storage_account_name"],
        )
    elif keypresent("secret", definition):
        return SecretVolume(
            name,
            tuple(
                (file_name, SecureParameter(value["parameter"]))
                if isinstance(value, dict)
                else (file_name, value)
                for file_name, value in definition["secret"].items()
            ),
        )
    elif keypresent("git_repo", definition):
        return git_repo(
            name,
            definition["git_repo"]["repository"],
            set_else_none("directory", definition["git_repo"]),
            set_else_none("revision", definition["git_repo"]),
        )
    return empty_dir(name)


def import_linked(definition, resource_type_function):
    if isinstance(definition, str):
        return definition
    return resource_type_function(
        definition["name"], set_else_none("resource_group", definition)
    )


def import_identity(definition: dict) -> ManagedIdentity:
    if not definition:
        return ManagedIdentity()
    return ManagedIdentity(
        system_assigned=keyisset("system_assigned", definition),
        user_assigned=tuple(
            import_linked(identity, UserAssignedIdentity)
            for identity in set_else_none("user_assigned", definition, [])
        ),
    )


def import_container_group(definition: dict) -> ContainerGroupConfig:
    network_profile = set_else_none("network_profile", definition)
    if network_profile:
        network_profile = import_linked(network_profile, link_network_profile)
    return ContainerGroupConfig(
        definition["name"],
        operating_system=set_else_none("operating_system", definition, LINUX),
        restart_policy=set_else_none("restart_policy", definition, ALWAYS_RESTART),
        instances=tuple(
            import_instance(instance)
            for instance in set_else_none("instances", definition, [])
        ),
        init_containers=tuple(
            import_init_container(container)
            for container in set_else_none("init_containers", definition, [])
        ),
        volumes=tuple(
            import_volume(volume) for volume in set_else_none("volumes", definition, [])
        ),
        network_profile=network_profile,
        registry_credentials=tuple(
            RegistryCredential(credential["server"], credential["username"])
            for credential in set_else_none("registry_credentials", definition, [])
        ),
        identity=import_identity(set_else_none("identity", definition)),
        ports=tuple(
            (port["protocol"], port["port"])
            for port in set_else_none("ports", definition, [])
        ),
        dns_name_label=set_else_none("dns_name_label", definition),
    )


def import_network_profile(definition: dict) -> NetworkProfileConfig:
    linked_vnet = set_else_none("linked_vnet", definition, {})
    return NetworkProfileConfig(
        definition["name"],
        vnet=set_else_none("vnet", definition),
        linked_vnet=set_else_none("name", linked_vnet),
        linked_vnet_resource_group=set_else_none("resource_group", linked_vnet),
        subnet=set_else_none("subnet", definition),
    )


def import_virtual_network(definition: dict) -> VirtualNetworkConfig:
    return VirtualNetworkConfig(
        definition["name"],
        address_spaces=tuple(set_else_none("address_spaces", definition, [])),
        subnets=tuple(
            SubnetConfig(
                subnet["name"],
                subnet["prefix"],
                tuple(set_else_none("delegations", subnet, [])),
            )
            for subnet in set_else_none("subnets", definition, [])
        ),
    )


def import_storage_account(definition: dict) -> StorageAccountConfig:
    return StorageAccountConfig(
        definition["name"], sku=set_else_none("sku", definition, STANDARD_LRS)
    )


def import_web_app(definition: dict) -> WebAppConfig:
    return WebAppConfig(
        definition["name"],
        service_plan_name=set_else_none("service_plan_name", definition),
        sku=set_else_none("sku", definition, F1),
        app_insights_name=set_else_none("app_insights_name", definition),
        run_from_package=keyisset("run_from_package", definition),
        node_version=set_else_none("node_version", definition),
        settings=tuple(set_else_none("settings", definition, {}).items()),
        dependencies=tuple(set_else_none("depends_on", definition, [])),
    )


def import_cosmos_container(definition: dict) -> CosmosContainerConfig:
    partition_key = set_else_none("partition_key", definition, {})
    return CosmosContainerConfig(
        definition["name"],
        partition_key_paths=tuple(set_else_none("paths", partition_key, [])),
        partition_key_kind=set_else_none("kind", partition_key, HASH),
        indexes=tuple(
            CosmosIndex(
                index["path"],
                tuple(
                    (item["data_type"], item["kind"])
                    for item in set_else_none("indexes", index, [])
                ),
            )
            for index in set_else_none("indexes", definition, [])
        ),
        excluded_paths=tuple(set_else_none("excluded_paths", definition, [])),
    )


def import_cosmos_db(definition: dict) -> CosmosDbConfig:
    consistency = set_else_none("consistency_policy", definition)
    failover = set_else_none("failover_policy", definition)
    return CosmosDbConfig(
        definition["server_name"],
        definition["name"],
        consistency_policy=ConsistencyPolicy(
            consistency["level"],
            set_else_none("max_staleness_prefix", consistency, eval_bool=True),
            set_else_none("max_interval_in_seconds", consistency, eval_bool=True),
        )
        if consistency
        else ConsistencyPolicy(),
        failover_policy=FailoverPolicy(
            failover["policy"], set_else_none("secondary_location", failover)
        )
        if failover
        else FailoverPolicy(),
        throughput=set_else_none("throughput", definition, DEFAULT_THROUGHPUT),
        containers=tuple(
            import_cosmos_container(container)
            for container in set_else_none("containers", definition, [])
        ),
    )


def import_sql_server(definition: dict) -> SqlAzureConfig:
    config = SqlAzureConfig(
        definition["server_name"],
        definition["admin_username"],
        definition["name"],
        edition=SqlEdition.from_sku(set_else_none("sku", definition, FREE)),
        collation=set_else_none("collation", definition, DEFAULT_COLLATION),
        encryption=keyisset("encryption", definition),
    )
    for rule in set_else_none("firewall_rules", definition, []):
        config = config.add_firewall_rule(
            rule["start"], rule["end"], set_else_none("name", rule)
        )
    if keyisset("use_azure_firewall", definition):
        config = config.use_azure_firewall()
    return config


def import_user_assigned_identity(definition: dict) -> UserAssignedIdentityConfig:
    return UserAssignedIdentityConfig(definition["name"])


RESOURCE_IMPORTS = {
    "container-group": import_container_group,
    "network-profile": import_network_profile,
    "virtual-network": import_virtual_network,
    "storage-account": import_storage_account,
    "web-app": import_web_app,
    "cosmos-db": import_cosmos_db,
    "sql-server": import_sql_server,
    "user-assigned-identity": import_user_assigned_identity,
}


def import_resource(definition: dict):
    """
    :param dict definition: the resource definition, with its type
    :return: the resource configuration
    :raises UnknownResourceType: if the type is not supported
    """
    resource_type = set_else_none("type", definition)
    if resource_type not in RESOURCE_IMPORTS:
        raise UnknownResourceType(
            f"Resource type {resource_type} is not supported. Must be one of",
            list(RESOURCE_IMPORTS.keys()),
        )
    config = RESOURCE_IMPORTS[resource_type](definition)
    LOG.debug(f"Imported {resource_type} {config}")
    return config


def import_arm_config(content: dict, location: str = None) -> ArmConfig:
    """
    Creates the ArmConfig from the merged input files content

    :param dict content: the input files content
    :param str location: overrides the location of the input files
    :rtype: ArmConfig
    """
    return ArmConfig(
        location=location or set_else_none("location", content, DEFAULT_LOCATION),
        parameters=tuple(set_else_none("parameters", content, [])),
        variables=tuple(set_else_none("variables", content, {}).items()),
        outputs=tuple(set_else_none("outputs", content, {}).items()),
        resources=tuple(
            import_resource(definition)
            for definition in set_else_none("resources", content, [])
        ),
    )
