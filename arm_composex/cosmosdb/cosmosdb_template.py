# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM resources of Cosmos DB: the account, its SQL database and the database containers.
"""

from __future__ import annotations

from troposphere.validators import boolean, integer

from arm_composex.common.arm_resources import ArmProperty, ArmResource
from arm_composex.common.dependencies import implicit_dependency
from arm_composex.common.logging import LOG
from arm_composex.cosmosdb.cosmosdb_config import (
    ConsistencyPolicy,
    CosmosContainerConfig,
    CosmosDbConfig,
    FailoverPolicy,
)
from arm_composex.cosmosdb.cosmosdb_params import (
    ACCOUNT_KIND,
    ACCOUNT_OFFER_TYPE,
    ACCOUNT_TYPE,
    AUTO_FAILOVER,
    BOUNDED_STALENESS,
    CONTAINER_TYPE,
    COSMOS_API_VERSION,
    DATABASE_TYPE,
    MULTI_MASTER,
    NO_FAILOVER,
)


class ConsistencyPolicyProperty(ArmProperty):
    props = {
        "defaultConsistencyLevel": (str, True),
        "maxStalenessPrefix": (integer, False),
        "maxIntervalInSeconds": (integer, False),
    }


class AccountLocation(ArmProperty):
    props = {
        "locationName": (str, True),
        "failoverPriority": (integer, True),
    }


class DatabaseAccount(ArmResource):
    arm_type = ACCOUNT_TYPE
    api_version = COSMOS_API_VERSION
    props = {
        "consistencyPolicy": (ConsistencyPolicyProperty, True),
        "databaseAccountOfferType": (str, True),
        "enableAutomaticFailover": (boolean, False),
        "enableMultipleWriteLocations": (boolean, False),
        "locations": ([AccountLocation], True),
    }


class DatabaseResource(ArmProperty):
    props = {"id": (str, True)}


class DatabaseOptions(ArmProperty):
    props = {"throughput": (integer, False)}


class PartitionKey(ArmProperty):
    props = {
        "paths": ([str], True),
        "kind": (str, True),
    }


class Index(ArmProperty):
    props = {
        "kind": (str, True),
        "dataType": (str, True),
        "precision": (integer, False),
    }


class IncludedPath(ArmProperty):
    props = {
        "path": (str, True),
        "indexes": ([Index], False),
    }


class ExcludedPath(ArmProperty):
    props = {"path": (str, True)}


class IndexingPolicy(ArmProperty):
    props = {
        "indexingMode": (str, True),
        "includedPaths": ([IncludedPath], False),
        "excludedPaths": ([ExcludedPath], False),
    }


class ContainerResource(ArmProperty):
    props = {
        "id": (str, True),
        "partitionKey": (PartitionKey, True),
        "indexingPolicy": (IndexingPolicy, False),
    }


class CosmosChildResource(ArmResource):
    """
    Database and container settings sit under properties.resource, an attribute name troposphere reserves.
    """

    def __init__(self, name: str, cosmos_resource: ArmProperty, **kwargs):
        self.cosmos_resource = cosmos_resource
        super().__init__(name, **kwargs)

    def to_dict(self, validation=True) -> dict:
        resource = super().to_dict(validation)
        properties = {"resource": self.cosmos_resource.to_dict(validation)}
        properties.update(resource.get("properties", {}))
        resource["properties"] = properties
        return resource


class SqlDatabase(CosmosChildResource):
    arm_type = DATABASE_TYPE
    api_version = COSMOS_API_VERSION
    props = {"options": (DatabaseOptions, False)}


class SqlContainer(CosmosChildResource):
    arm_type = CONTAINER_TYPE
    api_version = COSMOS_API_VERSION
    props = {}


def render_consistency_policy(policy: ConsistencyPolicy) -> ConsistencyPolicyProperty:
    if policy.level == BOUNDED_STALENESS:
        return ConsistencyPolicyProperty(
            defaultConsistencyLevel=policy.level,
            maxStalenessPrefix=policy.max_staleness_prefix,
            maxIntervalInSeconds=policy.max_interval_in_seconds,
        )
    return ConsistencyPolicyProperty(defaultConsistencyLevel=policy.level)


def render_locations(location: str, policy: FailoverPolicy) -> list:
    locations = [AccountLocation(locationName=location, failoverPriority=0)]
    if policy.policy != NO_FAILOVER:
        locations.append(
            AccountLocation(locationName=policy.secondary_location, failoverPriority=1)
        )
    return locations


def render_container(config: CosmosDbConfig, container: CosmosContainerConfig) -> SqlContainer:
    database_name = f"{config.server_name}/{config.name}"
    indexing_policy = IndexingPolicy(
        indexingMode="consistent",
        includedPaths=[
            IncludedPath(
                path=index.path,
                indexes=[
                    Index(kind=kind, dataType=data_type, precision=-1)
                    for data_type, kind in index.indexes
                ],
            )
            for index in container.indexes
        ],
        excludedPaths=[ExcludedPath(path=path) for path in container.excluded_paths],
    )
    return SqlContainer(
        f"{database_name}/{container.name}",
        ContainerResource(
            id=container.name,
            partitionKey=PartitionKey(
                paths=list(container.partition_key_paths), kind=container.partition_key_kind
            ),
            indexingPolicy=indexing_policy,
        ),
        dependencies=[implicit_dependency(DATABASE_TYPE, database_name)],
    )


def expand_cosmosdb(config: CosmosDbConfig, location: str) -> list:
    account = DatabaseAccount(
        config.server_name,
        location=location,
        kind=ACCOUNT_KIND,
        consistencyPolicy=render_consistency_policy(config.consistency_policy),
        databaseAccountOfferType=ACCOUNT_OFFER_TYPE,
        enableAutomaticFailover=config.failover_policy.policy == AUTO_FAILOVER,
        enableMultipleWriteLocations=config.failover_policy.policy == MULTI_MASTER,
        locations=render_locations(location, config.failover_policy),
    )
    database = SqlDatabase(
        f"{config.server_name}/{config.name}",
        DatabaseResource(id=config.name),
        dependencies=[implicit_dependency(ACCOUNT_TYPE, config.server_name)],
        options=DatabaseOptions(throughput=config.throughput),
    )
    containers = [render_container(config, container) for container in config.containers]
    LOG.debug(f"{config.server_name} - database {config.name}, {len(containers)} containers")
    return [account, database] + containers
