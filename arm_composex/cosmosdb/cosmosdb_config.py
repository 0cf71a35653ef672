# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar, Tuple

from arm_composex.cosmosdb.cosmosdb_params import (
    BOUNDED_STALENESS,
    CONSISTENCY_LEVELS,
    DEFAULT_THROUGHPUT,
    EVENTUAL,
    FAILOVER_POLICIES,
    HASH,
    INDEX_DATA_TYPES,
    INDEX_KINDS,
    MOD_KEY,
    NO_FAILOVER,
)


@dataclass(frozen=True)
class ConsistencyPolicy:
    """
    Default consistency of the account. Only BoundedStaleness uses the staleness settings.
    """

    level: str = EVENTUAL
    max_staleness_prefix: int = None
    max_interval_in_seconds: int = None

    def __post_init__(self):
        if self.level not in CONSISTENCY_LEVELS:
            raise ValueError(
                f"Consistency level {self.level} must be one of", CONSISTENCY_LEVELS
            )
        if self.level == BOUNDED_STALENESS and (
            self.max_staleness_prefix is None or self.max_interval_in_seconds is None
        ):
            raise ValueError(
                "BoundedStaleness requires max_staleness_prefix and max_interval_in_seconds"
            )

    @classmethod
    def bounded_staleness(cls, staleness_prefix: int, interval: int) -> ConsistencyPolicy:
        return cls(BOUNDED_STALENESS, staleness_prefix, interval)


@dataclass(frozen=True)
class FailoverPolicy:
    policy: str = NO_FAILOVER
    secondary_location: str = None

    def __post_init__(self):
        if self.policy not in FAILOVER_POLICIES:
            raise ValueError(f"Failover policy {self.policy} must be one of", FAILOVER_POLICIES)
        if self.policy != NO_FAILOVER and not self.secondary_location:
            raise ValueError(f"{self.policy} requires a secondary location")


@dataclass(frozen=True)
class CosmosIndex:
    """
    Included index path, with its (data type, index kind) pairs
    """

    path: str
    indexes: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def __post_init__(self):
        for data_type, kind in self.indexes:
            if data_type not in INDEX_DATA_TYPES:
                raise ValueError(f"{self.path} - data type must be one of", INDEX_DATA_TYPES)
            if kind not in INDEX_KINDS:
                raise ValueError(f"{self.path} - index kind must be one of", INDEX_KINDS)
        object.__setattr__(self, "indexes", tuple(tuple(index) for index in self.indexes))


@dataclass(frozen=True)
class CosmosContainerConfig:
    name: str
    partition_key_paths: Tuple[str, ...] = field(default_factory=tuple)
    partition_key_kind: str = HASH
    indexes: Tuple[CosmosIndex, ...] = field(default_factory=tuple)
    excluded_paths: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Cosmos container name must be a non empty string", self.name)
        if self.partition_key_kind not in INDEX_KINDS:
            raise ValueError(
                f"{self.name} - partition key kind must be one of", INDEX_KINDS
            )
        object.__setattr__(self, "partition_key_paths", tuple(self.partition_key_paths))
        object.__setattr__(self, "indexes", tuple(self.indexes))
        object.__setattr__(self, "excluded_paths", tuple(self.excluded_paths))

    def include_index(self, path: str, indexes: list) -> CosmosContainerConfig:
        return replace(self, indexes=self.indexes + (CosmosIndex(path, tuple(indexes)),))

    def exclude_path(self, path: str) -> CosmosContainerConfig:
        return replace(self, excluded_paths=self.excluded_paths + (path,))


@dataclass(frozen=True)
class CosmosDbConfig:
    """
    Cosmos DB account with its database

    :ivar str server_name: name of the database account
    :ivar str name: name of the database
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = MOD_KEY
    server_name: str
    name: str
    consistency_policy: ConsistencyPolicy = field(default_factory=ConsistencyPolicy)
    failover_policy: FailoverPolicy = field(default_factory=FailoverPolicy)
    throughput: int = DEFAULT_THROUGHPUT
    containers: Tuple[CosmosContainerConfig, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for attribute in ("server_name", "name"):
            value = getattr(self, attribute)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Cosmos DB {attribute} must be a non empty string", value)
        if isinstance(self.throughput, bool) or int(self.throughput) < 400:
            raise ValueError(f"{self.name} - throughput must be at least 400. Got", self.throughput)
        object.__setattr__(self, "throughput", int(self.throughput))
        object.__setattr__(self, "containers", tuple(self.containers))

    def add_containers(self, containers: list) -> CosmosDbConfig:
        return replace(self, containers=self.containers + tuple(containers))

    @property
    def secure_parameters(self) -> tuple:
        return ()
