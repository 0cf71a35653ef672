# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Identity configuration values
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple, Union

from arm_composex.common.arm_functions import ResourceId
from arm_composex.common.dependencies import (
    ResourceRef,
    implicit_dependency,
    linked_resource,
)
from arm_composex.identity.identity_params import (
    MOD_KEY,
    NO_IDENTITY,
    SYSTEM_AND_USER_ASSIGNED,
    SYSTEM_ASSIGNED,
    USER_ASSIGNED,
    USER_ASSIGNED_IDENTITY_TYPE,
)


@dataclass(frozen=True)
class UserAssignedIdentity:
    """
    Reference to a user-assigned identity. With a resource group, the identity is an existing one.
    """

    name: str
    resource_group: str = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("User assigned identity name must be a non empty string", self.name)

    @property
    def ref(self) -> ResourceRef:
        if self.resource_group:
            return linked_resource(USER_ASSIGNED_IDENTITY_TYPE, self.name, self.resource_group)
        return implicit_dependency(USER_ASSIGNED_IDENTITY_TYPE, self.name)

    @property
    def resource_id(self) -> ResourceId:
        return ResourceId(
            USER_ASSIGNED_IDENTITY_TYPE, self.name, resource_group=self.resource_group
        )


@dataclass(frozen=True)
class UserAssignedIdentityConfig:
    """
    User-assigned identity resource to create in the template
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = "identity"
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("User assigned identity name must be a non empty string", self.name)

    @property
    def identity(self) -> UserAssignedIdentity:
        return UserAssignedIdentity(self.name)

    @property
    def secure_parameters(self) -> tuple:
        return ()


def create_user_assigned_identity(name: str) -> UserAssignedIdentityConfig:
    return UserAssignedIdentityConfig(name)


@dataclass(frozen=True)
class ManagedIdentity:
    """
    Identity settings of a resource

    :ivar bool system_assigned: whether the resource gets a system assigned identity
    :ivar tuple[UserAssignedIdentity] user_assigned: the user assigned identities of the resource
    """

    system_assigned: bool = False
    user_assigned: Tuple[UserAssignedIdentity, ...] = field(default_factory=tuple)

    def __post_init__(self):
        user_assigned = []
        for identity in self.user_assigned:
            identity = to_user_assigned_identity(identity)
            if identity not in user_assigned:
                user_assigned.append(identity)
        object.__setattr__(self, "user_assigned", tuple(user_assigned))

    @property
    def identity_type(self) -> str:
        if self.system_assigned and self.user_assigned:
            return SYSTEM_AND_USER_ASSIGNED
        elif self.system_assigned:
            return SYSTEM_ASSIGNED
        elif self.user_assigned:
            return USER_ASSIGNED
        return NO_IDENTITY

    @property
    def is_set(self) -> bool:
        return self.identity_type != NO_IDENTITY

    @property
    def dependencies(self) -> list:
        return [identity.ref for identity in self.user_assigned]

    def add(
        self, identity: Union[UserAssignedIdentity, UserAssignedIdentityConfig, str]
    ) -> ManagedIdentity:
        return ManagedIdentity(
            self.system_assigned, self.user_assigned + (to_user_assigned_identity(identity),)
        )

    def with_system_identity(self) -> ManagedIdentity:
        return ManagedIdentity(True, self.user_assigned)


def to_user_assigned_identity(identity) -> UserAssignedIdentity:
    """
    Accepts identity references, identity resource configurations or names.
    """
    if isinstance(identity, UserAssignedIdentity):
        return identity
    elif isinstance(identity, UserAssignedIdentityConfig):
        return identity.identity
    elif isinstance(identity, str):
        return UserAssignedIdentity(identity)
    raise TypeError(
        "identity must be one of",
        (UserAssignedIdentity, UserAssignedIdentityConfig, str),
        "Got",
        type(identity),
    )
