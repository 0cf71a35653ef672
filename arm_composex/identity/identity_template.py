# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM rendering of identities
"""

from __future__ import annotations

from arm_composex.common.arm_resources import ArmProperty, ArmResource
from arm_composex.common.logging import LOG
from arm_composex.identity.identity_config import (
    ManagedIdentity,
    UserAssignedIdentityConfig,
)
from arm_composex.identity.identity_params import (
    IDENTITY_TYPES,
    USER_ASSIGNED,
    USER_ASSIGNED_IDENTITY_API_VERSION,
    USER_ASSIGNED_IDENTITY_TYPE,
)


class ResourceIdentity(ArmProperty):
    props = {
        "type": (str, True),
        "userAssignedIdentities": (dict, False),
    }

    def validate(self):
        if self.properties["type"] not in IDENTITY_TYPES:
            raise ValueError(
                f"Identity type {self.properties['type']} is not valid. Must be one of",
                IDENTITY_TYPES,
            )
        if USER_ASSIGNED in self.properties["type"] and not self.properties.get(
            "userAssignedIdentities"
        ):
            raise ValueError(
                f"Identity type {self.properties['type']} requires userAssignedIdentities"
            )


class UserAssignedIdentityResource(ArmResource):
    arm_type = USER_ASSIGNED_IDENTITY_TYPE
    api_version = USER_ASSIGNED_IDENTITY_API_VERSION
    props = {}


def render_identity(identity: ManagedIdentity) -> ResourceIdentity | None:
    """
    Defines the identity block of a resource

    :param ManagedIdentity identity:
    :return: the identity property, None if the resource has no identity
    """
    if identity is None or not identity.is_set:
        return None
    props = {"type": identity.identity_type}
    if identity.user_assigned:
        props["userAssignedIdentities"] = {
            identity_ref.resource_id.to_dict(): {}
            for identity_ref in identity.user_assigned
        }
    return ResourceIdentity(**props)


def expand_identity(config: UserAssignedIdentityConfig, location: str) -> list:
    LOG.debug(f"{config.name} - user assigned identity")
    return [UserAssignedIdentityResource(config.name, location=location)]
