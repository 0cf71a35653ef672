# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Base classes for the low-level ARM resources and their nested properties.

ARM resources share one envelope (type, apiVersion, name, location, dependsOn ...) and carry their settings
in a "properties" object. The properties are declared troposphere-style in ``props`` so that property types
and required properties get validated when rendering, and each class can add its own ``validate()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arm_composex.common.dependencies import ResourceRef

from troposphere import AWSProperty, encode_to_dict

from arm_composex.common.arm_functions import ResourceId


def validate_unique(values: list, label: str, owner: str) -> None:
    """
    Raises ValueError if values has duplicates

    :param list values: the values to check
    :param str label: what the values are, for the error message
    :param str owner: what the values belong to, for the error message
    """
    duplicates = sorted({str(value) for value in values if values.count(value) > 1})
    if duplicates:
        raise ValueError(f"{owner} - duplicate {label}: {', '.join(duplicates)}")


class ArmProperty(AWSProperty):
    """
    Nested property object of an ARM resource
    """


class NamedArmProperty(ArmProperty):
    """
    Nested property object rendered as {"name": name, "properties": {...}}, i.e. containers or subnets.
    """

    def __init__(self, name: str, **kwargs):
        if not isinstance(name, str) or not name:
            raise ValueError(f"{type(self).__name__} - name must be a non empty string. Got", name)
        self.name = name
        super().__init__(**kwargs)

    def to_dict(self, validation=True) -> dict:
        return {"name": self.name, "properties": super().to_dict(validation)}


class ArmResource(AWSProperty):
    """
    Class to represent a resource of the deployment template

    :cvar str arm_type: The ARM resource type, i.e. Microsoft.Web/sites
    :cvar str api_version: The API version the properties conform to
    :ivar str name: name of the resource. Child resources use parent/child
    :ivar list[ResourceRef] dependencies: references to other resources, resolved at assembly
    :ivar list depends_on: resolved dependencies, rendered into dependsOn
    """

    arm_type: str = None
    api_version: str = None
    props = {}

    def __init__(
        self,
        name: str,
        location: str = None,
        dependencies: list = None,
        sku: dict = None,
        kind: str = None,
        identity=None,
        tags: dict = None,
        **kwargs,
    ):
        if not isinstance(name, str) or not name:
            raise ValueError(f"{self.arm_type} - name must be a non empty string. Got", name)
        self.name = name
        self.location = location
        self.dependencies: list[ResourceRef] = list(dependencies) if dependencies else []
        self.depends_on: list = []
        self.sku = sku
        self.kind = kind
        self.identity = identity
        self.tags = tags
        super().__init__(**kwargs)

    def __repr__(self):
        return f"{self.arm_type}::{self.name}"

    @property
    def resource_id(self) -> ResourceId:
        return ResourceId(self.arm_type, self.name)

    @property
    def key(self) -> tuple:
        """Identifies the resource within a deployment template"""
        return self.arm_type.lower(), self.name.lower()

    def to_dict(self, validation=True) -> dict:
        resource = {
            "type": self.arm_type,
            "apiVersion": self.api_version,
            "name": self.name,
        }
        if self.location:
            resource["location"] = self.location
        for key, value in (
            ("sku", self.sku),
            ("kind", self.kind),
            ("identity", self.identity),
            ("tags", self.tags),
        ):
            if value:
                resource[key] = encode_to_dict(value)
        resource["dependsOn"] = [encode_to_dict(dep) for dep in self.depends_on]
        properties = super().to_dict(validation)
        if properties:
            resource["properties"] = properties
        return resource
