# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
The deployment document, rendered into an ARM JSON template.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Tuple

from troposphere import encode_to_dict

from arm_composex.common import ARM_SCHEMA, CONTENT_VERSION
from arm_composex.common.locations import DEFAULT_LOCATION
from arm_composex.common.secure_parameters import SECURE_STRING

OUTPUT_TYPE = "string"


@dataclass(frozen=True)
class DeploymentDocument:
    """
    Assembled deployment template

    :ivar tuple parameters: names of the parameters to supply at deployment time
    :ivar tuple variables: (name, value) pairs
    :ivar tuple outputs: (name, value) pairs
    :ivar tuple resources: the ArmResource of the template, in order
    """

    location: str = DEFAULT_LOCATION
    parameters: Tuple[str, ...] = field(default_factory=tuple)
    variables: Tuple[tuple, ...] = field(default_factory=tuple)
    outputs: Tuple[tuple, ...] = field(default_factory=tuple)
    resources: tuple = field(default_factory=tuple)

    def to_dict(self, validation=True) -> dict:
        return {
            "$schema": ARM_SCHEMA,
            "contentVersion": CONTENT_VERSION,
            "parameters": {name: {"type": SECURE_STRING} for name in self.parameters},
            "variables": {name: encode_to_dict(value) for name, value in self.variables},
            "resources": [resource.to_dict(validation) for resource in self.resources],
            "outputs": {
                name: {"type": OUTPUT_TYPE, "value": encode_to_dict(value)}
                for name, value in self.outputs
            },
        }

    def to_json(self, indent=2, validation=True) -> str:
        return json.dumps(self.to_dict(validation), indent=indent)

    def find_resource(self, name: str, resource_type: str = None):
        """
        :return: the first resource with that name (and type if set), None if there is none
        """
        for resource in self.resources:
            if resource.name == name and (
                resource_type is None or resource.arm_type == resource_type
            ):
                return resource
        return None
