# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the ArmComposeXSettings class
"""

from __future__ import annotations

from copy import deepcopy
from datetime import datetime as dt
from json import loads

import jsonschema
import yaml
from compose_x_common.compose_x_common import keyisset, set_else_none
from importlib_resources import files as pkg_files

from arm_composex.common import NONALPHANUM
from arm_composex.common.logging import LOG
from arm_composex.resources_import import import_arm_config

MERGED_LISTS = ["parameters", "resources"]


def load_input_file(file_path: str) -> dict:
    """
    Loads a YAML (or JSON) input file

    :param str file_path:
    :rtype: dict
    """
    with open(file_path) as input_fd:
        content = yaml.safe_load(input_fd.read())
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise TypeError(f"{file_path} - content must be a mapping. Got", type(content))
    return content


def merge_definitions(original: dict, override: dict) -> dict:
    """
    Merges the content of the override file into the original one.
    Parameters and resources add up, mappings merge and scalars get replaced.

    :param dict original:
    :param dict override:
    :return: the merged content
    :rtype: dict
    """
    merged = deepcopy(original)
    for key, value in override.items():
        if key in MERGED_LISTS and isinstance(merged.get(key), list):
            merged[key] = merged[key] + [
                item for item in value if not (key == "parameters" and item in merged[key])
            ]
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_definitions(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


class ArmComposeXSettings:
    """
    Class to handle the settings to use for ARM Compose-X.

    :ivar dict content: merged content of the input files
    :ivar str name: name of the deployment, used for the template file name
    :ivar str output_dir: directory to write the template to
    """

    name_arg = "Name"
    input_file_arg = "InputFiles"
    output_dir_arg = "OutputDirectory"
    location_arg = "Location"
    command_arg = "command"

    render_arg = "render"
    config_render_arg = "config"
    version_arg = "version"

    default_output_dir = f"/tmp/{dt.utcnow().strftime('%s')}"

    active_commands = [
        {
            "name": render_arg,
            "help": "Generates & Validates the ARM template locally",
        },
    ]
    validation_commands = [
        {
            "name": config_render_arg,
            "help": "Merges the input files to provide with the final input content",
        }
    ]
    neutral_commands = [{"name": version_arg, "help": "ARM Compose-X Version"}]

    def __init__(self, content: dict = None, **kwargs):
        """
        :param dict content: input content, used instead of, or merged after, the input files
        """
        self.command = set_else_none(self.command_arg, kwargs, self.render_arg)
        self.name = set_else_none(self.name_arg, kwargs, "arm-compose-x")
        self.output_dir = set_else_none(
            self.output_dir_arg, kwargs, self.default_output_dir
        )
        self.location = set_else_none(self.location_arg, kwargs)
        self.input_files = set_else_none(self.input_file_arg, kwargs, [])
        self.content = {}
        self.set_content(content)

    def __repr__(self):
        return f"{self.name}::{self.command}"

    @property
    def file_name(self) -> str:
        return NONALPHANUM.sub("-", self.name).strip("-")

    def set_content(self, content: dict = None) -> None:
        """
        Loads and merges the input files, then validates the result against the input schema

        :raises jsonschema.exceptions.ValidationError: if the merged content is invalid
        """
        merged = {}
        for file_path in self.input_files:
            LOG.debug(f"Loading input file {file_path}")
            merged = merge_definitions(merged, load_input_file(file_path))
        if content:
            merged = merge_definitions(merged, content)
        source = pkg_files("arm_composex").joinpath("specs/arm-compose-x.spec.json")
        LOG.info(f"Validating against input schema {source}")
        try:
            jsonschema.validate(merged, loads(source.read_text()))
        except jsonschema.exceptions.ValidationError as error:
            LOG.error(f"Input is not conform to schema: {error.message}")
            raise
        self.content = merged

    @property
    def arm_config(self):
        """
        :rtype: arm_composex.arm_composex.ArmConfig
        """
        return import_arm_config(self.content, location=self.location)

    def content_yaml(self) -> str:
        return yaml.safe_dump(self.content, sort_keys=False)

    def has_resources(self) -> bool:
        return keyisset("resources", self.content)
