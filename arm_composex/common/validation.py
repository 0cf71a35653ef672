# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Structural validation of the assembled deployment document.

Each resource renders with troposphere validation: required properties, property types and
the resource own ``validate()``. The rendered template is then checked against the deployment template
JSON schema shipped in arm_composex/specs.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arm_composex.common.deployment import DeploymentDocument

import jsonschema
from importlib_resources import files as pkg_files

from arm_composex.common.dependencies import DependencyGraph
from arm_composex.common.logging import LOG
from arm_composex.exceptions import TemplateValidationError

DEPLOYMENT_TEMPLATE_SCHEMA = "specs/deployment-template.spec.json"


def load_schema(schema_path: str = DEPLOYMENT_TEMPLATE_SCHEMA) -> dict:
    source = pkg_files("arm_composex").joinpath(schema_path)
    LOG.debug(f"Loading JSON schema {source}")
    return json.loads(source.read_text())


def validate_unique_resources(document: DeploymentDocument) -> None:
    keys = []
    for resource in document.resources:
        if resource.key in keys:
            raise TemplateValidationError(f"Resource {resource!r} is defined more than once")
        keys.append(resource.key)


def render_template(document: DeploymentDocument) -> dict:
    """
    Renders the document with troposphere validation of every resource

    :raises TemplateValidationError: if a resource is invalid
    """
    try:
        return document.to_dict(validation=True)
    except (ValueError, TypeError, KeyError, AttributeError) as error:
        LOG.error(f"Invalid resource in template: {error}")
        raise TemplateValidationError("Invalid resource in template", error) from error


def validate_document(document: DeploymentDocument, schema: dict = None) -> dict:
    """
    Validates the assembled document once.

    :param DeploymentDocument document:
    :param dict schema: override of the deployment template schema
    :return: the rendered template
    :rtype: dict
    :raises TemplateValidationError: on the first violation found
    """
    validate_unique_resources(document)
    graph = DependencyGraph(document.resources)
    for resource in document.resources:
        graph.resolve(resource)
    try:
        graph.topological_order()
    except ValueError as error:
        raise TemplateValidationError("Invalid dependencies", error) from error
    template = render_template(document)
    try:
        jsonschema.validate(template, schema if schema else load_schema())
    except jsonschema.exceptions.ValidationError as error:
        LOG.error(f"Template is not conform to schema: {error.message}")
        raise TemplateValidationError("Template is not conform to schema", error.message) from error
    LOG.info(f"Template validated. {len(document.resources)} resources")
    return template
