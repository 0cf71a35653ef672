# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM template expressions.

Expressions are troposphere helper functions so they can be assigned to any resource property
without type validation, the same way Ref() or GetAtt() would be for CloudFormation.
Nested functions compose on the raw expression; only the outermost one is wrapped in brackets.
"""

from __future__ import annotations

from troposphere import AWSHelperFn

from arm_composex.common import split_resource_name


def format_argument(value) -> str:
    """
    Formats a python value into an ARM expression function argument

    :param value: the value to format
    :rtype: str
    """
    if isinstance(value, ArmExpression):
        return value.expression
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, int):
        return str(value)
    elif isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    raise TypeError(
        "ARM function arguments must be of type", (str, int, ArmExpression), "Got", type(value)
    )


class ArmExpression(AWSHelperFn):
    """
    Any ARM expression, i.e. parameters('foo') or reference('bar').property
    """

    def __init__(self, expression: str):
        if not isinstance(expression, str) or not expression:
            raise ValueError("An ARM expression must be a non empty string. Got", expression)
        self.data = expression

    @property
    def expression(self) -> str:
        return self.data

    def get(self, path: str) -> ArmExpression:
        """
        Property access on the expression result

        :param str path: the property path, i.e. keys[0].value
        """
        return ArmExpression(f"{self.expression}.{path}")

    def to_dict(self) -> str:
        return f"[{self.expression}]"

    def __eq__(self, other):
        return isinstance(other, ArmExpression) and other.expression == self.expression

    def __hash__(self):
        return hash(self.expression)

    def __repr__(self):
        return self.to_dict()


class ArmFunction(ArmExpression):
    function_name = None

    def __init__(self, *args):
        self.args = args
        arguments = ", ".join(format_argument(arg) for arg in args)
        super().__init__(f"{self.function_name}({arguments})")


class ResourceId(ArmFunction):
    """
    resourceId([resourceGroupName], resourceType, name1, [name2], ...)
    """

    function_name = "resourceId"

    def __init__(self, resource_type: str, name: str, resource_group: str = None):
        self.resource_type = resource_type
        self.resource_name = name
        self.resource_group = resource_group
        segments = split_resource_name(name)
        if resource_group:
            super().__init__(resource_group, resource_type, *segments)
        else:
            super().__init__(resource_type, *segments)


class Reference(ArmFunction):
    function_name = "reference"


class Parameters(ArmFunction):
    function_name = "parameters"


class Variables(ArmFunction):
    function_name = "variables"


class Concat(ArmFunction):
    function_name = "concat"


class ListKeys(ArmFunction):
    function_name = "listKeys"


class List(ArmFunction):
    function_name = "list"


def render_expression(value):
    """
    Renders expressions to their string form, leaves any other value as-is.
    """
    if isinstance(value, ArmExpression):
        return value.to_dict()
    return value
