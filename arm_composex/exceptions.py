#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for arm-compose-x
"""


class ArmComposeXException(Exception):
    """
    Top class for ARM Compose-X Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class IncompatibleOptions(ArmComposeXException):
    """
    Exception when a resource configuration combines options that exclude each other,
    i.e. a network profile that both declares and links to an existing virtual network
    """


class UnknownResourceType(ArmComposeXException, TypeError):
    """
    Exception when a resource configuration has no module able to expand it into ARM resources.
    """


class VolumeNotFoundError(ArmComposeXException, LookupError):
    """
    Exception when a container mounts a volume that the container group does not declare.
    """


class TemplateValidationError(ArmComposeXException):
    """
    Exception when the assembled deployment template fails structural validation.
    """
