# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions shared across all modules.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

NONALPHANUM = re.compile(r"([^a-zA-Z\d]+)")
ARM_SCHEMA = (
    "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#"
)
CONTENT_VERSION = "1.0.0.0"


def unique_ordered(items: Iterable, key: Callable = None) -> list:
    """
    Removes duplicates from items, keeping the first occurrence of each.

    :param items: the items to go over
    :param key: function to compute the identity of an item. Defaults to the item itself.
    :return: the items in order of first encounter
    :rtype: list
    """
    seen = set()
    unique = []
    for item in items:
        identity = key(item) if key else item
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(item)
    return unique


def split_resource_name(name: str) -> list:
    """
    Child resources are named after their parents, i.e. server/database. resourceId() wants each segment.

    >>> split_resource_name("server/db")
    ['server', 'db']
    """
    return [segment for segment in name.split("/") if segment]
