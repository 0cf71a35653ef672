# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from arm_composex.common.arm_functions import Concat, ListKeys, ResourceId
from arm_composex.storage.storage_params import (
    MOD_KEY,
    STANDARD_LRS,
    STORAGE_ACCOUNT_TYPE,
    STORAGE_KEYS_API_VERSION,
    STORAGE_SKUS,
)


def storage_account_key(account_name: str, api_version: str = STORAGE_KEYS_API_VERSION):
    """
    Expression for the primary key of a storage account

    :param str account_name:
    :param str api_version:
    :rtype: arm_composex.common.arm_functions.ArmExpression
    """
    return ListKeys(ResourceId(STORAGE_ACCOUNT_TYPE, account_name), api_version).get(
        "keys[0].value"
    )


@dataclass(frozen=True)
class StorageAccountConfig:
    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = "storage"
    name: str
    sku: str = STANDARD_LRS

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Storage account name must be a non empty string", self.name)
        if self.sku not in STORAGE_SKUS:
            raise ValueError(f"{self.name} - sku {self.sku} is invalid. Must be one of", STORAGE_SKUS)

    @property
    def key(self):
        """Connection string of the storage account"""
        return Concat(
            "DefaultEndpointsProtocol=https;AccountName=",
            self.name,
            ";AccountKey=",
            storage_account_key(self.name),
        )

    @property
    def secure_parameters(self) -> tuple:
        return ()
