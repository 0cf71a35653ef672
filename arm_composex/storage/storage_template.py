# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from arm_composex.common.arm_resources import ArmResource
from arm_composex.common.logging import LOG
from arm_composex.storage.storage_config import StorageAccountConfig
from arm_composex.storage.storage_params import (
    STORAGE_ACCOUNT_API_VERSION,
    STORAGE_ACCOUNT_NAME,
    STORAGE_ACCOUNT_TYPE,
    STORAGE_KIND,
)


class StorageAccount(ArmResource):
    arm_type = STORAGE_ACCOUNT_TYPE
    api_version = STORAGE_ACCOUNT_API_VERSION
    props = {}

    def validate(self):
        if not STORAGE_ACCOUNT_NAME.match(self.name):
            raise ValueError(
                f"Storage account name {self.name} is invalid. Must match",
                STORAGE_ACCOUNT_NAME.pattern,
            )


def expand_storage(config: StorageAccountConfig, location: str) -> list:
    LOG.debug(f"{config.name} - storage account {config.sku}")
    return [
        StorageAccount(
            config.name,
            location=location,
            sku={"name": config.sku},
            kind=STORAGE_KIND,
        )
    ]
