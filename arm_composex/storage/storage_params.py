# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

import re

MOD_KEY = "storage"

STORAGE_ACCOUNT_TYPE = "Microsoft.Storage/storageAccounts"
STORAGE_ACCOUNT_API_VERSION = "2018-07-01"
STORAGE_KEYS_API_VERSION = "2017-10-01"
STORAGE_KIND = "StorageV2"

STORAGE_ACCOUNT_NAME = re.compile(r"^[a-z0-9]{3,24}$")

STANDARD_LRS = "Standard_LRS"
STANDARD_GRS = "Standard_GRS"
STANDARD_RAGRS = "Standard_RAGRS"
STANDARD_ZRS = "Standard_ZRS"
STANDARD_GZRS = "Standard_GZRS"
STANDARD_RAGZRS = "Standard_RAGZRS"
PREMIUM_LRS = "Premium_LRS"
PREMIUM_ZRS = "Premium_ZRS"

STORAGE_SKUS = [
    STANDARD_LRS,
    STANDARD_GRS,
    STANDARD_RAGRS,
    STANDARD_ZRS,
    STANDARD_GZRS,
    STANDARD_RAGZRS,
    PREMIUM_LRS,
    PREMIUM_ZRS,
]
