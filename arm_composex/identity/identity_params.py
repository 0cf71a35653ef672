# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "identity"

USER_ASSIGNED_IDENTITY_TYPE = "Microsoft.ManagedIdentity/userAssignedIdentities"
USER_ASSIGNED_IDENTITY_API_VERSION = "2018-11-30"

SYSTEM_ASSIGNED = "SystemAssigned"
USER_ASSIGNED = "UserAssigned"
SYSTEM_AND_USER_ASSIGNED = f"{SYSTEM_ASSIGNED}, {USER_ASSIGNED}"
NO_IDENTITY = "None"
IDENTITY_TYPES = [SYSTEM_ASSIGNED, USER_ASSIGNED, SYSTEM_AND_USER_ASSIGNED, NO_IDENTITY]
