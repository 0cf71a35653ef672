# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "sql"

SQL_API_VERSION = "2014-04-01-preview"
SERVER_TYPE = "Microsoft.Sql/servers"
DATABASE_TYPE = "Microsoft.Sql/servers/databases"
TDE_TYPE = "Microsoft.Sql/servers/databases/transparentDataEncryption"
FIREWALL_RULE_TYPE = "Microsoft.Sql/servers/firewallRules"
SERVER_VERSION = "12.0"
TDE_NAME = "current"
TDE_ENABLED = "Enabled"

DEFAULT_COLLATION = "SQL_Latin1_General_CP1_CI_AS"

FREE = "Free"
BASIC = "Basic"
STANDARD = "Standard"
PREMIUM = "Premium"
EDITIONS = [FREE, BASIC, STANDARD, PREMIUM]

STANDARD_OBJECTIVES = ["S0", "S1", "S2", "S3", "S4", "S6", "S7", "S9", "S12"]
PREMIUM_OBJECTIVES = ["P1", "P2", "P4", "P6", "P11", "P15"]

AZURE_FIREWALL_RULE = "AllowAllWindowsAzureIps"
AZURE_FIREWALL_ADDRESS = "0.0.0.0"
