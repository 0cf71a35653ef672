# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "cosmosdb"

COSMOS_API_VERSION = "2019-08-01"
ACCOUNT_TYPE = "Microsoft.DocumentDB/databaseAccounts"
DATABASE_TYPE = "Microsoft.DocumentDB/databaseAccounts/sqlDatabases"
CONTAINER_TYPE = "Microsoft.DocumentDB/databaseAccounts/sqlDatabases/containers"
ACCOUNT_KIND = "GlobalDocumentDB"
ACCOUNT_OFFER_TYPE = "Standard"

EVENTUAL = "Eventual"
CONSISTENT_PREFIX = "ConsistentPrefix"
SESSION = "Session"
BOUNDED_STALENESS = "BoundedStaleness"
STRONG = "Strong"
CONSISTENCY_LEVELS = [EVENTUAL, CONSISTENT_PREFIX, SESSION, BOUNDED_STALENESS, STRONG]

NO_FAILOVER = "NoFailover"
AUTO_FAILOVER = "AutoFailover"
MULTI_MASTER = "MultiMaster"
FAILOVER_POLICIES = [NO_FAILOVER, AUTO_FAILOVER, MULTI_MASTER]

HASH = "Hash"
RANGE = "Range"
INDEX_KINDS = [HASH, RANGE]

NUMBER = "Number"
STRING = "String"
INDEX_DATA_TYPES = [NUMBER, STRING]

DEFAULT_THROUGHPUT = 400
