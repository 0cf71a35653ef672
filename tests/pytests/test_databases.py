#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from arm_composex.arm_composex import ArmBuilder
from arm_composex.common.secure_parameters import SecureParameter
from arm_composex.cosmosdb.cosmosdb_config import (
    ConsistencyPolicy,
    CosmosContainerConfig,
    CosmosDbConfig,
    FailoverPolicy,
)
from arm_composex.cosmosdb.cosmosdb_params import (
    AUTO_FAILOVER,
    HASH,
    MULTI_MASTER,
    NUMBER,
    RANGE,
    STRING,
)
from arm_composex.sql.sql_config import FirewallRule, SqlAzureConfig, SqlEdition
from arm_composex.sql.sql_template import expand_sql

SERVER_ID = "[resourceId('Microsoft.Sql/servers', 'mysqlserver')]"
ACCOUNT_ID = "[resourceId('Microsoft.DocumentDB/databaseAccounts', 'mycosmos')]"
COSMOS_DATABASE_ID = (
    "[resourceId('Microsoft.DocumentDB/databaseAccounts/sqlDatabases', 'mycosmos', 'mydb')]"
)


def sql_server():
    return SqlAzureConfig("mysqlserver", "isaac", "mydb")


def test_sql_password_and_fqdn():
    config = sql_server()
    assert config.admin_password == SecureParameter("password-for-mysqlserver")
    assert config.secure_parameters == (SecureParameter("password-for-mysqlserver"),)
    assert config.fully_qualified_domain_name.to_dict() == (
        "[reference(concat('Microsoft.Sql/servers/', 'mysqlserver')).fullyQualifiedDomainName]"
    )


def test_sql_editions():
    assert SqlEdition.from_sku("S3") == SqlEdition("Standard", "S3")
    assert SqlEdition.from_sku("P11") == SqlEdition("Premium", "P11")
    assert SqlEdition.from_sku("Basic").objective == "Basic"
    assert SqlEdition().objective == "Free"
    with raises(ValueError):
        SqlEdition.from_sku("X9")
    with raises(ValueError):
        SqlEdition("Standard", "P1")


def test_sql_resources():
    config = (
        SqlAzureConfig("mysqlserver", "isaac", "mydb", edition=SqlEdition.from_sku("S1"))
        .use_encryption()
        .add_firewall_rule("10.0.0.1", "10.0.0.255")
        .use_azure_firewall()
    )
    document = ArmBuilder().add_resource(config).build()
    assert [resource.name for resource in document.resources] == [
        "mysqlserver",
        "mysqlserver/mydb",
        "mysqlserver/mydb/current",
        "mysqlserver/10.0.0.1-10.0.0.255",
        "mysqlserver/AllowAllWindowsAzureIps",
    ]
    server, database, encryption, office, azure = [
        resource.to_dict() for resource in document.resources
    ]
    assert server["properties"] == {
        "administratorLogin": "isaac",
        "administratorLoginPassword": "[parameters('password-for-mysqlserver')]",
        "version": "12.0",
    }
    assert database["location"] == "westeurope"
    assert database["dependsOn"] == [SERVER_ID]
    assert database["properties"] == {
        "edition": "Standard",
        "collation": "SQL_Latin1_General_CP1_CI_AS",
        "requestedServiceObjectiveName": "S1",
    }
    assert encryption["dependsOn"] == [
        "[resourceId('Microsoft.Sql/servers/databases', 'mysqlserver', 'mydb')]"
    ]
    assert encryption["properties"] == {"status": "Enabled"}
    assert office["dependsOn"] == [SERVER_ID]
    assert office["properties"] == {
        "startIpAddress": "10.0.0.1",
        "endIpAddress": "10.0.0.255",
    }
    assert azure["properties"] == {
        "startIpAddress": "0.0.0.0",
        "endIpAddress": "0.0.0.0",
    }
    assert document.parameters == ("password-for-mysqlserver",)


def test_sql_without_encryption():
    names = [resource.name for resource in expand_sql(sql_server(), "westeurope")]
    assert names == ["mysqlserver", "mysqlserver/mydb"]


def test_firewall_rules():
    with raises(ValueError):
        FirewallRule("office", "10.0.0.255", "10.0.0.1")
    with raises(ValueError):
        FirewallRule("office", "10.0.0.256", "10.0.0.257")
    with raises(ValueError):
        sql_server().add_firewall_rule("not-an-ip", "10.0.0.1")
    assert sql_server().add_firewall_rule("10.0.0.1", "10.0.0.1", "single").firewall_rules == (
        FirewallRule("single", "10.0.0.1", "10.0.0.1"),
    )


def people_container():
    return (
        CosmosContainerConfig("people", partition_key_paths=("/id",), partition_key_kind=HASH)
        .include_index("/*", [(NUMBER, HASH), (STRING, RANGE)])
        .exclude_path("/excluded/*")
    )


def test_cosmos_resources():
    config = CosmosDbConfig("mycosmos", "mydb").add_containers([people_container()])
    document = ArmBuilder().location("eastus").add_resource(config).build()
    account, database, container = [resource.to_dict() for resource in document.resources]
    assert account["type"] == "Microsoft.DocumentDB/databaseAccounts"
    assert account["kind"] == "GlobalDocumentDB"
    assert account["dependsOn"] == []
    assert account["properties"] == {
        "consistencyPolicy": {"defaultConsistencyLevel": "Eventual"},
        "databaseAccountOfferType": "Standard",
        "enableAutomaticFailover": False,
        "enableMultipleWriteLocations": False,
        "locations": [{"locationName": "eastus", "failoverPriority": 0}],
    }
    assert database["name"] == "mycosmos/mydb"
    assert "location" not in database
    assert database["dependsOn"] == [ACCOUNT_ID]
    assert database["properties"] == {
        "resource": {"id": "mydb"},
        "options": {"throughput": 400},
    }
    assert container["name"] == "mycosmos/mydb/people"
    assert container["dependsOn"] == [COSMOS_DATABASE_ID]
    assert container["properties"] == {
        "resource": {
            "id": "people",
            "partitionKey": {"paths": ["/id"], "kind": "Hash"},
            "indexingPolicy": {
                "indexingMode": "consistent",
                "includedPaths": [
                    {
                        "path": "/*",
                        "indexes": [
                            {"kind": "Hash", "dataType": "Number", "precision": -1},
                            {"kind": "Range", "dataType": "String", "precision": -1},
                        ],
                    }
                ],
                "excludedPaths": [{"path": "/excluded/*"}],
            },
        }
    }
    assert document.parameters == ()


def test_cosmos_policies():
    config = CosmosDbConfig(
        "mycosmos",
        "mydb",
        consistency_policy=ConsistencyPolicy.bounded_staleness(500, 1000),
        failover_policy=FailoverPolicy(AUTO_FAILOVER, "westeurope"),
        throughput=1000,
    )
    document = ArmBuilder().location("northeurope").add_resource(config).build()
    account = document.resources[0].to_dict()
    assert account["properties"]["consistencyPolicy"] == {
        "defaultConsistencyLevel": "BoundedStaleness",
        "maxStalenessPrefix": 500,
        "maxIntervalInSeconds": 1000,
    }
    assert account["properties"]["enableAutomaticFailover"] is True
    assert account["properties"]["locations"] == [
        {"locationName": "northeurope", "failoverPriority": 0},
        {"locationName": "westeurope", "failoverPriority": 1},
    ]
    assert document.resources[1].to_dict()["properties"]["options"] == {"throughput": 1000}
    multi_master = CosmosDbConfig(
        "mycosmos", "mydb", failover_policy=FailoverPolicy(MULTI_MASTER, "westus")
    )
    account = ArmBuilder().add_resource(multi_master).build().resources[0].to_dict()
    assert account["properties"]["enableMultipleWriteLocations"] is True
    assert account["properties"]["enableAutomaticFailover"] is False


def test_cosmos_invalid_settings():
    with raises(ValueError):
        CosmosDbConfig("mycosmos", "mydb", throughput=399)
    with raises(ValueError):
        ConsistencyPolicy("BoundedStaleness")
    with raises(ValueError):
        ConsistencyPolicy("Linearizable")
    with raises(ValueError):
        FailoverPolicy(AUTO_FAILOVER)
    with raises(ValueError):
        CosmosContainerConfig("people").include_index("/*", [("Boolean", HASH)])
