#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from arm_composex.arm_composex import ArmBuilder
from arm_composex.common.arm_functions import render_expression
from arm_composex.cosmosdb.cosmosdb_config import CosmosDbConfig
from arm_composex.sql.sql_config import SqlAzureConfig
from arm_composex.storage.storage_config import StorageAccountConfig
from arm_composex.web_app.web_app_config import WebAppConfig, dependency_name
from arm_composex.web_app.web_app_params import (
    APP_INSIGHTS_TYPE,
    SERVER_FARM_TYPE,
    SITE_EXTENSION_TYPE,
    SITE_TYPE,
)
from arm_composex.web_app.web_app_template import define_sku_tier, expand_web_app

PLAN_ID = "[resourceId('Microsoft.Web/serverfarms', 'mywebapp-plan')]"
INSIGHTS_ID = "[resourceId('Microsoft.Insights/components', 'mywebapp-ai')]"


def app_settings(site) -> dict:
    return {
        setting["name"]: setting["value"]
        for setting in site.to_dict()["properties"]["siteConfig"]["appSettings"]
    }


def test_web_app_defaults():
    config = WebAppConfig("mywebapp")
    assert config.service_plan_name == "mywebapp-plan"
    document = ArmBuilder().location("northeurope").add_resource(config).build()
    plan, site = document.resources
    assert plan.arm_type == SERVER_FARM_TYPE
    assert site.arm_type == SITE_TYPE
    plan_dict = plan.to_dict()
    assert plan_dict["name"] == "mywebapp-plan"
    assert plan_dict["location"] == "northeurope"
    assert plan_dict["sku"] == {
        "name": "F1",
        "tier": "Free",
        "size": "F1",
        "family": "F",
        "capacity": 1,
    }
    assert plan_dict["properties"] == {"perSiteScaling": False, "reserved": False}
    site_dict = site.to_dict()
    assert site_dict["dependsOn"] == [PLAN_ID]
    assert site_dict["properties"]["serverFarmId"] == PLAN_ID
    assert app_settings(site) == {}


def test_sku_tiers():
    assert define_sku_tier("S1") == "Standard"
    assert define_sku_tier("P2V2") == "PremiumV2"
    assert define_sku_tier("P2") == "Premium"
    assert define_sku_tier("I1") == "Isolated"
    assert define_sku_tier("D1") == "Shared"
    with raises(ValueError):
        WebAppConfig("mywebapp", sku="Z9")


def test_app_settings():
    config = (
        WebAppConfig("mywebapp", run_from_package=True, node_version="10.14.1")
        .add_setting("environment", "staging")
        .add_setting("workers", 4)
        .add_setting("environment", "production")
    )
    site = expand_web_app(config, "westeurope")[1]
    assert app_settings(site) == {
        "environment": "production",
        "workers": "4",
        "WEBSITE_RUN_FROM_PACKAGE": "1",
        "WEBSITE_NODE_DEFAULT_VERSION": "10.14.1",
    }


def test_app_insights():
    config = WebAppConfig("mywebapp").use_app_insights("mywebapp-ai")
    document = ArmBuilder().add_resource(config).build()
    assert [resource.arm_type for resource in document.resources] == [
        SERVER_FARM_TYPE,
        SITE_TYPE,
        SITE_EXTENSION_TYPE,
        APP_INSIGHTS_TYPE,
    ]
    plan, site, extension, insights = document.resources
    assert site.to_dict()["dependsOn"] == [PLAN_ID, INSIGHTS_ID]
    settings = app_settings(site)
    assert (
        settings["APPINSIGHTS_INSTRUMENTATIONKEY"]
        == "[reference(concat('Microsoft.Insights/components/', 'mywebapp-ai')).InstrumentationKey]"
    )
    assert settings["XDT_MicrosoftApplicationInsights_Mode"] == "recommended"
    extension_dict = extension.to_dict()
    assert extension_dict["name"] == "mywebapp/Microsoft.ApplicationInsights.AzureWebSites"
    assert extension_dict["dependsOn"] == ["[resourceId('Microsoft.Web/sites', 'mywebapp')]"]
    insights_dict = insights.to_dict()
    assert insights_dict["kind"] == "web"
    assert insights_dict["tags"] == {
        "[concat('hidden-link:', resourceGroup().id, '/providers/Microsoft.Web/sites/', 'mywebapp')]": "Resource",
        "displayName": "AppInsightsComponent",
    }
    assert insights_dict["properties"] == {
        "Application_Type": "web",
        "ApplicationId": "mywebapp",
    }


def test_explicit_dependencies():
    sql = SqlAzureConfig("mysqlserver", "isaac", "mydb")
    config = (
        WebAppConfig("mywebapp")
        .depends_on(StorageAccountConfig("mystorage"))
        .depends_on(sql)
        .depends_on("external-resource")
    )
    assert config.dependencies == ("mystorage", "mysqlserver", "external-resource")
    document = (
        ArmBuilder()
        .add_resources([StorageAccountConfig("mystorage"), sql, config])
        .build()
    )
    site = document.find_resource("mywebapp", SITE_TYPE)
    assert [render_expression(dep) for dep in site.depends_on] == [
        PLAN_ID,
        "[resourceId('Microsoft.Storage/storageAccounts', 'mystorage')]",
        "[resourceId('Microsoft.Sql/servers', 'mysqlserver')]",
        "external-resource",
    ]
    with raises(TypeError):
        dependency_name(42)


def test_depends_on_cosmos_account():
    cosmos = CosmosDbConfig("mycosmos", "mydb")
    config = WebAppConfig("mywebapp").depends_on(cosmos)
    assert config.dependencies == ("mycosmos",)
    document = ArmBuilder().add_resources([cosmos, config]).build()
    site = document.find_resource("mywebapp", SITE_TYPE)
    assert [render_expression(dep) for dep in site.depends_on] == [
        PLAN_ID,
        "[resourceId('Microsoft.DocumentDB/databaseAccounts', 'mycosmos')]",
    ]


def test_publishing_password():
    assert WebAppConfig("mywebapp").publishing_password.to_dict() == (
        "[list(resourceId('Microsoft.Web/sites/config', 'mywebapp', 'publishingcredentials'),"
        " '2014-06-01').properties.publishingPassword]"
    )
    assert WebAppConfig("mywebapp").secure_parameters == ()
