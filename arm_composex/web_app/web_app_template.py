# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM resources of web apps: the App Service plan (server farm), the site, and Application Insights.
"""

from __future__ import annotations

from troposphere.validators import boolean

from arm_composex.common.arm_functions import (
    ArmExpression,
    Concat,
    Reference,
    ResourceId,
)
from arm_composex.common.arm_resources import ArmProperty, ArmResource
from arm_composex.common.dependencies import explicit_dependency, implicit_dependency
from arm_composex.common.logging import LOG
from arm_composex.web_app.web_app_config import WebAppConfig
from arm_composex.web_app.web_app_params import (
    APP_INSIGHTS_API_VERSION,
    APP_INSIGHTS_EXTENSION,
    APP_INSIGHTS_SETTINGS,
    APP_INSIGHTS_TYPE,
    NODE_DEFAULT_VERSION,
    RUN_FROM_PACKAGE,
    SERVER_FARM_API_VERSION,
    SERVER_FARM_TYPE,
    SITE_API_VERSION,
    SITE_EXTENSION_TYPE,
    SITE_TYPE,
)

SKU_TIERS = {
    "F": "Free",
    "D": "Shared",
    "B": "Basic",
    "S": "Standard",
    "P": "Premium",
    "I": "Isolated",
}


def define_sku_tier(sku: str) -> str:
    """
    >>> define_sku_tier("P2V2")
    'PremiumV2'
    >>> define_sku_tier("B1")
    'Basic'
    """
    tier = SKU_TIERS[sku[0].upper()]
    if tier == "Premium" and sku.upper().endswith("V2"):
        return "PremiumV2"
    return tier


def instrumentation_key(app_insights_name: str):
    return Reference(Concat(f"{APP_INSIGHTS_TYPE}/", app_insights_name)).get(
        "InstrumentationKey"
    )


class ServerFarm(ArmResource):
    arm_type = SERVER_FARM_TYPE
    api_version = SERVER_FARM_API_VERSION
    props = {
        "perSiteScaling": (boolean, False),
        "reserved": (boolean, False),
    }


class NameValuePair(ArmProperty):
    props = {
        "name": (str, True),
        "value": (str, True),
    }


class SiteConfig(ArmProperty):
    props = {"appSettings": ([NameValuePair], False)}


class Site(ArmResource):
    arm_type = SITE_TYPE
    api_version = SITE_API_VERSION
    props = {
        "serverFarmId": (str, True),
        "siteConfig": (SiteConfig, False),
    }


class SiteExtension(ArmResource):
    arm_type = SITE_EXTENSION_TYPE
    api_version = SITE_API_VERSION
    props = {}


class AppInsightsComponent(ArmResource):
    arm_type = APP_INSIGHTS_TYPE
    api_version = APP_INSIGHTS_API_VERSION
    props = {
        "Application_Type": (str, True),
        "ApplicationId": (str, True),
    }


def define_app_settings(config: WebAppConfig) -> list:
    """
    Application settings of the site. A key set more than once keeps its last value, at its first position.
    """
    settings = dict(config.settings)
    if config.run_from_package:
        settings[RUN_FROM_PACKAGE[0]] = RUN_FROM_PACKAGE[1]
    if config.node_version:
        settings[NODE_DEFAULT_VERSION] = config.node_version
    if config.app_insights_name:
        settings["APPINSIGHTS_INSTRUMENTATIONKEY"] = instrumentation_key(
            config.app_insights_name
        )
        settings.update(APP_INSIGHTS_SETTINGS)
    return [
        NameValuePair(
            name=key, value=value if isinstance(value, ArmExpression) else str(value)
        )
        for key, value in settings.items()
    ]


def web_app_dependencies(config: WebAppConfig) -> list:
    dependencies = [implicit_dependency(SERVER_FARM_TYPE, config.service_plan_name)]
    dependencies += [explicit_dependency(name) for name in config.dependencies]
    if config.app_insights_name:
        dependencies.append(implicit_dependency(APP_INSIGHTS_TYPE, config.app_insights_name))
    return dependencies


def expand_web_app(config: WebAppConfig, location: str) -> list:
    server_farm = ServerFarm(
        config.service_plan_name,
        location=location,
        sku={
            "name": config.sku,
            "tier": define_sku_tier(config.sku),
            "size": config.sku,
            "family": config.sku[0],
            "capacity": 1,
        },
        perSiteScaling=False,
        reserved=False,
    )
    site = Site(
        config.name,
        location=location,
        dependencies=web_app_dependencies(config),
        serverFarmId=ResourceId(SERVER_FARM_TYPE, config.service_plan_name),
        siteConfig=SiteConfig(appSettings=define_app_settings(config)),
    )
    resources = [server_farm, site]
    if config.app_insights_name:
        LOG.debug(f"{config.name} - Application Insights {config.app_insights_name}")
        resources.append(
            SiteExtension(
                f"{config.name}/{APP_INSIGHTS_EXTENSION}",
                dependencies=[implicit_dependency(SITE_TYPE, config.name)],
            )
        )
        hidden_link = Concat(
            "hidden-link:",
            ArmExpression("resourceGroup().id"),
            f"/providers/{SITE_TYPE}/",
            config.name,
        )
        resources.append(
            AppInsightsComponent(
                config.app_insights_name,
                location=location,
                kind="web",
                tags={
                    hidden_link.to_dict(): "Resource",
                    "displayName": "AppInsightsComponent",
                },
                Application_Type="web",
                ApplicationId=config.name,
            )
        )
    return resources
