# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "web_app"

SERVER_FARM_TYPE = "Microsoft.Web/serverfarms"
SERVER_FARM_API_VERSION = "2018-02-01"
SITE_TYPE = "Microsoft.Web/sites"
SITE_API_VERSION = "2016-08-01"
SITE_EXTENSION_TYPE = "Microsoft.Web/sites/siteextensions"
SITE_CONFIG_TYPE = "Microsoft.Web/sites/config"
PUBLISHING_CREDENTIALS_API_VERSION = "2014-06-01"
APP_INSIGHTS_TYPE = "Microsoft.Insights/components"
APP_INSIGHTS_API_VERSION = "2014-04-01"
APP_INSIGHTS_EXTENSION = "Microsoft.ApplicationInsights.AzureWebSites"

F1 = "F1"
D1 = "D1"
B1 = "B1"
B2 = "B2"
B3 = "B3"
S1 = "S1"
S2 = "S2"
S3 = "S3"
P1 = "P1"
P2 = "P2"
P3 = "P3"
P1V2 = "P1V2"
P2V2 = "P2V2"
P3V2 = "P3V2"
I1 = "I1"
I2 = "I2"
I3 = "I3"

WEB_APP_SKUS = [F1, D1, B1, B2, B3, S1, S2, S3, P1, P2, P3, P1V2, P2V2, P3V2, I1, I2, I3]

RUN_FROM_PACKAGE = ("WEBSITE_RUN_FROM_PACKAGE", "1")
NODE_DEFAULT_VERSION = "WEBSITE_NODE_DEFAULT_VERSION"

APP_INSIGHTS_SETTINGS = [
    ("APPINSIGHTS_PROFILERFEATURE_VERSION", "1.0.0"),
    ("APPINSIGHTS_SNAPSHOTFEATURE_VERSION", "1.0.0"),
    ("ApplicationInsightsAgent_EXTENSION_VERSION", "~2"),
    ("DiagnosticServices_EXTENSION_VERSION", "~3"),
    ("InstrumentationEngine_EXTENSION_VERSION", "~1"),
    ("SnapshotDebugger_EXTENSION_VERSION", "~1"),
    ("XDT_MicrosoftApplicationInsights_BaseExtensions", "~1"),
    ("XDT_MicrosoftApplicationInsights_Mode", "recommended"),
]
