# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from ipaddress import IPv4Address

from arm_composex.common.arm_resources import ArmResource
from arm_composex.common.dependencies import implicit_dependency
from arm_composex.common.logging import LOG
from arm_composex.sql.sql_config import SqlAzureConfig
from arm_composex.sql.sql_params import (
    DATABASE_TYPE,
    FIREWALL_RULE_TYPE,
    SERVER_TYPE,
    SERVER_VERSION,
    SQL_API_VERSION,
    TDE_ENABLED,
    TDE_NAME,
    TDE_TYPE,
)


class SqlServer(ArmResource):
    arm_type = SERVER_TYPE
    api_version = SQL_API_VERSION
    props = {
        "administratorLogin": (str, True),
        "administratorLoginPassword": (str, True),
        "version": (str, True),
    }


class SqlDatabase(ArmResource):
    arm_type = DATABASE_TYPE
    api_version = SQL_API_VERSION
    props = {
        "edition": (str, True),
        "collation": (str, True),
        "requestedServiceObjectiveName": (str, True),
    }


class TransparentDataEncryption(ArmResource):
    arm_type = TDE_TYPE
    api_version = SQL_API_VERSION
    props = {"status": (str, True)}


class FirewallRule(ArmResource):
    arm_type = FIREWALL_RULE_TYPE
    api_version = SQL_API_VERSION
    props = {
        "startIpAddress": (str, True),
        "endIpAddress": (str, True),
    }

    def validate(self):
        for key in ("startIpAddress", "endIpAddress"):
            try:
                IPv4Address(self.properties[key])
            except ValueError as error:
                raise ValueError(f"{self.name} - {key} is not a valid IPv4 address", error)


def expand_sql(config: SqlAzureConfig, location: str) -> list:
    server_ref = implicit_dependency(SERVER_TYPE, config.server_name)
    database_name = f"{config.server_name}/{config.name}"
    resources = [
        SqlServer(
            config.server_name,
            location=location,
            administratorLogin=config.admin_username,
            administratorLoginPassword=config.admin_password.expression,
            version=SERVER_VERSION,
        ),
        SqlDatabase(
            database_name,
            location=location,
            dependencies=[server_ref],
            edition=config.edition.edition,
            collation=config.collation,
            requestedServiceObjectiveName=config.edition.objective,
        ),
    ]
    if config.encryption:
        resources.append(
            TransparentDataEncryption(
                f"{database_name}/{TDE_NAME}",
                dependencies=[implicit_dependency(DATABASE_TYPE, database_name)],
                status=TDE_ENABLED,
            )
        )
    for rule in config.firewall_rules:
        resources.append(
            FirewallRule(
                f"{config.server_name}/{rule.name}",
                dependencies=[server_ref],
                startIpAddress=rule.start_ip,
                endIpAddress=rule.end_ip,
            )
        )
    LOG.debug(
        f"{config.server_name} - database {config.name} {config.edition.objective},"
        f" {len(config.firewall_rules)} firewall rules"
    )
    return resources
