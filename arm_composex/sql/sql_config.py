# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from dataclasses import dataclass, field, replace
from ipaddress import IPv4Address
from typing import ClassVar, Tuple

from arm_composex.common.arm_functions import ArmExpression, Concat, Reference
from arm_composex.common.secure_parameters import SecureParameter, sql_password_parameter
from arm_composex.sql.sql_params import (
    AZURE_FIREWALL_ADDRESS,
    AZURE_FIREWALL_RULE,
    BASIC,
    DEFAULT_COLLATION,
    EDITIONS,
    FREE,
    MOD_KEY,
    PREMIUM,
    PREMIUM_OBJECTIVES,
    SERVER_TYPE,
    STANDARD,
    STANDARD_OBJECTIVES,
)


@dataclass(frozen=True)
class SqlEdition:
    """
    Database edition and service objective. Free and Basic use the edition as objective.
    """

    edition: str = FREE
    objective: str = None

    def __post_init__(self):
        if self.edition not in EDITIONS:
            raise ValueError(f"SQL edition {self.edition} must be one of", EDITIONS)
        if self.edition in (FREE, BASIC):
            object.__setattr__(self, "objective", self.edition)
        elif self.edition == STANDARD and self.objective not in STANDARD_OBJECTIVES:
            raise ValueError("Standard objective must be one of", STANDARD_OBJECTIVES)
        elif self.edition == PREMIUM and self.objective not in PREMIUM_OBJECTIVES:
            raise ValueError("Premium objective must be one of", PREMIUM_OBJECTIVES)

    @classmethod
    def from_sku(cls, sku: str) -> SqlEdition:
        """
        >>> SqlEdition.from_sku("S3")
        SqlEdition(edition='Standard', objective='S3')
        """
        if sku in (FREE, BASIC):
            return cls(sku)
        elif sku in STANDARD_OBJECTIVES:
            return cls(STANDARD, sku)
        elif sku in PREMIUM_OBJECTIVES:
            return cls(PREMIUM, sku)
        raise ValueError(
            f"SQL sku {sku} must be one of",
            [FREE, BASIC] + STANDARD_OBJECTIVES + PREMIUM_OBJECTIVES,
        )


@dataclass(frozen=True)
class FirewallRule:
    name: str
    start_ip: str
    end_ip: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Firewall rule name must be a non empty string", self.name)
        for address in (self.start_ip, self.end_ip):
            try:
                IPv4Address(address)
            except ValueError as error:
                raise ValueError(f"{self.name} - {address} is not a valid IPv4 address", error)
        if IPv4Address(self.start_ip) > IPv4Address(self.end_ip):
            raise ValueError(
                f"{self.name} - start {self.start_ip} is after end {self.end_ip}"
            )


@dataclass(frozen=True)
class SqlAzureConfig:
    """
    SQL server and its database. The administrator password is a secure parameter named after the server.
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = MOD_KEY
    server_name: str
    admin_username: str
    name: str
    edition: SqlEdition = field(default_factory=SqlEdition)
    collation: str = DEFAULT_COLLATION
    encryption: bool = False
    firewall_rules: Tuple[FirewallRule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for attribute in ("server_name", "admin_username", "name"):
            value = getattr(self, attribute)
            if not isinstance(value, str) or not value:
                raise ValueError(f"SQL {attribute} must be a non empty string", value)
        object.__setattr__(self, "firewall_rules", tuple(self.firewall_rules))

    def add_firewall_rule(self, start_ip: str, end_ip: str, name: str = None) -> SqlAzureConfig:
        rule = FirewallRule(name or f"{start_ip}-{end_ip}", start_ip, end_ip)
        return replace(self, firewall_rules=self.firewall_rules + (rule,))

    def use_azure_firewall(self) -> SqlAzureConfig:
        return self.add_firewall_rule(
            AZURE_FIREWALL_ADDRESS, AZURE_FIREWALL_ADDRESS, AZURE_FIREWALL_RULE
        )

    def use_encryption(self) -> SqlAzureConfig:
        return replace(self, encryption=True)

    @property
    def admin_password(self) -> SecureParameter:
        return sql_password_parameter(self.server_name)

    @property
    def fully_qualified_domain_name(self) -> ArmExpression:
        return Reference(Concat(f"{SERVER_TYPE}/", self.server_name)).get(
            "fullyQualifiedDomainName"
        )

    @property
    def secure_parameters(self) -> tuple:
        return (self.admin_password,)
