# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar, Tuple

from arm_composex.common.arm_functions import ArmExpression, List, ResourceId
from arm_composex.web_app.web_app_params import (
    F1,
    MOD_KEY,
    PUBLISHING_CREDENTIALS_API_VERSION,
    SITE_CONFIG_TYPE,
    WEB_APP_SKUS,
)


def dependency_name(resource) -> str:
    """
    Name to depend on for a resource configuration: the server of databases, the resource name otherwise.

    :param resource: resource name or resource configuration
    :rtype: str
    """
    if isinstance(resource, str):
        return resource
    # Cosmos DB and SQL configurations give their server (account) name, not their database name.
    # Their databases are child resources named <server>/<database>, rendered after the server.
    for attribute in ("server_name", "name"):
        name = getattr(resource, attribute, None)
        if isinstance(name, str) and name:
            return name
    raise TypeError("Cannot depend on", resource, "Expected a name or a resource configuration")


@dataclass(frozen=True)
class WebAppConfig:
    """
    Web app configuration

    :ivar str service_plan_name: App Service plan hosting the web app. Defaults to <name>-plan
    :ivar tuple settings: (key, value) application settings, in order
    :ivar tuple dependencies: names of the resources the web app explicitly depends on
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = MOD_KEY
    name: str
    service_plan_name: str = None
    sku: str = F1
    app_insights_name: str = None
    run_from_package: bool = False
    node_version: str = None
    settings: Tuple[tuple, ...] = field(default_factory=tuple)
    dependencies: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Web app name must be a non empty string", self.name)
        if self.sku not in WEB_APP_SKUS:
            raise ValueError(f"{self.name} - sku {self.sku} must be one of", WEB_APP_SKUS)
        if not self.service_plan_name:
            object.__setattr__(self, "service_plan_name", f"{self.name}-plan")
        object.__setattr__(
            self, "settings", tuple(tuple(setting) for setting in self.settings)
        )
        object.__setattr__(
            self, "dependencies", tuple(dependency_name(dep) for dep in self.dependencies)
        )

    def add_setting(self, key: str, value) -> WebAppConfig:
        return replace(self, settings=self.settings + ((key, value),))

    def depends_on(self, resource) -> WebAppConfig:
        return replace(self, dependencies=self.dependencies + (dependency_name(resource),))

    def use_app_insights(self, name: str) -> WebAppConfig:
        return replace(self, app_insights_name=name)

    @property
    def publishing_password(self) -> ArmExpression:
        return List(
            ResourceId(SITE_CONFIG_TYPE, f"{self.name}/publishingcredentials"),
            PUBLISHING_CREDENTIALS_API_VERSION,
        ).get("properties.publishingPassword")

    @property
    def secure_parameters(self) -> tuple:
        return ()
