# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

MOD_KEY = "container_group"

CONTAINER_GROUP_TYPE = "Microsoft.ContainerInstance/containerGroups"
CONTAINER_GROUP_API_VERSION = "2019-12-01"

LINUX = "Linux"
WINDOWS = "Windows"
OS_TYPES = [LINUX, WINDOWS]

ALWAYS_RESTART = "AlwaysRestart"
RESTART_ON_FAILURE = "RestartOnFailure"
NEVER_RESTART = "NeverRestart"
RESTART_POLICIES = {
    ALWAYS_RESTART: "Always",
    RESTART_ON_FAILURE: "OnFailure",
    NEVER_RESTART: "Never",
}

PUBLIC_PORT = "PublicPort"
INTERNAL_PORT = "InternalPort"
PORT_ACCESS = [PUBLIC_PORT, INTERNAL_PORT]

TCP = "TCP"
UDP = "UDP"
PROTOCOLS = [TCP, UDP]

PUBLIC_IP = "Public"

HTTP_PROBE = "http"
EXEC_PROBE = "exec"
PROBE_SCHEMES = {"http": 80, "https": 443}

DEFAULT_CPU_CORES = 1.0
DEFAULT_MEMORY_GB = 1.5
