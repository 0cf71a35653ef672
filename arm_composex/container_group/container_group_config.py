# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Configuration values of container groups, their containers and volumes.

All the values are frozen: the ``add_*`` / ``with_*`` methods return a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar, Tuple, Union
from urllib.parse import urlparse

from arm_composex.common import unique_ordered
from arm_composex.common.dependencies import ResourceRef, implicit_dependency
from arm_composex.common.secure_parameters import (
    SecureParameter,
    registry_password_parameter,
)
from arm_composex.container_group.container_group_params import (
    ALWAYS_RESTART,
    DEFAULT_CPU_CORES,
    DEFAULT_MEMORY_GB,
    EXEC_PROBE,
    HTTP_PROBE,
    INTERNAL_PORT,
    LINUX,
    MOD_KEY,
    OS_TYPES,
    PORT_ACCESS,
    PROBE_SCHEMES,
    PROTOCOLS,
    PUBLIC_PORT,
    RESTART_POLICIES,
    TCP,
    UDP,
)
from arm_composex.identity.identity_config import (
    ManagedIdentity,
    UserAssignedIdentity,
    UserAssignedIdentityConfig,
)
from arm_composex.network.network_config import NetworkProfileConfig
from arm_composex.network.network_params import NETWORK_PROFILE_TYPE


def validate_port(port) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise TypeError("port must be of type", int, "Got", type(port))
    if not (1 <= port < (2**16)):
        raise ValueError(f"port {port} is not between 1 and 65535")
    return port


def validate_name(name, what: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError(f"{what} name must be a non empty string. Got", name)
    return name


@dataclass(frozen=True)
class EnvVar:
    """
    Environment variable, with either a literal value or a secure parameter
    """

    name: str
    value: str = None
    secure_value: SecureParameter = None

    def __post_init__(self):
        validate_name(self.name, "Environment variable")
        if (self.value is None) == (self.secure_value is None):
            raise ValueError(
                f"Environment variable {self.name} requires either a value or a secure value"
            )

    @classmethod
    def create(cls, name: str, value: str) -> EnvVar:
        return cls(name, value=str(value))

    @classmethod
    def create_secure(cls, name: str, parameter_name: str) -> EnvVar:
        return cls(name, secure_value=SecureParameter(parameter_name))


def to_env_var(env_var) -> EnvVar:
    if isinstance(env_var, EnvVar):
        return env_var
    elif isinstance(env_var, tuple) and len(env_var) == 2:
        return EnvVar.create(*env_var)
    raise TypeError("env vars must be", EnvVar, "or (name, value) tuples. Got", env_var)


@dataclass(frozen=True)
class ProbeConfig:
    """
    Liveness or readiness probe. Either an http probe, or a command to execute.
    Numeric settings left to None are not set in the template.
    """

    path: str = None
    port: int = None
    scheme: str = None
    command: Tuple[str, ...] = None
    period_seconds: int = None
    initial_delay_seconds: int = None
    failure_threshold: int = None
    success_threshold: int = None
    timeout_seconds: int = None

    def __post_init__(self):
        if self.command is not None:
            object.__setattr__(self, "command", tuple(self.command))
        if (self.port is None) == (self.command is None):
            raise ValueError("Probes require either an http target or a command")
        if self.port is not None:
            validate_port(self.port)
        for setting in (
            "period_seconds",
            "initial_delay_seconds",
            "failure_threshold",
            "success_threshold",
            "timeout_seconds",
        ):
            value = getattr(self, setting)
            if value is not None and (not isinstance(value, int) or value < 0):
                raise ValueError(f"Probe {setting} must be a positive integer. Got", value)

    @property
    def protocol(self) -> str:
        return EXEC_PROBE if self.command is not None else HTTP_PROBE

    @classmethod
    def http(cls, url: str, **kwargs) -> ProbeConfig:
        """
        Http probe from the URL to check, i.e. https://whatever.com:8080/healthcheck

        :param str url: the URL to probe. Only its scheme, port and path are used.
        """
        parts = urlparse(url)
        if parts.scheme not in PROBE_SCHEMES:
            raise ValueError(
                f"Probe URL {url} scheme must be one of", list(PROBE_SCHEMES.keys())
            )
        port = parts.port if parts.port else PROBE_SCHEMES[parts.scheme]
        return cls(path=parts.path or "/", port=port, scheme=parts.scheme, **kwargs)

    @classmethod
    def exec(cls, command: list, **kwargs) -> ProbeConfig:
        return cls(command=tuple(command), **kwargs)


@dataclass(frozen=True)
class ContainerInstanceConfig:
    """
    A container of the group

    :ivar tuple ports: declared (port, access) pairs, in declaration order
    :ivar tuple volume_mounts: declared (volume name, mount path) pairs
    """

    name: str
    image: str = ""
    cpu_cores: float = DEFAULT_CPU_CORES
    memory_in_gb: float = DEFAULT_MEMORY_GB
    ports: Tuple[Tuple[int, str], ...] = field(default_factory=tuple)
    env_vars: Tuple[EnvVar, ...] = field(default_factory=tuple)
    volume_mounts: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    command: Tuple[str, ...] = field(default_factory=tuple)
    liveness_probe: ProbeConfig = None
    readiness_probe: ProbeConfig = None

    def __post_init__(self):
        validate_name(self.name, "Container")
        for setting in ("cpu_cores", "memory_in_gb"):
            value = getattr(self, setting)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{self.name} - {setting} must be a number. Got", type(value))
            if value < 0:
                raise ValueError(f"{self.name} - {setting} must be >= 0. Got", value)
        for port, access in self.ports:
            validate_port(port)
            if access not in PORT_ACCESS:
                raise ValueError(f"{self.name} - port access must be one of", PORT_ACCESS)
        object.__setattr__(self, "ports", tuple(tuple(port) for port in self.ports))
        object.__setattr__(self, "env_vars", tuple(to_env_var(env) for env in self.env_vars))
        object.__setattr__(
            self, "volume_mounts", tuple(tuple(mount) for mount in self.volume_mounts)
        )
        object.__setattr__(self, "command", tuple(self.command))

    def add_ports(self, access: str, ports: list) -> ContainerInstanceConfig:
        return replace(self, ports=self.ports + tuple((port, access) for port in ports))

    def add_public_ports(self, ports: list) -> ContainerInstanceConfig:
        return self.add_ports(PUBLIC_PORT, ports)

    def add_internal_ports(self, ports: list) -> ContainerInstanceConfig:
        return self.add_ports(INTERNAL_PORT, ports)

    def add_env_vars(self, env_vars: list) -> ContainerInstanceConfig:
        return replace(self, env_vars=self.env_vars + tuple(env_vars))

    def add_volume_mount(self, volume_name: str, mount_path: str) -> ContainerInstanceConfig:
        return replace(self, volume_mounts=self.volume_mounts + ((volume_name, mount_path),))

    def with_command(self, command: list) -> ContainerInstanceConfig:
        return replace(self, command=tuple(command))

    def with_probes(
        self, liveness: ProbeConfig = None, readiness: ProbeConfig = None
    ) -> ContainerInstanceConfig:
        return replace(
            self,
            liveness_probe=liveness or self.liveness_probe,
            readiness_probe=readiness or self.readiness_probe,
        )

    @property
    def secure_parameters(self) -> tuple:
        return tuple(env.secure_value for env in self.env_vars if env.secure_value)


@dataclass(frozen=True)
class InitContainerConfig:
    """
    Container run to completion before the group containers start. No ports, no probes.
    """

    name: str
    image: str = ""
    command: Tuple[str, ...] = field(default_factory=tuple)
    env_vars: Tuple[EnvVar, ...] = field(default_factory=tuple)
    volume_mounts: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def __post_init__(self):
        validate_name(self.name, "Init container")
        object.__setattr__(self, "command", tuple(self.command))
        object.__setattr__(self, "env_vars", tuple(to_env_var(env) for env in self.env_vars))
        object.__setattr__(
            self, "volume_mounts", tuple(tuple(mount) for mount in self.volume_mounts)
        )

    def add_volume_mount(self, volume_name: str, mount_path: str) -> InitContainerConfig:
        return replace(self, volume_mounts=self.volume_mounts + ((volume_name, mount_path),))

    @property
    def secure_parameters(self) -> tuple:
        return tuple(env.secure_value for env in self.env_vars if env.secure_value)


@dataclass(frozen=True)
class EmptyDirVolume:
    name: str

    def __post_init__(self):
        validate_name(self.name, "Volume")

    @property
    def secure_parameters(self) -> tuple:
        return ()


@dataclass(frozen=True)
class AzureFileVolume:
    name: str
    share_name: str
    storage_account_name: str

    def __post_init__(self):
        validate_name(self.name, "Volume")
        validate_name(self.share_name, f"{self.name} - file share")
        validate_name(self.storage_account_name, f"{self.name} - storage account")

    @property
    def secure_parameters(self) -> tuple:
        return ()


@dataclass(frozen=True)
class SecretVolume:
    """
    Files mounted from secrets

    :ivar tuple files: (file name, literal value or SecureParameter) pairs
    """

    name: str
    files: Tuple[Tuple[str, Union[str, SecureParameter]], ...] = field(default_factory=tuple)

    def __post_init__(self):
        validate_name(self.name, "Volume")
        for file_name, value in self.files:
            validate_name(file_name, f"{self.name} - secret file")
            if not isinstance(value, (str, SecureParameter)):
                raise TypeError(
                    f"{self.name}.{file_name} - secret must be one of",
                    (str, SecureParameter),
                    "Got",
                    type(value),
                )
        object.__setattr__(self, "files", tuple(tuple(item) for item in self.files))

    @property
    def secure_parameters(self) -> tuple:
        return tuple(value for _, value in self.files if isinstance(value, SecureParameter))


@dataclass(frozen=True)
class GitRepoVolume:
    name: str
    repository: str
    directory: str = None
    revision: str = None

    def __post_init__(self):
        validate_name(self.name, "Volume")
        if not urlparse(self.repository).scheme:
            raise ValueError(f"{self.name} - repository must be a URI. Got", self.repository)

    @property
    def secure_parameters(self) -> tuple:
        return ()


VOLUME_TYPES = (EmptyDirVolume, AzureFileVolume, SecretVolume, GitRepoVolume)


def empty_dir(name: str) -> EmptyDirVolume:
    return EmptyDirVolume(name)


def azure_file(name: str, share_name: str, storage_account_name: str) -> AzureFileVolume:
    return AzureFileVolume(name, share_name, storage_account_name)


def secret_string(name: str, file_name: str, value: str) -> SecretVolume:
    return SecretVolume(name, ((file_name, value),))


def secret_parameter(name: str, file_name: str, parameter_name: str) -> SecretVolume:
    return SecretVolume(name, ((file_name, SecureParameter(parameter_name)),))


def git_repo(name: str, repository: str, directory: str = None, revision: str = None) -> GitRepoVolume:
    return GitRepoVolume(name, repository, directory, revision)


@dataclass(frozen=True)
class RegistryCredential:
    server: str
    username: str

    def __post_init__(self):
        validate_name(self.server, "Registry server")
        validate_name(self.username, f"{self.server} - user")

    @property
    def password(self) -> SecureParameter:
        return registry_password_parameter(self.server)


@dataclass(frozen=True)
class ContainerGroupConfig:
    """
    Container group configuration

    :ivar network_profile: name of a network profile, the network profile configuration itself,
        or a linked network profile reference (see :func:`link_network_profile`)
    :ivar tuple ports: (protocol, port) pairs to open on the public IP, on top of the containers public ports
    """

    mod_key: ClassVar[str] = MOD_KEY
    res_key: ClassVar[str] = MOD_KEY
    name: str
    operating_system: str = LINUX
    restart_policy: str = ALWAYS_RESTART
    instances: Tuple[ContainerInstanceConfig, ...] = field(default_factory=tuple)
    init_containers: Tuple[InitContainerConfig, ...] = field(default_factory=tuple)
    volumes: Tuple[Union[EmptyDirVolume, AzureFileVolume, SecretVolume, GitRepoVolume], ...] = field(
        default_factory=tuple
    )
    network_profile: Union[str, NetworkProfileConfig, ResourceRef] = None
    registry_credentials: Tuple[RegistryCredential, ...] = field(default_factory=tuple)
    identity: ManagedIdentity = field(default_factory=ManagedIdentity)
    ports: Tuple[Tuple[str, int], ...] = field(default_factory=tuple)
    dns_name_label: str = None

    def __post_init__(self):
        validate_name(self.name, "Container group")
        if self.operating_system not in OS_TYPES:
            raise ValueError(
                f"{self.name} - operating system {self.operating_system} must be one of",
                OS_TYPES,
            )
        if self.restart_policy not in RESTART_POLICIES:
            raise ValueError(
                f"{self.name} - restart policy {self.restart_policy} must be one of",
                list(RESTART_POLICIES.keys()),
            )
        for volume in self.volumes:
            if not isinstance(volume, VOLUME_TYPES):
                raise TypeError(
                    f"{self.name} - volumes must be one of", VOLUME_TYPES, "Got", type(volume)
                )
        for protocol, port in self.ports:
            if protocol not in PROTOCOLS:
                raise ValueError(f"{self.name} - port protocol must be one of", PROTOCOLS)
            validate_port(port)
        if self.network_profile is not None and not isinstance(
            self.network_profile, (str, NetworkProfileConfig, ResourceRef)
        ):
            raise TypeError(
                f"{self.name} - network_profile must be one of",
                (str, NetworkProfileConfig, ResourceRef),
                "Got",
                type(self.network_profile),
            )
        if isinstance(self.network_profile, ResourceRef) and self.network_profile.is_explicit:
            raise TypeError(
                f"{self.name} - network_profile reference {self.network_profile.name} has no resource type."
                " Use the profile name or link_network_profile()"
            )
        for setting in ("instances", "init_containers", "volumes", "registry_credentials"):
            object.__setattr__(self, setting, tuple(getattr(self, setting)))
        object.__setattr__(self, "ports", tuple(tuple(port) for port in self.ports))

    def add_instances(self, instances: list) -> ContainerGroupConfig:
        return replace(self, instances=self.instances + tuple(instances))

    def add_init_containers(self, init_containers: list) -> ContainerGroupConfig:
        return replace(self, init_containers=self.init_containers + tuple(init_containers))

    def add_volumes(self, volumes: list) -> ContainerGroupConfig:
        return replace(self, volumes=self.volumes + tuple(volumes))

    def add_registry_credentials(self, credentials: list) -> ContainerGroupConfig:
        return replace(self, registry_credentials=self.registry_credentials + tuple(credentials))

    def add_identity(
        self, identity: Union[UserAssignedIdentity, UserAssignedIdentityConfig, str]
    ) -> ContainerGroupConfig:
        return replace(self, identity=self.identity.add(identity))

    def with_system_identity(self) -> ContainerGroupConfig:
        return replace(self, identity=self.identity.with_system_identity())

    def with_network_profile(
        self, network_profile: Union[str, NetworkProfileConfig, ResourceRef]
    ) -> ContainerGroupConfig:
        return replace(self, network_profile=network_profile)

    def add_tcp_port(self, port: int) -> ContainerGroupConfig:
        return replace(self, ports=self.ports + ((TCP, port),))

    def add_udp_port(self, port: int) -> ContainerGroupConfig:
        return replace(self, ports=self.ports + ((UDP, port),))

    @property
    def network_profile_ref(self) -> ResourceRef | None:
        if self.network_profile is None:
            return None
        elif isinstance(self.network_profile, ResourceRef):
            return self.network_profile
        elif isinstance(self.network_profile, NetworkProfileConfig):
            return self.network_profile.ref
        return implicit_dependency(NETWORK_PROFILE_TYPE, self.network_profile)

    @property
    def secure_parameters(self) -> tuple:
        parameters = [credential.password for credential in self.registry_credentials]
        for container in self.instances + self.init_containers:
            parameters += list(container.secure_parameters)
        for volume in self.volumes:
            parameters += list(volume.secure_parameters)
        return tuple(unique_ordered(parameters))
