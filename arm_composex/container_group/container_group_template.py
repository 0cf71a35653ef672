# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ARM resources and properties of Azure Container Instances container groups.
"""

from __future__ import annotations

import base64

from troposphere.validators import double, integer, network_port

from arm_composex.common.arm_functions import ResourceId
from arm_composex.common.arm_resources import (
    ArmProperty,
    ArmResource,
    NamedArmProperty,
    validate_unique,
)
from arm_composex.common.dependencies import implicit_dependency
from arm_composex.common.logging import LOG
from arm_composex.common.secure_parameters import SecureParameter
from arm_composex.container_group.container_group_config import (
    AzureFileVolume,
    ContainerGroupConfig,
    ContainerInstanceConfig,
    EmptyDirVolume,
    GitRepoVolume,
    InitContainerConfig,
    ProbeConfig,
    SecretVolume,
)
from arm_composex.container_group.container_group_params import (
    CONTAINER_GROUP_API_VERSION,
    CONTAINER_GROUP_TYPE,
    OS_TYPES,
    PROTOCOLS,
    PUBLIC_IP,
    RESTART_POLICIES,
)
from arm_composex.container_group.container_group_ports import (
    ReconciledContainer,
    reconcile_container_group,
)
from arm_composex.identity.identity_template import render_identity
from arm_composex.network.network_config import NetworkProfileConfig
from arm_composex.network.network_params import NETWORK_PROFILE_TYPE
from arm_composex.storage.storage_config import storage_account_key
from arm_composex.storage.storage_params import (
    STORAGE_ACCOUNT_API_VERSION,
    STORAGE_ACCOUNT_TYPE,
)


def set_props(**kwargs) -> dict:
    """Leaves out the unset properties"""
    return {key: value for key, value in kwargs.items() if value is not None}


class ContainerPort(ArmProperty):
    props = {"port": (network_port, True)}


class GroupPort(ArmProperty):
    props = {
        "protocol": (str, True),
        "port": (network_port, True),
    }

    def validate(self):
        if self.properties["protocol"] not in PROTOCOLS:
            raise ValueError(
                f"Port protocol {self.properties['protocol']} must be one of", PROTOCOLS
            )


class IpAddress(ArmProperty):
    props = {
        "type": (str, True),
        "ports": ([GroupPort], True),
        "dnsNameLabel": (str, False),
    }

    def validate(self):
        ports = [
            (port.properties["protocol"], port.properties["port"])
            for port in self.properties["ports"]
        ]
        validate_unique(ports, "public ports", "IpAddress")


class ResourceRequests(ArmProperty):
    props = {
        "cpu": (double, True),
        "memoryInGB": (double, True),
    }


class ResourceRequirements(ArmProperty):
    props = {"requests": (ResourceRequests, True)}


class EnvironmentVariable(ArmProperty):
    props = {
        "name": (str, True),
        "value": (str, False),
        "secureValue": (str, False),
    }


class VolumeMountProperty(ArmProperty):
    props = {
        "name": (str, True),
        "mountPath": (str, True),
        "readOnly": (bool, False),
    }


class HttpGet(ArmProperty):
    props = {
        "path": (str, False),
        "port": (network_port, True),
        "scheme": (str, False),
    }


class ContainerExec(ArmProperty):
    props = {"command": ([str], True)}


class ContainerProbe(ArmProperty):
    props = {
        "httpGet": (HttpGet, False),
        "exec": (ContainerExec, False),
        "initialDelaySeconds": (integer, False),
        "periodSeconds": (integer, False),
        "failureThreshold": (integer, False),
        "successThreshold": (integer, False),
        "timeoutSeconds": (integer, False),
    }

    def validate(self):
        if ("httpGet" in self.properties) == ("exec" in self.properties):
            raise ValueError("Container probes require exactly one of httpGet or exec")


class Container(NamedArmProperty):
    props = {
        "image": (str, True),
        "command": ([str], False),
        "ports": ([ContainerPort], False),
        "environmentVariables": ([EnvironmentVariable], False),
        "resources": (ResourceRequirements, True),
        "volumeMounts": ([VolumeMountProperty], False),
        "livenessProbe": (ContainerProbe, False),
        "readinessProbe": (ContainerProbe, False),
    }

    def validate(self):
        validate_unique(
            [port.properties["port"] for port in self.properties.get("ports", [])],
            "ports",
            self.name,
        )


class InitContainer(NamedArmProperty):
    props = {
        "image": (str, True),
        "command": ([str], False),
        "environmentVariables": ([EnvironmentVariable], False),
        "volumeMounts": ([VolumeMountProperty], False),
    }


class AzureFileVolumeProperty(ArmProperty):
    props = {
        "shareName": (str, True),
        "storageAccountName": (str, True),
        "storageAccountKey": (str, False),
        "readOnly": (bool, False),
    }


class GitRepoVolumeProperty(ArmProperty):
    props = {
        "repository": (str, True),
        "directory": (str, False),
        "revision": (str, False),
    }


class Volume(ArmProperty):
    props = {
        "name": (str, True),
        "azureFile": (AzureFileVolumeProperty, False),
        "emptyDir": (dict, False),
        "secret": (dict, False),
        "gitRepo": (GitRepoVolumeProperty, False),
    }

    def validate(self):
        sources = [
            source
            for source in ("azureFile", "emptyDir", "secret", "gitRepo")
            if source in self.properties
        ]
        if len(sources) != 1:
            raise ValueError(
                f"Volume {self.properties['name']} must have exactly one source. Got",
                sources,
            )


class ImageRegistryCredential(ArmProperty):
    props = {
        "server": (str, True),
        "username": (str, True),
        "password": (str, True),
    }


class ContainerGroupNetworkProfile(ArmProperty):
    props = {"id": (str, True)}


class ContainerGroup(ArmResource):
    arm_type = CONTAINER_GROUP_TYPE
    api_version = CONTAINER_GROUP_API_VERSION
    props = {
        "containers": ([Container], True),
        "initContainers": ([InitContainer], False),
        "osType": (str, True),
        "restartPolicy": (str, True),
        "ipAddress": (IpAddress, False),
        "imageRegistryCredentials": ([ImageRegistryCredential], False),
        "networkProfile": (ContainerGroupNetworkProfile, False),
        "volumes": ([Volume], False),
    }

    def validate(self):
        if self.properties["osType"] not in OS_TYPES:
            raise ValueError(
                f"{self.name} - osType {self.properties['osType']} must be one of", OS_TYPES
            )
        if self.properties["restartPolicy"] not in RESTART_POLICIES.values():
            raise ValueError(
                f"{self.name} - restartPolicy {self.properties['restartPolicy']} must be one of",
                list(RESTART_POLICIES.values()),
            )
        validate_unique(
            [
                container.name
                for container in self.properties["containers"]
                + self.properties.get("initContainers", [])
            ],
            "container names",
            self.name,
        )
        validate_unique(
            [volume.properties["name"] for volume in self.properties.get("volumes", [])],
            "volume names",
            self.name,
        )


def render_env_vars(env_vars: tuple) -> list:
    return [
        EnvironmentVariable(name=env.name, secureValue=env.secure_value.expression)
        if env.secure_value
        else EnvironmentVariable(name=env.name, value=env.value)
        for env in env_vars
    ]


def render_volume_mounts(reconciled: ReconciledContainer) -> list:
    return [
        VolumeMountProperty(name=volume_name, mountPath=mount_path)
        for volume_name, mount_path in reconciled.volume_mounts
    ]


def render_probe(probe: ProbeConfig) -> ContainerProbe | None:
    if probe is None:
        return None
    if probe.command is not None:
        target = {"exec": ContainerExec(command=list(probe.command))}
    else:
        target = {
            "httpGet": HttpGet(
                **set_props(path=probe.path, port=probe.port, scheme=probe.scheme)
            )
        }
    return ContainerProbe(
        **target,
        **set_props(
            initialDelaySeconds=probe.initial_delay_seconds,
            periodSeconds=probe.period_seconds,
            failureThreshold=probe.failure_threshold,
            successThreshold=probe.success_threshold,
            timeoutSeconds=probe.timeout_seconds,
        ),
    )


def render_container(
    container: ContainerInstanceConfig, reconciled: ReconciledContainer
) -> Container:
    props = set_props(
        command=list(container.command) or None,
        ports=[ContainerPort(port=port) for port in reconciled.ports] or None,
        environmentVariables=render_env_vars(container.env_vars) or None,
        volumeMounts=render_volume_mounts(reconciled) or None,
        livenessProbe=render_probe(container.liveness_probe),
        readinessProbe=render_probe(container.readiness_probe),
    )
    return Container(
        container.name.lower(),
        image=container.image,
        resources=ResourceRequirements(
            requests=ResourceRequests(
                cpu=float(container.cpu_cores), memoryInGB=float(container.memory_in_gb)
            )
        ),
        **props,
    )


def render_init_container(
    container: InitContainerConfig, reconciled: ReconciledContainer
) -> InitContainer:
    return InitContainer(
        container.name.lower(),
        image=container.image,
        **set_props(
            command=list(container.command) or None,
            environmentVariables=render_env_vars(container.env_vars) or None,
            volumeMounts=render_volume_mounts(reconciled) or None,
        ),
    )


def render_secret_file(value):
    if isinstance(value, SecureParameter):
        return value.expression
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


def render_volume(volume) -> Volume:
    if isinstance(volume, AzureFileVolume):
        return Volume(
            name=volume.name,
            azureFile=AzureFileVolumeProperty(
                shareName=volume.share_name,
                storageAccountName=volume.storage_account_name,
                storageAccountKey=storage_account_key(
                    volume.storage_account_name, STORAGE_ACCOUNT_API_VERSION
                ),
            ),
        )
    elif isinstance(volume, SecretVolume):
        return Volume(
            name=volume.name,
            secret={
                file_name: render_secret_file(value) for file_name, value in volume.files
            },
        )
    elif isinstance(volume, GitRepoVolume):
        return Volume(
            name=volume.name,
            gitRepo=GitRepoVolumeProperty(
                **set_props(
                    repository=volume.repository,
                    directory=volume.directory,
                    revision=volume.revision,
                )
            ),
        )
    elif isinstance(volume, EmptyDirVolume):
        return Volume(name=volume.name, emptyDir={})
    raise TypeError("Unsupported volume type", type(volume))


def render_network_profile(config: ContainerGroupConfig) -> ContainerGroupNetworkProfile | None:
    network_profile = config.network_profile
    if network_profile is None:
        return None
    elif isinstance(network_profile, NetworkProfileConfig):
        profile_id = network_profile.ref.resource_id
    elif isinstance(network_profile, str):
        profile_id = ResourceId(NETWORK_PROFILE_TYPE, network_profile)
    else:
        profile_id = network_profile.resource_id
    return ContainerGroupNetworkProfile(id=profile_id)


def container_group_dependencies(config: ContainerGroupConfig) -> list:
    """
    References of the container group to its network profile, user assigned identities and
    the storage accounts of its Azure File volumes.
    """
    dependencies = []
    if config.network_profile_ref:
        dependencies.append(config.network_profile_ref)
    dependencies += config.identity.dependencies
    dependencies += [
        implicit_dependency(STORAGE_ACCOUNT_TYPE, volume.storage_account_name)
        for volume in config.volumes
        if isinstance(volume, AzureFileVolume)
    ]
    return dependencies


def expand_container_group(config: ContainerGroupConfig, location: str) -> list:
    reconciled = reconcile_container_group(config)
    containers = [
        render_container(container, reconciled_container)
        for container, reconciled_container in zip(config.instances, reconciled.containers)
    ]
    init_containers = [
        render_init_container(container, reconciled_container)
        for container, reconciled_container in zip(
            config.init_containers, reconciled.init_containers
        )
    ]
    ip_address = None
    if reconciled.has_public_ip:
        ip_address = IpAddress(
            type=PUBLIC_IP,
            ports=[
                GroupPort(protocol=protocol, port=port)
                for protocol, port in reconciled.public_ports
            ],
            **set_props(dnsNameLabel=config.dns_name_label),
        )
    props = set_props(
        initContainers=init_containers or None,
        ipAddress=ip_address,
        imageRegistryCredentials=[
            ImageRegistryCredential(
                server=credential.server,
                username=credential.username,
                password=credential.password.expression,
            )
            for credential in config.registry_credentials
        ]
        or None,
        networkProfile=render_network_profile(config),
        volumes=[render_volume(volume) for volume in config.volumes] or None,
    )
    LOG.debug(
        f"{config.name} - {len(containers)} containers, public ports {list(reconciled.public_ports)}"
    )
    return [
        ContainerGroup(
            config.name,
            location=location,
            dependencies=container_group_dependencies(config),
            identity=render_identity(config.identity),
            containers=containers,
            osType=config.operating_system,
            restartPolicy=RESTART_POLICIES[config.restart_policy],
            **props,
        )
    ]
