# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Reconciles the ports and volume mounts declared on the containers with the container group settings.

Ports
------

A port declared as both PublicPort and InternalPort on the same container stays internal.
The public IP of the group exposes every other PublicPort port of the containers, once, in the order
they are first declared, followed by the ports added onto the group itself.
Containers advertise each of their ports once, minus the internal ports another container made public.

Volumes
--------

Mounts refer to the group volumes by name. A volume mounted twice on the same container is mounted once,
on the last path given.
"""

from __future__ import annotations

from dataclasses import dataclass

from arm_composex.common import unique_ordered
from arm_composex.common.logging import LOG
from arm_composex.container_group.container_group_config import (
    ContainerGroupConfig,
    ContainerInstanceConfig,
)
from arm_composex.container_group.container_group_params import (
    INTERNAL_PORT,
    PUBLIC_PORT,
    TCP,
)
from arm_composex.exceptions import VolumeNotFoundError


def define_effective_public_ports(container: ContainerInstanceConfig) -> list:
    """
    Ports of the container to expose on the group public IP.

    :param ContainerInstanceConfig container:
    :return: the port numbers, in declaration order
    :rtype: list[int]
    """
    internal = {port for port, access in container.ports if access == INTERNAL_PORT}
    public = []
    for port, access in container.ports:
        if access != PUBLIC_PORT:
            continue
        if port in internal:
            LOG.debug(
                f"{container.name} - port {port} is declared both public and internal. Kept internal."
            )
            continue
        public.append(port)
    return unique_ordered(public)


def define_public_ports(instances: list) -> list:
    """
    Union of the public ports of all the containers, in order of first encounter.

    :param list[ContainerInstanceConfig] instances:
    :rtype: list[int]
    """
    ports = []
    for container in instances:
        ports += define_effective_public_ports(container)
    return unique_ordered(ports)


def define_container_ports(container: ContainerInstanceConfig, public_ports: list) -> list:
    """
    Ports the container advertises. Internal ports exposed publicly by another container are left out.

    :param ContainerInstanceConfig container:
    :param list[int] public_ports: the group public ports
    :rtype: list[int]
    """
    own_public = define_effective_public_ports(container)
    ports = []
    for port, access in container.ports:
        if access == INTERNAL_PORT and port in public_ports and port not in own_public:
            LOG.debug(
                f"{container.name} - internal port {port} is public on another container. Dropped."
            )
            continue
        ports.append(port)
    return unique_ordered(ports)


def define_group_ports(config: ContainerGroupConfig, public_ports: list) -> list:
    """
    Ports of the public IP, as (protocol, port) pairs.

    The containers public ports keep their first-seen order. Ports added to the group itself are
    merged in by port number, before the first container port with a higher number.

    :param ContainerGroupConfig config:
    :param list[int] public_ports: public ports of the containers, all TCP
    :rtype: list[tuple]
    """
    group_ports = [(TCP, port) for port in public_ports]
    for protocol, port in config.ports:
        if (protocol, port) in group_ports:
            continue
        index = next(
            (index for index, (_, existing) in enumerate(group_ports) if existing > port),
            len(group_ports),
        )
        group_ports.insert(index, (protocol, port))
    return group_ports


def resolve_volume_mounts(container, volumes: dict) -> list:
    """
    Matches the mounts of a container against the group volumes.

    :param container: ContainerInstanceConfig or InitContainerConfig
    :param dict volumes: group volumes, by name
    :return: (volume name, mount path) pairs, one per volume
    :raises VolumeNotFoundError: if a mount refers to a volume the group does not have
    """
    mounts = {}
    for volume_name, mount_path in container.volume_mounts:
        if volume_name not in volumes:
            raise VolumeNotFoundError(
                f"{container.name} - volume {volume_name} is not defined in the group. Defined",
                list(volumes.keys()),
            )
        mounts[volume_name] = mount_path
    return list(mounts.items())


@dataclass(frozen=True)
class ReconciledContainer:
    name: str
    ports: tuple
    volume_mounts: tuple


@dataclass(frozen=True)
class ReconciledGroup:
    """
    :ivar tuple public_ports: (protocol, port) pairs of the public IP. Empty if the group has no public IP.
    :ivar tuple containers: ReconciledContainer for each container, in order
    :ivar tuple init_containers: ReconciledContainer for each init container, in order
    """

    public_ports: tuple
    containers: tuple
    init_containers: tuple

    @property
    def has_public_ip(self) -> bool:
        return bool(self.public_ports)


def reconcile_container_group(config: ContainerGroupConfig) -> ReconciledGroup:
    volumes = {volume.name: volume for volume in config.volumes}
    public_ports = define_public_ports(config.instances)
    containers = tuple(
        ReconciledContainer(
            container.name,
            tuple(define_container_ports(container, public_ports)),
            tuple(resolve_volume_mounts(container, volumes)),
        )
        for container in config.instances
    )
    init_containers = tuple(
        ReconciledContainer(
            container.name, (), tuple(resolve_volume_mounts(container, volumes))
        )
        for container in config.init_containers
    )
    group_ports = tuple(define_group_ports(config, public_ports))
    if not group_ports:
        LOG.debug(f"{config.name} - no public port. No public IP.")
    return ReconciledGroup(group_ports, containers, init_containers)
