# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Dependency edges between the resources of a deployment template.

Resource modules only describe what a resource points to, as ResourceRef. Which of these references become a
``dependsOn`` edge is decided here, once every resource of the template is known:

* typed references become an edge only if the target is declared in the template
* linked (existing) references never become an edge
* explicit, name-only, references always become an edge: the target resourceId() when a resource with
  that name is declared, the bare name otherwise, for the deployment engine to resolve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arm_composex.common.arm_resources import ArmResource

from arm_composex.common.arm_functions import ResourceId
from arm_composex.common.logging import LOG


@dataclass(frozen=True)
class ResourceRef:
    """
    Reference from one resource to another one.

    :ivar str name: name of the target resource
    :ivar str resource_type: ARM type of the target. None for explicit dependencies known by name only.
    :ivar bool linked: whether the target is an existing resource, outside of the template
    :ivar str resource_group: resource group of a linked target
    """

    name: str
    resource_type: str = None
    linked: bool = False
    resource_group: str = None

    @property
    def is_explicit(self) -> bool:
        return self.resource_type is None

    @property
    def key(self) -> tuple:
        return (self.resource_type or "").lower(), self.name.lower()

    @property
    def resource_id(self) -> ResourceId:
        if self.is_explicit:
            raise AttributeError(f"{self.name} - explicit references have no resource type")
        return ResourceId(
            self.resource_type,
            self.name,
            resource_group=self.resource_group if self.linked else None,
        )


def explicit_dependency(name: str) -> ResourceRef:
    return ResourceRef(name)


def implicit_dependency(resource_type: str, name: str) -> ResourceRef:
    return ResourceRef(name, resource_type)


def linked_resource(resource_type: str, name: str, resource_group: str = None) -> ResourceRef:
    return ResourceRef(name, resource_type, linked=True, resource_group=resource_group)


class DependencyGraph:
    """
    Resolves the dependencies of all the resources of a template.

    :ivar list[ArmResource] resources: resources of the template, in template order
    :ivar dict edges: for each resource key, the keys of the template resources it depends on
    """

    def __init__(self, resources: list[ArmResource]):
        self.resources = list(resources)
        self._by_key: dict = {}
        self._by_name: dict = {}
        for resource in self.resources:
            self._by_key.setdefault(resource.key, resource)
            self._by_name.setdefault(resource.name.lower(), resource)
        self.edges: dict = {resource.key: [] for resource in self.resources}

    def find(self, ref: ResourceRef) -> ArmResource | None:
        """
        Finds the template resource a reference points to.

        :param ResourceRef ref:
        :return: the resource, None if the reference is linked or the target is not in the template
        """
        if ref.linked:
            return None
        if ref.is_explicit:
            return self._by_name.get(ref.name.lower())
        return self._by_key.get(ref.key)

    def resolve(self, resource: ArmResource) -> list:
        """
        Defines the dependsOn values of a resource, in order of first encounter.

        :param ArmResource resource:
        :return: list of resourceId() expressions and/or opaque names
        :rtype: list
        """
        depends_on = []
        keys = []
        for ref in resource.dependencies:
            target = self.find(ref)
            if target is resource:
                continue
            if target is not None:
                if target.key in keys:
                    continue
                keys.append(target.key)
                depends_on.append(target.resource_id)
            elif ref.is_explicit:
                if ref.name in depends_on:
                    continue
                LOG.debug(f"{resource} - {ref.name} is not in the template. Kept as-is.")
                depends_on.append(ref.name)
            else:
                LOG.debug(f"{resource} - no dependency on {ref.resource_type}::{ref.name}")
        self.edges[resource.key] = keys
        return depends_on

    def apply(self) -> DependencyGraph:
        """
        Sets depends_on for every resource of the template
        """
        for resource in self.resources:
            resource.depends_on = self.resolve(resource)
        return self

    def topological_order(self) -> list:
        """
        Orders the template resources so that every resource comes after its dependencies.
        Resources that do not depend on each other keep their template order.

        :raises ValueError: if the dependencies are circular
        :rtype: list[ArmResource]
        """
        ordered = []
        done = set()
        pending = list(self.resources)
        while pending:
            ready = [
                resource
                for resource in pending
                if all(dep in done for dep in self.edges.get(resource.key, []))
            ]
            if not ready:
                raise ValueError(
                    "Circular dependencies between resources",
                    [repr(resource) for resource in pending],
                )
            for resource in ready:
                ordered.append(resource)
                done.add(resource.key)
            pending = [resource for resource in pending if resource.key not in done]
        return ordered
