"""Idempotent reconciliation of managed resources.

A resource that does not exist yet is created from its descriptor. A
resource that exists is merged field by field: this tool overwrites the
fields it owns and keeps everything else an operator may have changed,
such as replica counts, resource limits or extra env bindings.

Ownership is declared per kind in ``OWNERSHIP``. Kinds without an entry
(secrets, volumes, pods) are only ever created, never updated.

The fetch and the update are not guarded by a concurrency token, so two
concurrent runs against the same namespace can overwrite each other's
merge. Run one reconciliation pass at a time per namespace.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol

from icecream import ic

from kotsadm_deploy import console
from kotsadm_deploy.exceptions import ManagedElementMissingError, ResourceNotFoundError
from kotsadm_deploy.models import ReconcileResult, ResourceDescriptor, ResourceKind


class ResourceApi(Protocol):
    """Minimal cluster API required by the reconciler."""

    def get(self, kind: ResourceKind, namespace: str | None, name: str) -> dict[str, Any]: ...

    def create(self, kind: ResourceKind, namespace: str | None, body: dict[str, Any]) -> dict[str, Any]: ...

    def update(self, kind: ResourceKind, namespace: str | None, name: str, body: dict[str, Any]) -> dict[str, Any]: ...


@dataclass(frozen=True, slots=True)
class FieldOwnership:
    """Fields of a resource that reconciliation is authoritative over.

    Attributes:
        elements_path: Path from the manifest root to the list holding the
            managed element (a container or a port), located by name.
        replaced: Element fields always overwritten with the desired value.
        merged_by_name: Element list fields merged by entry name, desired
            entries first, then existing entries with other names.

    """

    elements_path: tuple[str, ...]
    replaced: tuple[str, ...] = ()
    merged_by_name: tuple[str, ...] = ()


_POD_TEMPLATE_CONTAINERS = ("spec", "template", "spec", "containers")

OWNERSHIP: Mapping[ResourceKind, FieldOwnership] = MappingProxyType(
    {
        ResourceKind.DEPLOYMENT: FieldOwnership(
            _POD_TEMPLATE_CONTAINERS, replaced=("image",), merged_by_name=("env",)
        ),
        ResourceKind.STATEFUL_SET: FieldOwnership(
            _POD_TEMPLATE_CONTAINERS, replaced=("image",), merged_by_name=("env",)
        ),
        ResourceKind.SERVICE: FieldOwnership(("spec", "ports"), replaced=("port", "targetPort")),
    }
)


def merge_named_list(desired: list[dict[str, Any]], existing: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Merge two lists of named entries.

    The result holds every desired entry in desired order, followed by the
    existing entries whose name is not desired, in existing order.

    Args:
        desired: Entries this tool manages.
        existing: Entries currently on the resource.

    Returns:
        The merged list.

    """
    desired_names = {entry["name"] for entry in desired}
    preserved = [entry for entry in existing if entry.get("name") not in desired_names]
    return [copy.deepcopy(entry) for entry in desired] + copy.deepcopy(preserved)


def _elements(manifest: dict[str, Any], path: tuple[str, ...]) -> list[dict[str, Any]]:
    node: Any = manifest
    for key in path:
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []


def _find_named(elements: list[dict[str, Any]], name: str) -> dict[str, Any] | None:
    for element in elements:
        if element.get("name") == name:
            return element
    return None


def merge_managed(desired: ResourceDescriptor, existing: dict[str, Any]) -> dict[str, Any]:
    """Merge a desired descriptor into an existing manifest.

    The existing manifest is not modified.

    Args:
        desired: The desired resource state.
        existing: The resource as currently stored in the cluster.

    Returns:
        A copy of ``existing`` with the owned fields of the managed element
        replaced or merged from ``desired``.

    Raises:
        ManagedElementMissingError: If ``existing`` has no element named
            ``desired.managed_element``.
        KeyError: If ``desired.kind`` has no ownership entry.

    """
    ownership = OWNERSHIP[desired.kind]
    merged = copy.deepcopy(existing)

    target = _find_named(_elements(merged, ownership.elements_path), desired.managed_element)
    if target is None:
        raise ManagedElementMissingError(desired.kind.value, desired.name, desired.managed_element)

    source = _find_named(_elements(desired.body, ownership.elements_path), desired.managed_element)
    if source is None:
        raise ValueError(f"descriptor for {desired.kind.value} {desired.name} lacks {desired.managed_element!r}")

    for field_name in ownership.replaced:
        if field_name in source:
            target[field_name] = copy.deepcopy(source[field_name])
        else:
            target.pop(field_name, None)

    for field_name in ownership.merged_by_name:
        target[field_name] = merge_named_list(source.get(field_name) or [], target.get(field_name) or [])

    return merged


class Reconciler:
    """Converges cluster resources to their descriptors.

    Attributes:
        api: The cluster API used to read and write resources.

    """

    def __init__(self, api: ResourceApi) -> None:
        self.api = api

    def reconcile(self, desired: ResourceDescriptor) -> ReconcileResult:
        """Create the resource if absent, otherwise merge and update it.

        Args:
            desired: The desired resource state.

        Returns:
            What was done to the resource.

        Raises:
            ManagedElementMissingError: If the existing resource has an unexpected shape.
            ClusterApiError: If a cluster call fails.

        """
        try:
            existing = self.api.get(desired.kind, desired.namespace, desired.name)
        except ResourceNotFoundError:
            self.api.create(desired.kind, desired.namespace, desired.body)
            console.step(f"Created {desired.kind.value} {console.highlight(desired.name)}")
            return ReconcileResult.CREATED

        if desired.kind not in OWNERSHIP:
            console.step(f"{desired.kind.value} {console.highlight(desired.name)} already exists")
            return ReconcileResult.UNCHANGED

        merged = merge_managed(desired, existing)
        ic(desired.kind, desired.name)
        self.api.update(desired.kind, desired.namespace, desired.name, merged)
        console.step(f"Updated {desired.kind.value} {console.highlight(desired.name)}")
        return ReconcileResult.UPDATED

    def ensure_created(self, desired: ResourceDescriptor) -> ReconcileResult:
        """Create the resource if absent and never touch an existing one."""
        try:
            self.api.get(desired.kind, desired.namespace, desired.name)
        except ResourceNotFoundError:
            self.api.create(desired.kind, desired.namespace, desired.body)
            console.step(f"Created {desired.kind.value} {console.highlight(desired.name)}")
            return ReconcileResult.CREATED
        return ReconcileResult.UNCHANGED
