"""Data models for kotsadm-deploy.

This module provides the typed structures shared by the configuration
model, the manifest builders and the reconciler.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StoreKind(str, Enum):
    """Supported object store backends.

    Inherits from str so values compare equal to their persisted form.
    """

    INTERNAL = "internal"
    EXTERNAL = "external"


class ResourceKind(str, Enum):
    """Kubernetes resource kinds managed by kotsadm-deploy."""

    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    SERVICE = "Service"
    SECRET = "Secret"
    POD = "Pod"
    PERSISTENT_VOLUME = "PersistentVolume"

    @property
    def namespaced(self) -> bool:
        """Whether resources of this kind live inside a namespace."""
        return self is not ResourceKind.PERSISTENT_VOLUME


class ReconcileResult(str, Enum):
    """Outcome of reconciling a single resource."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class StorageOptions:
    """Object store settings.

    Attributes:
        store_kind: The object store backend, see ``StoreKind``.
        access_key_id: Access key for the object store.
        secret_access_key: Secret key for the object store.
        bucket_name: Bucket holding kotsadm data.
        endpoint: Object store endpoint. Empty means the backend default.
        bucket_in_path: Whether the bucket is addressed path-style.

    """

    store_kind: str = StoreKind.INTERNAL
    access_key_id: str = ""
    secret_access_key: str = ""
    bucket_name: str = ""
    endpoint: str = ""
    bucket_in_path: bool = False


@dataclass(frozen=True, slots=True)
class DeployOptions:
    """Parameters for rendering the kotsadm manifests.

    Attributes:
        namespace: Namespace all namespaced resources are placed in.
        is_openshift: Whether the target is a security-constrained platform
            that assigns its own user ids.
        use_host_network: Whether pods run on the host network.
        storage: Validated object store settings.
        registry: Registry prefix for kotsadm images.
        tag: Image tag for kotsadm images.
        postgres_password: Password for the bundled postgres. Generated when empty.

    """

    namespace: str
    storage: StorageOptions
    is_openshift: bool = False
    use_host_network: bool = False
    registry: str = "kotsadm"
    tag: str = "latest"
    postgres_password: str = ""


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Desired state of a single cluster resource.

    Attributes:
        kind: The resource kind.
        name: The resource name.
        namespace: The namespace, or None for cluster-scoped resources.
        labels: Labels set on the resource metadata.
        managed_element: Name of the container or port this tool owns.
        body: The full manifest as sent to the Kubernetes API.

    """

    kind: ResourceKind
    name: str
    namespace: str | None
    labels: dict[str, str]
    managed_element: str
    body: dict[str, Any] = field(repr=False)
