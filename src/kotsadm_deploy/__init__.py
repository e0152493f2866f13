"""kotsadm-deploy: idempotent deployment of the kotsadm admin console.

This package validates and persists the object store configuration and
converges the kotsadm Kubernetes resources to their desired state without
discarding changes made by operators.

Example usage:
    from kotsadm_deploy import Cluster, DeployOptions, Kotsadm, load_storage_options
    from kotsadm_deploy.models import StorageOptions

    cluster = Cluster()
    storage = load_storage_options(cluster, "default", StorageOptions())
    Kotsadm(cluster, DeployOptions(namespace="default", storage=storage)).deploy()
"""

__version__ = "0.1.0"

from kotsadm_deploy.cli import cli
from kotsadm_deploy.cluster import Cluster
from kotsadm_deploy.deploy import Kotsadm, load_storage_options, render_manifests
from kotsadm_deploy.exceptions import (
    ClusterApiError,
    ClusterConnectionError,
    ErrorKind,
    IncompleteExternalConfigError,
    KotsadmError,
    MalformedBooleanFieldError,
    ManagedElementMissingError,
    ResourceNotFoundError,
    SecretParsingError,
    UnsupportedStoreKindError,
)
from kotsadm_deploy.models import DeployOptions, StorageOptions, StoreKind
from kotsadm_deploy.reconcile import Reconciler

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Classes
    "Cluster",
    "Kotsadm",
    "Reconciler",
    "DeployOptions",
    "StorageOptions",
    "StoreKind",
    # Functions
    "load_storage_options",
    "render_manifests",
    # Exceptions
    "ErrorKind",
    "KotsadmError",
    "UnsupportedStoreKindError",
    "IncompleteExternalConfigError",
    "MalformedBooleanFieldError",
    "ManagedElementMissingError",
    "ResourceNotFoundError",
    "ClusterApiError",
    "ClusterConnectionError",
    "SecretParsingError",
]
