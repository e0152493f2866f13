"""Building blocks shared by the manifest builders."""

import base64
from collections.abc import Mapping
from typing import Any

from kotsadm_deploy.models import DeployOptions, ResourceDescriptor, ResourceKind

KOTSADM_KEY = "kots.io/kotsadm"
KOTSADM_LABEL_VALUE = "true"

# Fixed non-root identity used when the platform does not assign one
NON_ROOT_ID = 1001

# Secrets referenced by env bindings
OBJECT_STORE_SECRET = "kotsadm-minio"
POSTGRES_SECRET = "kotsadm-postgres"
PASSWORD_SECRET = "kotsadm-password"
SESSION_SECRET = "kotsadm-session"

_API_VERSIONS: dict[ResourceKind, str] = {
    ResourceKind.DEPLOYMENT: "apps/v1",
    ResourceKind.STATEFUL_SET: "apps/v1",
    ResourceKind.SERVICE: "v1",
    ResourceKind.SECRET: "v1",
    ResourceKind.POD: "v1",
    ResourceKind.PERSISTENT_VOLUME: "v1",
}


def kotsadm_labels(**extra: str) -> dict[str, str]:
    """Return the product marker label, merged with any extra labels."""
    return {**extra, KOTSADM_KEY: KOTSADM_LABEL_VALUE}


def descriptor(
    kind: ResourceKind,
    name: str,
    namespace: str | None,
    spec: dict[str, Any],
    *,
    managed_element: str = "",
    spec_field: str = "spec",
    **top_level: Any,
) -> ResourceDescriptor:
    """Wrap a spec payload into a full manifest and its descriptor.

    Args:
        kind: The resource kind.
        name: The resource name.
        namespace: The namespace, or None for cluster-scoped kinds.
        spec: The kind-specific payload.
        managed_element: Name of the container or port owned by this tool.
        spec_field: Top-level manifest field holding the payload.
        **top_level: Extra top-level manifest fields, such as a secret type.

    Returns:
        The resource descriptor.

    """
    labels = kotsadm_labels()
    metadata: dict[str, Any] = {"name": name, "labels": labels}
    if namespace is not None:
        metadata["namespace"] = namespace

    body: dict[str, Any] = {
        "apiVersion": _API_VERSIONS[kind],
        "kind": kind.value,
        "metadata": metadata,
        spec_field: spec,
        **top_level,
    }
    return ResourceDescriptor(
        kind=kind,
        name=name,
        namespace=namespace,
        labels=dict(labels),
        managed_element=managed_element,
        body=body,
    )


def pod_security_context(deploy_options: DeployOptions, *, with_fs_group: bool = False) -> dict[str, int]:
    """Return the pod security context for the target platform.

    OpenShift assigns user ids from a per-namespace range, so no fixed id
    is set there.
    """
    if deploy_options.is_openshift:
        return {}
    context = {"runAsUser": NON_ROOT_ID}
    if with_fs_group:
        context["fsGroup"] = NON_ROOT_ID
    return context


def secret_env(name: str, secret: str, key: str) -> dict[str, Any]:
    """Return an env binding that reads its value from a secret key."""
    return {"name": name, "valueFrom": {"secretKeyRef": {"name": secret, "key": key}}}


def field_env(name: str, field_path: str) -> dict[str, Any]:
    """Return an env binding backed by the downward API."""
    return {"name": name, "valueFrom": {"fieldRef": {"fieldPath": field_path}}}


def value_env(name: str, value: str) -> dict[str, Any]:
    """Return an env binding with a literal, non-secret value."""
    return {"name": name, "value": value}


def encode_data(data: Mapping[str, bytes]) -> dict[str, str]:
    """Base64-encode secret values the way the Kubernetes API expects them."""
    return {key: base64.b64encode(value).decode() for key, value in data.items()}
