"""Manifests for the postgres database backing kotsadm."""

from typing import Any

from kotsadm_deploy.models import DeployOptions, ResourceDescriptor, ResourceKind
from kotsadm_deploy.objects.common import (
    POSTGRES_SECRET,
    descriptor,
    encode_data,
    kotsadm_labels,
    pod_security_context,
    secret_env,
    value_env,
)
from kotsadm_deploy.objects.hostnetwork import POSTGRES_PORT, pod_network_fields, port_binding

POSTGRES_NAME = "kotsadm-postgres"
POSTGRES_IMAGE = "postgres:10.7"
POSTGRES_USER = "kotsadm"
POSTGRES_DB = "kotsadm"
POSTGRES_STORAGE = "1Gi"
POSTGRES_DATA_DIR = "/var/lib/postgresql/data"
POSTGRES_HOSTPATH = "/var/lib/kotsadm/postgres"


def postgres_uri(password: str) -> str:
    """Return the connection URI kotsadm uses to reach postgres."""
    return (
        f"postgresql://{POSTGRES_USER}:{password}@{POSTGRES_NAME}/{POSTGRES_DB}"
        "?connect_timeout=10&sslmode=disable"
    )


def postgres_secret(namespace: str, password: str) -> ResourceDescriptor:
    """Build the secret holding the postgres password and connection URI."""
    data = encode_data({"password": password.encode(), "uri": postgres_uri(password).encode()})
    return descriptor(ResourceKind.SECRET, POSTGRES_SECRET, namespace, data, spec_field="data", type="Opaque")


def postgres_statefulset(deploy_options: DeployOptions) -> ResourceDescriptor:
    """Build the postgres statefulset.

    Args:
        deploy_options: The deploy-time options.

    Returns:
        The desired statefulset.

    """
    claim: dict[str, Any] = {
        "metadata": {"name": POSTGRES_NAME},
        "spec": {
            "accessModes": ["ReadWriteOnce"],
            "resources": {"requests": {"storage": POSTGRES_STORAGE}},
        },
    }
    container = {
        "name": POSTGRES_NAME,
        "image": POSTGRES_IMAGE,
        "imagePullPolicy": "IfNotPresent",
        "ports": [
            port_binding("postgres", POSTGRES_PORT, use_host_network=deploy_options.use_host_network),
        ],
        "volumeMounts": [{"name": POSTGRES_NAME, "mountPath": POSTGRES_DATA_DIR}],
        "env": [
            value_env("PGDATA", f"{POSTGRES_DATA_DIR}/pgdata"),
            value_env("POSTGRES_USER", POSTGRES_USER),
            secret_env("POSTGRES_PASSWORD", POSTGRES_SECRET, "password"),
            value_env("POSTGRES_DB", POSTGRES_DB),
        ],
    }

    spec = {
        "replicas": 1,
        "serviceName": POSTGRES_NAME,
        "selector": {"matchLabels": {"app": POSTGRES_NAME}},
        "volumeClaimTemplates": [claim],
        "template": {
            "metadata": {"labels": kotsadm_labels(app=POSTGRES_NAME)},
            "spec": {
                **pod_network_fields(deploy_options.use_host_network),
                "securityContext": pod_security_context(deploy_options, with_fs_group=True),
                "containers": [container],
            },
        },
    }
    return descriptor(
        ResourceKind.STATEFUL_SET,
        POSTGRES_NAME,
        deploy_options.namespace,
        spec,
        managed_element=POSTGRES_NAME,
    )


def postgres_service(namespace: str) -> ResourceDescriptor:
    """Build the service in front of postgres."""
    spec = {
        "selector": {"app": POSTGRES_NAME},
        "type": "ClusterIP",
        "ports": [{"name": "postgres", "port": POSTGRES_PORT, "targetPort": "postgres"}],
    }
    return descriptor(ResourceKind.SERVICE, POSTGRES_NAME, namespace, spec, managed_element="postgres")


def postgres_hostpath_volume() -> ResourceDescriptor:
    """Build the host-path volume used by postgres on host-network installs."""
    spec = {
        "capacity": {"storage": POSTGRES_STORAGE},
        "accessModes": ["ReadWriteOnce"],
        "persistentVolumeReclaimPolicy": "Retain",
        "hostPath": {"path": POSTGRES_HOSTPATH, "type": "DirectoryOrCreate"},
    }
    return descriptor(ResourceKind.PERSISTENT_VOLUME, POSTGRES_NAME, None, spec)
