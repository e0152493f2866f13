"""Manifests for the kotsadm admin console."""

from kotsadm_deploy.models import DeployOptions, ResourceDescriptor, ResourceKind
from kotsadm_deploy.objects.common import (
    OBJECT_STORE_SECRET,
    PASSWORD_SECRET,
    POSTGRES_SECRET,
    SESSION_SECRET,
    descriptor,
    field_env,
    kotsadm_labels,
    pod_security_context,
    secret_env,
)
from kotsadm_deploy.objects.hostnetwork import KOTSADM_PORT, pod_network_fields, port_binding
from kotsadm_deploy.storage import (
    KEY_ACCESS_KEY,
    KEY_BUCKET_IN_PATH,
    KEY_BUCKET_NAME,
    KEY_ENDPOINT,
    KEY_SECRET_KEY,
)

KOTSADM_NAME = "kotsadm"
KOTSADM_PORT_NAME = "http"


def kotsadm_image(deploy_options: DeployOptions) -> str:
    """Return the kotsadm image reference."""
    return f"{deploy_options.registry}/kotsadm:{deploy_options.tag}"


def kotsadm_env() -> list[dict]:
    """Return the env bindings of the kotsadm container.

    Credentials are always read from secrets so they can be rotated
    without touching the deployment.
    """
    return [
        secret_env("SHARED_PASSWORD_BCRYPT", PASSWORD_SECRET, "passwordBcrypt"),
        secret_env("SESSION_KEY", SESSION_SECRET, "key"),
        secret_env("POSTGRES_URI", POSTGRES_SECRET, "uri"),
        field_env("POD_NAMESPACE", "metadata.namespace"),
        secret_env("S3_ACCESS_KEY_ID", OBJECT_STORE_SECRET, KEY_ACCESS_KEY),
        secret_env("S3_SECRET_ACCESS_KEY", OBJECT_STORE_SECRET, KEY_SECRET_KEY),
        secret_env("S3_BUCKET_NAME", OBJECT_STORE_SECRET, KEY_BUCKET_NAME),
        secret_env("S3_ENDPOINT", OBJECT_STORE_SECRET, KEY_ENDPOINT),
        secret_env("S3_BUCKET_ENDPOINT", OBJECT_STORE_SECRET, KEY_BUCKET_IN_PATH),
    ]


def kotsadm_deployment(deploy_options: DeployOptions) -> ResourceDescriptor:
    """Build the kotsadm deployment.

    Args:
        deploy_options: The deploy-time options.

    Returns:
        The desired deployment.

    """
    pod_labels = kotsadm_labels(app=KOTSADM_NAME)
    container = {
        "name": KOTSADM_NAME,
        "image": kotsadm_image(deploy_options),
        "imagePullPolicy": "Always",
        "ports": [
            port_binding(KOTSADM_PORT_NAME, KOTSADM_PORT, use_host_network=deploy_options.use_host_network),
        ],
        "readinessProbe": {
            "failureThreshold": 3,
            "initialDelaySeconds": 10,
            "periodSeconds": 10,
            "httpGet": {"path": "/healthz", "port": KOTSADM_PORT, "scheme": "HTTP"},
        },
        "env": kotsadm_env(),
    }

    spec = {
        "selector": {"matchLabels": {"app": KOTSADM_NAME}},
        "template": {
            "metadata": {"labels": pod_labels},
            "spec": {
                **pod_network_fields(deploy_options.use_host_network),
                "securityContext": pod_security_context(deploy_options),
                "serviceAccountName": KOTSADM_NAME,
                "restartPolicy": "Always",
                "containers": [container],
            },
        },
    }
    return descriptor(
        ResourceKind.DEPLOYMENT,
        KOTSADM_NAME,
        deploy_options.namespace,
        spec,
        managed_element=KOTSADM_NAME,
    )


def kotsadm_service(namespace: str) -> ResourceDescriptor:
    """Build the ClusterIP service in front of kotsadm."""
    spec = {
        "selector": {"app": KOTSADM_NAME},
        "type": "ClusterIP",
        "ports": [{"name": KOTSADM_PORT_NAME, "port": KOTSADM_PORT, "targetPort": KOTSADM_PORT_NAME}],
    }
    return descriptor(ResourceKind.SERVICE, KOTSADM_NAME, namespace, spec, managed_element=KOTSADM_PORT_NAME)
