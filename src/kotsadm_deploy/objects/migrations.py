"""Manifest for the one-shot schema migrations pod."""

from kotsadm_deploy.models import DeployOptions, ResourceDescriptor, ResourceKind
from kotsadm_deploy.objects.common import POSTGRES_SECRET, descriptor, pod_security_context, secret_env, value_env
from kotsadm_deploy.objects.hostnetwork import pod_network_fields


def migrations_pod(deploy_options: DeployOptions, created_at: int) -> ResourceDescriptor:
    """Build the pod that applies the kotsadm database schema.

    The pod name carries ``created_at`` so every run gets a fresh pod.

    Args:
        deploy_options: The deploy-time options.
        created_at: Unix timestamp used as the name suffix.

    Returns:
        The desired pod.

    """
    name = f"kotsadm-migrations-{created_at}"
    container = {
        "name": name,
        "image": f"{deploy_options.registry}/kotsadm-migrations:{deploy_options.tag}",
        "imagePullPolicy": "Always",
        "env": [
            value_env("SCHEMAHERO_DRIVER", "postgres"),
            value_env("SCHEMAHERO_SPEC_FILE", "/tables"),
            secret_env("SCHEMAHERO_URI", POSTGRES_SECRET, "uri"),
        ],
    }
    spec = {
        **pod_network_fields(deploy_options.use_host_network),
        "securityContext": pod_security_context(deploy_options, with_fs_group=True),
        "restartPolicy": "OnFailure",
        "containers": [container],
    }
    return descriptor(ResourceKind.POD, name, deploy_options.namespace, spec, managed_element=name)
