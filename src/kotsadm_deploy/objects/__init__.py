"""Manifest builders subpackage.

Every function here is pure: it turns ``DeployOptions`` into
``ResourceDescriptor`` values and never talks to the cluster.
"""

from kotsadm_deploy.objects.kotsadm import kotsadm_deployment, kotsadm_service
from kotsadm_deploy.objects.migrations import migrations_pod
from kotsadm_deploy.objects.objectstore import object_store_secret
from kotsadm_deploy.objects.postgres import (
    postgres_hostpath_volume,
    postgres_secret,
    postgres_service,
    postgres_statefulset,
)

__all__ = [
    # kotsadm
    "kotsadm_deployment",
    "kotsadm_service",
    # postgres
    "postgres_secret",
    "postgres_statefulset",
    "postgres_service",
    "postgres_hostpath_volume",
    # migrations
    "migrations_pod",
    # object store
    "object_store_secret",
]
