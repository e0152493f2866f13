"""Credentials for the bundled postgres database."""

from kotsadm_deploy.models import DeployOptions, ReconcileResult
from kotsadm_deploy.objects.postgres import postgres_secret
from kotsadm_deploy.reconcile import Reconciler
from kotsadm_deploy.storage import new_token


def ensure_postgres_secret(reconciler: Reconciler, deploy_options: DeployOptions) -> ReconcileResult:
    """Create the postgres secret unless it already exists.

    An existing secret is never modified, since the database was
    initialized with the password it holds. A password is generated when
    none was supplied.

    Args:
        reconciler: Reconciler bound to the target cluster.
        deploy_options: The deploy-time options.

    Returns:
        Whether the secret was created.

    """
    password = deploy_options.postgres_password or new_token()
    return reconciler.ensure_created(postgres_secret(deploy_options.namespace, password))
