"""Kotsadm deployment facade.

This module sequences a full single-shot deployment: secrets first, then
the database, then the admin console that depends on both.
"""

import time
from collections.abc import Callable

import yaml
from icecream import ic

from kotsadm_deploy import console
from kotsadm_deploy.models import DeployOptions, ReconcileResult, ResourceDescriptor, StorageOptions
from kotsadm_deploy.objects import (
    kotsadm_deployment,
    kotsadm_service,
    migrations_pod,
    postgres_hostpath_volume,
    postgres_service,
    postgres_statefulset,
)
from kotsadm_deploy.reconcile import Reconciler, ResourceApi
from kotsadm_deploy.secrets import SecretCodec, ensure_postgres_secret
from kotsadm_deploy.storage import validate


def load_storage_options(api: ResourceApi, namespace: str, options: StorageOptions) -> StorageOptions:
    """Validate CLI options and overlay any previously persisted settings.

    Values stored by an earlier run win over the validated defaults, so
    generated credentials stay stable across runs.

    Raises:
        UnsupportedStoreKindError: If the store kind is not recognized.
        IncompleteExternalConfigError: If an external store lacks a required field.
        MalformedBooleanFieldError: If the stored path-style flag is invalid.

    """
    return SecretCodec(api, namespace).hydrate(validate(options))


def render_manifests(deploy_options: DeployOptions) -> dict[str, str]:
    """Render the kotsadm manifests as YAML documents.

    Args:
        deploy_options: The deploy-time options.

    Returns:
        A mapping of file name to YAML text.

    """
    descriptors: dict[str, ResourceDescriptor] = {
        "kotsadm-deployment.yaml": kotsadm_deployment(deploy_options),
        "kotsadm-service.yaml": kotsadm_service(deploy_options.namespace),
        "postgres-statefulset.yaml": postgres_statefulset(deploy_options),
        "postgres-service.yaml": postgres_service(deploy_options.namespace),
    }
    if deploy_options.use_host_network:
        descriptors["postgres-pv.yaml"] = postgres_hostpath_volume()

    return {
        filename: yaml.safe_dump(desired.body, sort_keys=False)
        for filename, desired in descriptors.items()
    }


class Kotsadm:
    """Deploys kotsadm and its dependencies into a namespace.

    Attributes:
        deploy_options: The deploy-time options.
        reconciler: Reconciler bound to the target cluster.
        codec: Codec for the object store secret.

    """

    def __init__(
        self,
        api: ResourceApi,
        deploy_options: DeployOptions,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.deploy_options = deploy_options
        self.reconciler = Reconciler(api)
        self.codec = SecretCodec(api, deploy_options.namespace)
        self._clock = clock

    def ensure_postgres(self) -> dict[str, ReconcileResult]:
        """Ensure the postgres secret, statefulset, volume and service."""
        opts = self.deploy_options
        results = {"Secret/kotsadm-postgres": ensure_postgres_secret(self.reconciler, opts)}

        results.update(self._reconcile(postgres_statefulset(opts)))
        if opts.use_host_network:
            volume = postgres_hostpath_volume()
            results[f"{volume.kind.value}/{volume.name}"] = self.reconciler.ensure_created(volume)
        results.update(self._reconcile(postgres_service(opts.namespace)))
        return results

    def run_migrations(self) -> dict[str, ReconcileResult]:
        """Start a fresh schema migrations pod.

        Every run creates a new ``kotsadm-migrations-<unix seconds>`` pod.
        Pods from earlier runs are not deleted: completed pods stay in the
        namespace, carrying the ``kots.io/kotsadm`` label, until removed by
        hand (``kubectl delete pod -l kots.io/kotsadm=true
        --field-selector=status.phase==Succeeded``).

        Returns:
            The outcome for the new pod, keyed by "Pod/<name>".

        """
        pod = migrations_pod(self.deploy_options, int(self._clock()))
        return {f"{pod.kind.value}/{pod.name}": self.reconciler.ensure_created(pod)}

    def ensure_kotsadm(self) -> dict[str, ReconcileResult]:
        """Ensure the kotsadm deployment and service."""
        results = self._reconcile(kotsadm_deployment(self.deploy_options))
        results.update(self._reconcile(kotsadm_service(self.deploy_options.namespace)))
        return results

    def deploy(self) -> dict[str, ReconcileResult]:
        """Run every step in dependency order.

        Returns:
            The outcome per resource, keyed by "Kind/name".

        Raises:
            KotsadmError: On the first failing step. Later steps are not run.

        """
        console.action(f"Deploying kotsadm to namespace {console.highlight(self.deploy_options.namespace)}")
        results = {f"Secret/{self.codec.name}": self.codec.persist(self.deploy_options.storage)}
        results.update(self.ensure_postgres())
        results.update(self.run_migrations())
        results.update(self.ensure_kotsadm())
        ic(results)
        return results

    def _reconcile(self, desired: ResourceDescriptor) -> dict[str, ReconcileResult]:
        return {f"{desired.kind.value}/{desired.name}": self.reconciler.reconcile(desired)}
