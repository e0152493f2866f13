"""Persistence of object store settings in a Kubernetes secret.

This module pairs the configuration model with the cluster API: settings
are written to the object store secret and read back on later runs.
"""

from icecream import ic

from kotsadm_deploy import console
from kotsadm_deploy.exceptions import ResourceNotFoundError
from kotsadm_deploy.models import ReconcileResult, ResourceKind, StorageOptions
from kotsadm_deploy.objects.common import OBJECT_STORE_SECRET
from kotsadm_deploy.objects.objectstore import object_store_secret
from kotsadm_deploy.reconcile import ResourceApi
from kotsadm_deploy.secrets.parsing import parse_secret_file, secret_payload
from kotsadm_deploy.storage import load_secret_data


class SecretCodec:
    """Reads and writes object store settings in a named secret.

    Attributes:
        api: The cluster API used to access the secret.
        namespace: Namespace holding the secret.
        name: Name of the secret.

    """

    def __init__(self, api: ResourceApi, namespace: str, name: str = OBJECT_STORE_SECRET) -> None:
        self.api = api
        self.namespace = namespace
        self.name = name

    def persist(self, options: StorageOptions) -> ReconcileResult:
        """Write options to the secret, creating it if absent.

        An existing secret has its whole payload replaced. Its metadata,
        including the resource version, is kept.

        Args:
            options: Validated options to store.

        Returns:
            Whether the secret was created or updated.

        Raises:
            ClusterApiError: If a cluster call fails.

        """
        desired = object_store_secret(self.namespace, options, name=self.name)
        try:
            existing = self.api.get(ResourceKind.SECRET, self.namespace, self.name)
        except ResourceNotFoundError:
            self.api.create(ResourceKind.SECRET, self.namespace, desired.body)
            console.step(f"Created Secret {console.highlight(self.name)}")
            return ReconcileResult.CREATED

        existing.pop("stringData", None)
        existing["data"] = desired.body["data"]
        self.api.update(ResourceKind.SECRET, self.namespace, self.name, existing)
        console.step(f"Updated Secret {console.highlight(self.name)}")
        return ReconcileResult.UPDATED

    def hydrate(self, baseline: StorageOptions) -> StorageOptions:
        """Overlay the persisted settings onto ``baseline``.

        ``baseline`` is updated in place and returned. It is left unchanged
        when the secret does not exist.

        Args:
            baseline: Options to update, typically validated CLI defaults.

        Returns:
            The updated baseline.

        Raises:
            ClusterApiError: If the secret cannot be read.
            MalformedBooleanFieldError: If the stored path-style flag is invalid.
            UnsupportedStoreKindError: If the stored type is not recognized.

        """
        try:
            secret = self.api.get(ResourceKind.SECRET, self.namespace, self.name)
        except ResourceNotFoundError:
            console.info(f"No existing {console.highlight(self.name)} secret, using defaults")
            return baseline

        payload = secret_payload(secret)
        ic(sorted(payload))
        load_secret_data(baseline, payload)
        return baseline


def hydrate_from_file(baseline: StorageOptions, secret_path: str) -> StorageOptions:
    """Overlay settings from an exported secret YAML file onto ``baseline``.

    Raises:
        SecretParsingError: If the file is not a valid secret.
        MalformedBooleanFieldError: If the stored path-style flag is invalid.

    """
    load_secret_data(baseline, secret_payload(parse_secret_file(secret_path)))
    return baseline
