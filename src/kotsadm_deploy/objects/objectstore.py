"""Manifest for the secret holding the object store settings."""

from kotsadm_deploy.models import ResourceDescriptor, ResourceKind, StorageOptions
from kotsadm_deploy.objects.common import OBJECT_STORE_SECRET, descriptor, encode_data
from kotsadm_deploy.storage import to_secret_data


def object_store_secret(namespace: str, options: StorageOptions, name: str = OBJECT_STORE_SECRET) -> ResourceDescriptor:
    """Build the object store secret from validated options."""
    data = encode_data(to_secret_data(options))
    return descriptor(ResourceKind.SECRET, name, namespace, data, spec_field="data", type="Opaque")
