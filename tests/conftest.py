"""Shared test fixtures for kotsadm-deploy tests."""

import copy
from unittest.mock import MagicMock, patch

import pytest
from icecream import ic
from kubernetes.config.config_exception import ConfigException

from kotsadm_deploy.exceptions import ResourceNotFoundError
from kotsadm_deploy.models import DeployOptions, StorageOptions, StoreKind

ic.disable()


class FakeCluster:
    """In-memory stand-in for the cluster API.

    Resources are stored by (kind, namespace, name). Every call is recorded
    in ``calls`` as a (verb, kind, name) tuple.
    """

    def __init__(self):
        self.resources = {}
        self.calls = []

    def add(self, kind, namespace, body):
        self.resources[(kind, namespace, body["metadata"]["name"])] = copy.deepcopy(body)

    def stored(self, kind, namespace, name):
        return self.resources[(kind, namespace, name)]

    def get(self, kind, namespace, name):
        self.calls.append(("get", kind, name))
        try:
            return copy.deepcopy(self.resources[(kind, namespace, name)])
        except KeyError:
            raise ResourceNotFoundError(kind.value, namespace, name) from None

    def create(self, kind, namespace, body):
        self.calls.append(("create", kind, body["metadata"]["name"]))
        self.add(kind, namespace, body)
        return copy.deepcopy(body)

    def update(self, kind, namespace, name, body):
        self.calls.append(("update", kind, name))
        self.add(kind, namespace, body)
        return copy.deepcopy(body)

    def verbs(self, verb):
        return [call for call in self.calls if call[0] == verb]


@pytest.fixture
def fake_cluster():
    """Empty in-memory cluster."""
    return FakeCluster()


@pytest.fixture
def internal_storage():
    """Validated internal object store options."""
    return StorageOptions(
        store_kind=StoreKind.INTERNAL,
        access_key_id="abcd",
        secret_access_key="efgh",
        bucket_name="kotsadm",
        endpoint="http://kotsadm-minio:9000",
        bucket_in_path=True,
    )


@pytest.fixture
def deploy_options(internal_storage):
    """Default deploy options on the pod network."""
    return DeployOptions(namespace="kots", storage=internal_storage, registry="registry.example.com", tag="v1.2.3")


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = ([{"name": "test-context"}], {"name": "test-context"})
        yield mock


@pytest.fixture
def mock_kube_config():
    """Mock kubernetes config loading, with no in-cluster credentials."""
    with (
        patch("kubernetes.config.load_kube_config") as mock,
        patch("kubernetes.config.load_incluster_config", side_effect=ConfigException("not in cluster")),
    ):
        yield mock


@pytest.fixture
def mock_apis():
    """Mock CoreV1Api and AppsV1Api, keyed by group name."""
    with (
        patch("kubernetes.client.CoreV1Api") as core,
        patch("kubernetes.client.AppsV1Api") as apps,
    ):
        core_instance = MagicMock()
        apps_instance = MagicMock()
        core.return_value = core_instance
        apps.return_value = apps_instance
        yield {"core": core_instance, "apps": apps_instance}
