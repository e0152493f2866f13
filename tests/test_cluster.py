"""Tests for cluster.py module."""

from unittest.mock import patch

import click
import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError, NewConnectionError

from kotsadm_deploy.cluster import Cluster
from kotsadm_deploy.exceptions import ClusterApiError, ClusterConnectionError, ResourceNotFoundError
from kotsadm_deploy.models import ResourceKind


@pytest.fixture
def cluster(mock_kube_contexts, mock_kube_config, mock_apis):
    """Cluster connected through the mocked kubeconfig."""
    return Cluster()


class TestClusterContextSelection:
    """Tests for context selection functionality."""

    def test_set_context_without_selection(self, mock_kube_contexts, mock_kube_config, mock_apis):
        """Test using current context without selection."""
        cluster = Cluster(select_context=False)

        assert cluster.context == "test-context"
        mock_kube_config.assert_called_once_with(context="test-context")

    def test_set_context_with_selection(self, mock_kube_config, mock_apis):
        """Test prompting user for context selection."""
        with (
            patch("kubernetes.config.list_kube_config_contexts") as mock_contexts,
            patch("questionary.select") as mock_select,
            patch("kubernetes.config.load_incluster_config") as mock_incluster,
        ):
            mock_contexts.return_value = (
                [{"name": "context1"}, {"name": "context2"}, {"name": "context3"}],
                {"name": "context1"},
            )
            mock_select.return_value.ask.return_value = "context2"

            cluster = Cluster(select_context=True)

        assert cluster.context == "context2"
        mock_select.assert_called_once()
        assert mock_select.call_args.kwargs["choices"] == ["context1", "context2", "context3"]
        mock_incluster.assert_not_called()

    def test_set_context_selection_cancelled(self, mock_kube_config, mock_kube_contexts, mock_apis):
        """Test cancelling the prompt aborts."""
        with patch("questionary.select") as mock_select:
            mock_select.return_value.ask.return_value = None

            with pytest.raises(click.Abort):
                Cluster(select_context=True)

        mock_kube_config.assert_not_called()

    def test_set_context_invalid_kubeconfig(self, mock_kube_config):
        """Test error when kubeconfig is invalid or missing."""
        with patch("kubernetes.config.list_kube_config_contexts") as mock_contexts:
            mock_contexts.side_effect = ConfigException("Invalid kube-config file. No configuration found.")

            with pytest.raises(ClusterConnectionError) as exc_info:
                Cluster(select_context=False)

        assert "Invalid or missing kubeconfig" in str(exc_info.value)

    def test_in_cluster_credentials(self, mock_apis):
        """Test in-cluster credentials are preferred over the kubeconfig."""
        with (
            patch("kubernetes.config.load_incluster_config") as mock_incluster,
            patch("kubernetes.config.load_kube_config") as mock_kube_config,
        ):
            cluster = Cluster()

        assert cluster.context == "in-cluster"
        mock_incluster.assert_called_once()
        mock_kube_config.assert_not_called()

    def test_repr(self, cluster):
        """Test the representation names the context."""
        assert repr(cluster) == "Cluster(context='test-context')"


class TestClusterDispatch:
    """Tests for mapping resource kinds to API calls."""

    def test_get_deployment(self, cluster, mock_apis):
        """Test deployments are read through the apps API."""
        mock_apis["apps"].read_namespaced_deployment.return_value = {"metadata": {"name": "kotsadm"}}

        result = cluster.get(ResourceKind.DEPLOYMENT, "kots", "kotsadm")

        assert result == {"metadata": {"name": "kotsadm"}}
        mock_apis["apps"].read_namespaced_deployment.assert_called_once_with(name="kotsadm", namespace="kots")

    def test_get_returns_plain_manifest(self, cluster, mock_apis):
        """Test client models are converted to camelCase dictionaries."""
        mock_apis["core"].read_namespaced_secret.return_value = client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=client.V1ObjectMeta(name="kotsadm-minio", resource_version="3"),
            data={"type": "aW50ZXJuYWw="},
        )

        result = cluster.get(ResourceKind.SECRET, "kots", "kotsadm-minio")

        assert result == {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {"name": "kotsadm-minio", "resourceVersion": "3"},
            "data": {"type": "aW50ZXJuYWw="},
        }

    @pytest.mark.parametrize(
        ("kind", "group", "method"),
        [
            (ResourceKind.STATEFUL_SET, "apps", "create_namespaced_stateful_set"),
            (ResourceKind.SERVICE, "core", "create_namespaced_service"),
            (ResourceKind.SECRET, "core", "create_namespaced_secret"),
            (ResourceKind.POD, "core", "create_namespaced_pod"),
        ],
    )
    def test_create_namespaced(self, cluster, mock_apis, kind, group, method):
        """Test namespaced kinds are created in their namespace."""
        body = {"metadata": {"name": "kotsadm-postgres"}}
        getattr(mock_apis[group], method).return_value = body

        cluster.create(kind, "kots", body)

        getattr(mock_apis[group], method).assert_called_once_with(body=body, namespace="kots")

    def test_create_persistent_volume(self, cluster, mock_apis):
        """Test cluster-scoped kinds are created without a namespace."""
        body = {"metadata": {"name": "kotsadm-postgres"}}
        mock_apis["core"].create_persistent_volume.return_value = body

        cluster.create(ResourceKind.PERSISTENT_VOLUME, None, body)

        mock_apis["core"].create_persistent_volume.assert_called_once_with(body=body)

    def test_update_replaces(self, cluster, mock_apis):
        """Test updates replace the whole resource."""
        body = {"metadata": {"name": "kotsadm"}}
        mock_apis["apps"].replace_namespaced_deployment.return_value = body

        cluster.update(ResourceKind.DEPLOYMENT, "kots", "kotsadm", body)

        mock_apis["apps"].replace_namespaced_deployment.assert_called_once_with(
            name="kotsadm", body=body, namespace="kots"
        )

    def test_namespace_required(self, cluster):
        """Test namespaced kinds need a namespace."""
        with pytest.raises(ValueError):
            cluster.get(ResourceKind.SERVICE, None, "kotsadm")


class TestClusterErrors:
    """Tests for API error translation."""

    def test_get_not_found(self, cluster, mock_apis):
        """Test a 404 on read becomes ResourceNotFoundError."""
        mock_apis["core"].read_namespaced_secret.side_effect = ApiException(status=404, reason="Not Found")

        with pytest.raises(ResourceNotFoundError) as exc_info:
            cluster.get(ResourceKind.SECRET, "kots", "kotsadm-minio")

        assert exc_info.value.namespace == "kots"
        assert exc_info.value.name == "kotsadm-minio"

    def test_get_forbidden(self, cluster, mock_apis):
        """Test other read failures are not treated as absence."""
        mock_apis["core"].read_namespaced_secret.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(ClusterApiError) as exc_info:
            cluster.get(ResourceKind.SECRET, "kots", "kotsadm-minio")

        assert exc_info.value.operation == "get"

    def test_create_conflict(self, cluster, mock_apis):
        """Test create failures name the operation and resource."""
        mock_apis["core"].create_namespaced_service.side_effect = ApiException(status=409, reason="Conflict")

        with pytest.raises(ClusterApiError) as exc_info:
            cluster.create(ResourceKind.SERVICE, "kots", {"metadata": {"name": "kotsadm"}})

        assert exc_info.value.operation == "create"
        assert exc_info.value.resource_kind == "Service"
        assert "kotsadm" in str(exc_info.value)

    def test_update_not_found(self, cluster, mock_apis):
        """Test a 404 on update is an API error."""
        mock_apis["apps"].replace_namespaced_deployment.side_effect = ApiException(status=404)

        with pytest.raises(ClusterApiError):
            cluster.update(ResourceKind.DEPLOYMENT, "kots", "kotsadm", {"metadata": {"name": "kotsadm"}})

    def test_connection_error(self, cluster, mock_apis):
        """Test an unreachable API server becomes ClusterConnectionError."""
        mock_apis["apps"].read_namespaced_stateful_set.side_effect = MaxRetryError(
            pool=None,
            url="https://localhost:6443",
            reason=NewConnectionError(None, "Connection refused"),
        )

        with pytest.raises(ClusterConnectionError) as exc_info:
            cluster.get(ResourceKind.STATEFUL_SET, "kots", "kotsadm-postgres")

        assert "Failed to connect" in str(exc_info.value)
        assert "StatefulSet kotsadm-postgres" in str(exc_info.value)
        assert exc_info.value.operation == "get"
        assert exc_info.value.resource_kind == "StatefulSet"
        assert exc_info.value.name == "kotsadm-postgres"

    def test_connection_error_on_create(self, cluster, mock_apis):
        """Test connection failures on writes name the operation and resource."""
        mock_apis["apps"].create_namespaced_deployment.side_effect = MaxRetryError(
            pool=None,
            url="/apis/apps/v1/namespaces/kots/deployments",
            reason="refused",
        )

        with pytest.raises(ClusterConnectionError) as exc_info:
            cluster.create(ResourceKind.DEPLOYMENT, "kots", {"metadata": {"name": "kotsadm"}})

        assert str(exc_info.value) == "Failed to connect to the Kubernetes cluster to create Deployment kotsadm: refused"
        assert exc_info.value.operation == "create"
