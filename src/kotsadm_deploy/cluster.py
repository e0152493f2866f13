"""Kubernetes cluster interaction utilities.

This module provides the Cluster class, which exposes get, create and
update by resource kind on top of the official Kubernetes client. Results
are returned as plain manifest dictionaries.
"""

from collections.abc import Callable
from typing import Any

import click
import questionary
from icecream import ic
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError

from kotsadm_deploy import console
from kotsadm_deploy.exceptions import ClusterApiError, ClusterConnectionError, ResourceNotFoundError
from kotsadm_deploy.models import ResourceKind
from kotsadm_deploy.styles import POINTER, PROMPT_STYLE, QMARK

# Kind -> (API group, client method suffix)
_KIND_METHODS: dict[ResourceKind, tuple[str, str]] = {
    ResourceKind.DEPLOYMENT: ("apps", "deployment"),
    ResourceKind.STATEFUL_SET: ("apps", "stateful_set"),
    ResourceKind.SERVICE: ("core", "service"),
    ResourceKind.SECRET: ("core", "secret"),
    ResourceKind.POD: ("core", "pod"),
    ResourceKind.PERSISTENT_VOLUME: ("core", "persistent_volume"),
}


class Cluster:
    """Reads and writes kotsadm resources in a Kubernetes cluster.

    Attributes:
        context: The active Kubernetes context name, or "in-cluster".

    """

    def __init__(self, *, select_context: bool = False) -> None:
        """Load cluster credentials.

        In-cluster credentials are used when available, unless a context
        selection was requested. Otherwise the kubeconfig is used.

        Args:
            select_context: If True, prompt user to select a kubeconfig context.
                           Must be passed as a keyword argument.

        """
        self.context: str = self._load_config(select_context=select_context)
        self._api_client = client.ApiClient()
        self._apis: dict[str, Any] = {
            "core": client.CoreV1Api(self._api_client),
            "apps": client.AppsV1Api(self._api_client),
        }

    @classmethod
    def _load_config(cls, *, select_context: bool) -> str:
        if not select_context:
            try:
                config.load_incluster_config()
            except ConfigException:
                pass
            else:
                console.action(f"Working with {console.highlight('in-cluster')} credentials")
                return "in-cluster"

        context = cls._set_context(select_context=select_context)
        config.load_kube_config(context=context)
        return context

    @staticmethod
    def _set_context(*, select_context: bool) -> str:
        """Set the Kubernetes context to use.

        Args:
            select_context: If True, prompt user to select a context.

        Returns:
            The selected or current context name.

        Raises:
            ClusterConnectionError: If kubeconfig is invalid or missing.
            click.Abort: If user cancels context selection.

        """
        try:
            contexts, current_context = config.list_kube_config_contexts()
        except ConfigException as e:
            raise ClusterConnectionError(f"Invalid or missing kubeconfig: {e}") from e
        if select_context:
            context_names: list[str] = [context["name"] for context in contexts]
            context: str | None = questionary.select(
                "Select context to work with",
                choices=context_names,
                style=PROMPT_STYLE,
                pointer=POINTER,
                qmark=QMARK,
            ).ask()
            if context is None:
                console.warning("Context selection cancelled.")
                raise click.Abort()
        else:
            context = str(current_context["name"])
        console.action(f"Working with {console.highlight(context)} cluster")
        return context

    def _method(self, verb: str, kind: ResourceKind) -> Callable[..., Any]:
        group, suffix = _KIND_METHODS[kind]
        scope = "namespaced_" if kind.namespaced else ""
        return getattr(self._apis[group], f"{verb}_{scope}{suffix}")

    @staticmethod
    def _scope(kind: ResourceKind, namespace: str | None) -> dict[str, str]:
        if kind.namespaced:
            if not namespace:
                raise ValueError(f"{kind.value} requires a namespace")
            return {"namespace": namespace}
        return {}

    def _call(
        self,
        operation: str,
        kind: ResourceKind,
        scope: dict[str, str],
        name: str,
        call: Callable[[], Any],
    ) -> dict[str, Any]:
        try:
            result = call()
        except ApiException as e:
            if operation == "get" and e.status == 404:
                raise ResourceNotFoundError(kind.value, scope.get("namespace"), name) from e
            raise ClusterApiError(operation, kind.value, name, e) from e
        except MaxRetryError as e:
            raise ClusterConnectionError(
                f"Failed to connect to the Kubernetes cluster to {operation} {kind.value} {name}: {e.reason}",
                operation=operation,
                resource_kind=kind.value,
                name=name,
            ) from e
        return self._api_client.sanitize_for_serialization(result)

    def get(self, kind: ResourceKind, namespace: str | None, name: str) -> dict[str, Any]:
        """Fetch a resource.

        Args:
            kind: The resource kind.
            namespace: The namespace, ignored for cluster-scoped kinds.
            name: The resource name.

        Returns:
            The resource manifest.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            ClusterApiError: If the API call fails for another reason.
            ClusterConnectionError: If the cluster is unreachable.

        """
        ic(kind, namespace, name)
        method = self._method("read", kind)
        scope = self._scope(kind, namespace)
        return self._call("get", kind, scope, name, lambda: method(name=name, **scope))

    def create(self, kind: ResourceKind, namespace: str | None, body: dict[str, Any]) -> dict[str, Any]:
        """Create a resource from a manifest.

        Raises:
            ClusterApiError: If the API call fails.
            ClusterConnectionError: If the cluster is unreachable.

        """
        name = body["metadata"]["name"]
        method = self._method("create", kind)
        scope = self._scope(kind, namespace)
        return self._call("create", kind, scope, name, lambda: method(body=body, **scope))

    def update(self, kind: ResourceKind, namespace: str | None, name: str, body: dict[str, Any]) -> dict[str, Any]:
        """Replace a resource with the given manifest.

        Raises:
            ClusterApiError: If the API call fails.
            ClusterConnectionError: If the cluster is unreachable.

        """
        method = self._method("replace", kind)
        scope = self._scope(kind, namespace)
        return self._call("update", kind, scope, name, lambda: method(name=name, body=body, **scope))

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(context={self.context!r})"
