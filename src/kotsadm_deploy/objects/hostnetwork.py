"""Port bindings and tolerations that depend on the network mode.

Pods on the host network bind their ports directly on the node and must
be able to run on control-plane nodes, which are usually tainted.
"""

from typing import Any

KOTSADM_PORT = 3000
POSTGRES_PORT = 5432

_TAINTED_ROLES = (
    "node-role.kubernetes.io/master",
    "node-role.kubernetes.io/control-plane",
)


def port_binding(name: str, port: int, *, use_host_network: bool) -> dict[str, Any]:
    """Return a container port, with a matching host port on the host network.

    Args:
        name: The port name.
        port: The port the container listens on.
        use_host_network: Whether the pod runs on the host network.

    Returns:
        A container port entry.

    """
    binding: dict[str, Any] = {"name": name, "containerPort": port}
    if use_host_network:
        binding["hostPort"] = port
    return binding


def tolerations(use_host_network: bool) -> list[dict[str, str]]:
    """Return the tolerations for the given network mode."""
    if not use_host_network:
        return []
    return [{"key": role, "operator": "Exists", "effect": "NoSchedule"} for role in _TAINTED_ROLES]


def pod_network_fields(use_host_network: bool) -> dict[str, Any]:
    """Return the pod spec fields controlled by the network mode."""
    fields: dict[str, Any] = {"hostNetwork": use_host_network}
    if use_host_network:
        fields["tolerations"] = tolerations(use_host_network)
        # Keep cluster DNS resolution for service names like kotsadm-postgres
        fields["dnsPolicy"] = "ClusterFirstWithHostNet"
    return fields
