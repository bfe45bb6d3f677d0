"""Kubernetes node health for freshly installed clusters.

The client is built from the kubeconfig content fetched from OCM, held in
memory; no KUBECONFIG file or environment variable is involved.
"""

from dataclasses import dataclass

import yaml
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from rosa_lifecycle.lib.errors import ExternalCallFailedError
from rosa_lifecycle.lib.result import Err, Ok, Result

NODE_READY = "Ready"
CONDITION_TRUE = "True"

# Per-request timeout for list calls, in seconds
DEFAULT_REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class NodeStatus:
    """Readiness of one node."""

    name: str
    ready: bool


def core_api(kubeconfig: str) -> client.CoreV1Api:
    """Build a CoreV1Api from kubeconfig YAML content.

    Raises:
        ValueError: if the kubeconfig is not a YAML mapping
    """
    config_dict = yaml.safe_load(kubeconfig)
    if not isinstance(config_dict, dict):
        raise ValueError("kubeconfig is not a YAML mapping")
    api_client = config.new_client_from_config_dict(config_dict)
    return client.CoreV1Api(api_client)


def node_status(node: client.V1Node) -> NodeStatus:
    """A node is ready unless it reports a Ready condition that is not True."""
    conditions = (node.status.conditions if node.status else None) or []
    ready = not any(c.type == NODE_READY and c.status != CONDITION_TRUE for c in conditions)
    name = node.metadata.name if node.metadata else ""
    return NodeStatus(name=name or "", ready=ready)


def list_node_status(
    api: client.CoreV1Api, timeout: int = DEFAULT_REQUEST_TIMEOUT
) -> Result[list[NodeStatus], ExternalCallFailedError]:
    """List all nodes with their readiness."""
    try:
        nodes = api.list_node(_request_timeout=timeout)
    except ApiException as e:
        return Err(ExternalCallFailedError("kubernetes list nodes", f"{e.status}: {e.reason}"))
    except (HTTPError, OSError) as e:
        return Err(ExternalCallFailedError("kubernetes list nodes", str(e)))
    return Ok([node_status(n) for n in nodes.items or []])


def all_nodes_ready(nodes: list[NodeStatus]) -> bool:
    """True for a non-empty node list where every node is ready."""
    return bool(nodes) and all(n.ready for n in nodes)
