"""Post-install health checks.

Two variants of one capability, chosen once per create by
`select_health_check(hosted_cp)`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import yaml
from kubernetes import client
from kubernetes.config.config_exception import ConfigException

from rosa_lifecycle.lib import k8s
from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import ExternalCallFailedError, HealthCheckError
from rosa_lifecycle.lib.poll import NODES_READY, PollProfile, poll_until
from rosa_lifecycle.lib.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class PostInstallHealthCheck(Protocol):
    """Waits until a newly installed cluster is operational."""

    name: str

    def run(self, ctx: RosaContext, kubeconfig: str) -> Result[None, HealthCheckError]: ...


@dataclass(frozen=True)
class ClassicHealthCheck:
    """Classic clusters: no in-cluster checks yet (placeholder)."""

    name: str = "classic"

    def run(self, ctx: RosaContext, kubeconfig: str) -> Result[None, HealthCheckError]:
        logger.info("Start: ROSA Classic cluster health checks")
        logger.info("End: ROSA Classic cluster health checks")
        return Ok(None)


@dataclass(frozen=True)
class HostedControlPlaneHealthCheck:
    """Hosted control plane clusters: wait for every worker node to be Ready."""

    name: str = "hosted-control-plane"
    profile: PollProfile = NODES_READY
    api_factory: Callable[[str], client.CoreV1Api] = field(default=k8s.core_api)

    def run(self, ctx: RosaContext, kubeconfig: str) -> Result[None, HealthCheckError]:
        logger.info("Start: ROSA Hosted Control Plane (HCP) cluster health checks")
        try:
            api = self.api_factory(kubeconfig)
        except (ConfigException, yaml.YAMLError, ValueError, TypeError) as e:
            return Err(
                ExternalCallFailedError("kubernetes client", f"failed to construct kubernetes client: {e}")
            )

        def nodes_ready() -> Result[bool, ExternalCallFailedError]:
            match k8s.list_node_status(api):
                case Err() as e:
                    return e
                case Ok(nodes):
                    not_ready = [n.name for n in nodes if not n.ready]
                    logger.debug("%d nodes, not ready: %s", len(nodes), not_ready or "none")
                    return Ok(k8s.all_nodes_ready(nodes))

        match poll_until(
            nodes_ready,
            resource="all nodes ready",
            attempts=self.profile.attempts,
            interval=self.profile.interval,
            cancel=ctx.cancel,
        ):
            case Err() as e:
                return e
            case Ok(_):
                logger.info("End: ROSA Hosted Control Plane (HCP) cluster health checks")
                return Ok(None)


def select_health_check(hosted_cp: bool) -> PostInstallHealthCheck:
    """The health check variant for a cluster topology."""
    if hosted_cp:
        return HostedControlPlaneHealthCheck()
    return ClassicHealthCheck()
