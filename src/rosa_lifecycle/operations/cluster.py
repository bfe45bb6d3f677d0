"""Cluster operations - submit, resolve, describe, delete and wait."""

import logging

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    ClusterNotFoundError,
    CommandError,
    DecodeError,
    OutputError,
    PollError,
    ValidationFailedError,
)
from rosa_lifecycle.lib.poll import PollProfile, poll_until
from rosa_lifecycle.lib.result import Err, Ok, Result
from rosa_lifecycle.models import ClusterHandle, ClusterProvisioningRequest

logger = logging.getLogger(__name__)

PRODUCT_ID = "rosa"
READY_STATE = "ready"


def _create_args(request: ClusterProvisioningRequest, region: str) -> list[str]:
    roles = request.account_roles
    args = [
        "create", "cluster", "--output", "json", "--mode", "auto", "--yes",
        "--cluster-name", request.cluster_name,
        "--channel-group", request.channel_group,
        "--compute-machine-type", request.compute_machine_type,
        "--machine-cidr", request.machine_cidr,
        "--region", region,
        "--version", str(request.version),
        "--replicas", str(request.replicas),
        "--controlplane-iam-role", roles.control_plane,
        "--role-arn", roles.installer,
        "--support-role-arn", roles.support,
        "--worker-iam-role", roles.worker,
    ]  # fmt: skip
    if request.properties:
        args.extend(["--properties", request.properties])
    if request.hosted_cp:
        args.extend(
            ["--hosted-cp", "--oidc-config-id", request.oidc_config_id, "--subnet-ids", request.subnet_ids]
        )
    if request.sts:
        args.append("--sts")
    return args


def submit_cluster(
    ctx: RosaContext, request: ClusterProvisioningRequest
) -> Result[None, CommandError]:
    """Send the create request. Returns once the cluster record exists."""
    logger.info("Creating cluster %r (version %s)", request.cluster_name, request.version)
    match ctx.rosa.run(_create_args(request, ctx.region), ctx.credentials):
        case Err() as e:
            return e
        case Ok(_):
            return Ok(None)


def find_cluster(
    ctx: RosaContext, cluster_name: str
) -> Result[ClusterHandle, OutputError | ClusterNotFoundError]:
    """Resolve a cluster by exact name. Exactly one record must match."""
    search = f"product.id = '{PRODUCT_ID}' AND name = '{cluster_name}'"
    match ctx.ocm.list_clusters(search, page=1, size=1):
        case Err() as e:
            return e
        case Ok(page):
            pass

    if page.total != 1 or not page.items:
        return Err(ClusterNotFoundError(cluster_name, page.total))

    item = page.items[0]
    return Ok(
        ClusterHandle(
            id=str(item.get("id", "")),
            name=str(item.get("name", cluster_name)),
            state=str(item.get("state", "")),
        )
    )


def create_cluster(
    ctx: RosaContext, request: ClusterProvisioningRequest
) -> Result[ClusterHandle, OutputError | ClusterNotFoundError]:
    """Submit the create request and resolve the new cluster."""
    match submit_cluster(ctx, request):
        case Err() as e:
            return e
        case Ok(_):
            pass
    return find_cluster(ctx, request.cluster_name)


def delete_cluster(
    ctx: RosaContext, cluster_id: str
) -> Result[None, CommandError | ValidationFailedError]:
    """Send the delete request."""
    if not cluster_id:
        return Err(ValidationFailedError("cluster_id", "cluster ID is undefined and is required"))

    logger.info("Deleting cluster %s", cluster_id)
    match ctx.rosa.run(["delete", "cluster", "--cluster", cluster_id, "--yes"], ctx.credentials):
        case Err() as e:
            return e
        case Ok(_):
            return Ok(None)


def describe_cluster_state(ctx: RosaContext, cluster_id: str) -> Result[str, OutputError]:
    """Current state of a cluster (`installing`, `ready`, `error`, ...)."""
    args = ["describe", "cluster", "--cluster", cluster_id, "--output", "json"]
    match ctx.rosa.run_json_object(args, ctx.credentials):
        case Err() as e:
            return e
        case Ok({"status": {"state": state}}):
            return Ok(str(state))
        case Ok({"state": state}):
            return Ok(str(state))
        case Ok(_):
            return Err(DecodeError("rosa describe cluster", "output has no status.state"))


def wait_for_cluster_ready(
    ctx: RosaContext, cluster_id: str, profile: PollProfile
) -> Result[int, PollError]:
    """Poll `rosa describe cluster` until the state is ready."""

    def is_ready() -> Result[bool, OutputError]:
        match describe_cluster_state(ctx, cluster_id):
            case Err() as e:
                return e
            case Ok(state):
                logger.debug("Cluster %r state=%s", cluster_id, state)
                return Ok(state == READY_STATE)

    return poll_until(
        is_ready,
        resource=f"cluster {cluster_id!r} ready",
        attempts=profile.attempts,
        interval=profile.interval,
        cancel=ctx.cancel,
    )


def wait_for_cluster_deleted(
    ctx: RosaContext, cluster_name: str, profile: PollProfile
) -> Result[int, PollError]:
    """Poll OCM until no cluster with the name is left.

    Zero matches is gone; a lookup error counts as "not yet".
    """

    def is_absent() -> Result[bool, OutputError | ClusterNotFoundError]:
        match find_cluster(ctx, cluster_name):
            case Ok(cluster):
                logger.debug("Cluster %r is still uninstalling (state=%s)", cluster_name, cluster.state)
                return Ok(False)
            case Err(ClusterNotFoundError(matches=0)):
                return Ok(True)
            case Err(ClusterNotFoundError()):
                return Ok(False)
            case Err() as e:
                return e

    return poll_until(
        is_absent,
        resource=f"cluster {cluster_name!r} deleted",
        attempts=profile.attempts,
        interval=profile.interval,
        cancel=ctx.cancel,
    )


def get_kubeconfig(ctx: RosaContext, cluster_id: str) -> Result[str, OutputError]:
    """Admin kubeconfig content for a cluster."""
    return ctx.ocm.get_kubeconfig(cluster_id)
