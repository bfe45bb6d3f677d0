"""Cluster lifecycle workflows - create and delete ROSA clusters end to end.

Both workflows run their steps strictly in order and stop at the first
failure. Create never rolls back what it already provisioned; run
delete_cluster to clean up. Every error is a ClusterLifecycleError naming
the action, the failing component and the last state reached.
"""

import logging
from dataclasses import dataclass

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    Action,
    ClusterLifecycleError,
    Component,
    LeafError,
    ValidationFailedError,
)
from rosa_lifecycle.lib.poll import (
    CLUSTER_DELETED,
    CLUSTER_READY_CLASSIC,
    CLUSTER_READY_HOSTED,
    PollProfile,
)
from rosa_lifecycle.lib.result import Err, Ok, Result
from rosa_lifecycle.models import (
    CreateClusterOptions,
    DeleteClusterOptions,
    ProvisioningState,
    validate_options,
    validate_request,
)
from rosa_lifecycle.operations.account_roles import ensure_account_roles, release_account_roles
from rosa_lifecycle.operations.cluster import create_cluster as create_cluster_op
from rosa_lifecycle.operations.cluster import delete_cluster as delete_cluster_op
from rosa_lifecycle.operations.cluster import (
    get_kubeconfig,
    wait_for_cluster_deleted,
    wait_for_cluster_ready,
)
from rosa_lifecycle.operations.health import PostInstallHealthCheck, select_health_check
from rosa_lifecycle.operations.network import create_network, destroy_network
from rosa_lifecycle.operations.oidc_config import (
    current_oidc_config_for_cluster,
    ensure_oidc_config,
    release_oidc_config,
    release_oidc_provider,
)
from rosa_lifecycle.operations.operator_roles import delete_operator_roles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaitProfiles:
    """Attempt budgets for the cluster-level waits."""

    ready_classic: PollProfile = CLUSTER_READY_CLASSIC
    ready_hosted: PollProfile = CLUSTER_READY_HOSTED
    deleted: PollProfile = CLUSTER_DELETED


DEFAULT_WAITS = WaitProfiles()


def create_cluster(
    ctx: RosaContext,
    options: CreateClusterOptions,
    *,
    health_check: PostInstallHealthCheck | None = None,
    waits: WaitProfiles = DEFAULT_WAITS,
) -> Result[str, ClusterLifecycleError]:
    """Create a cluster and wait until it is operational. Returns the cluster id.

    1. Validate caller input, fill defaults (hosted control plane implies STS)
    2. STS: ensure account roles for <name>/<major.minor>
    3. Hosted control plane: ensure OIDC config, create the VPC
    4. Validate the fully populated request
    5. Submit the cluster and resolve its id
    6. Wait for the cluster to be ready
    7. Fetch the kubeconfig and run the post-install health check
    """
    state = ProvisioningState.REQUESTED
    cluster_id: str | None = None

    def fail(component: Component, cause: LeafError) -> Err[ClusterLifecycleError]:
        logger.error("Create of %r failed at %s (%s): %s", options.cluster_name, component, state, cause)
        return Err(ClusterLifecycleError(Action.CREATE, component, cause, state, cluster_id))

    def advance(to: ProvisioningState) -> ProvisioningState:
        logger.info("Cluster %r: %s -> %s", options.cluster_name, state, to)
        return to

    # Step 1: caller input, before any external call
    match validate_options(options):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(version):
            pass

    options = options.with_defaults()
    if health_check is None:
        health_check = select_health_check(options.hosted_cp)

    # Step 2: account roles
    if options.sts:
        match ensure_account_roles(
            ctx, options.cluster_name, version.major_minor, options.channel_group
        ):
            case Err(e):
                return fail(Component.ACCOUNT_ROLES, e)
            case Ok(roles):
                options = options.with_account_roles(roles)
        state = advance(ProvisioningState.ROLES_READY)

    # Step 3: OIDC config and network
    if options.hosted_cp:
        installer = options.account_roles.installer if options.account_roles else ""
        match ensure_oidc_config(ctx, options.cluster_name, installer, options.oidc_config_managed):
            case Err(e):
                return fail(Component.OIDC_CONFIG, e)
            case Ok(oidc_config_id):
                options = options.with_oidc_config(oidc_config_id)
        state = advance(ProvisioningState.OIDC_READY)

        match create_network(
            ctx, options.cluster_name, ctx.region, ctx.network_dir(options.cluster_name)
        ):
            case Err(e):
                return fail(Component.NETWORK, e)
            case Ok(network):
                options = options.with_network(network)
        state = advance(ProvisioningState.NETWORK_READY)

    # Step 4: nothing is submitted unless every required field is present
    match validate_request(options):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(request):
            pass

    # Step 5: submit and resolve
    match create_cluster_op(ctx, request):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(cluster):
            cluster_id = cluster.id
    logger.info("Cluster ID: %s", cluster_id)
    state = advance(ProvisioningState.SUBMITTED)

    # Step 6: ready
    profile = waits.ready_hosted if options.hosted_cp else waits.ready_classic
    state = advance(ProvisioningState.WAITING_READY)
    match wait_for_cluster_ready(ctx, cluster_id, profile):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(_):
            pass
    state = advance(ProvisioningState.READY)

    # Step 7: health
    match get_kubeconfig(ctx, cluster_id):
        case Err(e):
            return fail(Component.HEALTH_CHECK, e)
        case Ok(kubeconfig):
            pass

    state = advance(ProvisioningState.HEALTH_CHECKING)
    match health_check.run(ctx, kubeconfig):
        case Err(e):
            return fail(Component.HEALTH_CHECK, e)
        case Ok(_):
            pass
    state = advance(ProvisioningState.OPERATIONAL)

    return Ok(cluster_id)


def delete_cluster(
    ctx: RosaContext,
    options: DeleteClusterOptions,
    *,
    waits: WaitProfiles = DEFAULT_WAITS,
) -> Result[None, ClusterLifecycleError]:
    """Delete a cluster and everything create provisioned for it.

    Order matters and differs from a mirror of create:
    0. Both the cluster id and name are required
    1. Hosted control plane: resolve the attached OIDC config id (must exist)
    2. Delete the cluster and wait until it is gone
    3. STS: delete operator roles, then the OIDC provider
    4. Hosted control plane: delete the OIDC config, destroy the VPC
    5. STS: delete account roles (prefix = cluster name)
    """
    state = ProvisioningState.REQUESTED
    options = options.with_defaults()

    def fail(component: Component, cause: LeafError) -> Err[ClusterLifecycleError]:
        logger.error("Delete of %r failed at %s (%s): %s", options.cluster_name, component, state, cause)
        return Err(
            ClusterLifecycleError(Action.DELETE, component, cause, state, options.cluster_id or None)
        )

    def advance(to: ProvisioningState) -> ProvisioningState:
        logger.info("Cluster %r: %s -> %s", options.cluster_name, state, to)
        return to

    if not options.cluster_id:
        return fail(Component.CLUSTER, ValidationFailedError("cluster_id", "cluster ID is required"))
    if not options.cluster_name:
        return fail(Component.CLUSTER, ValidationFailedError("cluster_name", "cluster name is required"))

    # Step 1: the config id is only known while the cluster exists
    oidc_config_id = ""
    if options.hosted_cp:
        match current_oidc_config_for_cluster(ctx, options.cluster_id):
            case Err(e):
                return fail(Component.OIDC_CONFIG, e)
            case Ok(oidc_config_id):
                pass

    # Step 2: cluster
    match delete_cluster_op(ctx, options.cluster_id):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(_):
            pass
    state = advance(ProvisioningState.DELETE_SUBMITTED)

    state = advance(ProvisioningState.WAITING_DELETED)
    match wait_for_cluster_deleted(ctx, options.cluster_name, waits.deleted):
        case Err(e):
            return fail(Component.CLUSTER, e)
        case Ok(_):
            pass

    # Step 3: cluster-scoped roles and provider
    if options.sts:
        match delete_operator_roles(ctx, options.cluster_id):
            case Err(e):
                return fail(Component.OPERATOR_ROLES, e)
            case Ok(_):
                pass

        match release_oidc_provider(ctx, options.cluster_id):
            case Err(e):
                return fail(Component.OIDC_PROVIDER, e)
            case Ok(_):
                pass
        state = advance(ProvisioningState.ROLES_CLEANED)

    # Step 4: OIDC config and network
    if options.hosted_cp:
        match release_oidc_config(ctx, oidc_config_id):
            case Err(e):
                return fail(Component.OIDC_CONFIG, e)
            case Ok(_):
                pass
        state = advance(ProvisioningState.OIDC_CONFIG_DELETED)

        match destroy_network(
            ctx, options.cluster_name, ctx.region, ctx.network_dir(options.cluster_name)
        ):
            case Err(e):
                return fail(Component.NETWORK, e)
            case Ok(_):
                pass
        state = advance(ProvisioningState.NETWORK_DELETED)

    # Step 5: account roles
    if options.sts:
        match release_account_roles(ctx, options.cluster_name):
            case Err(e):
                return fail(Component.ACCOUNT_ROLES, e)
            case Ok(_):
                pass
        state = advance(ProvisioningState.ACCOUNT_ROLES_DELETED)

    state = advance(ProvisioningState.DONE)
    return Ok(None)
