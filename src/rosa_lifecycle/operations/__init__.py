"""Operations layer - atomic operations that return Result types."""

from rosa_lifecycle.operations.account_roles import (
    ensure_account_roles,
    lookup_account_roles,
    release_account_roles,
)
from rosa_lifecycle.operations.cluster import (
    create_cluster,
    delete_cluster,
    find_cluster,
    wait_for_cluster_deleted,
    wait_for_cluster_ready,
)
from rosa_lifecycle.operations.health import select_health_check
from rosa_lifecycle.operations.network import create_network, destroy_network
from rosa_lifecycle.operations.oidc_config import (
    current_oidc_config_for_cluster,
    ensure_oidc_config,
    lookup_oidc_config,
    release_oidc_config,
    release_oidc_provider,
)
from rosa_lifecycle.operations.operator_roles import delete_operator_roles
from rosa_lifecycle.operations.provider import connect

__all__ = [
    # account roles
    "ensure_account_roles",
    "lookup_account_roles",
    "release_account_roles",
    # oidc
    "ensure_oidc_config",
    "lookup_oidc_config",
    "release_oidc_config",
    "current_oidc_config_for_cluster",
    "release_oidc_provider",
    # operator roles
    "delete_operator_roles",
    # network
    "create_network",
    "destroy_network",
    # cluster
    "create_cluster",
    "delete_cluster",
    "find_cluster",
    "wait_for_cluster_ready",
    "wait_for_cluster_deleted",
    # health
    "select_health_check",
    # provider
    "connect",
]
