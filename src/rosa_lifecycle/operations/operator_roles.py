"""Operator role operations."""

import logging

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import CommandError
from rosa_lifecycle.lib.result import Result, map_ok

logger = logging.getLogger(__name__)


def delete_operator_roles(ctx: RosaContext, cluster_id: str) -> Result[None, CommandError]:
    """Delete the operator roles created for a cluster."""
    logger.info("Deleting operator roles of cluster %s", cluster_id)
    args = ["delete", "operator-roles", "--cluster", cluster_id, "--mode", "auto", "--yes"]
    return map_ok(ctx.rosa.run(args, ctx.credentials), lambda _: None)
