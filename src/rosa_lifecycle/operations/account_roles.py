"""Account role operations - the four IAM roles STS clusters are installed with."""

import logging

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    AccountRolesError,
    AccountRolesInconsistentError,
    CommandError,
    DecodeError,
)
from rosa_lifecycle.lib.result import Err, Ok, Result
from rosa_lifecycle.models import AccountRoleSet, AccountRoleType, Arn

logger = logging.getLogger(__name__)

_FIELD_BY_TYPE = {
    AccountRoleType.CONTROL_PLANE: "control_plane",
    AccountRoleType.INSTALLER: "installer",
    AccountRoleType.SUPPORT: "support",
    AccountRoleType.WORKER: "worker",
}


def lookup_account_roles(
    ctx: RosaContext, prefix: str, version: str
) -> Result[AccountRoleSet | None, AccountRolesError]:
    """Find the account roles for a prefix and major.minor version.

    Returns Ok(None) when none exist, Ok(set) when all four exist, and
    AccountRolesInconsistentError for anything in between.
    """
    match ctx.rosa.run_json_list(["list", "account-roles", "--output", "json"], ctx.credentials):
        case Err() as e:
            return e
        case Ok(available):
            pass

    found: dict[str, Arn] = {}
    matched = 0
    for role in available:
        role_name = str(role.get("RoleName", ""))
        if not role_name.startswith(prefix):
            continue
        if str(role.get("Version", "")) != version:
            continue
        role_type = str(role.get("RoleType", ""))
        if role_type not in _FIELD_BY_TYPE:
            continue
        try:
            arn = Arn(str(role.get("RoleARN", "")))
        except ValueError as e:
            return Err(DecodeError("rosa list account-roles", str(e)))
        logger.debug("Found %s role %s", role_type, arn.resource_name)
        found[_FIELD_BY_TYPE[AccountRoleType(role_type)]] = arn
        matched += 1

    if matched == 0:
        return Ok(None)
    if matched != len(_FIELD_BY_TYPE) or len(found) != len(_FIELD_BY_TYPE):
        return Err(AccountRolesInconsistentError(prefix, version, tuple(sorted(found))))
    return Ok(AccountRoleSet(**found))


def ensure_account_roles(
    ctx: RosaContext, prefix: str, version: str, channel_group: str
) -> Result[AccountRoleSet, AccountRolesError]:
    """Return the account roles for prefix/version, creating them if none exist.

    Idempotent: an existing complete set is returned without a create call.
    A partial set is an error and is never repaired.
    """
    match lookup_account_roles(ctx, prefix, version):
        case Err() as e:
            return e
        case Ok(AccountRoleSet() as roles):
            logger.info("Account roles already exist with prefix/version %s/%s", prefix, version)
            return Ok(roles)
        case Ok(None):
            pass

    logger.info("Creating account roles with prefix/version %s/%s", prefix, version)
    args = [
        "create",
        "account-roles",
        "--prefix",
        prefix,
        "--version",
        version,
        "--channel-group",
        channel_group,
        "--mode",
        "auto",
        "--yes",
    ]
    match ctx.rosa.run(args, ctx.credentials):
        case Err() as e:
            return e
        case Ok(_):
            pass

    match lookup_account_roles(ctx, prefix, version):
        case Err() as e:
            return e
        case Ok(None):
            return Err(AccountRolesInconsistentError(prefix, version, ()))
        case Ok(roles):
            logger.info("Account roles created with prefix/version %s/%s", prefix, version)
            return Ok(roles)


def release_account_roles(ctx: RosaContext, prefix: str) -> Result[None, CommandError]:
    """Delete all account roles with the prefix. No existence check."""
    logger.info("Deleting account roles with prefix %r", prefix)
    args = ["delete", "account-roles", "--prefix", prefix, "--mode", "auto", "--yes"]
    match ctx.rosa.run(args, ctx.credentials):
        case Err() as e:
            return e
        case Ok(_):
            logger.info("Account roles with prefix %r deleted!", prefix)
            return Ok(None)
