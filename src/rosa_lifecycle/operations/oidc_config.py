"""OIDC config operations - trust configuration for STS clusters."""

import logging

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    CommandError,
    DecodeError,
    OidcConfigError,
    OidcConfigNotFoundError,
    OutputError,
    ValidationFailedError,
)
from rosa_lifecycle.lib.result import Err, Ok, Result, map_ok
from rosa_lifecycle.models import OidcConfig

logger = logging.getLogger(__name__)


def lookup_oidc_config(ctx: RosaContext, prefix: str) -> Result[OidcConfig | None, OutputError]:
    """First OIDC config whose secret ARN contains the prefix, or None."""
    match ctx.ocm.list_oidc_configs():
        case Err() as e:
            return e
        case Ok(configs):
            pass

    for config in configs:
        secret_arn = str(config.get("secret_arn", ""))
        if prefix in secret_arn:
            return Ok(
                OidcConfig(
                    id=str(config.get("id", "")),
                    secret_arn=secret_arn,
                    managed=bool(config.get("managed", False)),
                )
            )
    return Ok(None)


def ensure_oidc_config(
    ctx: RosaContext, prefix: str, installer_role_arn: str, managed: bool
) -> Result[str, OidcConfigError]:
    """Return the id of the OIDC config for the prefix, creating one if needed."""
    if not prefix or not installer_role_arn:
        missing = "prefix" if not prefix else "installer_role_arn"
        return Err(ValidationFailedError(missing, "some parameters are undefined"))

    match lookup_oidc_config(ctx, prefix):
        case Err() as e:
            return e
        case Ok(OidcConfig() as existing):
            logger.info("OIDC config %s already exists for prefix %r", existing.id, prefix)
            return Ok(existing.id)
        case Ok(None):
            pass

    logger.info("Creating %s OIDC config with prefix %r", "managed" if managed else "unmanaged", prefix)
    args = [
        "create",
        "oidc-config",
        "--output",
        "json",
        "--mode",
        "auto",
        "--yes",
        f"--managed={str(managed).lower()}",
        "--installer-role-arn",
        installer_role_arn,
        "--prefix",
        prefix,
    ]
    match ctx.rosa.run_json_object(args, ctx.credentials):
        case Err() as e:
            return e
        case Ok({"id": config_id}) if config_id:
            logger.info("OIDC config %s created", config_id)
            return Ok(str(config_id))
        case Ok(_):
            return Err(DecodeError("rosa create oidc-config", "output has no id"))


def release_oidc_config(ctx: RosaContext, oidc_config_id: str) -> Result[None, CommandError]:
    """Delete an OIDC config by id. No existence check."""
    logger.info("Deleting OIDC config %s", oidc_config_id)
    args = ["delete", "oidc-config", "--mode", "auto", "--oidc-config-id", oidc_config_id, "--yes"]
    return map_ok(ctx.rosa.run(args, ctx.credentials), lambda _: None)


def current_oidc_config_for_cluster(
    ctx: RosaContext, cluster_id: str
) -> Result[str, OutputError | OidcConfigNotFoundError]:
    """Id of the OIDC config attached to a live cluster."""
    match ctx.ocm.get_cluster(cluster_id):
        case Err() as e:
            return e
        case Ok(cluster):
            pass

    oidc_config = ((cluster.get("aws") or {}).get("sts") or {}).get("oidc_config") or {}
    oidc_config_id = oidc_config.get("id")
    if not oidc_config_id:
        return Err(OidcConfigNotFoundError(cluster_id))
    return Ok(str(oidc_config_id))


def release_oidc_provider(ctx: RosaContext, cluster_id: str) -> Result[None, CommandError]:
    """Delete the OIDC identity provider registered for a cluster."""
    logger.info("Deleting OIDC provider of cluster %s", cluster_id)
    args = ["delete", "oidc-provider", "--cluster", cluster_id, "--mode", "auto", "--yes"]
    return map_ok(ctx.rosa.run(args, ctx.credentials), lambda _: None)
