"""Network operations - the VPC a hosted control plane cluster is installed into."""

import logging
from pathlib import Path

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import DecodeError, NetworkError, ValidationFailedError
from rosa_lifecycle.lib.result import Err, Ok, Result
from rosa_lifecycle.lib.templates import VPC_TEMPLATE, stage_template
from rosa_lifecycle.models import NetworkTopology

logger = logging.getLogger(__name__)

PRIVATE_SUBNET_OUTPUT = "cluster-private-subnet"
PUBLIC_SUBNET_OUTPUT = "cluster-public-subnet"
NODE_PRIVATE_SUBNET_OUTPUT = "node-private-subnet"


def _check_parameters(
    cluster_name: str, region: str, work_dir: Path | None
) -> ValidationFailedError | None:
    for name, value in (("cluster_name", cluster_name), ("region", region), ("work_dir", work_dir)):
        if not value:
            return ValidationFailedError(name, "one or more parameters is empty")
    return None


def _variables(cluster_name: str, region: str) -> dict[str, str]:
    return {"aws_region": region, "cluster_name": cluster_name}


def _unquote(value: str) -> str:
    return value.replace('"', "").strip()


def create_network(
    ctx: RosaContext, cluster_name: str, region: str, work_dir: Path
) -> Result[NetworkTopology, NetworkError]:
    """Create the VPC and return its three subnets.

    Stages the bundled definition into `work_dir`, then init/plan/apply/output.
    Terraform's local working data is removed on every exit path.
    """
    if (invalid := _check_parameters(cluster_name, region, work_dir)) is not None:
        return Err(invalid)

    tf = ctx.terraform(work_dir)
    try:
        logger.info("Creating AWS VPC for cluster %r in %s", cluster_name, region)
        try:
            stage_template(VPC_TEMPLATE, work_dir)
        except OSError as e:
            return Err(
                ValidationFailedError(
                    "work_dir", f"failed to copy terraform file to working directory: {e}"
                )
            )

        match tf.init(ctx.credentials):
            case Err() as e:
                return e
            case Ok(_):
                pass

        match tf.plan(ctx.credentials, _variables(cluster_name, region)):
            case Err() as e:
                return e
            case Ok(_):
                pass

        match tf.apply(ctx.credentials):
            case Err() as e:
                return e
            case Ok(_):
                pass

        match tf.output(ctx.credentials):
            case Err() as e:
                return e
            case Ok(outputs):
                pass

        missing = [
            name
            for name in (PRIVATE_SUBNET_OUTPUT, PUBLIC_SUBNET_OUTPUT, NODE_PRIVATE_SUBNET_OUTPUT)
            if not _unquote(outputs.get(name, ""))
        ]
        if missing:
            return Err(DecodeError("terraform output", f"missing outputs: {', '.join(missing)}"))

        topology = NetworkTopology(
            private_subnet=_unquote(outputs[PRIVATE_SUBNET_OUTPUT]),
            public_subnet=_unquote(outputs[PUBLIC_SUBNET_OUTPUT]),
            node_private_subnet=_unquote(outputs[NODE_PRIVATE_SUBNET_OUTPUT]),
        )
        logger.info("AWS VPC created! subnets=%s", topology.subnet_ids)
        return Ok(topology)
    finally:
        tf.uninstall()


def destroy_network(
    ctx: RosaContext, cluster_name: str, region: str, work_dir: Path
) -> Result[None, NetworkError]:
    """Destroy the VPC created by create_network in the same working directory.

    The definition is not re-staged: `work_dir` must still hold the files
    (and state) from creation.
    """
    if (invalid := _check_parameters(cluster_name, region, work_dir)) is not None:
        return Err(invalid)

    tf = ctx.terraform(work_dir)
    try:
        logger.info("Deleting AWS VPC for cluster %r", cluster_name)
        match tf.init(ctx.credentials):
            case Err() as e:
                return e
            case Ok(_):
                pass

        match tf.destroy(ctx.credentials, _variables(cluster_name, region)):
            case Err() as e:
                return e
            case Ok(_):
                logger.info("AWS VPC deleted!")
                return Ok(None)
    finally:
        tf.uninstall()
