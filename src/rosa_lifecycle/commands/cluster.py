"""Cluster commands - create and delete ROSA clusters."""

from pathlib import Path

import click

from rosa_lifecycle.commands.common import (
    common_options,
    echo_key_value,
    handle_result,
    install_cancel_handlers,
    make_context,
    to_json,
)
from rosa_lifecycle.models import (
    DEFAULT_CHANNEL_GROUP,
    DEFAULT_COMPUTE_MACHINE_TYPE,
    DEFAULT_MACHINE_CIDR,
    DEFAULT_REPLICAS,
    CreateClusterOptions,
    DeleteClusterOptions,
)
from rosa_lifecycle.operations import connect, find_cluster
from rosa_lifecycle.workflows import create_cluster, delete_cluster


def _topology_options(fn):
    fn = click.option(
        "--hosted-cp/--classic",
        default=True,
        show_default=True,
        help="Hosted control plane (implies --sts) or classic topology",
    )(fn)
    fn = click.option("--sts/--no-sts", default=False, help="Use AWS STS (always on for --hosted-cp)")(fn)
    return fn


@click.command()
@click.argument("name")
@click.option("--version", "version", required=True, help="OpenShift version, e.g. 4.12.6")
@click.option("--channel-group", default=DEFAULT_CHANNEL_GROUP, show_default=True)
@click.option("--compute-machine-type", default=DEFAULT_COMPUTE_MACHINE_TYPE, show_default=True)
@click.option("--machine-cidr", default=DEFAULT_MACHINE_CIDR, show_default=True)
@click.option("--replicas", type=int, default=DEFAULT_REPLICAS, show_default=True)
@click.option("--properties", default="", help="Extra cluster properties passed through to rosa")
@click.option(
    "--oidc-config-managed/--oidc-config-unmanaged",
    default=True,
    show_default=True,
    help="Let Red Hat manage the OIDC config",
)
@_topology_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@common_options
def create(
    name: str,
    version: str,
    channel_group: str,
    compute_machine_type: str,
    machine_cidr: str,
    replicas: int,
    properties: str,
    oidc_config_managed: bool,
    hosted_cp: bool,
    sts: bool,
    as_json: bool,
    region: str,
    profile: str | None,
    ocm_token: str,
    ocm_env: str,
    rosa_binary: str,
    terraform_binary: str,
    work_dir: Path | None,
) -> None:
    """Create a ROSA cluster and wait until it is operational.

    NAME is the cluster name. It is also the prefix of the account roles and
    the OIDC config created for the cluster.

    Nothing is rolled back on failure; run 'rosa-lifecycle delete NAME' to
    clean up what was provisioned.

    \b
    Examples:
      rosa-lifecycle create c1 --version 4.12.6 -r us-east-1
      rosa-lifecycle create c2 --version 4.13.0 --classic --sts -r eu-west-1
    """
    options = CreateClusterOptions(
        cluster_name=name,
        version=version,
        channel_group=channel_group,
        compute_machine_type=compute_machine_type,
        machine_cidr=machine_cidr,
        replicas=replicas,
        properties=properties,
        hosted_cp=hosted_cp,
        sts=sts,
        oidc_config_managed=oidc_config_managed,
    )

    if not as_json:
        click.echo(f"Creating cluster: {name}")
        echo_key_value("Version", version, indent=1)
        echo_key_value("Topology", "hosted control plane" if hosted_cp else "classic", indent=1)
        echo_key_value("Region", region, indent=1)
        click.echo()

    with make_context(
        region, profile, ocm_token, ocm_env, rosa_binary, terraform_binary, work_dir
    ) as ctx:
        install_cancel_handlers(ctx)
        handle_result(connect(ctx))
        cluster_id = handle_result(
            create_cluster(ctx, options),
            success_message=None if as_json else f"Cluster '{name}' is operational!",
        )

    if as_json:
        click.echo(to_json({"name": name, "id": cluster_id}))
    else:
        echo_key_value("Cluster ID", cluster_id)


@click.command()
@click.argument("name")
@click.option("--cluster-id", default="", help="Cluster ID (resolved from NAME when omitted)")
@_topology_options
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@common_options
def delete(
    name: str,
    cluster_id: str,
    hosted_cp: bool,
    sts: bool,
    yes: bool,
    region: str,
    profile: str | None,
    ocm_token: str,
    ocm_env: str,
    rosa_binary: str,
    terraform_binary: str,
    work_dir: Path | None,
) -> None:
    """Delete a ROSA cluster and the resources created for it.

    Deletes in order:
    1. The cluster (and waits until it is gone)
    2. Operator roles and the OIDC provider (STS)
    3. The OIDC config and the VPC (hosted control plane)
    4. Account roles prefixed with NAME (STS)

    \b
    Examples:
      rosa-lifecycle delete c1 -r us-east-1
      rosa-lifecycle delete c2 --classic --sts --cluster-id 2a8f... --yes
    """
    if not yes:
        click.echo(f"This will delete cluster '{name}' and everything created for it.")
        if not click.confirm("Are you sure you want to continue?"):
            click.echo("Aborted.")
            return

    with make_context(
        region, profile, ocm_token, ocm_env, rosa_binary, terraform_binary, work_dir
    ) as ctx:
        install_cancel_handlers(ctx)
        handle_result(connect(ctx))

        if not cluster_id:
            cluster_id = handle_result(find_cluster(ctx, name)).id
        click.echo(f"Deleting cluster: {name} ({cluster_id})")

        options = DeleteClusterOptions(
            cluster_id=cluster_id,
            cluster_name=name,
            hosted_cp=hosted_cp,
            sts=sts,
        )
        handle_result(
            delete_cluster(ctx, options),
            success_message=f"Cluster '{name}' deleted successfully!",
        )
