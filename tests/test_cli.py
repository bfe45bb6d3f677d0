"""Tests for the click commands in commands/cluster.py."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    Action,
    ClusterLifecycleError,
    ClusterNotFoundError,
    Component,
    ExternalCallFailedError,
)
from rosa_lifecycle.lib.result import Err, Ok
from rosa_lifecycle.main import cli
from rosa_lifecycle.models import ClusterHandle, ProvisioningState, Version

MODULE = "rosa_lifecycle.commands.cluster"


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> dict[str, str]:
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    return {
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "OCM_TOKEN": "offline-token",
        "ROSA_LIFECYCLE_WORK_DIR": str(tmp_path),
    }


@pytest.fixture(autouse=True)
def no_signal_handlers():
    """Keep the test process's own SIGINT handling."""
    with patch(f"{MODULE}.install_cancel_handlers"):
        yield


@pytest.fixture
def connected():
    with patch(f"{MODULE}.connect", return_value=Ok(Version("1.2.30"))) as connect:
        yield connect


class TestCreateCommand:
    def test_success(self, env, connected) -> None:
        with patch(f"{MODULE}.create_cluster", return_value=Ok("abc123")) as create:
            result = CliRunner().invoke(cli, ["create", "c1", "--version", "4.12.6"], env=env)

        assert result.exit_code == 0, result.output
        assert "abc123" in result.output
        ctx, options = create.call_args.args
        assert options.cluster_name == "c1"
        assert options.hosted_cp is True
        assert options.oidc_config_managed is True
        assert ctx.region == "us-east-1"
        assert ctx.ocm_url == "https://api.openshift.com"

    def test_json_output(self, env, connected) -> None:
        with patch(f"{MODULE}.create_cluster", return_value=Ok("abc123")):
            result = CliRunner().invoke(
                cli, ["create", "c1", "--version", "4.12.6", "--json"], env=env
            )

        assert result.exit_code == 0, result.output
        assert '"id": "abc123"' in result.output

    def test_failure_exits_1(self, env, connected) -> None:
        error = ClusterLifecycleError(
            Action.CREATE,
            Component.NETWORK,
            ExternalCallFailedError("terraform apply", "limit exceeded"),
            ProvisioningState.OIDC_READY,
        )
        with patch(f"{MODULE}.create_cluster", return_value=Err(error)):
            result = CliRunner().invoke(cli, ["create", "c1", "--version", "4.12.6"], env=env)

        assert result.exit_code == 1
        assert "limit exceeded" in result.output

    def test_stage_environment(self, env, connected) -> None:
        with patch(f"{MODULE}.create_cluster", return_value=Ok("abc123")) as create:
            CliRunner().invoke(
                cli, ["create", "c1", "--version", "4.12.6", "--ocm-env", "stage"], env=env
            )

        ctx, _ = create.call_args.args
        assert ctx.ocm_url == "https://api.stage.openshift.com"

    def test_closes_context(self, env, connected) -> None:
        with (
            patch.object(RosaContext, "close", autospec=True) as close,
            patch(f"{MODULE}.create_cluster", return_value=Ok("abc123")),
        ):
            result = CliRunner().invoke(cli, ["create", "c1", "--version", "4.12.6"], env=env)

        assert result.exit_code == 0, result.output
        close.assert_called_once()

    def test_closes_context_on_failure(self, env, connected) -> None:
        error = ClusterLifecycleError(
            Action.CREATE,
            Component.CLUSTER,
            ExternalCallFailedError("rosa create cluster", "quota"),
            ProvisioningState.NETWORK_READY,
        )
        with (
            patch.object(RosaContext, "close", autospec=True) as close,
            patch(f"{MODULE}.create_cluster", return_value=Err(error)),
        ):
            result = CliRunner().invoke(cli, ["create", "c1", "--version", "4.12.6"], env=env)

        assert result.exit_code == 1
        close.assert_called_once()

    def test_bootstrap_failure_skips_workflow(self, env) -> None:
        with (
            patch(f"{MODULE}.connect", return_value=Err(ExternalCallFailedError("rosa", "not found"))),
            patch(f"{MODULE}.create_cluster") as create,
        ):
            result = CliRunner().invoke(cli, ["create", "c1", "--version", "4.12.6"], env=env)

        assert result.exit_code == 1
        create.assert_not_called()


class TestDeleteCommand:
    def test_resolves_cluster_id_by_name(self, env, connected) -> None:
        with (
            patch(f"{MODULE}.find_cluster", return_value=Ok(ClusterHandle("abc123", "c1"))),
            patch(f"{MODULE}.delete_cluster", return_value=Ok(None)) as delete,
        ):
            result = CliRunner().invoke(cli, ["delete", "c1", "--yes"], env=env)

        assert result.exit_code == 0, result.output
        _, options = delete.call_args.args
        assert options.cluster_id == "abc123"
        assert options.cluster_name == "c1"
        assert options.hosted_cp is True

    def test_explicit_cluster_id(self, env, connected) -> None:
        with (
            patch(f"{MODULE}.find_cluster") as find,
            patch(f"{MODULE}.delete_cluster", return_value=Ok(None)) as delete,
        ):
            result = CliRunner().invoke(
                cli, ["delete", "c1", "--cluster-id", "xyz", "--classic", "--sts", "--yes"], env=env
            )

        assert result.exit_code == 0, result.output
        find.assert_not_called()
        _, options = delete.call_args.args
        assert options.cluster_id == "xyz"
        assert options.hosted_cp is False
        assert options.sts is True

    def test_unknown_cluster(self, env, connected) -> None:
        with (
            patch(f"{MODULE}.find_cluster", return_value=Err(ClusterNotFoundError("c1", 0))),
            patch(f"{MODULE}.delete_cluster") as delete,
        ):
            result = CliRunner().invoke(cli, ["delete", "c1", "--yes"], env=env)

        assert result.exit_code == 1
        assert "found 0" in result.output
        delete.assert_not_called()

    def test_confirmation_declined(self, env, connected) -> None:
        with patch(f"{MODULE}.delete_cluster") as delete:
            result = CliRunner().invoke(cli, ["delete", "c1"], env=env, input="n\n")

        assert "Aborted" in result.output
        delete.assert_not_called()
