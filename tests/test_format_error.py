"""Tests for commands/common.py - _format_error pattern matching.

Every error type gets its own test to catch:
- Type aliases used in match/case (crash at runtime)
- Wrong positional destructuring (silent wrong values)
- Missing case arms (falls through to generic str())
"""

from rosa_lifecycle.commands.common import _format_error
from rosa_lifecycle.lib.errors import (
    AccountRolesInconsistentError,
    Action,
    ClusterLifecycleError,
    ClusterNotFoundError,
    Component,
    CredentialsError,
    DecodeError,
    ExternalCallFailedError,
    OidcConfigNotFoundError,
    OperationCancelledError,
    PollTimeoutError,
    RosaVersionError,
    ValidationFailedError,
)
from rosa_lifecycle.models import ProvisioningState


class TestFormatLeafErrors:
    """Tests for operation-level error formatting."""

    def test_external_call_failed(self) -> None:
        result = _format_error(ExternalCallFailedError("rosa create cluster", "quota exceeded"))
        assert "rosa create cluster" in result
        assert "quota exceeded" in result

    def test_decode_error(self) -> None:
        result = _format_error(DecodeError("terraform output", "missing outputs"))
        assert "terraform output" in result
        assert "missing outputs" in result

    def test_cancelled(self) -> None:
        result = _format_error(OperationCancelledError("wait for cluster 'abc' ready"))
        assert "cancelled" in result
        assert "wait for cluster 'abc' ready" in result

    def test_poll_timeout(self) -> None:
        result = _format_error(PollTimeoutError("cluster 'abc' ready", 30, "not satisfied"))
        assert "cluster 'abc' ready" in result
        assert "30 attempts" in result
        assert "not satisfied" in result

    def test_validation_failed(self) -> None:
        result = _format_error(ValidationFailedError("version", "version is required"))
        assert "'version'" in result
        assert "version is required" in result

    def test_credentials(self) -> None:
        result = _format_error(CredentialsError("region is not supplied"))
        assert "AWS credentials" in result
        assert "region is not supplied" in result

    def test_rosa_version(self) -> None:
        result = _format_error(RosaVersionError(current="1.2.9", minimum="1.2.22"))
        assert "1.2.9" in result
        assert "1.2.22" in result

    def test_account_roles_inconsistent(self) -> None:
        result = _format_error(AccountRolesInconsistentError("c1", "4.12", ("installer", "worker")))
        assert "'c1'" in result
        assert "4.12" in result
        assert "installer, worker" in result
        assert "rosa delete account-roles --prefix c1" in result

    def test_account_roles_inconsistent_none_found(self) -> None:
        result = _format_error(AccountRolesInconsistentError("c1", "4.12", ()))
        assert "found: none" in result

    def test_cluster_not_found(self) -> None:
        result = _format_error(ClusterNotFoundError("c1", 0))
        assert "'c1'" in result
        assert "found 0" in result

    def test_oidc_config_not_found(self) -> None:
        result = _format_error(OidcConfigNotFoundError("abc123"))
        assert "abc123" in result
        assert "OIDC config" in result


class TestFormatLifecycleErrors:
    """Tests for the workflow error wrapper."""

    def test_includes_action_component_and_state(self) -> None:
        error = ClusterLifecycleError(
            action=Action.CREATE,
            component=Component.NETWORK,
            cause=ExternalCallFailedError("terraform apply", "limit exceeded"),
            state=ProvisioningState.OIDC_READY,
        )
        result = _format_error(error)
        assert result.startswith("Failed to create network (last state: OIDCReady)")
        assert "limit exceeded" in result

    def test_includes_cluster_id(self) -> None:
        error = ClusterLifecycleError(
            action=Action.DELETE,
            component=Component.CLUSTER,
            cause=PollTimeoutError("cluster 'c1' deleted", 30, "not satisfied"),
            state=ProvisioningState.WAITING_DELETED,
            cluster_id="abc123",
        )
        result = _format_error(error)
        assert "Failed to delete cluster" in result
        assert "for cluster abc123" in result
        assert "Timed out" in result

    def test_unknown_error_falls_back_to_str(self) -> None:
        assert _format_error("plain message") == "plain message"
