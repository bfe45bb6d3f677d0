"""Shared CLI utilities.

Common options, RosaContext creation, error handling, output formatting.
"""

import json
import signal
import sys
from collections.abc import Callable
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import click

from rosa_lifecycle.lib.aws import AwsCredentials
from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    AccountRolesInconsistentError,
    ClusterLifecycleError,
    ClusterNotFoundError,
    CredentialsError,
    DecodeError,
    ExternalCallFailedError,
    OidcConfigNotFoundError,
    OperationCancelledError,
    PollTimeoutError,
    RosaVersionError,
    ValidationFailedError,
)
from rosa_lifecycle.lib.ocm import ENVIRONMENTS
from rosa_lifecycle.lib.result import Err, Ok, Result

# Default values
DEFAULT_OCM_ENV = "production"
DEFAULT_ROSA_BINARY = "rosa"
DEFAULT_TERRAFORM_BINARY = "terraform"

# Type variables for decorators
P = ParamSpec("P")
T = TypeVar("T")


# Common CLI options as decorators
def region_option(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --region/-r option."""
    return click.option(
        "--region",
        "-r",
        envvar="AWS_REGION",
        required=True,
        help="AWS region",
    )(fn)


def profile_option(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --profile/-p option."""
    return click.option(
        "--profile",
        "-p",
        envvar="AWS_PROFILE",
        default=None,
        help="AWS profile (static access keys are used when unset)",
    )(fn)


def aws_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add all AWS-related options (region, profile)."""
    fn = region_option(fn)
    fn = profile_option(fn)
    return fn


def ocm_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add --ocm-token and --ocm-env options."""
    fn = click.option(
        "--ocm-token",
        envvar="OCM_TOKEN",
        required=True,
        help="OpenShift Cluster Manager offline token",
    )(fn)
    fn = click.option(
        "--ocm-env",
        envvar="OCM_ENV",
        type=click.Choice(sorted(ENVIRONMENTS)),
        default=DEFAULT_OCM_ENV,
        show_default=True,
        help="OpenShift Cluster Manager environment",
    )(fn)
    return fn


def tool_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add external tool and working directory options."""
    fn = click.option(
        "--rosa-binary",
        envvar="ROSA_BINARY",
        default=DEFAULT_ROSA_BINARY,
        show_default=True,
        help="rosa CLI executable",
    )(fn)
    fn = click.option(
        "--terraform-binary",
        envvar="TERRAFORM_BINARY",
        default=DEFAULT_TERRAFORM_BINARY,
        show_default=True,
        help="terraform executable",
    )(fn)
    fn = click.option(
        "--work-dir",
        envvar="ROSA_LIFECYCLE_WORK_DIR",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Terraform working directory root (default: XDG data dir)",
    )(fn)
    return fn


def common_options(fn: Callable[P, T]) -> Callable[P, T]:
    """Add all common options (AWS, OCM, tools)."""
    fn = aws_options(fn)
    fn = ocm_options(fn)
    fn = tool_options(fn)
    return fn


def make_context(
    region: str,
    profile: str | None,
    ocm_token: str,
    ocm_env: str = DEFAULT_OCM_ENV,
    rosa_binary: str = DEFAULT_ROSA_BINARY,
    terraform_binary: str = DEFAULT_TERRAFORM_BINARY,
    work_dir: Path | None = None,
) -> RosaContext:
    """Create RosaContext from CLI options."""
    return RosaContext(
        credentials=AwsCredentials.from_environment(region=region, profile=profile),
        ocm_token=ocm_token,
        ocm_url=ENVIRONMENTS[ocm_env],
        rosa_binary=rosa_binary,
        terraform_binary=terraform_binary,
        work_dir=work_dir,
    )


def handle_result(result: Result[T, Any], success_message: str | None = None) -> T:
    """Handle a Result, exiting on error with appropriate message.

    On Ok: returns the value, optionally prints success message
    On Err: prints error and exits with code 1
    """
    match result:
        case Ok(value):
            if success_message:
                click.secho(success_message, fg="green", bold=True)
            return value
        case Err(error):
            handle_error(error)
            sys.exit(1)  # Should never reach here, but for type checker


def handle_error(error: Any) -> None:
    """Print error message and exit."""
    message = _format_error(error)
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _format_error(error: Any) -> str:
    """Format error for display."""
    match error:
        case ClusterLifecycleError(action, component, cause, state, cluster_id):
            where = f"Failed to {action} {component} (last state: {state})"
            if cluster_id:
                where += f" for cluster {cluster_id}"
            return f"{where}: {_format_error(cause)}"

        case ExternalCallFailedError(operation, reason):
            return f"'{operation}' failed: {reason}"

        case DecodeError(operation, reason):
            return f"Unexpected output from '{operation}': {reason}"

        case OperationCancelledError(operation):
            return f"'{operation}' was cancelled."

        case PollTimeoutError(resource, attempts, last_observation):
            return f"Timed out waiting for {resource} after {attempts} attempts (last: {last_observation})."

        case ValidationFailedError(field, reason):
            return f"Invalid '{field}': {reason}"

        case CredentialsError(reason):
            return f"AWS credentials: {reason}"

        case RosaVersionError(current, minimum):
            return f"rosa CLI {current} is too old, {minimum} or newer is required."

        case AccountRolesInconsistentError(prefix, version, found):
            found_str = ", ".join(found) if found else "none"
            return (
                f"Account roles for prefix '{prefix}' version {version} are incomplete "
                f"(found: {found_str}). Delete them with 'rosa delete account-roles --prefix {prefix}'."
            )

        case ClusterNotFoundError(cluster_name, matches):
            return f"Expected exactly one cluster named '{cluster_name}', found {matches}."

        case OidcConfigNotFoundError(cluster_id):
            return f"Cluster '{cluster_id}' has no OIDC config attached."

        case _:
            return str(error)


def to_json(obj: Any) -> str:
    """Convert object to JSON string."""
    return json.dumps(_to_serializable(obj), indent=2)


def _to_serializable(obj: Any) -> Any:
    """Convert object to JSON-serializable form."""
    if obj is None:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _to_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_serializable(v) for v in obj]
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_serializable(asdict(obj))
    return str(obj)


def echo_key_value(key: str, value: Any, indent: int = 0) -> None:
    """Print a key-value pair with optional indentation."""
    prefix = "  " * indent
    click.echo(f"{prefix}{key}: {value}")


def install_cancel_handlers(ctx: RosaContext) -> None:
    """SIGINT/SIGTERM set the context's cancel event instead of killing the process.

    The running command or poll stops at its next check and the workflow
    returns a cancelled error naming the last state reached.
    """

    def _cancel(signum: int, _frame: Any) -> None:
        click.secho(f"Received {signal.Signals(signum).name}, cancelling...", fg="yellow", err=True)
        ctx.cancel.set()

    signal.signal(signal.SIGINT, _cancel)
    signal.signal(signal.SIGTERM, _cancel)
