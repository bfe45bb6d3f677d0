"""Error types for rosa-lifecycle.

All errors are frozen dataclasses - no exceptions in business logic.
Operations return the leaf errors below; the lifecycle workflows wrap them
in ClusterLifecycleError, which records the action (create/delete), the
component that failed and how far the workflow got.
"""

from dataclasses import dataclass
from enum import StrEnum

# =============================================================================
# Tags
# =============================================================================


class Action(StrEnum):
    """Lifecycle action an error was raised under."""

    CREATE = "create"
    DELETE = "delete"


class Component(StrEnum):
    """Sub-operation of the lifecycle that failed."""

    ACCOUNT_ROLES = "account roles"
    OIDC_CONFIG = "oidc config"
    OIDC_PROVIDER = "oidc provider"
    OPERATOR_ROLES = "operator roles"
    NETWORK = "network"
    CLUSTER = "cluster"
    HEALTH_CHECK = "health check"


# =============================================================================
# External call errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class ExternalCallFailedError:
    """A command or API call failed (non-zero exit, HTTP error, connection error)."""

    operation: str
    reason: str


@dataclass(frozen=True, slots=True)
class DecodeError:
    """Command or API output did not have the expected shape."""

    operation: str
    reason: str


@dataclass(frozen=True, slots=True)
class OperationCancelledError:
    """The caller cancelled the invocation while this operation was running."""

    operation: str


# =============================================================================
# Polling
# =============================================================================


@dataclass(frozen=True, slots=True)
class PollTimeoutError:
    """A readiness poll used up its attempt budget."""

    resource: str
    attempts: int
    last_observation: str


# =============================================================================
# Validation
# =============================================================================


@dataclass(frozen=True, slots=True)
class ValidationFailedError:
    """A required option is missing or malformed. Raised before any side effect."""

    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class CredentialsError:
    """AWS credentials are missing or rejected."""

    reason: str


@dataclass(frozen=True, slots=True)
class RosaVersionError:
    """The rosa CLI is older than the minimum supported version."""

    current: str
    minimum: str


# =============================================================================
# Resource errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class AccountRolesInconsistentError:
    """Only some of the four account roles exist for a prefix/version.

    Never repaired automatically; the partial set must be cleaned up by hand
    (or with `rosa delete account-roles --prefix`).
    """

    prefix: str
    version: str
    found: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ClusterNotFoundError:
    """A cluster search did not return exactly one record."""

    cluster_name: str
    matches: int


@dataclass(frozen=True, slots=True)
class OidcConfigNotFoundError:
    """The cluster has no OIDC config attached."""

    cluster_id: str


# =============================================================================
# Type Aliases for Error Unions
# =============================================================================

type CommandError = ExternalCallFailedError | OperationCancelledError
type OutputError = CommandError | DecodeError
type PollError = PollTimeoutError | OperationCancelledError
type AccountRolesError = OutputError | AccountRolesInconsistentError
type OidcConfigError = OutputError | ValidationFailedError | OidcConfigNotFoundError
type NetworkError = OutputError | ValidationFailedError
type ClusterError = OutputError | ValidationFailedError | ClusterNotFoundError | PollError
type HealthCheckError = ExternalCallFailedError | PollError
type ProviderError = OutputError | CredentialsError | RosaVersionError

type LeafError = (
    AccountRolesError
    | OidcConfigError
    | NetworkError
    | ClusterError
    | HealthCheckError
    | CredentialsError
)


# =============================================================================
# Lifecycle wrapper
# =============================================================================


@dataclass(frozen=True, slots=True)
class ClusterLifecycleError:
    """A create or delete workflow stopped.

    `state` is the last ProvisioningState reached before the failing step.
    `cluster_id` is set once the cluster has been submitted (create) or was
    given (delete), so callers can clean up with a delete.
    """

    action: Action
    component: Component
    cause: LeafError
    state: str
    cluster_id: str | None = None
