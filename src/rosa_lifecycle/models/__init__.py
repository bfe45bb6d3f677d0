"""rosa-lifecycle data models.

Pure data structures. The create options are an immutable builder: every
`with_*` method returns a new value, and `validate_request` turns a fully
populated builder into a ClusterProvisioningRequest or a typed error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

from rosa_lifecycle.lib.errors import ValidationFailedError
from rosa_lifecycle.lib.result import Err, Ok, Result

DEFAULT_CHANNEL_GROUP = "stable"
DEFAULT_COMPUTE_MACHINE_TYPE = "m5.xlarge"
DEFAULT_MACHINE_CIDR = "10.0.0.0/16"
DEFAULT_REPLICAS = 2

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)(?:\.(\d+))?(?:[-+].*)?$")


class Arn(str):
    """AWS ARN - a string subclass with parsed component access."""

    def __new__(cls, value: str) -> Self:
        parts = value.split(":")
        if len(parts) < 6 or parts[0] != "arn":
            raise ValueError(f"Invalid ARN: {value}")
        return super().__new__(cls, value)

    @property
    def resource(self) -> str:
        return ":".join(self.split(":")[5:])

    @property
    def resource_name(self) -> str:
        """Last path segment, e.g. the role name of an IAM role ARN."""
        return self.resource.rsplit("/", 1)[-1]


class Version(str):
    """Semantic version string (`4.12.6`, `v1.2.22`, `4.13.0-rc.1`)."""

    def __new__(cls, value: str) -> Self:
        if not _VERSION_RE.match(value.strip()):
            raise ValueError(f"Invalid version: {value!r}")
        return super().__new__(cls, value.strip())

    def _groups(self) -> tuple[int, int, int]:
        match = _VERSION_RE.match(self)
        assert match is not None
        major, minor, patch = match.groups()
        return int(major), int(minor), int(patch or 0)

    @property
    def major(self) -> int:
        return self._groups()[0]

    @property
    def minor(self) -> int:
        return self._groups()[1]

    @property
    def major_minor(self) -> str:
        """`4.12.6` -> `4.12`; account roles are keyed by this."""
        return f"{self.major}.{self.minor}"

    def at_least(self, other: Version) -> bool:
        return self._groups() >= other._groups()


class AccountRoleType(StrEnum):
    """RoleType values reported by `rosa list account-roles`."""

    CONTROL_PLANE = "Control plane"
    INSTALLER = "Installer"
    SUPPORT = "Support"
    WORKER = "Worker"


class ProvisioningState(StrEnum):
    """Progress points of a create or delete invocation."""

    REQUESTED = "Requested"
    # create
    ROLES_READY = "RolesReady"
    OIDC_READY = "OIDCReady"
    NETWORK_READY = "NetworkReady"
    SUBMITTED = "Submitted"
    WAITING_READY = "WaitingReady"
    READY = "Ready"
    HEALTH_CHECKING = "HealthChecking"
    OPERATIONAL = "Operational"
    # delete
    DELETE_SUBMITTED = "DeleteSubmitted"
    WAITING_DELETED = "WaitingDeleted"
    ROLES_CLEANED = "RolesCleaned"
    OIDC_CONFIG_DELETED = "OIDCConfigDeleted"
    NETWORK_DELETED = "NetworkDeleted"
    ACCOUNT_ROLES_DELETED = "AccountRolesDeleted"
    DONE = "Done"


@dataclass(frozen=True)
class AccountRoleSet:
    """The four account roles required for STS clusters."""

    control_plane: Arn
    installer: Arn
    support: Arn
    worker: Arn


@dataclass(frozen=True)
class OidcConfig:
    """OIDC trust configuration registered in OCM."""

    id: str
    secret_arn: str
    managed: bool = False


@dataclass(frozen=True)
class NetworkTopology:
    """Subnets created for a hosted control plane cluster."""

    private_subnet: str
    public_subnet: str
    node_private_subnet: str

    @property
    def subnet_ids(self) -> str:
        """Value for `rosa create cluster --subnet-ids`."""
        return f"{self.private_subnet},{self.public_subnet}"


@dataclass(frozen=True)
class ClusterHandle:
    """A cluster as returned by an OCM search."""

    id: str
    name: str
    state: str = ""


@dataclass(frozen=True)
class CreateClusterOptions:
    """Caller input for a create, plus the values provisioned along the way.

    Unset fields are filled by `with_defaults()`. The provisioned fields
    (account roles, OIDC config, network) are only ever set by the workflow
    through the `with_*` methods.
    """

    cluster_name: str
    version: str
    channel_group: str = ""
    compute_machine_type: str = ""
    machine_cidr: str = ""
    replicas: int = 0
    properties: str = ""
    hosted_cp: bool = False
    sts: bool = False
    oidc_config_managed: bool = False

    account_roles: AccountRoleSet | None = None
    oidc_config_id: str = ""
    network: NetworkTopology | None = None

    def with_defaults(self) -> CreateClusterOptions:
        """Fill unset options. A hosted control plane always uses STS."""
        return replace(
            self,
            channel_group=self.channel_group or DEFAULT_CHANNEL_GROUP,
            compute_machine_type=self.compute_machine_type or DEFAULT_COMPUTE_MACHINE_TYPE,
            machine_cidr=self.machine_cidr or DEFAULT_MACHINE_CIDR,
            replicas=self.replicas or DEFAULT_REPLICAS,
            sts=self.sts or self.hosted_cp,
        )

    def with_account_roles(self, roles: AccountRoleSet) -> CreateClusterOptions:
        return replace(self, account_roles=roles)

    def with_oidc_config(self, oidc_config_id: str) -> CreateClusterOptions:
        return replace(self, oidc_config_id=oidc_config_id)

    def with_network(self, network: NetworkTopology) -> CreateClusterOptions:
        return replace(self, network=network)


@dataclass(frozen=True)
class ClusterProvisioningRequest:
    """A validated, fully populated create request. Built by validate_request()."""

    cluster_name: str
    version: Version
    channel_group: str
    compute_machine_type: str
    machine_cidr: str
    replicas: int
    properties: str
    hosted_cp: bool
    sts: bool
    account_roles: AccountRoleSet
    oidc_config_id: str = ""
    subnet_ids: str = ""


@dataclass(frozen=True)
class DeleteClusterOptions:
    """Caller input for a delete."""

    cluster_id: str
    cluster_name: str
    hosted_cp: bool = False
    sts: bool = False

    def with_defaults(self) -> DeleteClusterOptions:
        return replace(self, sts=self.sts or self.hosted_cp)


def validate_options(options: CreateClusterOptions) -> Result[Version, ValidationFailedError]:
    """Check the caller-supplied fields. Runs before any external call."""
    if not options.cluster_name:
        return Err(ValidationFailedError("cluster_name", "cluster name is required"))
    if not options.version:
        return Err(ValidationFailedError("version", "version is required"))
    try:
        version = Version(options.version)
    except ValueError as e:
        return Err(ValidationFailedError("version", f"failed to parse into semantic version: {e}"))
    if options.replicas < 0:
        return Err(ValidationFailedError("replicas", "replicas must not be negative"))
    return Ok(version)


def validate_request(
    options: CreateClusterOptions,
) -> Result[ClusterProvisioningRequest, ValidationFailedError]:
    """Build the submit request from default-filled, fully provisioned options.

    Pure: returns the first missing field as an error, never mutates.
    """
    match validate_options(options):
        case Err() as e:
            return e
        case Ok(version):
            pass

    if options.hosted_cp:
        if not options.oidc_config_id:
            return Err(
                ValidationFailedError(
                    "oidc_config_id", "oidc config id is required for hosted control plane clusters"
                )
            )
        if options.network is None:
            return Err(
                ValidationFailedError(
                    "subnet_ids", "subnet ids are required for hosted control plane clusters"
                )
            )

    roles = options.account_roles
    if roles is None:
        return Err(ValidationFailedError("account_roles", "account roles are required"))
    for field_name in ("control_plane", "installer", "support", "worker"):
        if not getattr(roles, field_name):
            return Err(
                ValidationFailedError(
                    f"account_roles.{field_name}", f"iam role arn for {field_name} is required"
                )
            )

    return Ok(
        ClusterProvisioningRequest(
            cluster_name=options.cluster_name,
            version=version,
            channel_group=options.channel_group or DEFAULT_CHANNEL_GROUP,
            compute_machine_type=options.compute_machine_type or DEFAULT_COMPUTE_MACHINE_TYPE,
            machine_cidr=options.machine_cidr or DEFAULT_MACHINE_CIDR,
            replicas=options.replicas or DEFAULT_REPLICAS,
            properties=options.properties,
            hosted_cp=options.hosted_cp,
            sts=options.sts or options.hosted_cp,
            account_roles=roles,
            oidc_config_id=options.oidc_config_id,
            subnet_ids=options.network.subnet_ids if options.network else "",
        )
    )
