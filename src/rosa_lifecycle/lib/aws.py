"""AWS credentials passed explicitly to every external call.

AwsCredentials is created once at CLI entry. Nothing here touches
os.environ: subprocesses get a per-call environment from
`subprocess_env()`, and boto3 gets its own session.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from rosa_lifecycle.lib.errors import CredentialsError
from rosa_lifecycle.lib.result import Err, Ok, Result

if TYPE_CHECKING:
    from mypy_boto3_sts import STSClient

# Variables stripped from the inherited environment so only the explicit
# credentials reach the child process.
AWS_AUTH_VARIABLES = frozenset(
    {
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_SECURITY_TOKEN",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
    }
)


@dataclass
class AwsCredentials:
    """AWS authentication data. A profile takes priority over static keys.

    Example:
        creds = AwsCredentials(region="us-east-1", profile="dev")
        subprocess.run(["rosa", "whoami"], env=creds.subprocess_env())
    """

    region: str
    profile: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = field(default=None, repr=False)
    session_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        region: str | None = None,
        profile: str | None = None,
    ) -> AwsCredentials:
        """Fill unset values from AWS_* variables (read only)."""
        env = os.environ if environ is None else environ
        return cls(
            region=region or env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION", ""),
            profile=profile or env.get("AWS_PROFILE") or None,
            access_key_id=env.get("AWS_ACCESS_KEY_ID") or None,
            secret_access_key=env.get("AWS_SECRET_ACCESS_KEY") or None,
            session_token=env.get("AWS_SESSION_TOKEN") or None,
        )

    @property
    def uses_profile(self) -> bool:
        return bool(self.profile)

    @property
    def uses_access_keys(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    def validate(self) -> Result[AwsCredentials, CredentialsError]:
        """Check that either a profile or a key pair is set, and a region."""
        if not self.uses_profile and not self.uses_access_keys:
            return Err(CredentialsError("credentials are not supplied (profile or access keys)"))
        if not self.region:
            return Err(CredentialsError("region is not supplied"))
        return Ok(self)

    def env(self) -> dict[str, str]:
        """The AWS_* variables describing these credentials."""
        values = {"AWS_REGION": self.region, "AWS_DEFAULT_REGION": self.region}
        if self.uses_profile:
            values["AWS_PROFILE"] = self.profile or ""
        elif self.uses_access_keys:
            values["AWS_ACCESS_KEY_ID"] = self.access_key_id or ""
            values["AWS_SECRET_ACCESS_KEY"] = self.secret_access_key or ""
            if self.session_token:
                values["AWS_SESSION_TOKEN"] = self.session_token
        return values

    def subprocess_env(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Environment for a child process: `base` minus ambient AWS auth, plus ours."""
        inherited = os.environ if base is None else base
        env = {k: v for k, v in inherited.items() if k not in AWS_AUTH_VARIABLES}
        env.update(self.env())
        return env

    @cached_property
    def session(self) -> boto3.Session:
        """Boto3 session built from these credentials only."""
        if self.uses_profile:
            return boto3.Session(profile_name=self.profile, region_name=self.region)
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            aws_session_token=self.session_token,
            region_name=self.region,
        )

    @cached_property
    def sts(self) -> STSClient:
        """STS client."""
        return self.session.client("sts")

    def verify(self) -> Result[str, CredentialsError]:
        """Ask STS who we are. Returns the account id."""
        try:
            return Ok(self.sts.get_caller_identity()["Account"])
        except (ClientError, BotoCoreError) as e:
            return Err(CredentialsError(f"aws authentication failed: {e}"))
