"""Shared pytest fixtures for rosa-lifecycle tests."""

import json
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from rosa_lifecycle.lib.aws import AwsCredentials
from rosa_lifecycle.lib.command import CommandOutput
from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.ocm import OcmClient
from rosa_lifecycle.lib.result import Err, Ok
from rosa_lifecycle.lib.rosa import RosaCli

ACCOUNT_ID = "123456789012"

ROLE_SUFFIXES = {
    "Control plane": "ControlPlane",
    "Installer": "Installer",
    "Support": "Support",
    "Worker": "Worker",
}


def command_key(args: Sequence[str]) -> tuple[str, ...]:
    """Leading subcommand words of a rosa invocation, e.g. ('create', 'cluster')."""
    words: list[str] = []
    for arg in args:
        if arg.startswith("-") or len(words) == 2:
            break
        words.append(arg)
    return tuple(words)


class FakeRosa(RosaCli):
    """Scripted rosa CLI.

    Responses are queued per subcommand; the last one repeats. Unscripted
    subcommands succeed with empty output.
    """

    def __init__(self) -> None:
        super().__init__(binary="rosa")
        self.calls: list[list[str]] = []
        self._responses: dict[tuple[str, ...], list[Any]] = {}

    def respond(self, *command: str, stdout: Any = "", error: Any = None) -> None:
        if error is not None:
            result: Any = Err(error)
        else:
            text = stdout if isinstance(stdout, str) else json.dumps(stdout)
            result = Ok(CommandOutput(stdout=text, stderr=""))
        self._responses.setdefault(tuple(command), []).append(result)

    def run(self, args: Sequence[str], credentials: AwsCredentials) -> Any:
        self.calls.append(list(args))
        queue = self._responses.get(command_key(args))
        if not queue:
            return Ok(CommandOutput(stdout="", stderr=""))
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [command_key(c) for c in self.calls]

    def calls_for(self, *command: str) -> list[list[str]]:
        return [c for c in self.calls if command_key(c) == tuple(command)]


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def temp_xdg_dirs(monkeypatch: pytest.MonkeyPatch):
    """Create temporary XDG directories for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        data_dir = base / "data"
        data_dir.mkdir()

        monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))

        yield {
            "data": data_dir,
            "base": base,
        }


@pytest.fixture
def credentials() -> AwsCredentials:
    """Static key credentials."""
    return AwsCredentials(region="us-east-1", access_key_id="testing", secret_access_key="testing")


@pytest.fixture
def rosa() -> FakeRosa:
    return FakeRosa()


@pytest.fixture
def ctx(credentials: AwsCredentials, rosa: FakeRosa, tmp_path: Path) -> RosaContext:
    """RosaContext with a scripted rosa CLI and a mocked OCM client."""
    context = RosaContext(
        credentials=credentials,
        ocm_token="offline-token",
        work_dir=tmp_path / "work",
    )
    context.rosa = rosa
    context.ocm = MagicMock(spec=OcmClient)
    return context


@pytest.fixture
def role_listing():
    """Build `rosa list account-roles -o json` entries for a prefix/version."""

    def build(prefix: str, version: str, role_types: Sequence[str] = tuple(ROLE_SUFFIXES)):
        return [
            {
                "RoleName": f"{prefix}-HCP-ROSA-{ROLE_SUFFIXES[t]}-Role",
                "RoleType": t,
                "Version": version,
                "RoleARN": f"arn:aws:iam::{ACCOUNT_ID}:role/{prefix}-HCP-ROSA-{ROLE_SUFFIXES[t]}-Role",
            }
            for t in role_types
        ]

    return build
