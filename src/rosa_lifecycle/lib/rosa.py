"""Thin wrapper around the `rosa` CLI binary.

Every call takes the AWS credentials explicitly; they become the child
process environment for that call only.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from rosa_lifecycle.lib import command
from rosa_lifecycle.lib.aws import AwsCredentials
from rosa_lifecycle.lib.command import CommandOutput
from rosa_lifecycle.lib.errors import CommandError, OutputError
from rosa_lifecycle.lib.result import Err, Ok, Result

MINIMUM_VERSION = "1.2.22"


@dataclass
class RosaCli:
    """The rosa binary plus the invocation's cancel event."""

    binary: str = "rosa"
    cancel: threading.Event | None = None

    def run(
        self, args: Sequence[str], credentials: AwsCredentials
    ) -> Result[CommandOutput, CommandError]:
        return command.run(
            [self.binary, *args],
            env=credentials.subprocess_env(),
            cancel=self.cancel,
        )

    def run_json_object(
        self, args: Sequence[str], credentials: AwsCredentials
    ) -> Result[dict[str, Any], OutputError]:
        """Run a subcommand that prints one JSON object (`--output json`)."""
        match self.run(args, credentials):
            case Err() as e:
                return e
            case Ok(output):
                return command.decode_object(output, command.describe([self.binary, *args]))

    def run_json_list(
        self, args: Sequence[str], credentials: AwsCredentials
    ) -> Result[list[dict[str, Any]], OutputError]:
        """Run a subcommand that prints a JSON array of objects."""
        match self.run(args, credentials):
            case Err() as e:
                return e
            case Ok(output):
                return command.decode_list(output, command.describe([self.binary, *args]))
