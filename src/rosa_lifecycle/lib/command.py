"""Subprocess execution with cancellation and JSON output decoding."""

from __future__ import annotations

import json
import logging
import subprocess
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rosa_lifecycle.lib.errors import (
    CommandError,
    DecodeError,
    ExternalCallFailedError,
    OperationCancelledError,
)
from rosa_lifecycle.lib.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# How often a running command checks the cancel event
CANCEL_CHECK_INTERVAL = 0.5


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str


def describe(args: Sequence[str], words: int = 3) -> str:
    """Short operation label for errors and logs, e.g. 'rosa create cluster'."""
    name = Path(args[0]).name if args else "<empty>"
    return " ".join([name, *[a for a in args[1:words] if not a.startswith("-")]])


def run(
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    cancel: threading.Event | None = None,
) -> Result[CommandOutput, CommandError]:
    """Run a command to completion, capturing stdout and stderr.

    A non-zero exit is an ExternalCallFailedError carrying stderr. If
    `cancel` is set while the command runs, the child is killed and
    OperationCancelledError is returned.
    """
    operation = describe(args)
    if cancel is not None and cancel.is_set():
        return Err(OperationCancelledError(operation))

    logger.debug("Running %s", " ".join(args))
    try:
        process = subprocess.Popen(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            env=dict(env) if env is not None else None,
            cwd=cwd,
        )
    except OSError as e:
        return Err(ExternalCallFailedError(operation, f"failed to start command: {e}"))

    while True:
        try:
            stdout, stderr = process.communicate(timeout=CANCEL_CHECK_INTERVAL)
            break
        except subprocess.TimeoutExpired:
            if cancel is not None and cancel.is_set():
                process.kill()
                process.communicate()
                logger.warning("Cancelled %s", operation)
                return Err(OperationCancelledError(operation))

    if process.returncode != 0:
        reason = stderr.strip() or stdout.strip() or f"exit status {process.returncode}"
        return Err(ExternalCallFailedError(operation, reason))

    return Ok(CommandOutput(stdout=stdout, stderr=stderr))


def decode_object(output: CommandOutput, operation: str) -> Result[dict[str, Any], DecodeError]:
    """Decode stdout as a single JSON object."""
    match _decode(output, operation):
        case Ok(dict() as value):
            return Ok(value)
        case Ok(value):
            return Err(DecodeError(operation, f"expected a JSON object, got {type(value).__name__}"))
        case Err() as e:
            return e


def decode_list(output: CommandOutput, operation: str) -> Result[list[dict[str, Any]], DecodeError]:
    """Decode stdout as a JSON array of objects. Empty output is an empty list."""
    if not output.stdout.strip():
        return Ok([])
    match _decode(output, operation):
        case Ok(list() as items) if all(isinstance(i, dict) for i in items):
            return Ok(items)
        case Ok(value):
            return Err(
                DecodeError(operation, f"expected a JSON array of objects, got {type(value).__name__}")
            )
        case Err() as e:
            return e


def _decode(output: CommandOutput, operation: str) -> Result[Any, DecodeError]:
    try:
        return Ok(json.loads(output.stdout))
    except json.JSONDecodeError as e:
        return Err(DecodeError(operation, f"failed to convert output to JSON: {e}"))
