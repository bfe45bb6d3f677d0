"""Terraform runner bound to one working directory.

Each subcommand runs with the caller's AWS credentials as its process
environment. `uninstall()` removes Terraform's local working data (plugins,
module cache, lock file, saved plan) but keeps the state file, so a later
destroy in the same directory still knows what to tear down.
"""

from __future__ import annotations

import json
import shutil
import threading
from collections.abc import Mapping
from pathlib import Path

from rosa_lifecycle.lib import command
from rosa_lifecycle.lib.aws import AwsCredentials
from rosa_lifecycle.lib.command import CommandOutput
from rosa_lifecycle.lib.errors import CommandError, DecodeError, OutputError
from rosa_lifecycle.lib.result import Err, Ok, Result

PLAN_FILE = "rosa-lifecycle.tfplan"


class Terraform:
    """
    Run terraform init/plan/apply/output/destroy in a working directory.

    Uses -input=false and -no-color everywhere; nothing is ever prompted.
    """

    def __init__(
        self,
        working_dir: Path,
        binary: str = "terraform",
        cancel: threading.Event | None = None,
    ):
        """
        Initialize runner.

        Args:
            working_dir: Directory holding the .tf files and state
            binary: terraform executable
            cancel: Event that aborts a running subcommand when set
        """
        self.working_dir = working_dir
        self.binary = binary
        self.cancel = cancel

    def _run(
        self, args: list[str], credentials: AwsCredentials
    ) -> Result[CommandOutput, CommandError]:
        env = credentials.subprocess_env()
        env["TF_IN_AUTOMATION"] = "1"
        return command.run(
            [self.binary, *args],
            env=env,
            cwd=self.working_dir,
            cancel=self.cancel,
        )

    @staticmethod
    def _var_args(variables: Mapping[str, str]) -> list[str]:
        return [f"-var={name}={value}" for name, value in variables.items()]

    def init(self, credentials: AwsCredentials) -> Result[None, CommandError]:
        match self._run(["init", "-input=false", "-no-color"], credentials):
            case Err() as e:
                return e
            case Ok(_):
                return Ok(None)

    def plan(
        self, credentials: AwsCredentials, variables: Mapping[str, str]
    ) -> Result[None, CommandError]:
        """Plan into a saved plan file consumed by apply()."""
        args = ["plan", "-input=false", "-no-color", f"-out={PLAN_FILE}", *self._var_args(variables)]
        match self._run(args, credentials):
            case Err() as e:
                return e
            case Ok(_):
                return Ok(None)

    def apply(self, credentials: AwsCredentials) -> Result[None, CommandError]:
        args = ["apply", "-input=false", "-no-color", "-auto-approve", PLAN_FILE]
        match self._run(args, credentials):
            case Err() as e:
                return e
            case Ok(_):
                return Ok(None)

    def output(self, credentials: AwsCredentials) -> Result[dict[str, str], OutputError]:
        """Root module outputs as raw JSON text (strings keep their quotes)."""
        match self._run(["output", "-json", "-no-color"], credentials):
            case Err() as e:
                return e
            case Ok(output):
                pass

        try:
            raw = json.loads(output.stdout or "{}")
        except json.JSONDecodeError as e:
            return Err(DecodeError("terraform output", f"failed to convert output to JSON: {e}"))
        if not isinstance(raw, dict):
            return Err(DecodeError("terraform output", "expected a JSON object of outputs"))

        outputs: dict[str, str] = {}
        for name, meta in raw.items():
            if not isinstance(meta, dict) or "value" not in meta:
                return Err(DecodeError("terraform output", f"output {name!r} has no value"))
            outputs[name] = json.dumps(meta["value"])
        return Ok(outputs)

    def destroy(
        self, credentials: AwsCredentials, variables: Mapping[str, str]
    ) -> Result[None, CommandError]:
        args = ["destroy", "-input=false", "-no-color", "-auto-approve", *self._var_args(variables)]
        match self._run(args, credentials):
            case Err() as e:
                return e
            case Ok(_):
                return Ok(None)

    def uninstall(self) -> None:
        """Remove local working data. Never fails; missing paths are ignored."""
        shutil.rmtree(self.working_dir / ".terraform", ignore_errors=True)
        for name in (".terraform.lock.hcl", PLAN_FILE):
            (self.working_dir / name).unlink(missing_ok=True)
