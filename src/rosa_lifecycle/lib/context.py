"""Per-invocation context passed to every operation.

RosaContext is created at CLI entry (one per create/delete invocation).
Clients are lazily initialized on first access via cached_property, and all
of them share the context's cancel event.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from rosa_lifecycle.lib import paths
from rosa_lifecycle.lib.aws import AwsCredentials
from rosa_lifecycle.lib.ocm import PRODUCTION, OcmClient
from rosa_lifecycle.lib.rosa import RosaCli
from rosa_lifecycle.lib.terraform import Terraform


@dataclass
class RosaContext:
    """Credentials, endpoints and clients for one lifecycle invocation.

    Example:
        with RosaContext(credentials=creds, ocm_token=token) as ctx:
            ctx.rosa.run(["whoami"], ctx.credentials)
            ctx.ocm.list_clusters("name = 'c1'")
            ctx.cancel.set()  # aborts the running command or poll
    """

    credentials: AwsCredentials
    ocm_token: str
    ocm_url: str = PRODUCTION
    rosa_binary: str = "rosa"
    terraform_binary: str = "terraform"
    work_dir: Path | None = None
    cancel: threading.Event = field(default_factory=threading.Event)

    @property
    def region(self) -> str:
        return self.credentials.region

    @cached_property
    def rosa(self) -> RosaCli:
        """rosa CLI wrapper."""
        return RosaCli(binary=self.rosa_binary, cancel=self.cancel)

    @cached_property
    def ocm(self) -> OcmClient:
        """OCM API client."""
        return OcmClient(token=self.ocm_token, url=self.ocm_url, cancel=self.cancel)

    def terraform(self, working_dir: Path) -> Terraform:
        """Terraform runner for a working directory."""
        return Terraform(working_dir, binary=self.terraform_binary, cancel=self.cancel)

    def network_dir(self, cluster_name: str) -> Path:
        """Terraform working directory for a cluster's VPC."""
        if self.work_dir is not None:
            return self.work_dir / cluster_name
        return paths.network_dir(cluster_name)

    def close(self) -> None:
        """Close the OCM client if one was created."""
        if "ocm" in self.__dict__:
            self.ocm.close()

    def __enter__(self) -> RosaContext:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
