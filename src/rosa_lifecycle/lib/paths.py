"""XDG-compliant paths for CLI data."""

import os
from pathlib import Path

APP_NAME = "rosa-lifecycle"


def data_dir() -> Path:
    """~/.local/share/rosa-lifecycle/"""
    base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / APP_NAME


def cluster_dir(cluster_name: str) -> Path:
    """Per-cluster working data."""
    return data_dir() / "clusters" / cluster_name


def network_dir(cluster_name: str) -> Path:
    """Terraform working directory for a cluster's VPC (shared by create and destroy)."""
    return cluster_dir(cluster_name) / "network"


def bin_dir() -> Path:
    """Downloaded tool binaries (the rosa CLI when it is not on PATH)."""
    return data_dir() / "bin"
