"""Workflows layer - orchestrate operations into user intents."""

from rosa_lifecycle.workflows.cluster import (
    DEFAULT_WAITS,
    WaitProfiles,
    create_cluster,
    delete_cluster,
)

__all__ = [
    "create_cluster",
    "delete_cluster",
    "WaitProfiles",
    "DEFAULT_WAITS",
]
