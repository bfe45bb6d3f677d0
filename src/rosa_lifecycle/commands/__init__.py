"""Commands layer - CLI facade over workflows."""

from rosa_lifecycle.commands.cluster import create, delete

__all__ = [
    "create",
    "delete",
]
