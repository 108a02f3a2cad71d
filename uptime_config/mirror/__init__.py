"""
Mirror Integration — Keep a reviewable copy of the config in a Git repo.

The mirror is best-effort: the authoritative store is written first and
mirror failures never undo it.
"""

from .base import MirrorClient, MirrorFile
from .github_contents import GitHubContentsClient
from .settings import MirrorCredentials, MirrorSettings

__all__ = [
    "GitHubContentsClient",
    "MirrorClient",
    "MirrorCredentials",
    "MirrorFile",
    "MirrorSettings",
]
