"""
Mirror Client — Interface for the secondary, version-checked copy.

Every failure surfaces as a MirrorError subclass, including responses
that arrive but cannot be parsed. The coordinator relies on that to keep
mirror problems from failing a request after the store write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .settings import MirrorCredentials


@dataclass(frozen=True)
class MirrorFile:
    """Current content of a mirrored file and its version token."""

    path: str
    content: str
    sha: str


class MirrorClient(ABC):
    """Base class for mirror backends."""

    @abstractmethod
    def read_current(
        self,
        credentials: MirrorCredentials,
        path: str,
        branch: Optional[str] = None,
    ) -> MirrorFile:
        """Fetch a file and its version token. MirrorNotFound if absent."""
        pass

    @abstractmethod
    def write_if_match(
        self,
        credentials: MirrorCredentials,
        path: str,
        content: str,
        expected_sha: Optional[str],
        message: str,
        branch: Optional[str] = None,
    ) -> str:
        """Replace the file if its token still matches; return the commit id."""
        pass
