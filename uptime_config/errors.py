"""
Errors — Exception taxonomy for configuration sync.

Authoritative-path errors (MalformedDocument, NotConfigured,
StoreUnavailable) abort the request and map to an HTTP status.
Mirror-path errors (MirrorError subclasses) are absorbed by the
coordinator once the store write has committed.

## Status mapping

    MalformedDocument            → 400
    IncompleteMirrorCredentials  → 400
    NotConfigured                → 404
    StoreUnavailable             → 500
    MirrorError                  → never surfaced
"""

from __future__ import annotations

from typing import Dict, List, Optional


class ConfigSyncError(Exception):
    """Base class for all configuration sync errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class MalformedDocument(ConfigSyncError):
    """The submitted or stored document failed validation."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        errors: Optional[List[Dict]] = None,
    ):
        self.errors = errors or []
        super().__init__(message, details)


class IncompleteMirrorCredentials(MalformedDocument):
    """Some, but not all, mirror credential fields were supplied."""


class NotConfigured(ConfigSyncError):
    """No configuration record exists yet."""


class StoreUnavailable(ConfigSyncError):
    """The authoritative store could not be read or written."""


class MirrorError(ConfigSyncError):
    """Base class for remote mirror failures."""


class MirrorNotFound(MirrorError):
    """The mirror file does not exist in the repository."""


class MirrorConflict(MirrorError):
    """The mirror file changed since its version token was read."""


class MirrorAuthError(MirrorError):
    """The mirror credentials were rejected."""


class MirrorUnavailable(MirrorError):
    """The mirror host could not be reached or returned an error."""
