"""
Mirror Settings — Where and how the config module is committed.

Deployment-level settings (path, branch, commit message, create policy)
come from MIRROR_* environment variables. Credentials do not: they arrive
with each edit request and are never stored server-side.

    MIRROR_PATH=uptime.config.ts
    MIRROR_BRANCH=main
    MIRROR_COMMIT_MESSAGE="Update uptime configuration"
    MIRROR_CREATE_IF_MISSING=false
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..errors import IncompleteMirrorCredentials

logger = logging.getLogger(__name__)

DEFAULT_MIRROR_PATH = "uptime.config.ts"
DEFAULT_COMMIT_MESSAGE = "Update uptime configuration"

# Request body fields carrying per-request credentials
CREDENTIAL_FIELDS = ("mirrorToken", "mirrorOwner", "mirrorRepo")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class MirrorCredentials:
    """Per-request GitHub credentials for one target repository."""

    token: str
    owner: str
    repo: str

    @property
    def repo_slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __repr__(self) -> str:
        # Token stays out of logs and tracebacks
        return f"MirrorCredentials(repo={self.repo_slug!r}, token=***)"

    @classmethod
    def from_request(cls, body: Mapping[str, Any]) -> Optional["MirrorCredentials"]:
        """
        Extract credentials from an edit request body.

        Returns None when no credential field is set (local-only mode).
        Empty strings count as unset.

        Raises:
            IncompleteMirrorCredentials: If only some fields are set
        """
        values = {}
        for name in CREDENTIAL_FIELDS:
            value = body.get(name)
            if value is not None and not isinstance(value, str):
                raise IncompleteMirrorCredentials(
                    "Invalid mirror credentials", f"{name} must be a string"
                )
            values[name] = (value or "").strip()

        present = [name for name, value in values.items() if value]
        if not present:
            return None
        missing = [name for name in CREDENTIAL_FIELDS if name not in present]
        if missing:
            raise IncompleteMirrorCredentials(
                "Incomplete mirror credentials", f"missing: {', '.join(missing)}"
            )
        return cls(
            token=values["mirrorToken"],
            owner=values["mirrorOwner"],
            repo=values["mirrorRepo"],
        )


@dataclass
class MirrorSettings:
    """Deployment-wide mirror settings."""

    path: str = DEFAULT_MIRROR_PATH
    branch: Optional[str] = None  # None = repository default branch
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    # False = update-only: a missing file is skipped, never created
    create_if_missing: bool = False

    @classmethod
    def from_env(cls) -> "MirrorSettings":
        """Parse mirror settings from environment variables."""
        settings = cls(
            path=os.environ.get("MIRROR_PATH", DEFAULT_MIRROR_PATH).lstrip("/"),
            branch=os.environ.get("MIRROR_BRANCH") or None,
            commit_message=os.environ.get(
                "MIRROR_COMMIT_MESSAGE", DEFAULT_COMMIT_MESSAGE
            ),
            create_if_missing=_env_flag("MIRROR_CREATE_IF_MISSING"),
        )
        logger.debug(
            f"Mirror settings: path={settings.path} branch={settings.branch or 'default'} "
            f"create_if_missing={settings.create_if_missing}"
        )
        return settings
