"""
Sync Coordinator — Two-phase persistence of the configuration document.

## Write path

    IDLE → STORE_WRITING → STORE_WRITTEN → MIRROR_READING → MIRROR_WRITING → DONE

1. Validate via the codec. MalformedDocument aborts before any I/O.
2. Write the authoritative store. StoreUnavailable aborts; the mirror
   is never attempted.
3. No credentials: DONE(partial), local-only mode.
4. Read the mirror's sha. A missing file is skipped (update-only) or
   created (create-if-missing), per MirrorSettings.
5. Conditional write with that sha. Every mirror error is logged once
   and absorbed: the store write already committed.

## Read path

Reads only the authoritative store, never the mirror.

Nothing is retried and nothing is held between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

from .. import codec
from ..errors import MirrorError, MirrorNotFound, NotConfigured
from ..mirror.base import MirrorClient
from ..mirror.settings import MirrorCredentials, MirrorSettings
from ..models.config import ConfigurationDocument
from ..store.base import ConfigStore

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    STORE_WRITING = "store_writing"
    STORE_WRITTEN = "store_written"
    MIRROR_READING = "mirror_reading"
    MIRROR_WRITING = "mirror_writing"
    DONE = "done"


class MirrorOutcome(str, Enum):
    SKIPPED = "skipped"  # no credentials supplied
    NOT_FOUND = "not_found"  # file absent, update-only mode
    SYNCED = "synced"
    CREATED = "created"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of one write."""

    state: SyncState = SyncState.IDLE
    mirror_outcome: MirrorOutcome = MirrorOutcome.SKIPPED
    warnings: List[str] = field(default_factory=list)
    trail: List[SyncState] = field(default_factory=lambda: [SyncState.IDLE])
    commit_sha: Optional[str] = None

    @property
    def partial(self) -> bool:
        """True when the store was written but the mirror was not."""
        return self.mirror_outcome not in (MirrorOutcome.SYNCED, MirrorOutcome.CREATED)

    def enter(self, state: SyncState) -> None:
        self.state = state
        self.trail.append(state)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "partial": self.partial,
            "mirror": self.mirror_outcome.value,
            "warnings": list(self.warnings),
            "commit_sha": self.commit_sha,
        }


class SyncCoordinator:
    """
    Orchestrates store-then-mirror persistence.

    Both clients are injected so tests can substitute fakes.
    """

    def __init__(
        self,
        store: ConfigStore,
        mirror_client: MirrorClient,
        mirror_settings: Optional[MirrorSettings] = None,
    ):
        self.store = store
        self.mirror_client = mirror_client
        self.mirror_settings = mirror_settings or MirrorSettings()

    # ── Read path ────────────────────────────────────────────────

    def read(self) -> ConfigurationDocument:
        """
        Load the current document from the authoritative store.

        Raises:
            NotConfigured: If no record exists
            StoreUnavailable: On store failure
            MalformedDocument: If the stored record is corrupt
        """
        blob = self.store.get()
        if blob is None:
            raise NotConfigured("Config not found")
        return codec.from_store_blob(blob)

    def render_mirror_source(self) -> str:
        """Render the stored document as the mirror module."""
        return codec.to_mirror_source(self.read())

    # ── Write path ───────────────────────────────────────────────

    def write(
        self,
        document: Union[ConfigurationDocument, Mapping[str, Any]],
        credentials: Optional[MirrorCredentials] = None,
    ) -> SyncResult:
        """
        Persist a new document, then mirror it if credentials are given.

        Raises:
            MalformedDocument: Validation failed; nothing was written
            StoreUnavailable: Store write failed; mirror not attempted
        """
        doc = codec.parse_document(document)
        blob = codec.to_store_blob(doc)

        result = SyncResult()
        result.enter(SyncState.STORE_WRITING)
        self.store.put(blob)
        result.enter(SyncState.STORE_WRITTEN)
        logger.info(
            f"Config stored via {self.store.name} ({len(doc.monitor_ids)} monitors)",
            extra={"store": self.store.name},
        )

        if credentials is None:
            logger.debug("No mirror credentials, local-only write")
            result.enter(SyncState.DONE)
            return result

        self._mirror(doc, credentials, result)
        result.enter(SyncState.DONE)
        return result

    def mirror_current(self, credentials: MirrorCredentials) -> SyncResult:
        """
        Mirror the document already in the store.

        Same absorption policy as write(), starting from STORE_WRITTEN.
        """
        doc = self.read()
        result = SyncResult(state=SyncState.STORE_WRITTEN, trail=[SyncState.STORE_WRITTEN])
        self._mirror(doc, credentials, result)
        result.enter(SyncState.DONE)
        return result

    def _mirror(
        self,
        doc: ConfigurationDocument,
        credentials: MirrorCredentials,
        result: SyncResult,
    ) -> None:
        settings = self.mirror_settings
        source = codec.to_mirror_source(doc)
        target = f"{credentials.repo_slug}/{settings.path}"

        try:
            result.enter(SyncState.MIRROR_READING)
            expected_sha: Optional[str]
            try:
                expected_sha = self.mirror_client.read_current(
                    credentials, settings.path, branch=settings.branch
                ).sha
            except MirrorNotFound:
                if not settings.create_if_missing:
                    self._warn(
                        result,
                        MirrorOutcome.NOT_FOUND,
                        f"Mirror file {target} does not exist, skipped",
                    )
                    return
                expected_sha = None

            result.enter(SyncState.MIRROR_WRITING)
            result.commit_sha = self.mirror_client.write_if_match(
                credentials,
                settings.path,
                source,
                expected_sha,
                settings.commit_message,
                branch=settings.branch,
            )
            result.mirror_outcome = (
                MirrorOutcome.SYNCED if expected_sha else MirrorOutcome.CREATED
            )
        except MirrorError as e:
            self._warn(
                result,
                MirrorOutcome.FAILED,
                f"Mirror sync to {target} failed ({type(e).__name__}): {e}",
            )

    @staticmethod
    def _warn(result: SyncResult, outcome: MirrorOutcome, message: str) -> None:
        logger.warning(f"[mirror] {message}", extra={"mirror_outcome": outcome.value})
        result.mirror_outcome = outcome
        result.warnings.append(message)
