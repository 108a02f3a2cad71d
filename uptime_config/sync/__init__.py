"""
Configuration sync — store first, mirror second.
"""

from .coordinator import MirrorOutcome, SyncCoordinator, SyncResult, SyncState

__all__ = ["MirrorOutcome", "SyncCoordinator", "SyncResult", "SyncState"]
