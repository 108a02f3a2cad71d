"""
Config Store — Interface for the authoritative configuration record.

A store holds exactly one record: the JSON blob produced by the codec.
There is no compare-and-swap; the last writer wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class ConfigStore(ABC):
    """
    Base class for authoritative store backends.

    Implementations must raise StoreUnavailable for any transport or
    backend failure, and return None from get() when no record exists.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name used in logs."""
        pass

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored blob, or None if nothing has been written yet."""
        pass

    @abstractmethod
    def put(self, blob: str) -> None:
        """Unconditionally replace the stored blob."""
        pass
