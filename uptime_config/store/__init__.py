"""
Authoritative store backends for the configuration record.
"""

from .base import ConfigStore
from .cloudflare_kv import CloudflareKVStore
from .file_store import FileConfigStore

__all__ = ["ConfigStore", "CloudflareKVStore", "FileConfigStore"]
