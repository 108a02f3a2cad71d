"""
Settings — Process-wide configuration from environment variables.

The store binding is ambient (fixed per deployment) and is resolved once
here, then injected into the SyncCoordinator. Mirror credentials are never
part of these settings.

## Environment Variables

- STORE_BACKEND: file, cloudflare (default: file)
- STORE_PATH: JSON file for the file backend (default: state/config.json)
- CF_ACCOUNT_ID, CF_KV_NAMESPACE_ID, CF_API_TOKEN: cloudflare backend
- CONFIG_KEY: KV record key (default: config)
- STORE_TIMEOUT: seconds (default: 15)
- GITHUB_API_URL: mirror API base (default: https://api.github.com)
- MIRROR_TIMEOUT: seconds (default: 15)
- MIRROR_PATH, MIRROR_BRANCH, MIRROR_COMMIT_MESSAGE,
  MIRROR_CREATE_IF_MISSING: see mirror.settings
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .mirror.github_contents import GITHUB_API_BASE, GitHubContentsClient
from .mirror.settings import MirrorSettings
from .store.base import ConfigStore
from .store.cloudflare_kv import CloudflareKVStore
from .store.file_store import FileConfigStore
from .sync.coordinator import SyncCoordinator

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("file", "cloudflare")


@dataclass
class Settings:
    """Everything needed to build a SyncCoordinator."""

    store_backend: str = "file"
    store_path: Path = Path("state") / "config.json"
    config_key: str = "config"
    store_timeout: float = 15

    cf_account_id: Optional[str] = None
    cf_namespace_id: Optional[str] = None
    cf_api_token: Optional[str] = None

    github_api_url: str = GITHUB_API_BASE
    mirror_timeout: float = 15
    mirror: MirrorSettings = field(default_factory=MirrorSettings)

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "Settings":
        """
        Read settings from the environment.

        Args:
            root: Base directory for relative STORE_PATH values
        """
        store_path = Path(os.environ.get("STORE_PATH", "state/config.json"))
        if root is not None and not store_path.is_absolute():
            store_path = root / store_path

        settings = cls(
            store_backend=os.environ.get("STORE_BACKEND", "file").lower(),
            store_path=store_path,
            config_key=os.environ.get("CONFIG_KEY", "config"),
            store_timeout=float(os.environ.get("STORE_TIMEOUT", 15)),
            cf_account_id=os.environ.get("CF_ACCOUNT_ID"),
            cf_namespace_id=os.environ.get("CF_KV_NAMESPACE_ID"),
            cf_api_token=os.environ.get("CF_API_TOKEN"),
            github_api_url=os.environ.get("GITHUB_API_URL", GITHUB_API_BASE),
            mirror_timeout=float(os.environ.get("MIRROR_TIMEOUT", 15)),
            mirror=MirrorSettings.from_env(),
        )
        settings.validate()
        return settings

    def missing_cloudflare_vars(self) -> List[str]:
        required = {
            "CF_ACCOUNT_ID": self.cf_account_id,
            "CF_KV_NAMESPACE_ID": self.cf_namespace_id,
            "CF_API_TOKEN": self.cf_api_token,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> None:
        """
        Raises:
            ValueError: If the store backend is unknown or incomplete
        """
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown STORE_BACKEND {self.store_backend!r} "
                f"(expected one of: {', '.join(STORE_BACKENDS)})"
            )
        if self.store_backend == "cloudflare":
            missing = self.missing_cloudflare_vars()
            if missing:
                raise ValueError(
                    f"STORE_BACKEND=cloudflare requires: {', '.join(missing)}"
                )

    def build_store(self) -> ConfigStore:
        self.validate()
        if self.store_backend == "cloudflare":
            logger.info(f"Using Cloudflare KV store (key={self.config_key})")
            return CloudflareKVStore(
                account_id=self.cf_account_id,
                namespace_id=self.cf_namespace_id,
                api_token=self.cf_api_token,
                key=self.config_key,
                timeout=self.store_timeout,
            )
        logger.info(f"Using file store ({self.store_path})")
        return FileConfigStore(self.store_path)

    def build_coordinator(self) -> SyncCoordinator:
        return SyncCoordinator(
            store=self.build_store(),
            mirror_client=GitHubContentsClient(
                api_base=self.github_api_url,
                timeout=self.mirror_timeout,
            ),
            mirror_settings=self.mirror,
        )
