"""
Cloudflare KV Store — Workers KV backend for the configuration record.

The monitoring worker reads its configuration from the same KV namespace,
so this is the production backend.

## Configuration

- CF_ACCOUNT_ID: Cloudflare account id
- CF_KV_NAMESPACE_ID: KV namespace id (the worker's state namespace)
- CF_API_TOKEN: API token with Workers KV Storage:Edit
- CONFIG_KEY: Record key (default: config)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from ..errors import StoreUnavailable
from .base import ConfigStore

logger = logging.getLogger(__name__)

CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4"

# Cloudflare API error code for an absent KV key. An unknown namespace or
# account also answers 404, but with a different code.
KV_KEY_NOT_FOUND = 10009


def _is_missing_key(resp: httpx.Response) -> bool:
    try:
        errors = resp.json().get("errors") or []
    except (ValueError, AttributeError):
        return False
    return any(
        isinstance(err, dict)
        and (err.get("code") == KV_KEY_NOT_FOUND or "key not found" in str(err.get("message", "")))
        for err in errors
    )


class CloudflareKVStore(ConfigStore):
    """Reads and writes one key in a Workers KV namespace."""

    def __init__(
        self,
        account_id: str,
        namespace_id: str,
        api_token: str,
        key: str = "config",
        timeout: float = 15,
        api_base: str = CLOUDFLARE_API_BASE,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.account_id = account_id
        self.namespace_id = namespace_id
        self.api_token = api_token
        self.key = key
        self.timeout = timeout
        self.api_base = api_base.rstrip("/")
        self.transport = transport

    @property
    def name(self) -> str:
        return "cloudflare_kv"

    @property
    def value_url(self) -> str:
        return (
            f"{self.api_base}/accounts/{self.account_id}"
            f"/storage/kv/namespaces/{self.namespace_id}/values/{self.key}"
        )

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "User-Agent": "uptime-config/1.0",
        }

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def get(self) -> Optional[str]:
        try:
            with self._client() as client:
                resp = client.get(self.value_url, headers=self._get_headers())
        except httpx.TimeoutException as e:
            raise StoreUnavailable(
                "KV read timed out", f"no response after {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise StoreUnavailable("KV read failed", str(e)) from e

        if resp.status_code == 404 and _is_missing_key(resp):
            logger.debug(f"KV key {self.key!r} not set")
            return None
        if resp.status_code != 200:
            logger.error(f"KV read error: {resp.status_code}")
            raise StoreUnavailable(
                "KV read failed", f"HTTP {resp.status_code}: {resp.text[:200]}"
            )
        return resp.content.decode("utf-8")

    def put(self, blob: str) -> None:
        headers = self._get_headers()
        headers["Content-Type"] = "text/plain; charset=utf-8"
        try:
            with self._client() as client:
                resp = client.put(
                    self.value_url,
                    headers=headers,
                    content=blob.encode("utf-8"),
                )
        except httpx.TimeoutException as e:
            raise StoreUnavailable(
                "KV write timed out", f"no response after {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise StoreUnavailable("KV write failed", str(e)) from e

        if resp.status_code >= 400:
            logger.error(f"KV write error: {resp.status_code}")
            raise StoreUnavailable(
                "KV write failed", f"HTTP {resp.status_code}: {resp.text[:200]}"
            )
        logger.info(f"Config written to KV key {self.key!r} ({len(blob)} bytes)")
