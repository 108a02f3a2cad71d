"""
Shared fixtures for configuration sync tests.

Provides in-memory fakes for the authoritative store and the mirror client,
plus a Flask test app wired to a coordinator built from them.
"""

from __future__ import annotations

from typing import List, Optional

import pytest

from uptime_config.errors import MirrorNotFound, StoreUnavailable
from uptime_config.mirror.base import MirrorClient, MirrorFile
from uptime_config.mirror.settings import MirrorCredentials, MirrorSettings
from uptime_config.store.base import ConfigStore
from uptime_config.sync.coordinator import SyncCoordinator


class FakeStore(ConfigStore):
    """In-memory store that counts calls and can be told to fail."""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob
        self.get_calls = 0
        self.put_calls = 0
        self.fail_get = False
        self.fail_put = False

    @property
    def name(self) -> str:
        return "fake"

    def get(self) -> Optional[str]:
        self.get_calls += 1
        if self.fail_get:
            raise StoreUnavailable("KV read failed", "connection reset")
        return self.blob

    def put(self, blob: str) -> None:
        self.put_calls += 1
        if self.fail_put:
            raise StoreUnavailable("KV write failed", "connection reset")
        self.blob = blob


class FakeMirrorClient(MirrorClient):
    """Records mirror calls; errors are injected per operation."""

    def __init__(self, content: str = "const pageConfig = {}", sha: str = "abc123"):
        self.files = {"uptime.config.ts": MirrorFile("uptime.config.ts", content, sha)}
        self.read_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
        self.reads: List[tuple] = []
        self.writes: List[dict] = []

    @property
    def call_count(self) -> int:
        return len(self.reads) + len(self.writes)

    def read_current(self, credentials, path, branch=None):
        self.reads.append((credentials, path, branch))
        if self.read_error:
            raise self.read_error
        if path not in self.files:
            raise MirrorNotFound(f"{path} not found")
        return self.files[path]

    def write_if_match(self, credentials, path, content, expected_sha, message, branch=None):
        self.writes.append({
            "credentials": credentials,
            "path": path,
            "content": content,
            "expected_sha": expected_sha,
            "message": message,
            "branch": branch,
        })
        if self.write_error:
            raise self.write_error
        self.files[path] = MirrorFile(path, content, "def456")
        return "commit789"


@pytest.fixture
def sample_config():
    """Full configuration document as the editor posts it."""
    return {
        "pageSettings": {
            "title": "Ethan's Status Page",
            "links": [
                {"link": "https://github.com/lyc8503", "label": "GitHub"},
                {"link": "mailto:me@lyc8503.net", "label": "Email Me", "highlight": True},
            ],
            "group": {
                "🌐 Public": ["foo_monitor"],
                "🔐 Private": ["test_tcp_monitor"],
            },
        },
        "monitorSettings": {
            "kvWriteCooldownMinutes": 3,
            "monitors": [
                {
                    "id": "foo_monitor",
                    "name": "My API Monitor",
                    "method": "POST",
                    "target": "https://example.com",
                    "tooltip": "This is a tooltip for this monitor",
                    "statusPageLink": "https://example.com",
                    "hideLatencyChart": False,
                    "expectedCodes": [200],
                    "timeout": 10000,
                    "headers": {"User-Agent": "Uptimeflare"},
                    "body": "Hello, world!",
                    "responseKeyword": "success",
                    "responseForbiddenKeyword": "bad gateway",
                    "checkLocationWorkerRoute": "https://xxx.example.com",
                },
                {
                    "id": "test_tcp_monitor",
                    "name": "Example TCP Monitor",
                    "method": "TCP_PING",
                    "target": "1.2.3.4:22",
                    "timeout": 5000,
                },
            ],
            "notification": {
                "appriseApiServer": "https://apprise.example.com/notify",
                "recipientUrl": "tgram://bottoken/ChatID",
                "timeZone": "Asia/Shanghai",
                "gracePeriod": 5,
            },
            "callbacks": {},
        },
    }


@pytest.fixture
def minimal_config():
    """Smallest valid document."""
    return {
        "pageSettings": {"title": "S"},
        "monitorSettings": {
            "monitors": [{"id": "m1", "method": "HTTP", "target": "https://x"}],
        },
    }


@pytest.fixture
def credentials():
    return MirrorCredentials(token="ghp_test", owner="octo", repo="status")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def mirror_client():
    return FakeMirrorClient()


@pytest.fixture
def mirror_settings():
    return MirrorSettings()


@pytest.fixture
def coordinator(store, mirror_client, mirror_settings):
    return SyncCoordinator(store, mirror_client, mirror_settings)


@pytest.fixture
def app(coordinator):
    """Flask test app wired to the fake coordinator."""
    pytest.importorskip("flask")
    from uptime_config.admin.server import create_app

    app = create_app(coordinator)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
