"""
GitHub Contents — Read and conditionally overwrite a repository file.

Uses the GitHub REST contents API. The blob sha returned by a read is the
version token; passing it back on write makes GitHub reject the update if
the file changed in between (409), which gives compare-and-swap semantics.

## Status mapping

    404              → MirrorNotFound
    401, 403         → MirrorAuthError
    409, 422 (sha)   → MirrorConflict
    anything else    → MirrorUnavailable
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import (
    MirrorAuthError,
    MirrorConflict,
    MirrorError,
    MirrorNotFound,
    MirrorUnavailable,
)
from .base import MirrorClient, MirrorFile
from .settings import MirrorCredentials

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"

def _get_headers(token: str) -> Dict[str, str]:
    """Get GitHub API headers."""
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "User-Agent": "uptime-config/1.0",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def _json_body(resp: httpx.Response, where: str) -> Any:
    """Decode a success response; anything unparseable is MirrorUnavailable."""
    try:
        return resp.json()
    except ValueError as e:
        raise MirrorUnavailable(
            f"Unreadable GitHub response for {where}",
            f"HTTP {resp.status_code}: {resp.text[:200]}",
        ) from e


def _error_message(resp: httpx.Response) -> str:
    try:
        message = resp.json().get("message")
    except ValueError:
        message = None
    return f"HTTP {resp.status_code}: {message or resp.text[:200]}"


class GitHubContentsClient(MirrorClient):
    """Thin client over GET/PUT /repos/{owner}/{repo}/contents/{path}."""

    def __init__(
        self,
        api_base: str = GITHUB_API_BASE,
        timeout: float = 15,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _url(self, credentials: MirrorCredentials, path: str) -> str:
        return f"{self.api_base}/repos/{credentials.repo_slug}/contents/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        credentials: MirrorCredentials,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                return client.request(
                    method,
                    self._url(credentials, path),
                    headers=_get_headers(credentials.token),
                    **kwargs,
                )
        except httpx.TimeoutException as e:
            raise MirrorUnavailable(
                "GitHub request timed out", f"no response after {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise MirrorUnavailable("GitHub request failed", str(e)) from e

    def _raise_for_status(self, resp: httpx.Response, credentials: MirrorCredentials, path: str) -> None:
        where = f"{credentials.repo_slug}/{path}"
        status = resp.status_code
        if status < 400:
            return
        error: MirrorError
        if status == 404:
            error = MirrorNotFound(f"{where} not found", _error_message(resp))
        elif status in (401, 403):
            error = MirrorAuthError(f"GitHub rejected credentials for {credentials.repo_slug}", _error_message(resp))
        elif status == 409 or (status == 422 and "sha" in resp.text):
            error = MirrorConflict(f"{where} changed since it was read", _error_message(resp))
        else:
            error = MirrorUnavailable(f"GitHub error for {where}", _error_message(resp))
        raise error

    def read_current(
        self,
        credentials: MirrorCredentials,
        path: str,
        branch: Optional[str] = None,
    ) -> MirrorFile:
        """
        Fetch a file and its blob sha.

        Raises:
            MirrorNotFound, MirrorAuthError, MirrorUnavailable (also for
            a success response that cannot be parsed)
        """
        params = {"ref": branch} if branch else None
        resp = self._request("GET", credentials, path, params=params)
        self._raise_for_status(resp, credentials, path)

        where = f"{credentials.repo_slug}/{path}"
        data = _json_body(resp, where)
        if not isinstance(data, dict) or data.get("type") != "file":
            # A directory listing comes back as a JSON array
            raise MirrorUnavailable(f"{where} is not a file")

        sha = data.get("sha")
        if not isinstance(sha, str) or not sha:
            raise MirrorUnavailable(f"GitHub returned no sha for {where}")

        raw = data.get("content") or ""
        try:
            # Only the sha drives the write; content is informational
            content = base64.b64decode(raw).decode("utf-8", errors="replace")
        except (TypeError, ValueError) as e:
            raise MirrorUnavailable(f"Undecodable content for {where}", str(e)) from e

        logger.debug(f"[mirror-github] Read {where} (sha {sha[:8]})")
        return MirrorFile(path=path, content=content, sha=sha)

    def write_if_match(
        self,
        credentials: MirrorCredentials,
        path: str,
        content: str,
        expected_sha: Optional[str],
        message: str,
        branch: Optional[str] = None,
    ) -> str:
        """
        Replace a file only if its sha still equals expected_sha.

        expected_sha=None creates the file; GitHub refuses if it already
        exists.

        Returns:
            The sha of the new commit

        Raises:
            MirrorConflict, MirrorAuthError, MirrorUnavailable
        """
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if expected_sha:
            body["sha"] = expected_sha
        if branch:
            body["branch"] = branch

        resp = self._request("PUT", credentials, path, json=body)
        self._raise_for_status(resp, credentials, path)

        data = _json_body(resp, f"{credentials.repo_slug}/{path}")
        commit = data.get("commit") if isinstance(data, dict) else None
        commit_sha = commit.get("sha") if isinstance(commit, dict) else None
        if not isinstance(commit_sha, str) or not commit_sha:
            # The PUT succeeded; only the commit metadata is missing
            commit_sha = "unknown"
        logger.info(
            f"[mirror-github] {path} committed to {credentials.repo_slug} "
            f"(commit: {commit_sha[:8]})",
            extra={"repo": credentials.repo_slug},
        )
        return commit_sha
