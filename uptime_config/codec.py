"""
Config Codec — Serialize configuration documents for both storage targets.

Two independent serializers share the validated ConfigurationDocument:

- Store blob: compact JSON, lossless round trip
- Mirror source: the uptime.config.ts module the worker imports at build time

## Mirror source shape

    const pageConfig = { ...pageSettings, 2-space indent... }

    const workerConfig = { ...monitorSettings, 2-space indent... }

    export { pageConfig, workerConfig }

Output is deterministic: the same document always renders to the same
bytes, so mirror commits only show real changes.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from .errors import MalformedDocument
from .models.config import ConfigurationDocument

logger = logging.getLogger(__name__)

PAGE_DECLARATION = "pageConfig"
WORKER_DECLARATION = "workerConfig"
EXPORT_TRAILER = f"export {{ {PAGE_DECLARATION}, {WORKER_DECLARATION} }}"

_DECLARATION_RE = r"(?:const|let|var)\s+{name}\s*(?::[^=]+)?=\s*"


def _summarize(exc: ValidationError) -> str:
    """Flatten pydantic errors to 'loc: msg; loc: msg'."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "document"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_document(payload: Any) -> ConfigurationDocument:
    """
    Validate a decoded payload into a ConfigurationDocument.

    Raises:
        MalformedDocument: If required fields are missing, mistyped, or
            monitor ids are not unique
    """
    if isinstance(payload, ConfigurationDocument):
        return payload
    if not isinstance(payload, Mapping):
        raise MalformedDocument(
            "Invalid config document",
            f"expected a JSON object, got {type(payload).__name__}",
        )
    try:
        return ConfigurationDocument.model_validate(dict(payload))
    except ValidationError as e:
        raise MalformedDocument(
            "Invalid config document",
            _summarize(e),
            errors=e.errors(include_url=False, include_context=False),
        ) from e


def to_api_dict(doc: ConfigurationDocument) -> Dict[str, Any]:
    """Document as the operator submitted it, camelCase keys."""
    return doc.model_dump(mode="json", by_alias=True, exclude_unset=True)


def to_store_blob(doc: ConfigurationDocument) -> str:
    """Serialize a document for the KV store."""
    return json.dumps(to_api_dict(doc), ensure_ascii=False, separators=(",", ":"))


def from_store_blob(blob: str | bytes) -> ConfigurationDocument:
    """
    Deserialize a KV store record.

    Raises:
        MalformedDocument: If the blob is not JSON or not a valid document
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise MalformedDocument("Stored config is not valid JSON", str(e)) from e
    return parse_document(data)


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def to_mirror_source(doc: ConfigurationDocument) -> str:
    """Render the uptime.config.ts module for the mirror repository."""
    data = to_api_dict(doc)
    return (
        f"const {PAGE_DECLARATION} = {_pretty(data['pageSettings'])}\n\n"
        f"const {WORKER_DECLARATION} = {_pretty(data['monitorSettings'])}\n\n"
        f"{EXPORT_TRAILER}"
    )


def _read_declaration(source: str, name: str) -> Any:
    match = re.search(_DECLARATION_RE.format(name=name), source)
    if not match:
        raise MalformedDocument(
            "Invalid config module", f"missing declaration: {name}"
        )
    try:
        value, _ = json.JSONDecoder().raw_decode(source, match.end())
    except ValueError as e:
        raise MalformedDocument(
            "Invalid config module", f"{name} is not a JSON literal ({e})"
        ) from e
    return value


def from_mirror_source(source: str) -> ConfigurationDocument:
    """
    Parse an uptime.config.ts module back into a document.

    Only modules whose declarations are JSON literals are supported,
    which covers everything to_mirror_source produces.
    """
    page = _read_declaration(source, PAGE_DECLARATION)
    worker = _read_declaration(source, WORKER_DECLARATION)
    logger.debug("Parsed config module (%d chars)", len(source))
    return parse_document({"pageSettings": page, "monitorSettings": worker})
