"""
Configuration Models — Pydantic schemas for the status page configuration.

The document has two sections, matching the two declarations the
monitoring worker imports from uptime.config.ts:

- pageSettings: title, navigation links, monitor groups
- monitorSettings: KV write cooldown, monitors, notification, callbacks

Field names are snake_case in Python and camelCase on the wire. Optional
fields have no defaults that would be materialised on dump: documents are
serialized with exclude_unset so the stored copy matches what the operator
submitted.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    model_validator,
)
from pydantic.alias_generators import to_camel


# HTTP verbs plus the generic HTTP check and the raw TCP connect check
MonitorMethod = Literal[
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "HTTP",
    "TCP_PING",
]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
    )


# --- Page settings ---


class Link(_ConfigModel):
    """Navigation link shown in the status page header."""

    link: StrictStr
    label: StrictStr
    highlight: Optional[StrictBool] = None


class PageSettings(_ConfigModel):
    """Status page presentation settings (pageConfig)."""

    title: StrictStr
    links: Optional[List[Link]] = None
    # group name -> monitor ids, in display order
    group: Optional[Dict[str, List[StrictStr]]] = None


# --- Monitor settings ---


class MonitorTarget(_ConfigModel):
    """A single health check definition."""

    id: StrictStr = Field(min_length=1)
    name: Optional[StrictStr] = None
    method: MonitorMethod
    target: StrictStr = Field(min_length=1)
    tooltip: Optional[StrictStr] = None
    status_page_link: Optional[StrictStr] = None
    hide_latency_chart: Optional[StrictBool] = None
    expected_codes: Optional[List[StrictInt]] = None
    timeout: Optional[StrictInt] = Field(default=None, gt=0)
    headers: Optional[Dict[str, StrictStr]] = None
    body: Optional[StrictStr] = None
    response_keyword: Optional[StrictStr] = None
    response_forbidden_keyword: Optional[StrictStr] = None
    check_location_worker_route: Optional[StrictStr] = None

    @property
    def is_tcp(self) -> bool:
        return self.method == "TCP_PING"


class NotificationSettings(_ConfigModel):
    """Apprise notification settings."""

    apprise_api_server: Optional[StrictStr] = None
    recipient_url: Optional[StrictStr] = None
    time_zone: Optional[StrictStr] = None
    grace_period: Optional[StrictInt] = Field(default=None, ge=0)


class MonitorSettings(_ConfigModel):
    """Worker settings (workerConfig)."""

    kv_write_cooldown_minutes: Optional[StrictInt] = Field(default=None, ge=0)
    monitors: List[MonitorTarget]
    notification: Optional[NotificationSettings] = None
    # Opaque to this service; kept so the stored copy stays lossless
    callbacks: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "MonitorSettings":
        seen = set()
        duplicates = []
        for monitor in self.monitors:
            if monitor.id in seen and monitor.id not in duplicates:
                duplicates.append(monitor.id)
            seen.add(monitor.id)
        if duplicates:
            raise ValueError(f"duplicate monitor ids: {', '.join(duplicates)}")
        return self

    def get_monitor(self, monitor_id: str) -> Optional[MonitorTarget]:
        """Get a monitor by id."""
        for monitor in self.monitors:
            if monitor.id == monitor_id:
                return monitor
        return None


class ConfigurationDocument(_ConfigModel):
    """
    Complete status page configuration.

    This is the unit of persistence: replaced wholesale on every write.
    """

    page_settings: PageSettings
    monitor_settings: MonitorSettings

    @property
    def monitor_ids(self) -> List[str]:
        return [m.id for m in self.monitor_settings.monitors]
