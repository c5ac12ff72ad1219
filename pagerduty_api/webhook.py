"""Decoding of version 2 webhook payloads."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import IO, Any

from .base import APIObject, _field
from .service import Service

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})\Z"
)


def _parse_time(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp; a missing or null value gives None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"cannot parse {value!r} as an RFC 3339 time")
    match = _RFC3339.match(value)
    if not match:
        raise ValueError(f"cannot parse {value!r} as an RFC 3339 time")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    if zone.upper() == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = zone[1:].split(":")
        tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tz
    )


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _dicts(value: Any) -> list[dict[str, Any]]:
    return [dict(item) for item in value or []]


@dataclass
class IncidentDetails(APIObject):
    """The incident behind the action that caused a webhook message.

    Pending actions, assignments, acknowledgements, priority, alert counts
    and alerts are kept as the API's JSON objects. Each alert carries only
    its alert key.
    """

    incident_number: int = 0
    title: str = ""
    created_at: datetime | None = None
    status: str = ""
    incident_key: str | None = None
    pending_actions: list[dict[str, Any]] = field(default_factory=list)
    service: Service = field(default_factory=Service)
    assignments: list[dict[str, Any]] = field(default_factory=list)
    acknowledgements: list[dict[str, Any]] = field(default_factory=list)
    last_status_change_at: datetime | None = None
    last_status_change_by: APIObject = field(default_factory=APIObject)
    first_trigger_log_entry: APIObject = field(default_factory=APIObject)
    escalation_policy: APIObject = field(default_factory=APIObject)
    teams: list[APIObject] = field(default_factory=list)
    priority: dict[str, Any] = field(default_factory=dict)
    urgency: str = ""
    resolve_reason: str | None = None
    alert_counts: dict[str, Any] = field(default_factory=dict)
    metadata: Any = None
    alerts: list[dict[str, Any]] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> IncidentDetails:
        data = data or {}
        return cls(
            **cls._api_fields(data),
            incident_number=int(_field(data, "incident_number") or 0),
            title=_field(data, "title") or "",
            created_at=_parse_time(_field(data, "created_at")),
            status=_field(data, "status") or "",
            incident_key=_opt_str(_field(data, "incident_key")),
            pending_actions=_dicts(_field(data, "pending_actions")),
            service=Service.from_dict(_field(data, "service")),
            assignments=_dicts(_field(data, "assignments")),
            acknowledgements=_dicts(_field(data, "acknowledgements")),
            last_status_change_at=_parse_time(_field(data, "last_status_change_at")),
            last_status_change_by=APIObject.from_dict(_field(data, "last_status_change_by")),
            first_trigger_log_entry=APIObject.from_dict(_field(data, "first_trigger_log_entry")),
            escalation_policy=APIObject.from_dict(_field(data, "escalation_policy")),
            teams=[APIObject.from_dict(item) for item in _field(data, "teams") or []],
            priority=dict(_field(data, "priority") or {}),
            urgency=_field(data, "urgency") or "",
            resolve_reason=_opt_str(_field(data, "resolve_reason")),
            alert_counts=dict(_field(data, "alert_counts") or {}),
            metadata=_field(data, "metadata"),
            alerts=_dicts(_field(data, "alerts")),
            description=_field(data, "description") or "",
        )


@dataclass
class WebhookPayload:
    """One version 2 webhook message."""

    id: str = ""
    event: str = ""
    created_on: datetime | None = None
    incident: IncidentDetails = field(default_factory=IncidentDetails)
    log_entries: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> WebhookPayload:
        data = data or {}
        return cls(
            id=_field(data, "id") or "",
            event=_field(data, "event") or "",
            created_on=_parse_time(_field(data, "created_on")),
            incident=IncidentDetails.from_dict(_field(data, "incident")),
            log_entries=_dicts(_field(data, "log_entries")),
        )


@dataclass
class WebhookPayloadMessages:
    """The messages of one delivery; several if actions came in quick succession."""

    messages: list[WebhookPayload] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> WebhookPayloadMessages:
        data = data or {}
        return cls(
            messages=[WebhookPayload.from_dict(item) for item in _field(data, "messages") or []]
        )


def decode_webhook(stream: IO[str] | IO[bytes] | str | bytes) -> WebhookPayloadMessages:
    """Decode a webhook delivery from a stream or a string.

    Raises ValueError if the body is not valid JSON or holds a bad timestamp.
    """
    if hasattr(stream, "read"):
        data = json.load(stream)
    else:
        data = json.loads(stream)
    if data is None:
        return WebhookPayloadMessages()
    if not isinstance(data, dict):
        raise ValueError("webhook body is not a JSON object")
    return WebhookPayloadMessages.from_dict(data)