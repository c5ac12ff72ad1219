"""Service integrations and their e-mail filter settings."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from .base import APIObject, ClientBase, _field, _MISSING


def _json_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    return "object"


def _decode_mode(value: Any, by_name: Mapping[str, Any]):
    if value is None:
        raise ValueError("value cannot be null")
    if not isinstance(value, str):
        raise ValueError(f"cannot unmarshal {_json_kind(value)} into a string")
    try:
        return by_name[value]
    except KeyError:
        raise ValueError(f"unknown value {json.dumps(value)}") from None


class IntegrationEmailFilterMode(IntEnum):
    """How the e-mail filter rules of a generic e-mail integration are combined."""

    INVALID = 0
    ALL = 1
    OR = 2
    AND = 3

    def __str__(self) -> str:
        return _FILTER_MODE_NAMES.get(self, "invalid")

    def to_json(self) -> str:
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: str) -> IntegrationEmailFilterMode:
        return cls._from_value(json.loads(text))

    @classmethod
    def _from_value(cls, value: Any) -> IntegrationEmailFilterMode:
        return _decode_mode(value, {name: mode for mode, name in _FILTER_MODE_NAMES.items()})


_FILTER_MODE_NAMES = {
    IntegrationEmailFilterMode.ALL: "all-email",
    IntegrationEmailFilterMode.OR: "or-rules-email",
    IntegrationEmailFilterMode.AND: "and-rules-email",
}


class IntegrationEmailFilterRuleMode(IntEnum):
    """How one part of an inbound e-mail is matched by a filter rule."""

    INVALID = 0
    ALWAYS = 1
    MATCH = 2
    NO_MATCH = 3

    def __str__(self) -> str:
        return _RULE_MODE_NAMES.get(self, "invalid")

    def to_json(self) -> str:
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: str) -> IntegrationEmailFilterRuleMode:
        return cls._from_value(json.loads(text))

    @classmethod
    def _from_value(cls, value: Any) -> IntegrationEmailFilterRuleMode:
        return _decode_mode(value, {name: mode for mode, name in _RULE_MODE_NAMES.items()})


_RULE_MODE_NAMES = {
    IntegrationEmailFilterRuleMode.ALWAYS: "always",
    IntegrationEmailFilterRuleMode.MATCH: "match",
    IntegrationEmailFilterRuleMode.NO_MATCH: "no-match",
}

_RULE_PARTS = ("subject", "body", "from_email")


@dataclass
class IntegrationEmailFilterRule:
    """One e-mail filter rule of a generic e-mail integration."""

    subject_mode: IntegrationEmailFilterRuleMode = IntegrationEmailFilterRuleMode.INVALID
    subject_regex: str | None = None
    body_mode: IntegrationEmailFilterRuleMode = IntegrationEmailFilterRuleMode.INVALID
    body_regex: str | None = None
    from_email_mode: IntegrationEmailFilterRuleMode = IntegrationEmailFilterRuleMode.INVALID
    from_email_regex: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for part in _RULE_PARTS:
            mode = getattr(self, f"{part}_mode")
            regex = getattr(self, f"{part}_regex")
            if mode:
                out[f"{part}_mode"] = str(mode)
            if regex is not None:
                out[f"{part}_regex"] = regex
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> IntegrationEmailFilterRule:
        """Decode a rule; absent regular expressions become empty strings."""
        data = data or {}
        kwargs: dict[str, Any] = {}
        for part in _RULE_PARTS:
            raw_mode = _field(data, f"{part}_mode", _MISSING)
            kwargs[f"{part}_mode"] = (
                IntegrationEmailFilterRuleMode.INVALID
                if raw_mode is _MISSING
                else IntegrationEmailFilterRuleMode._from_value(raw_mode)
            )
            kwargs[f"{part}_regex"] = _field(data, f"{part}_regex") or ""
        return cls(**kwargs)


@dataclass
class Integration(APIObject):
    """An event source attached to a service."""

    name: str = ""
    service: APIObject | None = None
    created_at: str = ""
    vendor: APIObject | None = None
    integration_key: str = ""
    integration_email: str = ""
    email_filter_mode: IntegrationEmailFilterMode = IntegrationEmailFilterMode.INVALID
    email_filters: list[IntegrationEmailFilterRule] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        for key in ("name", "created_at", "integration_key", "integration_email"):
            value = getattr(self, key)
            if value:
                out[key] = value
        if self.service is not None:
            out["service"] = self.service.to_dict()
        if self.vendor is not None:
            out["vendor"] = self.vendor.to_dict()
        if self.email_filter_mode:
            out["email_filter_mode"] = str(self.email_filter_mode)
        if self.email_filters:
            out["email_filters"] = [rule.to_dict() for rule in self.email_filters]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Integration:
        data = data or {}
        service = _field(data, "service")
        vendor = _field(data, "vendor")
        raw_mode = _field(data, "email_filter_mode", _MISSING)
        return cls(
            **cls._api_fields(data),
            name=_field(data, "name") or "",
            service=APIObject.from_dict(service) if service is not None else None,
            created_at=_field(data, "created_at") or "",
            vendor=APIObject.from_dict(vendor) if vendor is not None else None,
            integration_key=_field(data, "integration_key") or "",
            integration_email=_field(data, "integration_email") or "",
            email_filter_mode=(
                IntegrationEmailFilterMode.INVALID
                if raw_mode is _MISSING
                else IntegrationEmailFilterMode._from_value(raw_mode)
            ),
            email_filters=[
                IntegrationEmailFilterRule.from_dict(rule)
                for rule in _field(data, "email_filters") or []
            ],
        )


@dataclass
class GetIntegrationOptions:
    """Query options for fetching one integration."""

    includes: list[str] = field(default_factory=list)

    def to_query(self) -> dict[str, Any]:
        return {"include": list(self.includes)}


class IntegrationsMixin(ClientBase):
    """Endpoints for integrations belonging to a service."""

    def create_integration(self, service_id: str, integration: Integration) -> Integration:
        response = self._request(
            "POST",
            f"/services/{service_id}/integrations",
            body={"integration": integration.to_dict()},
        )
        return Integration.from_dict(self._get_root(response, "integration"))

    def get_integration(
        self,
        service_id: str,
        integration_id: str,
        options: GetIntegrationOptions | None = None,
    ) -> Integration:
        response = self._request(
            "GET",
            f"/services/{service_id}/integrations/{integration_id}",
            options.to_query() if options else None,
        )
        return Integration.from_dict(self._get_root(response, "integration"))

    def update_integration(self, service_id: str, integration: Integration) -> Integration:
        response = self._request(
            "PUT",
            f"/services/{service_id}/integrations/{integration.id}",
            body=integration.to_dict(),
        )
        return Integration.from_dict(self._get_root(response, "integration"))

    def delete_integration(self, service_id: str, integration_id: str) -> None:
        self._request("DELETE", f"/services/{service_id}/integrations/{integration_id}")