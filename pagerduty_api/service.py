"""Services, their settings and their event rules."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import APIListObject, APIObject, ClientBase, _field
from .integration import Integration
from .team import Team


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_dict(value: Any) -> dict[str, Any] | None:
    return None if value is None else dict(value)


def _drop_empty(pairs: tuple[tuple[str, Any], ...]) -> dict[str, Any]:
    return {key: value for key, value in pairs if value}


@dataclass
class InlineModel:
    """When a scheduled action takes place."""

    type: str = ""
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty((("type", self.type), ("name", self.name)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> InlineModel:
        data = data or {}
        return cls(type=_field(data, "type") or "", name=_field(data, "name") or "")


@dataclass
class ScheduledAction:
    """An action the service performs on a schedule."""

    type: str = ""
    at: InlineModel = field(default_factory=InlineModel)
    to_urgency: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        out["at"] = self.at.to_dict()
        out["to_urgency"] = self.to_urgency
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ScheduledAction:
        data = data or {}
        return cls(
            type=_field(data, "type") or "",
            at=InlineModel.from_dict(_field(data, "at")),
            to_urgency=_field(data, "to_urgency") or "",
        )


@dataclass
class IncidentUrgencyType:
    """The urgency of incidents during or outside support hours."""

    type: str = ""
    urgency: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty((("type", self.type), ("urgency", self.urgency)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> IncidentUrgencyType:
        data = data or {}
        return cls(type=_field(data, "type") or "", urgency=_field(data, "urgency") or "")


@dataclass
class SupportHours:
    """The support hours of a service."""

    type: str = ""
    time_zone: str = ""
    start_time: str = ""
    end_time: str = ""
    days_of_week: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = _drop_empty(
            (
                ("type", self.type),
                ("time_zone", self.time_zone),
                ("start_time", self.start_time),
                ("end_time", self.end_time),
            )
        )
        if self.days_of_week:
            out["days_of_week"] = list(self.days_of_week)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SupportHours:
        data = data or {}
        return cls(
            type=_field(data, "type") or "",
            time_zone=_field(data, "time_zone") or "",
            start_time=_field(data, "start_time") or "",
            end_time=_field(data, "end_time") or "",
            days_of_week=[int(day) for day in _field(data, "days_of_week") or []],
        )


@dataclass
class IncidentUrgencyRule:
    """The default urgency of new incidents."""

    type: str = ""
    urgency: str = ""
    during_support_hours: IncidentUrgencyType | None = None
    outside_support_hours: IncidentUrgencyType | None = None

    def to_dict(self) -> dict[str, Any]:
        out = _drop_empty((("type", self.type), ("urgency", self.urgency)))
        if self.during_support_hours is not None:
            out["during_support_hours"] = self.during_support_hours.to_dict()
        if self.outside_support_hours is not None:
            out["outside_support_hours"] = self.outside_support_hours.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> IncidentUrgencyRule:
        data = data or {}
        during = _field(data, "during_support_hours")
        outside = _field(data, "outside_support_hours")
        return cls(
            type=_field(data, "type") or "",
            urgency=_field(data, "urgency") or "",
            during_support_hours=IncidentUrgencyType.from_dict(during) if during is not None else None,
            outside_support_hours=IncidentUrgencyType.from_dict(outside) if outside is not None else None,
        )


@dataclass
class AlertGroupParamsConfig:
    """The configuration of alert grouping parameters."""

    timeout: int | None = None
    aggregate: str = ""
    fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.timeout is not None:
            out["timeout"] = self.timeout
        if self.aggregate:
            out["aggregate"] = self.aggregate
        if self.fields:
            out["fields"] = list(self.fields)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> AlertGroupParamsConfig:
        data = data or {}
        return cls(
            timeout=_opt_int(_field(data, "timeout")),
            aggregate=_field(data, "aggregate") or "",
            fields=list(_field(data, "fields") or []),
        )


@dataclass
class AlertGroupingParameters:
    """How alerts on a service are grouped into incidents."""

    type: str = ""
    config: AlertGroupParamsConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.config is not None:
            out["config"] = self.config.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> AlertGroupingParameters:
        data = data or {}
        config = _field(data, "config")
        return cls(
            type=_field(data, "type") or "",
            config=AlertGroupParamsConfig.from_dict(config) if config is not None else None,
        )


@dataclass
class ServiceRule:
    """An event rule of a service.

    Conditions, time frame and actions are kept as the API's JSON objects.
    """

    id: str = ""
    self_url: str = ""
    disabled: bool | None = None
    conditions: dict[str, Any] | None = None
    time_frame: dict[str, Any] | None = None
    position: int | None = None
    actions: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out = _drop_empty((("id", self.id), ("self", self.self_url)))
        for key in ("disabled", "conditions", "time_frame", "position", "actions"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ServiceRule:
        data = data or {}
        disabled = _field(data, "disabled")
        return cls(
            id=_field(data, "id") or "",
            self_url=_field(data, "self") or "",
            disabled=None if disabled is None else bool(disabled),
            conditions=_opt_dict(_field(data, "conditions")),
            time_frame=_opt_dict(_field(data, "time_frame")),
            position=_opt_int(_field(data, "position")),
            actions=_opt_dict(_field(data, "actions")),
        )


_SERVICE_STRINGS = (
    "name",
    "description",
    "created_at",
    "status",
    "last_incident_timestamp",
    "alert_creation",
    "alert_grouping",
)
_SERVICE_TIMEOUTS = ("auto_resolve_timeout", "acknowledgement_timeout", "alert_grouping_timeout")


@dataclass
class Service(APIObject):
    """Something that is monitored, such as a web service or a database."""

    name: str = ""
    description: str = ""
    auto_resolve_timeout: int | None = None
    acknowledgement_timeout: int | None = None
    created_at: str = ""
    status: str = ""
    last_incident_timestamp: str = ""
    integrations: list[Integration] = field(default_factory=list)
    escalation_policy: APIObject | None = None
    teams: list[Team] = field(default_factory=list)
    incident_urgency_rule: IncidentUrgencyRule | None = None
    support_hours: SupportHours | None = None
    scheduled_actions: list[ScheduledAction] = field(default_factory=list)
    alert_creation: str = ""
    alert_grouping: str = ""
    alert_grouping_timeout: int | None = None
    alert_grouping_parameters: AlertGroupingParameters | None = None
    response_play: APIObject | None = None
    addons: list[APIObject] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        for key in _SERVICE_STRINGS:
            value = getattr(self, key)
            if value:
                out[key] = value
        for key in _SERVICE_TIMEOUTS:
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        for key in (
            "escalation_policy",
            "incident_urgency_rule",
            "support_hours",
            "alert_grouping_parameters",
            "response_play",
        ):
            value = getattr(self, key)
            if value is not None:
                out[key] = value.to_dict()
        for key in ("integrations", "teams", "scheduled_actions", "addons"):
            items = getattr(self, key)
            if items:
                out[key] = [item.to_dict() for item in items]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Service:
        data = data or {}

        def nested(name: str, kind: Any) -> Any:
            value = _field(data, name)
            return kind.from_dict(value) if value is not None else None

        def items(name: str, kind: Any) -> list[Any]:
            return [kind.from_dict(item) for item in _field(data, name) or []]

        return cls(
            **cls._api_fields(data),
            **{key: _field(data, key) or "" for key in _SERVICE_STRINGS},
            **{key: _opt_int(_field(data, key)) for key in _SERVICE_TIMEOUTS},
            integrations=items("integrations", Integration),
            escalation_policy=nested("escalation_policy", APIObject),
            teams=items("teams", Team),
            incident_urgency_rule=nested("incident_urgency_rule", IncidentUrgencyRule),
            support_hours=nested("support_hours", SupportHours),
            scheduled_actions=items("scheduled_actions", ScheduledAction),
            alert_grouping_parameters=nested("alert_grouping_parameters", AlertGroupingParameters),
            response_play=nested("response_play", APIObject),
            addons=items("addons", APIObject),
        )


@dataclass
class ListServiceOptions:
    """Query options for listing services.

    The API defaults ``limit`` to 25 and caps it at 100. Asking for ``total``
    slows the response down.
    """

    limit: int = 0
    offset: int = 0
    total: bool = False
    team_ids: list[str] = field(default_factory=list)
    time_zone: str = ""
    sort_by: str = ""
    query: str = ""
    includes: list[str] = field(default_factory=list)

    def to_query(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
            "team_ids": list(self.team_ids),
            "time_zone": self.time_zone,
            "sort_by": self.sort_by,
            "query": self.query,
            "include": list(self.includes),
        }


@dataclass
class ListServiceResponse(APIListObject):
    """One page of services."""

    services: list[Service] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListServiceResponse:
        data = data or {}
        info = APIListObject.from_dict(data)
        return cls(
            limit=info.limit,
            offset=info.offset,
            more=info.more,
            total=info.total,
            services=[Service.from_dict(item) for item in _field(data, "services") or []],
        )


@dataclass
class GetServiceOptions:
    """Query options for fetching one service."""

    includes: list[str] = field(default_factory=list)

    def to_query(self) -> dict[str, Any]:
        return {"include": list(self.includes)}


class ServicesMixin(ClientBase):
    """Endpoints for services and their rules."""

    def list_services(self, options: ListServiceOptions | None = None) -> ListServiceResponse:
        """Return one page of services."""
        response = self._request("GET", "/services", options.to_query() if options else None)
        return ListServiceResponse.from_dict(self._decode_object(response))

    def list_services_paginated(self, options: ListServiceOptions | None = None) -> list[Service]:
        """Return every service, following all pages."""
        query = options.to_query() if options else None
        return [
            service
            for page in self._paged_get("/services", query)
            for service in ListServiceResponse.from_dict(page).services
        ]

    def get_service(self, service_id: str, options: GetServiceOptions | None = None) -> Service:
        response = self._request(
            "GET", f"/services/{service_id}", options.to_query() if options else None
        )
        return Service.from_dict(self._get_root(response, "service"))

    def create_service(self, service: Service) -> Service:
        response = self._request("POST", "/services", body={"service": service.to_dict()})
        return Service.from_dict(self._get_root(response, "service"))

    def update_service(self, service: Service) -> Service:
        response = self._request(
            "PUT", f"/services/{service.id}", body={"service": service.to_dict()}
        )
        return Service.from_dict(self._get_root(response, "service"))

    def delete_service(self, service_id: str) -> None:
        self._request("DELETE", f"/services/{service_id}")

    def list_service_rules_paginated(self, service_id: str) -> list[ServiceRule]:
        """Return every rule of a service, following all pages."""
        return [
            ServiceRule.from_dict(rule)
            for page in self._paged_get(f"/services/{service_id}/rules")
            for rule in _field(page, "rules") or []
        ]

    def get_service_rule(self, service_id: str, rule_id: str) -> ServiceRule:
        response = self._request("GET", f"/services/{service_id}/rules/{rule_id}")
        return ServiceRule.from_dict(self._get_root(response, "rule"))

    def delete_service_rule(self, service_id: str, rule_id: str) -> None:
        self._request("DELETE", f"/services/{service_id}/rules/{rule_id}")

    def create_service_rule(self, service_id: str, rule: ServiceRule) -> ServiceRule:
        response = self._request(
            "POST", f"/services/{service_id}/rules/", body={"rule": rule.to_dict()}
        )
        return ServiceRule.from_dict(self._get_root(response, "rule"))

    def update_service_rule(self, service_id: str, rule_id: str, rule: ServiceRule) -> ServiceRule:
        response = self._request(
            "PUT", f"/services/{service_id}/rules/{rule_id}", body={"rule": rule.to_dict()}
        )
        return ServiceRule.from_dict(self._get_root(response, "rule"))