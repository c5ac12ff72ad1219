"""Dependencies between business and technical services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import ClientBase, _field


@dataclass
class ServiceObj:
    """A reference to a service within a dependency."""

    id: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in (("id", self.id), ("type", self.type)) if value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ServiceObj:
        data = data or {}
        return cls(id=_field(data, "id") or "", type=_field(data, "type") or "")


@dataclass
class ServiceDependency:
    """A relationship between a supporting and a dependent service."""

    id: str = ""
    type: str = ""
    supporting_service: ServiceObj | None = None
    dependent_service: ServiceObj | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.id:
            out["id"] = self.id
        if self.type:
            out["type"] = self.type
        if self.supporting_service is not None:
            out["supporting_service"] = self.supporting_service.to_dict()
        if self.dependent_service is not None:
            out["dependent_service"] = self.dependent_service.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ServiceDependency:
        data = data or {}
        supporting = _field(data, "supporting_service")
        dependent = _field(data, "dependent_service")
        return cls(
            id=_field(data, "id") or "",
            type=_field(data, "type") or "",
            supporting_service=ServiceObj.from_dict(supporting) if supporting is not None else None,
            dependent_service=ServiceObj.from_dict(dependent) if dependent is not None else None,
        )


@dataclass
class ListServiceDependencies:
    """A list of service relationships, as sent and received by the API."""

    relationships: list[ServiceDependency] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        if not self.relationships:
            return {}
        return {"relationships": [item.to_dict() for item in self.relationships]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListServiceDependencies:
        data = data or {}
        return cls(
            relationships=[
                ServiceDependency.from_dict(item)
                for item in _field(data, "relationships") or []
            ]
        )


class ServiceDependenciesMixin(ClientBase):
    """Endpoints for service dependencies."""

    def _dependencies(self, method: str, path: str, body: Any = None) -> ListServiceDependencies:
        response = self._request(method, path, body=body)
        return ListServiceDependencies.from_dict(self._decode_object(response))

    def list_business_service_dependencies(self, business_service_id: str) -> ListServiceDependencies:
        return self._dependencies(
            "GET", f"/service_dependencies/business_services/{business_service_id}"
        )

    def list_technical_service_dependencies(self, service_id: str) -> ListServiceDependencies:
        return self._dependencies(
            "GET", f"/service_dependencies/technical_services/{service_id}"
        )

    def associate_service_dependencies(
        self, dependencies: ListServiceDependencies
    ) -> ListServiceDependencies:
        """Create dependencies between services."""
        return self._dependencies(
            "POST", "/service_dependencies/associate", dependencies.to_dict()
        )

    def disassociate_service_dependencies(
        self, dependencies: ListServiceDependencies
    ) -> ListServiceDependencies:
        """Remove dependencies between services."""
        return self._dependencies(
            "POST", "/service_dependencies/disassociate", dependencies.to_dict()
        )