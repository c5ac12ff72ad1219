"""Vendors: the kinds of integration a service can use."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .base import APIListObject, APIObject, ClientBase, _field

_VENDOR_STRINGS = (
    "name",
    "logo_url",
    "long_name",
    "website_url",
    "description",
    "thumbnail_url",
    "generic_service_type",
    "integration_guide_url",
    "alert_creation_default",
)
_VENDOR_FLAGS = ("connectable", "alert_creation_editable", "is_pd_cef")


@dataclass
class Vendor(APIObject):
    """A kind of integration, such as a monitoring tool."""

    name: str = ""
    logo_url: str = ""
    long_name: str = ""
    website_url: str = ""
    description: str = ""
    connectable: bool = False
    thumbnail_url: str = ""
    generic_service_type: str = ""
    integration_guide_url: str = ""
    alert_creation_default: str = ""
    alert_creation_editable: bool = False
    is_pd_cef: bool = False

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        for key in _VENDOR_STRINGS + _VENDOR_FLAGS:
            value = getattr(self, key)
            if value:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Vendor:
        data = data or {}
        return cls(
            **cls._api_fields(data),
            **{key: _field(data, key) or "" for key in _VENDOR_STRINGS},
            **{key: bool(_field(data, key)) for key in _VENDOR_FLAGS},
        )


@dataclass
class ListVendorOptions:
    """Pagination options for listing vendors.

    The API defaults ``limit`` to 25 and caps it at 100. Asking for ``total``
    slows the response down.
    """

    limit: int = 0
    offset: int = 0
    total: bool = False

    def to_query(self) -> dict[str, Any]:
        return {"limit": self.limit, "offset": self.offset, "total": self.total}


@dataclass
class ListVendorResponse(APIListObject):
    """One page of vendors."""

    vendors: list[Vendor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListVendorResponse:
        data = data or {}
        info = APIListObject.from_dict(data)
        return cls(
            limit=info.limit,
            offset=info.offset,
            more=info.more,
            total=info.total,
            vendors=[Vendor.from_dict(item) for item in _field(data, "vendors") or []],
        )


class VendorsMixin(ClientBase):
    """Endpoints for vendors."""

    def list_vendors(self, options: ListVendorOptions | None = None) -> ListVendorResponse:
        """Return one page of vendors."""
        response = self._request("GET", "/vendors", options.to_query() if options else None)
        return ListVendorResponse.from_dict(self._decode_object(response))

    def get_vendor(self, vendor_id: str) -> Vendor:
        response = self._request("GET", f"/vendors/{vendor_id}")
        return Vendor.from_dict(self._get_root(response, "vendor"))