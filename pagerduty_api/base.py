"""Shared building blocks: API objects, query encoding and the HTTP core."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import requests

DEFAULT_BASE_URL = "https://api.pagerduty.com"
ACCEPT_HEADER = "application/vnd.pagerduty+json;version=2"

_MISSING = object()


class PagerDutyError(Exception):
    """Raised when a request fails or a response cannot be understood."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _field(data: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Look a key up the way JSON decoding does: exact match first, then ignoring case."""
    if name in data:
        return data[name]
    folded = name.casefold()
    for key, value in data.items():
        if isinstance(key, str) and key.casefold() == folded:
            return value
    return default


def encode_query(params: Mapping[str, Any] | None) -> str:
    """Encode query parameters, dropping empty values and sorting by key.

    List values are sent once per item under ``key[]``; booleans as ``true``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        if not value:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{key}[]", str(item)) for item in value)
        elif isinstance(value, bool):
            pairs.append((key, "true"))
        else:
            pairs.append((key, str(value)))
    pairs.sort(key=lambda pair: pair[0])
    return urlencode(pairs)


@dataclass
class APIObject:
    """Fields shared by every object the API returns."""

    id: str = ""
    type: str = ""
    summary: str = ""
    self_url: str = ""
    html_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        pairs = (
            ("id", self.id),
            ("type", self.type),
            ("summary", self.summary),
            ("self", self.self_url),
            ("html_url", self.html_url),
        )
        return {key: value for key, value in pairs if value}

    @classmethod
    def _api_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": _field(data, "id") or "",
            "type": _field(data, "type") or "",
            "summary": _field(data, "summary") or "",
            "self_url": _field(data, "self") or "",
            "html_url": _field(data, "html_url") or "",
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None):
        return cls(**cls._api_fields(data or {}))


@dataclass
class APIListObject:
    """Pagination details of a list response."""

    limit: int = 0
    offset: int = 0
    more: bool = False
    total: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> APIListObject:
        data = data or {}
        return cls(
            limit=int(_field(data, "limit") or 0),
            offset=int(_field(data, "offset") or 0),
            more=bool(_field(data, "more") or False),
            total=int(_field(data, "total") or 0),
        )


class ClientBase:
    """HTTP core shared by the endpoint mixins."""

    def __init__(
        self,
        auth_token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
    ):
        self.auth_token = auth_token
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> requests.Response:
        url = self.base_url + path
        encoded = encode_query(query)
        if encoded:
            url += ("&" if "?" in path else "?") + encoded
        headers = {
            "Accept": ACCEPT_HEADER,
            "Authorization": f"Token token={self.auth_token}",
        }
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)
        try:
            response = self.session.request(method, url, headers=headers, data=data)
        except requests.RequestException as exc:
            raise PagerDutyError(f"{method} {url}: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise PagerDutyError(
                f"HTTP response failed with status code {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _decode_json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise PagerDutyError(f"failed to decode JSON response: {exc}") from exc

    def _decode_object(self, response: requests.Response) -> dict[str, Any]:
        data = self._decode_json(response)
        if not isinstance(data, dict):
            raise PagerDutyError("failed to decode JSON response: expected an object")
        return data

    def _get_root(self, response: requests.Response, root: str) -> dict[str, Any]:
        """Return the object stored under ``root`` in a JSON response."""
        try:
            data = self._decode_object(response)
        except PagerDutyError as exc:
            raise PagerDutyError(f"Could not decode JSON response: {exc}") from exc
        if root not in data:
            raise PagerDutyError(f"JSON response does not have {root} field")
        return data[root] or {}

    def _paged_get(self, path: str, query: Mapping[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        """Yield every page of a list endpoint, following ``more`` and ``offset``."""
        params = {key: value for key, value in (query or {}).items() if key != "offset"}
        separator = "&" if "?" in path else "?"
        offset = 0
        while True:
            response = self._request("GET", f"{path}{separator}offset={offset}", params)
            page = self._decode_object(response)
            yield page
            info = APIListObject.from_dict(page)
            if not info.more:
                return
            offset = info.offset + info.limit