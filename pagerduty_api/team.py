"""Teams, their members and the escalation policies they own."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .base import APIListObject, APIObject, ClientBase, _field


@dataclass
class Team(APIObject):
    """A group of users and escalation policies within an organisation."""

    name: str = ""
    description: str = ""
    parent: APIObject | None = None

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.name:
            out["name"] = self.name
        if self.description:
            out["description"] = self.description
        if self.parent is not None:
            out["parent"] = self.parent.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Team:
        data = data or {}
        parent = _field(data, "parent")
        return cls(
            **cls._api_fields(data),
            name=_field(data, "name") or "",
            description=_field(data, "description") or "",
            parent=APIObject.from_dict(parent) if parent is not None else None,
        )


@dataclass
class ListTeamOptions:
    """Query options for listing teams.

    The API defaults ``limit`` to 25 and caps it at 100. Asking for ``total``
    slows the response down.
    """

    limit: int = 0
    offset: int = 0
    total: bool = False
    query: str = ""

    def to_query(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
            "query": self.query,
        }


@dataclass
class ListTeamResponse(APIListObject):
    """One page of teams."""

    teams: list[Team] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListTeamResponse:
        data = data or {}
        info = APIListObject.from_dict(data)
        return cls(
            limit=info.limit,
            offset=info.offset,
            more=info.more,
            total=info.total,
            teams=[Team.from_dict(item) for item in _field(data, "teams") or []],
        )


class TeamUserRole(str, Enum):
    """Roles a user can hold within a team."""

    OBSERVER = "observer"
    RESPONDER = "responder"
    MANAGER = "manager"


@dataclass
class Member:
    """A user belonging to a team, with their role in it."""

    user: APIObject = field(default_factory=APIObject)
    role: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Member:
        data = data or {}
        return cls(
            user=APIObject.from_dict(_field(data, "user")),
            role=_field(data, "role") or "",
        )


@dataclass
class ListTeamMembersOptions:
    """Pagination options for listing the members of a team."""

    limit: int = 0
    offset: int = 0
    total: bool = False

    def to_query(self) -> dict[str, Any]:
        return {"limit": self.limit, "offset": self.offset, "total": self.total}


@dataclass
class ListTeamMembersResponse(APIListObject):
    """One page of team members."""

    members: list[Member] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ListTeamMembersResponse:
        data = data or {}
        info = APIListObject.from_dict(data)
        return cls(
            limit=info.limit,
            offset=info.offset,
            more=info.more,
            total=info.total,
            members=[Member.from_dict(item) for item in _field(data, "members") or []],
        )


class TeamsMixin(ClientBase):
    """Endpoints for teams."""

    def list_teams(self, options: ListTeamOptions | None = None) -> ListTeamResponse:
        """Return one page of teams, optionally filtered by a search query."""
        response = self._request("GET", "/teams", options.to_query() if options else None)
        return ListTeamResponse.from_dict(self._decode_object(response))

    def create_team(self, team: Team) -> Team:
        response = self._request("POST", "/teams", body=team.to_dict())
        return Team.from_dict(self._get_root(response, "team"))

    def delete_team(self, team_id: str) -> None:
        self._request("DELETE", f"/teams/{team_id}")

    def get_team(self, team_id: str) -> Team:
        response = self._request("GET", f"/teams/{team_id}")
        return Team.from_dict(self._get_root(response, "team"))

    def update_team(self, team_id: str, team: Team) -> Team:
        response = self._request("PUT", f"/teams/{team_id}", body=team.to_dict())
        return Team.from_dict(self._get_root(response, "team"))

    def remove_escalation_policy_from_team(self, team_id: str, ep_id: str) -> None:
        self._request("DELETE", f"/teams/{team_id}/escalation_policies/{ep_id}")

    def add_escalation_policy_to_team(self, team_id: str, ep_id: str) -> None:
        self._request("PUT", f"/teams/{team_id}/escalation_policies/{ep_id}")

    def remove_user_from_team(self, team_id: str, user_id: str) -> None:
        self._request("DELETE", f"/teams/{team_id}/users/{user_id}")

    def add_user_to_team(
        self,
        team_id: str,
        user_id: str,
        role: TeamUserRole | str | None = None,
    ) -> None:
        """Add a user to a team, with a team role if one is given."""
        if isinstance(role, TeamUserRole):
            role = role.value
        body = {"role": role} if role else {}
        self._request("PUT", f"/teams/{team_id}/users/{user_id}", body=body)

    def list_team_members(
        self,
        team_id: str,
        options: ListTeamMembersOptions | None = None,
    ) -> ListTeamMembersResponse:
        """Return one page of the members of a team."""
        response = self._request(
            "GET",
            f"/teams/{team_id}/members",
            options.to_query() if options else None,
        )
        return ListTeamMembersResponse.from_dict(self._decode_object(response))

    def list_team_members_paginated(self, team_id: str) -> list[Member]:
        """Return every member of a team, following all pages."""
        return [
            member
            for page in self._paged_get(f"/teams/{team_id}/members")
            for member in ListTeamMembersResponse.from_dict(page).members
        ]