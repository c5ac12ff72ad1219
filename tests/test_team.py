import json
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from pagerduty_api.base import APIObject, PagerDutyError
from pagerduty_api.team import (
    ListTeamMembersOptions,
    ListTeamMembersResponse,
    ListTeamOptions,
    ListTeamResponse,
    Member,
    Team,
    TeamsMixin,
    TeamUserRole,
)

BASE = "https://api.example.com"
TEAM_ID = "MYTEAM"
MAX_PAGE_SIZE = 3


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def client():
    return TeamsMixin("token", base_url=BASE)


def _member_pages(amount, page_size):
    roles = ["manager", "responder", "observer"]
    pages = []
    low = 1
    offset = 0
    while True:
        more = low + page_size - 1 < amount
        high = low + page_size - 1 if more else amount
        members = [
            {"user": {"id": f"ID{offset + index}"}, "role": roles[number % len(roles)]}
            for index, number in enumerate(range(low, high + 1))
        ]
        pages.append({"more": more, "limit": page_size, "offset": offset, "members": members})
        if not more:
            return pages
        offset += page_size
        low += page_size


def test_list_teams(rsps, client):
    rsps.add(responses.GET, f"{BASE}/teams", json={"teams": [{"id": "1"}]})
    res = client.list_teams(ListTeamOptions(query="foo"))
    assert res == ListTeamResponse(teams=[Team(id="1")])
    request = rsps.calls[0].request
    assert request.method == "GET"
    assert parse_qs(urlparse(request.url).query) == {"query": ["foo"]}


def test_create_team(rsps, client):
    rsps.add(responses.POST, f"{BASE}/teams", json={"team": {"id": "1", "name": "foo"}})
    res = client.create_team(Team(name="foo"))
    assert res == Team(id="1", name="foo")
    request = rsps.calls[0].request
    assert request.method == "POST"
    assert json.loads(request.body) == {"name": "foo"}


def test_delete_team(rsps, client):
    rsps.add(responses.DELETE, f"{BASE}/teams/1", body="")
    assert client.delete_team("1") is None
    assert rsps.calls[0].request.method == "DELETE"


def test_get_team(rsps, client):
    rsps.add(responses.GET, f"{BASE}/teams/1", json={"team": {"id": "1", "name": "foo"}})
    assert client.get_team("1") == Team(id="1", name="foo")


def test_get_team_missing_root(rsps, client):
    rsps.add(responses.GET, f"{BASE}/teams/1", json={"other": {}})
    with pytest.raises(PagerDutyError, match="does not have team field"):
        client.get_team("1")


def test_update_team(rsps, client):
    rsps.add(responses.PUT, f"{BASE}/teams/1", json={"team": {"id": "1", "name": "foo"}})
    res = client.update_team("1", Team(id="1", name="foo"))
    assert res == Team(id="1", name="foo")
    request = rsps.calls[0].request
    assert request.method == "PUT"
    assert json.loads(request.body) == {"id": "1", "name": "foo"}


def test_remove_escalation_policy_from_team(rsps, client):
    rsps.add(responses.DELETE, f"{BASE}/teams/1/escalation_policies/1", body="")
    assert client.remove_escalation_policy_from_team("1", "1") is None
    assert rsps.calls[0].request.method == "DELETE"
    assert rsps.calls[0].request.url == f"{BASE}/teams/1/escalation_policies/1"


def test_remove_escalation_policy_error_status(rsps, client):
    rsps.add(responses.DELETE, f"{BASE}/teams/1/escalation_policies/1", status=404, body="")
    with pytest.raises(PagerDutyError) as info:
        client.remove_escalation_policy_from_team("1", "1")
    assert info.value.status_code == 404


def test_add_escalation_policy_to_team(rsps, client):
    rsps.add(responses.PUT, f"{BASE}/teams/1/escalation_policies/1", body="")
    assert client.add_escalation_policy_to_team("1", "1") is None
    assert rsps.calls[0].request.method == "PUT"
    assert rsps.calls[0].request.url == f"{BASE}/teams/1/escalation_policies/1"


def test_remove_user_from_team(rsps, client):
    rsps.add(responses.DELETE, f"{BASE}/teams/1/users/1", body="")
    assert client.remove_user_from_team("1", "1") is None
    assert rsps.calls[0].request.method == "DELETE"
    assert rsps.calls[0].request.url == f"{BASE}/teams/1/users/1"


def test_add_user_to_team_without_role(rsps, client):
    rsps.add(responses.PUT, f"{BASE}/teams/1/users/1", body="")
    assert client.add_user_to_team("1", "1") is None
    request = rsps.calls[0].request
    assert request.method == "PUT"
    assert json.loads(request.body) == {}


@pytest.mark.parametrize(
    "role, expected",
    [(TeamUserRole.MANAGER, "manager"), (TeamUserRole.OBSERVER, "observer"), ("responder", "responder")],
)
def test_add_user_to_team_with_role(rsps, client, role, expected):
    rsps.add(responses.PUT, f"{BASE}/teams/1/users/1", body="")
    assert client.add_user_to_team("1", "1", role) is None
    assert json.loads(rsps.calls[0].request.body) == {"role": expected}


def test_list_members_success(rsps, client):
    expected = MAX_PAGE_SIZE - 1
    page = _member_pages(expected, MAX_PAGE_SIZE)[0]
    rsps.add(responses.GET, f"{BASE}/teams/{TEAM_ID}/members", json=page)
    res = client.list_team_members(TEAM_ID, ListTeamMembersOptions())
    assert len(res.members) == expected
    assert res.limit == MAX_PAGE_SIZE
    assert res.more is False
    assert res.members[0] == Member(user=APIObject(id="ID0"), role="responder")


def test_list_members_error():
    api = TeamsMixin("token", base_url="A-FAKE-URL")
    with pytest.raises(PagerDutyError):
        api.list_team_members(TEAM_ID, ListTeamMembersOptions())


def test_list_all_members_multiple_pages(rsps, client):
    expected = MAX_PAGE_SIZE * 3 + 1
    pages = _member_pages(expected, MAX_PAGE_SIZE)
    offsets = []

    def callback(request):
        offset = int(parse_qs(urlparse(request.url).query)["offset"][0])
        offsets.append(offset)
        return 200, {}, json.dumps(pages[offset // MAX_PAGE_SIZE])

    rsps.add_callback(responses.GET, f"{BASE}/teams/{TEAM_ID}/members", callback=callback)
    members = client.list_team_members_paginated(TEAM_ID)
    assert len(members) == expected
    assert offsets == [0, 3, 6, 9]
    assert [member.user.id for member in members] == [f"ID{n}" for n in range(expected)]


def test_list_all_members_error():
    api = TeamsMixin("token", base_url="A-FAKE-URL")
    with pytest.raises(PagerDutyError):
        api.list_team_members_paginated(TEAM_ID)


def test_team_round_trip():
    team = Team(id="T1", name="ops", description="on call", parent=APIObject(id="P1", type="team_reference"))
    assert Team.from_dict(team.to_dict()) == team
    assert team.to_dict()["parent"] == {"id": "P1", "type": "team_reference"}


def test_empty_team_serialises_to_empty_object():
    assert Team().to_dict() == {}


def test_list_options_to_query():
    options = ListTeamOptions(limit=10, offset=20, total=True, query="ops")
    assert options.to_query() == {"limit": 10, "offset": 20, "total": True, "query": "ops"}
    assert ListTeamMembersOptions(limit=5).to_query() == {"limit": 5, "offset": 0, "total": False}


def test_members_response_from_dict():
    res = ListTeamMembersResponse.from_dict(
        {"more": True, "limit": 2, "offset": 4, "members": [{"user": {"id": "U1"}, "role": "observer"}]}
    )
    assert res == ListTeamMembersResponse(
        limit=2, offset=4, more=True, members=[Member(user=APIObject(id="U1"), role="observer")]
    )