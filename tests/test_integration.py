import json

import pytest
import responses

from pagerduty_api.base import APIObject, PagerDutyError
from pagerduty_api.integration import (
    GetIntegrationOptions,
    Integration,
    IntegrationEmailFilterMode,
    IntegrationEmailFilterRule,
    IntegrationEmailFilterRuleMode,
    IntegrationsMixin,
)

BASE = "https://api.example.com"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def make_client():
    return IntegrationsMixin("token", base_url=BASE)


def test_create_integration(rsps):
    rsps.add(responses.POST, BASE + "/services/1/integrations",
             json={"integration": {"id": "1", "name": "foo"}})
    res = make_client().create_integration("1", Integration(name="foo"))
    assert res == Integration(id="1", name="foo")
    sent = json.loads(rsps.calls[0].request.body)
    assert sent == {"integration": {"name": "foo"}}


def test_get_integration(rsps):
    rsps.add(responses.GET, BASE + "/services/1/integrations/1",
             json={"integration": {"id": "1", "name": "foo"}})
    res = make_client().get_integration("1", "1", GetIntegrationOptions(includes=[]))
    assert res == Integration(id="1", name="foo")
    assert rsps.calls[0].request.method == "GET"


def test_update_integration(rsps):
    rsps.add(responses.PUT, BASE + "/services/1/integrations/1",
             json={"integration": {"id": "1", "name": "foo"}})
    res = make_client().update_integration("1", Integration(id="1", name="foo"))
    assert res == Integration(id="1", name="foo")
    assert json.loads(rsps.calls[0].request.body) == {"id": "1", "name": "foo"}


def test_delete_integration(rsps):
    rsps.add(responses.DELETE, BASE + "/services/1/integrations/1", status=204)
    assert make_client().delete_integration("1", "1") is None
    assert rsps.calls[0].request.method == "DELETE"


def test_missing_root_field(rsps):
    rsps.add(responses.GET, BASE + "/services/1/integrations/1", json={"other": {}})
    with pytest.raises(PagerDutyError, match="JSON response does not have integration field"):
        make_client().get_integration("1", "1")


@pytest.mark.parametrize("mode, want", [
    (IntegrationEmailFilterMode.INVALID, "invalid"),
    (IntegrationEmailFilterMode.ALL, "all-email"),
    (IntegrationEmailFilterMode.OR, "or-rules-email"),
    (IntegrationEmailFilterMode.AND, "and-rules-email"),
])
def test_filter_mode_string_and_json(mode, want):
    assert str(mode) == want
    assert mode.to_json() == f'"{want}"'


@pytest.mark.parametrize("text, want", [
    ('"all-email"', IntegrationEmailFilterMode.ALL),
    ('"or-rules-email"', IntegrationEmailFilterMode.OR),
    ('"and-rules-email"', IntegrationEmailFilterMode.AND),
])
def test_filter_mode_from_json(text, want):
    assert IntegrationEmailFilterMode.from_json(text) is want


@pytest.mark.parametrize("text, err", [
    ('"invalid"', 'unknown value "invalid"'),
    ("null", "value cannot be null"),
    ("42", "cannot unmarshal number"),
])
def test_filter_mode_from_json_errors(text, err):
    with pytest.raises(ValueError, match=err):
        IntegrationEmailFilterMode.from_json(text)


@pytest.mark.parametrize("mode, want", [
    (IntegrationEmailFilterRuleMode.INVALID, "invalid"),
    (IntegrationEmailFilterRuleMode.ALWAYS, "always"),
    (IntegrationEmailFilterRuleMode.MATCH, "match"),
    (IntegrationEmailFilterRuleMode.NO_MATCH, "no-match"),
])
def test_rule_mode_string_and_json(mode, want):
    assert str(mode) == want
    assert mode.to_json() == f'"{want}"'


@pytest.mark.parametrize("text, want", [
    ('"always"', IntegrationEmailFilterRuleMode.ALWAYS),
    ('"match"', IntegrationEmailFilterRuleMode.MATCH),
    ('"no-match"', IntegrationEmailFilterRuleMode.NO_MATCH),
])
def test_rule_mode_from_json(text, want):
    assert IntegrationEmailFilterRuleMode.from_json(text) is want


@pytest.mark.parametrize("text, err", [
    ('"invalid"', 'unknown value "invalid"'),
    ("null", "value cannot be null"),
    ("42", "cannot unmarshal number"),
])
def test_rule_mode_from_json_errors(text, err):
    with pytest.raises(ValueError, match=err):
        IntegrationEmailFilterRuleMode.from_json(text)


def test_filter_rule_zero_value_is_empty_object():
    assert json.dumps(IntegrationEmailFilterRule().to_dict()) == "{}"


def test_filter_rule_from_full_dict():
    data = json.loads('{"subject_mode":"always", "subject_regex":"", "body_mode":"match", '
                      '"body_regex":"testbody", "from_email_mode":"no-match", '
                      '"from_email_regex":"testfrom"}')
    assert IntegrationEmailFilterRule.from_dict(data) == IntegrationEmailFilterRule(
        subject_mode=IntegrationEmailFilterRuleMode.ALWAYS,
        subject_regex="",
        body_mode=IntegrationEmailFilterRuleMode.MATCH,
        body_regex="testbody",
        from_email_mode=IntegrationEmailFilterRuleMode.NO_MATCH,
        from_email_regex="testfrom",
    )


def test_filter_rule_from_empty_dict():
    rule = IntegrationEmailFilterRule.from_dict({})
    assert rule == IntegrationEmailFilterRule(
        subject_regex="", body_regex="", from_email_regex="",
    )
    assert rule.subject_mode is IntegrationEmailFilterRuleMode.INVALID


def test_integration_round_trip():
    integration = Integration(
        id="1",
        name="mail",
        service=APIObject(id="S1", type="service_reference"),
        integration_email="alerts@example.com",
        email_filter_mode=IntegrationEmailFilterMode.OR,
        email_filters=[IntegrationEmailFilterRule(
            subject_mode=IntegrationEmailFilterRuleMode.MATCH,
            subject_regex="down",
            body_regex="",
            from_email_regex="",
        )],
    )
    data = integration.to_dict()
    assert data["email_filter_mode"] == "or-rules-email"
    assert Integration.from_dict(data) == integration


def test_integration_null_filter_mode_rejected():
    with pytest.raises(ValueError, match="value cannot be null"):
        Integration.from_dict({"email_filter_mode": None})


def test_get_integration_options_query():
    assert GetIntegrationOptions(includes=["vendors"]).to_query() == {"include": ["vendors"]}