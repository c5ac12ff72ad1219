# pagerduty-api

A Python library for the PagerDuty REST API. It covers services and their
event rules, service integrations with their e-mail filter settings,
service dependencies, teams and team members, and vendors. It also decodes
version 2 webhook payloads and verifies the signatures of version 3
webhooks.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Building a client

The endpoints are grouped into mixin classes, each built on
`pagerduty_api.base.ClientBase`. Combine the ones you need into one class:

```python
from pagerduty_api.dependency import ServiceDependenciesMixin
from pagerduty_api.integration import IntegrationsMixin
from pagerduty_api.service import ServicesMixin
from pagerduty_api.team import TeamsMixin
from pagerduty_api.vendor import VendorsMixin


class PagerDuty(
    ServicesMixin,
    IntegrationsMixin,
    ServiceDependenciesMixin,
    TeamsMixin,
    VendorsMixin,
):
    pass


client = PagerDuty(auth_token="token")
```

`ClientBase` takes the token, an optional `base_url` (by default
`https://api.pagerduty.com`) and an optional `requests.Session`, which is
handy for proxies, retries or tests.

Every call returns the decoded object, or raises
`pagerduty_api.base.PagerDutyError`. For a response outside the 2xx range
the error carries `status_code` and the response `body`.

## Services

```python
from pagerduty_api.service import GetServiceOptions, ListServiceOptions, Service, ServiceRule

page = client.list_services(ListServiceOptions(query="checkout"))
services = client.list_services_paginated(ListServiceOptions())
for service in services:
    print(service.id, service.name)

service = client.get_service("PSERVICE1", GetServiceOptions(includes=["teams"]))
created = client.create_service(Service(name="checkout"))
client.update_service(created)
client.delete_service(created.id)

rules = client.list_service_rules_paginated("PSERVICE1")
rule = client.create_service_rule("PSERVICE1", ServiceRule())
client.delete_service_rule("PSERVICE1", rule.id)
```

`list_services` returns a single page as a `ListServiceResponse`; the
`*_paginated` methods follow the `more` and `offset` fields and return
every item as a list. Options left at their defaults are not sent.

## Integrations

```python
from pagerduty_api.integration import (
    GetIntegrationOptions,
    Integration,
    IntegrationEmailFilterMode,
)

integration = client.create_integration("PSERVICE1", Integration(name="alerts"))
integration = client.get_integration("PSERVICE1", integration.id, GetIntegrationOptions())
integration.email_filter_mode = IntegrationEmailFilterMode.ALL
client.update_integration("PSERVICE1", integration)
client.delete_integration("PSERVICE1", integration.id)
```

The e-mail filter modes are the enums `IntegrationEmailFilterMode` and
`IntegrationEmailFilterRuleMode`. `str()` gives the API's string value
(`"all-email"`, `"match"`, ..., or `"invalid"`), `to_json` writes it as a
JSON string and `from_json` reads one back, raising `ValueError` for
`null`, non-strings and unknown values. `IntegrationEmailFilterRule.from_dict`
turns missing regular expressions into empty strings.

## Service dependencies

```python
from pagerduty_api.dependency import ListServiceDependencies, ServiceDependency, ServiceObj

deps = client.list_technical_service_dependencies("PSERVICE1")
for relationship in deps.relationships:
    print(relationship.supporting_service.id, "->", relationship.dependent_service.id)

client.associate_service_dependencies(
    ListServiceDependencies(
        relationships=[
            ServiceDependency(
                supporting_service=ServiceObj(id="PSERVICE1", type="service"),
                dependent_service=ServiceObj(id="PBIZ0001", type="business_service"),
            )
        ]
    )
)
```

`list_business_service_dependencies` and
`disassociate_service_dependencies` work the same way.

## Teams

```python
from pagerduty_api.team import ListTeamOptions, Team, TeamUserRole

teams = client.list_teams(ListTeamOptions(query="ops"))
team = client.create_team(Team(name="ops"))
client.add_user_to_team(team.id, "PUSER01", TeamUserRole.RESPONDER)
client.add_escalation_policy_to_team(team.id, "PPOLICY1")

members = client.list_team_members_paginated(team.id)
for member in members:
    print(member.user.id, member.role)
```

## Vendors

```python
from pagerduty_api.vendor import ListVendorOptions

vendors = client.list_vendors(ListVendorOptions(limit=100))
vendor = client.get_vendor("PVENDOR1")
```

## Webhooks

Version 2 webhook bodies decode into dataclasses. `decode_webhook` takes a
stream or a string, and raises `ValueError` for invalid JSON or a bad
timestamp:

```python
from pagerduty_api.webhook import decode_webhook

with open("payload.json", "rb") as stream:
    messages = decode_webhook(stream)
for message in messages.messages:
    print(message.event, message.incident.title, message.created_on)
```

Version 3 webhooks are signed. Check the `X-PagerDuty-Signature` header
against the raw body before trusting the request. The header is looked up
without regard to case; the body may be bytes, a string or a binary stream.
On success the checked body is returned:

```python
from pagerduty_api.webhookv3 import (
    MalformedBodyError,
    MalformedHeaderError,
    NoValidSignaturesError,
    verify_signature,
)

secret = "secret"
try:
    body = verify_signature(request_headers, request_body, secret)
    status = 200
except NoValidSignaturesError:
    status = 403
except (MalformedHeaderError, MalformedBodyError):
    status = 400
```

Only the first 2 MiB of the body are read, so larger bodies do not verify.

## What this package does not do

There are no endpoints for users, contact methods, notification rules or
tags, and no ready-made client class that combines the mixins: build one as
shown above. There is no command-line tool.