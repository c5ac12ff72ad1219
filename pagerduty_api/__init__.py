"""Client for the PagerDuty REST API: services, integrations, dependencies, teams, vendors and webhooks."""

__version__ = "0.1.0"

__all__ = [
    "base",
    "dependency",
    "integration",
    "service",
    "team",
    "vendor",
    "webhook",
    "webhookv3",
]