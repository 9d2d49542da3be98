"""PlanGuard - entitlement and usage governance for subscription dashboards"""

__version__ = "0.1.0"
