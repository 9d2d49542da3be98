"""Services"""
from planguard.services.api_client import DashboardApiClient
from planguard.services.dashboard_service import DashboardService, RequestGenerations

__all__ = ["DashboardApiClient", "DashboardService", "RequestGenerations"]
