"""FastAPI dependency injection for services and presentation config."""

from acutrace.core.theme import DEFAULT_THEME, Theme
from acutrace.services.dashboard import DashboardService


def get_dashboard_service() -> DashboardService:
    """Get a dashboard service configured from settings."""
    return DashboardService()


def get_theme() -> Theme:
    """Get the dashboard theme."""
    return DEFAULT_THEME
