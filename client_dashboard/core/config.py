"""
Settings and environment management module for the client dashboard backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Environment Variables:
- SHEET_CSV_URL: CSV export URL of the client spreadsheet (Required)
- WEBHOOK_URL: Assistant webhook receiving chat messages
- HTTP_TIMEOUT_SECONDS: Timeout applied to every outbound request
- LOG_LEVEL: Root logging level

Chart Defaults:
- revenue_periods: 6 (trailing periods shown on the revenue chart)
- revenue_period_freq: "M" (calendar months)
- revenue_target_baseline: 45000 (synthetic target of the first period)
- revenue_target_increment: 2000 (synthetic target increase per period)

Usage:
    from client_dashboard.core.config import get_settings

    settings = get_settings()
    csv_url = settings.sheet_csv_url
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CHAT_GREETING = (
    "Hello! I can help you analyze your dashboard data. "
    "Send me any questions or commands!"
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        sheet_csv_url: URL returning the client spreadsheet as CSV. Required.
        webhook_url: Assistant webhook endpoint for chat messages.
        http_timeout_seconds: Timeout for sheet fetches and webhook calls.
        revenue_periods: Number of trailing periods on the revenue series.
        revenue_period_freq: pandas period frequency used for bucketing.
        revenue_period_label_format: strftime format for period labels.
        revenue_target_baseline: Synthetic target for the first period.
        revenue_target_increment: Synthetic target increase per period.
        chat_greeting: Assistant message seeded into a new chat log. Empty disables it.
        records_page_size: Default page size for the records endpoint.
        log_level: Root logging level.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # External Sources
    # =========================================================================

    # Google Sheets "export?format=csv" URL or any endpoint serving the same CSV
    sheet_csv_url: str

    # Chat webhook (n8n workflow in the default local setup)
    webhook_url: str = 'http://localhost:5678/webhook-test/Dashboard'

    # Applies to connect, read, write and pool acquisition
    http_timeout_seconds: float = 10.0

    # =========================================================================
    # Chart Projection
    # =========================================================================

    revenue_periods: int = 6
    revenue_period_freq: str = 'M'
    revenue_period_label_format: str = '%b'
    revenue_target_baseline: float = 45000.0
    revenue_target_increment: float = 2000.0

    # =========================================================================
    # Session / API
    # =========================================================================

    chat_greeting: str = DEFAULT_CHAT_GREETING
    records_page_size: int = 10
    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The cached settings instance.

    Raises:
        pydantic.ValidationError: If SHEET_CSV_URL is not set.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
