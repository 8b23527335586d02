"""Configuration adapters."""

from lightrail_arrivals.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
