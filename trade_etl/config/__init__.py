"""
Configuration management for Trade ETL.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for network configuration.
"""

from trade_etl.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
