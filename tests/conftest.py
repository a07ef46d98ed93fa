"""
Pytest fixtures for Trade ETL tests. Isolates network configuration from the host environment.
"""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "STELLAR_NETWORK",
    "STELLAR_RPC_URL",
    "STELLAR_NETWORK_PASSPHRASE",
    "RPC_TIMEOUT_SEC",
    "RPC_PAGE_SIZE",
)


@pytest.fixture
def clean_env(monkeypatch):
    """
    Unset every Trade ETL variable and skip .env loading so each test starts from defaults.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("trade_etl.config.env.load_trade_etl_env", lambda: None)
    return monkeypatch


@pytest.fixture
def closing_spy():
    """Record which ledger readers were opened and closed by a backend."""
    return {"opened": [], "closed": []}
