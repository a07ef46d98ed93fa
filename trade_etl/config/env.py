"""
Environment variable loading and validation for Trade ETL.

- STELLAR_NETWORK: testnet | pubnet (default: testnet)
- STELLAR_RPC_URL: Stellar RPC endpoint (read from .env); required for pubnet
- STELLAR_NETWORK_PASSPHRASE: override for private/standalone networks
- RPC_TIMEOUT_SEC, RPC_PAGE_SIZE: HTTP timeout and getTransactions page size
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is trade_etl/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

TESTNET = "testnet"
PUBNET = "pubnet"

TESTNET_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
PUBNET_NETWORK_PASSPHRASE = "Public Global Stellar Network ; September 2015"

TESTNET_RPC_URL = "https://soroban-testnet.stellar.org"

DEFAULT_RPC_TIMEOUT_SEC = 30.0
DEFAULT_RPC_PAGE_SIZE = 200


def load_trade_etl_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


PUBNET_ALIASES = ("pubnet", "mainnet", "public")


def normalize_network(raw: str) -> str:
    """Map a network name or alias to testnet | pubnet; raise ValueError for anything else."""
    name = raw.strip().lower()
    if name in PUBNET_ALIASES:
        return PUBNET
    if name == TESTNET:
        return TESTNET
    raise ValueError(f"Unknown network {raw!r}; expected testnet or pubnet")


def get_stellar_network() -> str:
    """
    Return STELLAR_NETWORK from env: testnet | pubnet.
    Default: testnet. "mainnet"/"public" are accepted as pubnet aliases; any
    other value raises ValueError.
    """
    load_trade_etl_env()
    return normalize_network(os.getenv("STELLAR_NETWORK") or TESTNET)


def get_network_passphrase(network: str | None = None) -> str:
    """Return the passphrase that scopes transaction hashes on the network."""
    load_trade_etl_env()
    override = (os.getenv("STELLAR_NETWORK_PASSPHRASE") or "").strip()
    if override:
        return override
    network = network or get_stellar_network()
    return PUBNET_NETWORK_PASSPHRASE if network == PUBNET else TESTNET_NETWORK_PASSPHRASE


def get_stellar_rpc_url(network: str | None = None) -> str:
    """
    Resolve the Stellar RPC URL.
    Order: STELLAR_RPC_URL > network default. Pubnet has no default endpoint.
    """
    load_trade_etl_env()
    url = (os.getenv("STELLAR_RPC_URL") or "").strip()
    if url:
        return url
    network = network or get_stellar_network()
    if network == PUBNET:
        raise ValueError("STELLAR_RPC_URL must be set when STELLAR_NETWORK=pubnet")
    return TESTNET_RPC_URL


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def get_rpc_timeout_sec() -> float:
    load_trade_etl_env()
    return _float_env("RPC_TIMEOUT_SEC", DEFAULT_RPC_TIMEOUT_SEC)


def get_rpc_page_size() -> int:
    """getTransactions page size; Stellar RPC accepts 1..200."""
    load_trade_etl_env()
    size = int(_float_env("RPC_PAGE_SIZE", DEFAULT_RPC_PAGE_SIZE))
    if not 1 <= size <= 200:
        raise ValueError("RPC_PAGE_SIZE must be between 1 and 200")
    return size
