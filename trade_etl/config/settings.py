"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate required settings and provide defaults for optional ones.
- Expose typed settings (network, RPC URL, passphrase, timeouts) for use
  by the ledger reader and the export tool.
"""

from __future__ import annotations

from dataclasses import dataclass

from trade_etl.config import env


@dataclass(frozen=True)
class Settings:
    """Resolved environment for one run."""

    network: str
    rpc_url: str
    network_passphrase: str
    rpc_timeout_sec: float
    rpc_page_size: int


def get_settings(network: str | None = None) -> Settings:
    """
    Return the current application settings.

    Args:
        network: Optional testnet | pubnet override; defaults to STELLAR_NETWORK.
    """
    resolved = env.normalize_network(network) if network else env.get_stellar_network()
    return Settings(
        network=resolved,
        rpc_url=env.get_stellar_rpc_url(resolved),
        network_passphrase=env.get_network_passphrase(resolved),
        rpc_timeout_sec=env.get_rpc_timeout_sec(),
        rpc_page_size=env.get_rpc_page_size(),
    )
