"""
Ledger data providers: bounded backends and per-ledger transaction readers.

Responsibilities:
- Define the provider contract the fetcher depends on: a backend bounded to a
  ledger range that opens one transaction reader per ledger.
- Implement it over Stellar RPC (JSON-RPC getLedgers / getTransactions with
  xdrFormat=json) using a synchronous httpx client.
- Provide an in-memory backend for replaying captured ledgers.

Readers yield transactions in application order and signal end-of-data with
EOFError. No retries: transport and RPC errors surface as ProviderError.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Iterable

import httpx

from trade_etl.core.exceptions import ProviderError
from trade_etl.ledger_reader.models import LedgerHeader, LedgerTransaction
from trade_etl.trade_logging import get_logger

logger = get_logger(__name__)

XDR_FORMAT = "json"

# JSON-RPC request ids
_request_ids = itertools.count(1)


def _build_rpc_body(method: str, params: dict[str, Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": method,
        "params": params,
    }


class TransactionReader(ABC):
    """
    Reads the transactions of exactly one ledger.

    ``header`` is available as soon as the reader is open. ``read()`` returns
    the next transaction and raises EOFError once the ledger is drained.
    """

    header: LedgerHeader

    @abstractmethod
    def read(self) -> LedgerTransaction:
        ...

    def close(self) -> None:
        """Release the reader. Idempotent."""

    def __enter__(self) -> "TransactionReader":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class LedgerBackend(ABC):
    """A provider bounded to the inclusive ledger range ``[start, end]``."""

    def __init__(self, start: int, end: int) -> None:
        if start > end:
            raise ValueError(f"start ledger {start} is after end ledger {end}")
        self.start = start
        self.end = end

    def _check_bounds(self, sequence: int) -> None:
        if not self.start <= sequence <= self.end:
            raise ProviderError(
                f"Ledger {sequence} is outside the backend range [{self.start}, {self.end}]",
                ledger_sequence=sequence,
            )

    @abstractmethod
    def transaction_reader(self, sequence: int) -> TransactionReader:
        """Open a reader for one ledger; raise ProviderError if it cannot be opened."""

    def close(self) -> None:
        """Release backend resources. Idempotent."""

    def __enter__(self) -> "LedgerBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class StaticLedgerBackend(LedgerBackend):
    """In-memory backend over already-decoded ledgers (replays, fixtures)."""

    def __init__(
        self,
        ledgers: Iterable[tuple[LedgerHeader, list[LedgerTransaction]]],
        *,
        start: int | None = None,
        end: int | None = None,
    ) -> None:
        self._ledgers = {header.sequence: (header, list(txs)) for header, txs in ledgers}
        if not self._ledgers and (start is None or end is None):
            raise ValueError("an empty StaticLedgerBackend needs an explicit range")
        super().__init__(
            start if start is not None else min(self._ledgers),
            end if end is not None else max(self._ledgers),
        )

    def transaction_reader(self, sequence: int) -> TransactionReader:
        self._check_bounds(sequence)
        if sequence not in self._ledgers:
            raise ProviderError(f"Ledger {sequence} is not available", ledger_sequence=sequence)
        header, txs = self._ledgers[sequence]
        return _StaticTransactionReader(header, txs)


class _StaticTransactionReader(TransactionReader):
    def __init__(self, header: LedgerHeader, txs: list[LedgerTransaction]) -> None:
        self.header = header
        self._pending = deque(txs)

    def read(self) -> LedgerTransaction:
        if not self._pending:
            raise EOFError
        return self._pending.popleft()

    def close(self) -> None:
        self._pending.clear()


class RpcLedgerBackend(LedgerBackend):
    """
    Stellar RPC backend for one ledger range.

    Opening the backend checks that the RPC server serves the expected network
    passphrase, so a testnet endpoint is never read as pubnet (or vice versa).
    """

    def __init__(
        self,
        rpc_url: str,
        start: int,
        end: int,
        *,
        network_passphrase: str,
        request_timeout_sec: float = 30.0,
        page_size: int = 200,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Stellar RPC HTTP endpoint (e.g. https://soroban-testnet.stellar.org).
            start, end: Inclusive ledger range this backend may read.
            network_passphrase: Expected passphrase of the RPC server's network.
            request_timeout_sec: HTTP timeout for each RPC request.
            page_size: getTransactions page size (1 to 200).
            client: Optional preconfigured httpx.Client; owned by the caller when given.
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if not (1 <= page_size <= 200):
            raise ValueError("page_size must be between 1 and 200")
        super().__init__(start, end)
        self._rpc_url = rpc_url.rstrip("/")
        self._network_passphrase = network_passphrase
        self._page_size = page_size
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(request_timeout_sec))
        self._network_checked = False

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def call(self, method: str, params: dict[str, Any], *, sequence: int | None = None) -> Any:
        """Perform one JSON-RPC call; raise ProviderError on transport or RPC error."""
        body = _build_rpc_body(method, params)
        try:
            resp = self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"Stellar RPC {method} failed: {e}", ledger_sequence=sequence) from e
        if "error" in data:
            err = data["error"]
            raise ProviderError(
                f"Stellar RPC error: {err.get('message', err)} (code={err.get('code')})",
                ledger_sequence=sequence,
            )
        result = data.get("result")
        if result is None:
            raise ProviderError(f"Stellar RPC {method} returned no result", ledger_sequence=sequence)
        return result

    def _check_network(self) -> None:
        if self._network_checked:
            return
        served = self.call("getNetwork", {}).get("passphrase")
        if served != self._network_passphrase:
            raise ProviderError(
                f"RPC server network passphrase {served!r} does not match "
                f"expected {self._network_passphrase!r}"
            )
        self._network_checked = True

    def _fetch_header(self, sequence: int) -> LedgerHeader:
        result = self.call(
            "getLedgers",
            {"startLedger": sequence, "pagination": {"limit": 1}, "xdrFormat": XDR_FORMAT},
            sequence=sequence,
        )
        ledgers = result.get("ledgers") or []
        if not ledgers or int(ledgers[0].get("sequence", -1)) != sequence:
            raise ProviderError(f"Ledger {sequence} is not available from RPC", ledger_sequence=sequence)
        try:
            return LedgerHeader.from_rpc_item(ledgers[0])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Malformed ledger header: {e}", ledger_sequence=sequence) from e

    def transaction_reader(self, sequence: int) -> TransactionReader:
        self._check_bounds(sequence)
        self._check_network()
        header = self._fetch_header(sequence)
        logger.debug("rpc_reader_opened", ledger_sequence=sequence, rpc_url=self._rpc_url)
        return _RpcTransactionReader(self, header, self._page_size)


class _RpcTransactionReader(TransactionReader):
    """Pages through getTransactions, keeping only entries of its own ledger."""

    def __init__(self, backend: RpcLedgerBackend, header: LedgerHeader, page_size: int) -> None:
        self.header = header
        self._backend = backend
        self._page_size = page_size
        self._pending: deque[LedgerTransaction] = deque()
        self._cursor: str | None = None
        self._exhausted = False

    def _fetch_page(self) -> None:
        sequence = self.header.sequence
        params: dict[str, Any] = {"xdrFormat": XDR_FORMAT}
        if self._cursor is None:
            params["startLedger"] = sequence
            params["pagination"] = {"limit": self._page_size}
        else:
            params["pagination"] = {"cursor": self._cursor, "limit": self._page_size}
        result = self._backend.call("getTransactions", params, sequence=sequence)
        items = result.get("transactions") or []
        self._cursor = result.get("cursor")
        for item in items:
            ledger = int(item.get("ledger", sequence))
            if ledger > sequence:
                self._exhausted = True
                break
            if ledger < sequence:
                continue
            try:
                self._pending.append(LedgerTransaction.from_rpc_item(item))
            except KeyError as e:
                raise ProviderError(
                    f"Transaction item is missing {e}; was xdrFormat=json honored?",
                    ledger_sequence=sequence,
                ) from e
        if len(items) < self._page_size or not self._cursor:
            self._exhausted = True

    def read(self) -> LedgerTransaction:
        while not self._pending:
            if self._exhausted:
                raise EOFError
            self._fetch_page()
        return self._pending.popleft()

    def close(self) -> None:
        self._pending.clear()
        self._exhausted = True
