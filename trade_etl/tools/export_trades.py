"""
Export trades for a ledger range as JSON lines.

Usage:
    python -m trade_etl.tools.export_trades --start 1000 --end 1010 [--limit 500]
        [--network testnet|pubnet] [--output trades.jsonl]

Requires .env with STELLAR_RPC_URL for pubnet; testnet uses the public SDF RPC.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Iterable, TextIO

from trade_etl.config import get_settings
from trade_etl.core.exceptions import TradeEtlError
from trade_etl.ledger_reader import get_transactions_for_network
from trade_etl.trade_logging import get_logger
from trade_etl.transform import TradeOutput, transform_trades

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export Stellar trades for a ledger range as JSON lines.")
    parser.add_argument("--start", type=int, required=True, help="First ledger sequence (inclusive)")
    parser.add_argument("--end", type=int, required=True, help="Last ledger sequence (inclusive)")
    parser.add_argument(
        "--limit",
        type=int,
        default=-1,
        help="Max transactions to read across the range; negative reads all (default: -1)",
    )
    parser.add_argument("--network", choices=("testnet", "pubnet"), default=None)
    parser.add_argument("--output", default="-", help="Output file; '-' for stdout")
    return parser


def write_trades(trades: Iterable[TradeOutput], out: TextIO) -> int:
    count = 0
    for trade in trades:
        out.write(json.dumps(trade.to_dict(), sort_keys=True))
        out.write("\n")
        count += 1
    return count


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.start > args.end:
        print("--start must not be after --end", file=sys.stderr)
        return 2

    try:
        settings = get_settings(args.network)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        records = get_transactions_for_network(args.start, args.end, args.limit, network=settings.network)
        trades = transform_trades(records)
    except TradeEtlError as e:
        logger.error("export_failed", error=str(e), **e.context())
        return 1

    if args.output == "-":
        count = write_trades(trades, sys.stdout)
    else:
        with open(args.output, "w", encoding="utf-8") as f:
            count = write_trades(trades, f)
    logger.info("trades_exported", trade_count=count, output=args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
