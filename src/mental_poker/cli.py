# Area: Shared
"""
mental_poker.cli - Command-line interface
=========================================

Provides the CLI entry point for a player session.

Usage:
    python -m mental_poker                             # Local ledger
    python -m mental_poker --hot-seat                  # Three seats, one terminal
    python -m mental_poker --network testnet --index 1 # Second account, logs to .logsP2

Settings come from (later wins):
    1. Built-in defaults
    2. JSON config file (--config)
    3. .env file and environment variables
    4. CLI flags
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ._shared.logging_config import log_file_for_index

ENV_MAPPINGS = {
    "ENDPOINT": "endpoint",
    "NETWORK": "network",
    "PRIVATE_KEY": "private_key",
    "ADDRESS": "address",
    "PROVER_URL": "prover_url",
    "PROGRAM": "program",
    "POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "BUY_IN": "buy_in",
    "BIG_BLIND": "big_blind",
    "LOG_FILE": "log_file",
}

INT_KEYS = {"buy_in", "big_blind", "search_start", "search_limit"}
FLOAT_KEYS = {"poll_interval_seconds"}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Mental Poker - three-seat poker over a shared ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mental_poker
  python -m mental_poker --hot-seat
  python -m mental_poker --config poker.json --network testnet
  PRIVATE_KEY_1=APrivateKey1... python -m mental_poker --network testnet --index 1
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument(
        "--network",
        choices=["local", "testnet", "mainnet"],
        help="Ledger backend (default: local)",
    )
    parser.add_argument(
        "--index",
        type=int,
        help="Account index: reads PRIVATE_KEY_<N>/ADDRESS_<N> and logs to .logsP<N+1>",
    )
    parser.add_argument(
        "--hot-seat",
        action="store_true",
        help="Run all three seats over one local ledger in this terminal",
    )
    return parser.parse_args(argv)


def _coerce(key: str, value: str) -> Any:
    if key in INT_KEYS:
        return int(value)
    if key in FLOAT_KEYS:
        return float(value)
    return value


def load_config(config_path: Optional[str], index: Optional[int] = None) -> Dict[str, Any]:
    """Load config from file, then .env and environment overrides."""
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)

    load_dotenv()

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = _coerce(config_key, os.environ[env_key])

    if index is not None:
        for env_key, config_key in (("PRIVATE_KEY", "private_key"), ("ADDRESS", "address")):
            indexed = f"{env_key}_{index}"
            if indexed in os.environ:
                config[config_key] = os.environ[indexed]
        config["log_file"] = log_file_for_index(index)

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = load_config(args.config, index=args.index)
    if args.network:
        config["network"] = args.network

    # Import runners here so --help works without building a session
    from .runner import HotSeatRunner, PokerRunner

    try:
        if args.hot_seat:
            runner = HotSeatRunner(config=config)
        else:
            runner = PokerRunner(config=config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set via config file, .env or environment variables.", file=sys.stderr)
        return 1

    runner.run()
    return 0
