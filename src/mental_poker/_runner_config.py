# Area: Shared
"""
mental_poker._runner_config - Runner Configuration
==================================================

Configuration defaults, validation and derived settings for the
runners. Config is a plain dict assembled by cli.load_config().
"""

import logging
from typing import Any, Dict

from ._core.model import NetworkType

logger = logging.getLogger("mental_poker")

DEFAULT_CONFIG: Dict[str, Any] = {
    "network": "local",
    "endpoint": "http://localhost:3030",
    "program": "mental_poker.aleo",
    "buy_in": 1000,
    "big_blind": 20,
    "search_start": 1,
    "search_limit": 20,
    "log_file": "mental_poker.log",
}

# Live networks sign real transactions; the local ledger needs nothing
REQUIRED_CONFIG_KEYS = {
    NetworkType.LOCAL: [],
    NetworkType.TESTNET: ["endpoint", "prover_url", "private_key", "address"],
    NetworkType.MAINNET: ["endpoint", "prover_url", "private_key", "address"],
}

INTEGER_KEYS = ("buy_in", "big_blind", "search_start", "search_limit")


def with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(DEFAULT_CONFIG)
    merged.update({key: value for key, value in config.items() if value is not None})
    return merged


def network_type(config: Dict[str, Any]) -> NetworkType:
    """
    Resolve the configured network.

    Raises:
        ValueError: If the network name is unknown
    """
    name = str(config.get("network", "local")).lower()
    try:
        return NetworkType(name)
    except ValueError:
        valid = [n.value for n in NetworkType]
        raise ValueError(f"Unknown network {name!r}, expected one of {valid}") from None


def validate_config(config: dict) -> None:
    """
    Validate configuration for the selected network.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing or values are out of range
    """
    network = network_type(config)
    missing = [k for k in REQUIRED_CONFIG_KEYS[network] if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys for {network.value}: {missing}")

    for key in INTEGER_KEYS:
        if key in config and (not isinstance(config[key], int) or config[key] < 0):
            raise ValueError(f"Config key {key!r} must be a non-negative integer, got {config[key]!r}")
    if config.get("big_blind", 2) < 2:
        raise ValueError("big_blind must be at least 2")
    if config.get("buy_in", 0) and config["buy_in"] < config.get("big_blind", 0):
        raise ValueError("buy_in must cover at least one big blind")

    interval = config.get("poll_interval_seconds")
    if interval is not None and (not isinstance(interval, (int, float)) or interval <= 0):
        raise ValueError(f"poll_interval_seconds must be positive, got {interval!r}")


def poll_interval(config: Dict[str, Any]) -> float:
    """Configured poll interval, else the network's default cadence."""
    interval = config.get("poll_interval_seconds")
    if interval is not None:
        return float(interval)
    return network_type(config).poll_interval
