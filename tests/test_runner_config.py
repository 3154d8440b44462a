# Area: Shared Tests
"""Tests for _runner_config defaults and validation."""

import pytest

from mental_poker._core.model import NetworkType
from mental_poker._runner_config import (
    DEFAULT_CONFIG,
    network_type,
    poll_interval,
    validate_config,
    with_defaults,
)

LIVE_KEYS = {
    "endpoint": "https://node.example/v1",
    "prover_url": "https://prover.example",
    "private_key": "APrivateKey1xyz",
    "address": "aleo1xyz",
}


class TestWithDefaults:
    """Tests for with_defaults()."""

    def test_fills_missing_keys(self):
        config = with_defaults({"buy_in": 500})
        assert config["buy_in"] == 500
        assert config["big_blind"] == DEFAULT_CONFIG["big_blind"]

    def test_none_does_not_override(self):
        assert with_defaults({"network": None})["network"] == "local"


class TestNetworkType:
    """Tests for network_type()."""

    def test_case_insensitive(self):
        assert network_type({"network": "TestNet"}) is NetworkType.TESTNET

    def test_unknown_network(self):
        with pytest.raises(ValueError, match="Unknown network"):
            network_type({"network": "devnet"})


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_local_needs_nothing(self):
        validate_config(with_defaults({}))

    def test_live_network_requires_credentials(self):
        with pytest.raises(ValueError, match="private_key"):
            validate_config(with_defaults({"network": "testnet", "endpoint": "x", "prover_url": "y"}))

    def test_live_network_complete(self):
        validate_config(with_defaults(dict(LIVE_KEYS, network="mainnet")))

    def test_big_blind_minimum(self):
        with pytest.raises(ValueError, match="big_blind"):
            validate_config(with_defaults({"big_blind": 1}))

    def test_buy_in_covers_big_blind(self):
        with pytest.raises(ValueError, match="buy_in"):
            validate_config(with_defaults({"buy_in": 10, "big_blind": 20}))

    def test_integer_keys(self):
        with pytest.raises(ValueError, match="search_limit"):
            validate_config(with_defaults({"search_limit": "20"}))

    @pytest.mark.parametrize("interval", [0, -1, "fast"])
    def test_poll_interval_must_be_positive(self, interval):
        with pytest.raises(ValueError, match="poll_interval_seconds"):
            validate_config(with_defaults({"poll_interval_seconds": interval}))


class TestPollInterval:
    """Tests for poll_interval()."""

    def test_network_default(self):
        assert poll_interval({"network": "testnet"}) == 5.0

    def test_override(self):
        assert poll_interval({"network": "mainnet", "poll_interval_seconds": 2}) == 2.0
