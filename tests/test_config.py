"""Tests for network configuration and the config store."""

import json

import pytest

from stealthwallet.networks import (
    START_BLOCKS,
    SUPPORTED_NETWORKS,
    NetworkConfig,
    get_network,
)
from stealthwallet.storage import AppConfig, ConfigStore
from stealthwallet.types import UnknownNetworkError


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path)


class TestNetworkConfig:
    """Test network presets."""

    def test_mainnet(self) -> None:
        config = NetworkConfig.mainnet()

        assert config.chain_id == 1
        assert config.start_block == START_BLOCKS[1]
        assert config.forwarder is None

    def test_sepolia_has_forwarder(self) -> None:
        config = NetworkConfig.sepolia()

        assert config.chain_id == 11155111
        assert config.forwarder is not None

    def test_with_rpc_url(self) -> None:
        config = NetworkConfig.mainnet().with_rpc_url("http://localhost:8545")

        assert config.rpc_url == "http://localhost:8545"
        assert config.chain_id == 1
        assert NetworkConfig.mainnet().rpc_url != "http://localhost:8545"

    def test_unknown_chain_start_block(self) -> None:
        assert NetworkConfig(chain_id=31337, name="Local", rpc_url="http://localhost:8545").start_block == 0

    def test_get_network(self) -> None:
        assert get_network("base").chain_id == 8453

    def test_get_unknown_network(self) -> None:
        with pytest.raises(UnknownNetworkError, match="Available"):
            get_network("dogechain")

    def test_all_networks_have_start_blocks(self) -> None:
        for network in SUPPORTED_NETWORKS.values():
            assert network.start_block > 0


class TestAppConfig:
    """Test config serialization."""

    def test_defaults(self) -> None:
        config = AppConfig()

        assert config.active_network == "mainnet"
        assert config.custom_rpc_url is None
        assert config.last_scan_block == {}

    def test_dict_round_trip(self) -> None:
        config = AppConfig("sepolia", "http://localhost:8545", {11155111: 6000000})
        data = config.to_dict()

        assert data["lastScanBlock"] == {"11155111": "6000000"}
        assert AppConfig.from_dict(data) == config


class TestConfigStore:
    """Test the JSON config store."""

    def test_missing_file_gives_defaults(self, store) -> None:
        assert store.load() == AppConfig()
        assert store.current_network() == NetworkConfig.mainnet()

    def test_set_network(self, store) -> None:
        store.set_network("sepolia")

        assert store.load().active_network == "sepolia"
        assert store.current_network().chain_id == 11155111

    def test_set_unknown_network(self, store) -> None:
        with pytest.raises(UnknownNetworkError):
            store.set_network("nowhere")
        assert store.load().active_network == "mainnet"

    def test_custom_rpc(self, store) -> None:
        store.set_custom_rpc("http://localhost:8545")
        assert store.current_network().rpc_url == "http://localhost:8545"

        store.clear_custom_rpc()
        assert store.current_network().rpc_url == NetworkConfig.mainnet().rpc_url

    def test_scan_cursor(self, store) -> None:
        sepolia = NetworkConfig.sepolia()
        assert store.get_last_scan_block(sepolia.chain_id) is None
        assert store.next_scan_block(sepolia) == START_BLOCKS[sepolia.chain_id]

        store.update_last_scan_block(sepolia.chain_id, 7000000)

        assert store.get_last_scan_block(sepolia.chain_id) == 7000000
        assert store.next_scan_block(sepolia) == 7000001
        assert store.next_scan_block(NetworkConfig.mainnet()) == START_BLOCKS[1]

    def test_cursor_survives_reload(self, tmp_path) -> None:
        ConfigStore(tmp_path).update_last_scan_block(1, 123)
        assert ConfigStore(tmp_path).get_last_scan_block(1) == 123

    def test_file_format(self, store) -> None:
        store.set_network("base")
        store.update_last_scan_block(8453, 20000000)

        data = json.loads(store.config_path.read_text())
        assert data == {"activeNetwork": "base", "lastScanBlock": {"8453": "20000000"}}

    def test_corrupt_file_gives_defaults(self, store, caplog) -> None:
        store.config_path.parent.mkdir(parents=True, exist_ok=True)
        store.config_path.write_text("{corrupt")

        with caplog.at_level("WARNING", logger="stealthwallet.storage.config_storage"):
            assert store.load() == AppConfig()
        assert caplog.records
