"""App configuration and scan cursor persistence."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from ..networks import DEFAULT_NETWORK, SUPPORTED_NETWORKS, NetworkConfig, get_network

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Persisted user settings."""

    active_network: str = DEFAULT_NETWORK
    """Name of the selected network in SUPPORTED_NETWORKS."""

    custom_rpc_url: Optional[str] = None
    """RPC endpoint overriding the network default (optional)."""

    last_scan_block: dict[int, int] = field(default_factory=dict)
    """Last fully scanned block, by chain id."""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"activeNetwork": self.active_network}
        if self.custom_rpc_url:
            data["customRpcUrl"] = self.custom_rpc_url
        if self.last_scan_block:
            # Block numbers are stored as strings, chain ids as object keys
            data["lastScanBlock"] = {
                str(chain_id): str(block) for chain_id, block in self.last_scan_block.items()
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        return cls(
            active_network=data.get("activeNetwork", DEFAULT_NETWORK),
            custom_rpc_url=data.get("customRpcUrl"),
            last_scan_block={
                int(chain_id): int(block)
                for chain_id, block in (data.get("lastScanBlock") or {}).items()
            },
        )


class ConfigStore:
    """
    JSON config file in ``~/.stealth-wallet/config.json``.

    A missing or unreadable file yields the default configuration.
    """

    DIRECTORY_NAME = ".stealth-wallet"
    CONFIG_FILE = "config.json"

    def __init__(self, directory: Optional[Union[str, Path]] = None) -> None:
        self._directory = Path(directory) if directory is not None else Path.home() / self.DIRECTORY_NAME

    @property
    def config_path(self) -> Path:
        return self._directory / self.CONFIG_FILE

    def load(self) -> AppConfig:
        """Load the configuration, falling back to defaults."""
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
            return AppConfig.from_dict(data)
        except FileNotFoundError:
            return AppConfig()
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
            return AppConfig()

    def save(self, config: AppConfig) -> None:
        """Write the configuration."""
        self._directory.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        try:
            self.config_path.chmod(0o600)
        except OSError:
            logger.debug("Could not set permissions on %s", self.config_path)

    def current_network(self) -> NetworkConfig:
        """The active network, with the custom RPC URL applied."""
        config = self.load()
        network = SUPPORTED_NETWORKS.get(config.active_network, SUPPORTED_NETWORKS[DEFAULT_NETWORK])
        if config.custom_rpc_url:
            return network.with_rpc_url(config.custom_rpc_url)
        return network

    def set_network(self, name: str) -> NetworkConfig:
        """
        Select the active network.

        Raises:
            UnknownNetworkError: If the name is not supported
        """
        network = get_network(name)
        config = self.load()
        config.active_network = name
        self.save(config)
        return network

    def set_custom_rpc(self, rpc_url: str) -> None:
        config = self.load()
        config.custom_rpc_url = rpc_url
        self.save(config)

    def clear_custom_rpc(self) -> None:
        config = self.load()
        config.custom_rpc_url = None
        self.save(config)

    def update_last_scan_block(self, chain_id: int, block_number: int) -> None:
        """Record the last fully scanned block for a chain."""
        config = self.load()
        config.last_scan_block[chain_id] = block_number
        self.save(config)
        logger.debug("Scan cursor for chain %d at block %d", chain_id, block_number)

    def get_last_scan_block(self, chain_id: int) -> Optional[int]:
        """Last fully scanned block for a chain, or None."""
        return self.load().last_scan_block.get(chain_id)

    def next_scan_block(self, network: NetworkConfig) -> int:
        """First block to scan: after the cursor, else the deployment block."""
        last = self.get_last_scan_block(network.chain_id)
        if last is not None:
            return last + 1
        return network.start_block
