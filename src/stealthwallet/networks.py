"""
Network configuration for chains with ERC-5564/ERC-6538 deployments.

Only configuration lives here. RPC calls, log fetching and transaction
submission are done by the chain client that uses these values.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .types import UnknownNetworkError

# Singleton deployments (CREATE2, same address on every chain)
ERC5564_ANNOUNCER = "0x55649E01B5Df198D18D95b5cc5051630cfD45564"
ERC6538_REGISTRY = "0x6538E6bf4B0eBd30A8Ea093027Ac2422ce5d6538"

# StealthForwarder (atomic send + announce), by chain id
STEALTH_FORWARDER: dict[int, str] = {
    11155111: "0x594c5b0e28a1ae14bf92b6f8b42d1dc5cc801b1b",  # Sepolia
}

# Announcer deployment block per chain id (first block worth scanning)
START_BLOCKS: dict[int, int] = {
    1: 20042207,
    11155111: 5486597,
    17000: 1222405,
    42161: 219468264,
    10: 121097390,
    8453: 15502414,
    137: 57888814,
}

DEFAULT_NETWORK = "mainnet"


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for one EVM network."""

    chain_id: int
    """EIP-155 chain id."""

    name: str
    """Human-readable network name."""

    rpc_url: str
    """JSON-RPC endpoint."""

    block_explorer: Optional[str] = None
    """Block explorer base URL (optional)."""

    @classmethod
    def mainnet(cls) -> "NetworkConfig":
        """Creates configuration for Ethereum Mainnet."""
        return cls(
            chain_id=1,
            name="Ethereum Mainnet",
            rpc_url="https://eth.llamarpc.com",
            block_explorer="https://etherscan.io",
        )

    @classmethod
    def sepolia(cls) -> "NetworkConfig":
        """Creates configuration for the Sepolia testnet."""
        return cls(
            chain_id=11155111,
            name="Sepolia Testnet",
            rpc_url="https://rpc.sepolia.org",
            block_explorer="https://sepolia.etherscan.io",
        )

    def with_rpc_url(self, url: str) -> "NetworkConfig":
        """Returns a copy that uses a custom RPC endpoint."""
        return replace(self, rpc_url=url)

    @property
    def start_block(self) -> int:
        """Announcer deployment block, or 0 if unknown."""
        return START_BLOCKS.get(self.chain_id, 0)

    @property
    def forwarder(self) -> Optional[str]:
        """StealthForwarder address on this chain, if deployed."""
        return STEALTH_FORWARDER.get(self.chain_id)


SUPPORTED_NETWORKS: dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig.mainnet(),
    "sepolia": NetworkConfig.sepolia(),
    "holesky": NetworkConfig(
        chain_id=17000,
        name="Holesky Testnet",
        rpc_url="https://ethereum-holesky-rpc.publicnode.com",
        block_explorer="https://holesky.etherscan.io",
    ),
    "arbitrum": NetworkConfig(
        chain_id=42161,
        name="Arbitrum One",
        rpc_url="https://arb1.arbitrum.io/rpc",
        block_explorer="https://arbiscan.io",
    ),
    "optimism": NetworkConfig(
        chain_id=10,
        name="Optimism",
        rpc_url="https://mainnet.optimism.io",
        block_explorer="https://optimistic.etherscan.io",
    ),
    "base": NetworkConfig(
        chain_id=8453,
        name="Base",
        rpc_url="https://mainnet.base.org",
        block_explorer="https://basescan.org",
    ),
    "polygon": NetworkConfig(
        chain_id=137,
        name="Polygon",
        rpc_url="https://polygon-rpc.com",
        block_explorer="https://polygonscan.com",
    ),
}


def get_network(name: str) -> NetworkConfig:
    """
    Look up a supported network by name.

    Raises:
        UnknownNetworkError: If the name is not in SUPPORTED_NETWORKS
    """
    network = SUPPORTED_NETWORKS.get(name)
    if network is None:
        available = ", ".join(SUPPORTED_NETWORKS)
        raise UnknownNetworkError(f"Unknown network: {name}. Available: {available}")
    return network
