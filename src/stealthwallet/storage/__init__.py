"""stealthwallet storage module."""

from .wallet_storage import (
    WalletStorage,
    InMemoryWalletStorage,
    FileWalletStorage,
    EncryptedWallet,
    WalletData,
    WalletInfo,
    seal_wallet,
    open_wallet,
)
from .config_storage import AppConfig, ConfigStore

__all__ = [
    "WalletStorage",
    "InMemoryWalletStorage",
    "FileWalletStorage",
    "EncryptedWallet",
    "WalletData",
    "WalletInfo",
    "seal_wallet",
    "open_wallet",
    "AppConfig",
    "ConfigStore",
]
