"""
stealthwallet - Stealth addresses on EVM chains

Python implementation of ERC-5564 stealth addresses (SECP256k1 with view tags)
with password-encrypted wallet storage.
"""

import logging

from .keys import (
    SpendViewKeyPair,
    EphemeralKeyPair,
    generate_random_keys,
    derive_keys_from_signature,
    generate_ephemeral_keypair,
    ephemeral_keypair_from_private,
    derive_main_address,
)
from .primitives import PrivateScalar, PublicPoint, Address, ViewTag
from .curve import keccak256, public_key, address_from_point
from .meta_address import (
    MetaAddress,
    encode_meta_address,
    decode_meta_address,
    parse_meta_address,
    meta_address_to_hex,
    split_meta_address,
    is_valid_public_key,
)
from .stealth import (
    StealthAddressInfo,
    generate_stealth_address,
    check_stealth_address,
    compute_stealth_private_key,
    stealth_address_from_private_key,
)
from .metadata import (
    EthTransfer,
    pack_metadata,
    unpack_view_tag,
    build_eth_transfer_metadata,
    parse_eth_transfer_metadata,
)
from .models import Announcement, ScanMatch
from .scanner import (
    check_announcement,
    scan_announcements,
    scan_announcements_parallel,
    iter_chunks,
    block_ranges,
)
from .cipher import EncryptedData, derive_encryption_key, encrypt_data, decrypt_data
from .networks import (
    NetworkConfig,
    SUPPORTED_NETWORKS,
    START_BLOCKS,
    ERC5564_ANNOUNCER,
    ERC6538_REGISTRY,
    get_network,
)
from .storage import (
    WalletStorage,
    InMemoryWalletStorage,
    FileWalletStorage,
    EncryptedWallet,
    WalletData,
    WalletInfo,
    AppConfig,
    ConfigStore,
)
from .types import (
    CURVE_ORDER,
    SCHEME_ID,
    StealthWalletError,
    InvalidSignatureLengthError,
    InvalidDerivedKeyError,
    DerivedKeyInvalidError,
    InvalidMetaAddressLengthError,
    InvalidPublicKeyError,
    InvalidPrivateKeyError,
    InvalidAddressError,
    InvalidViewTagError,
    InvalidMetadataError,
    InvalidStealthAddressMatchError,
    DecryptionFailedError,
    UnsupportedWalletVersionError,
    WalletIntegrityCheckFailedError,
    WalletNotFoundError,
    WalletExistsError,
    InvalidWalletFormatError,
    UnknownNetworkError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Keys
    "SpendViewKeyPair",
    "EphemeralKeyPair",
    "generate_random_keys",
    "derive_keys_from_signature",
    "generate_ephemeral_keypair",
    "ephemeral_keypair_from_private",
    "derive_main_address",
    # Primitives
    "PrivateScalar",
    "PublicPoint",
    "Address",
    "ViewTag",
    "keccak256",
    "public_key",
    "address_from_point",
    # Meta-address
    "MetaAddress",
    "encode_meta_address",
    "decode_meta_address",
    "parse_meta_address",
    "meta_address_to_hex",
    "split_meta_address",
    "is_valid_public_key",
    # Stealth
    "StealthAddressInfo",
    "generate_stealth_address",
    "check_stealth_address",
    "compute_stealth_private_key",
    "stealth_address_from_private_key",
    # Metadata
    "EthTransfer",
    "pack_metadata",
    "unpack_view_tag",
    "build_eth_transfer_metadata",
    "parse_eth_transfer_metadata",
    # Scanner
    "Announcement",
    "ScanMatch",
    "check_announcement",
    "scan_announcements",
    "scan_announcements_parallel",
    "iter_chunks",
    "block_ranges",
    # Cipher
    "EncryptedData",
    "derive_encryption_key",
    "encrypt_data",
    "decrypt_data",
    # Networks
    "NetworkConfig",
    "SUPPORTED_NETWORKS",
    "START_BLOCKS",
    "ERC5564_ANNOUNCER",
    "ERC6538_REGISTRY",
    "get_network",
    # Storage
    "WalletStorage",
    "InMemoryWalletStorage",
    "FileWalletStorage",
    "EncryptedWallet",
    "WalletData",
    "WalletInfo",
    "AppConfig",
    "ConfigStore",
    # Constants
    "CURVE_ORDER",
    "SCHEME_ID",
    # Errors
    "StealthWalletError",
    "InvalidSignatureLengthError",
    "InvalidDerivedKeyError",
    "DerivedKeyInvalidError",
    "InvalidMetaAddressLengthError",
    "InvalidPublicKeyError",
    "InvalidPrivateKeyError",
    "InvalidAddressError",
    "InvalidViewTagError",
    "InvalidMetadataError",
    "InvalidStealthAddressMatchError",
    "DecryptionFailedError",
    "UnsupportedWalletVersionError",
    "WalletIntegrityCheckFailedError",
    "WalletNotFoundError",
    "WalletExistsError",
    "InvalidWalletFormatError",
    "UnknownNetworkError",
]
