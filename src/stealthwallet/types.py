"""Type definitions and constants for stealthwallet."""

# Curve constants (secp256k1)
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
PRIVATE_KEY_SIZE = 32
COMPRESSED_PUBLIC_KEY_SIZE = 33
UNCOMPRESSED_PUBLIC_KEY_SIZE = 65
ADDRESS_SIZE = 20

# ERC-5564 constants
SCHEME_ID = 1  # SECP256k1 with view tags
SIGNATURE_SIZE = 65  # r (32) + s (32) + v (1)
META_ADDRESS_SIZE = 2 * COMPRESSED_PUBLIC_KEY_SIZE
VIEW_TAG_SIZE = 1

# ETH transfer metadata: viewTag (1) + marker (4) + token (20) + amount (32)
ETH_TRANSFER_MARKER = bytes.fromhex("eeeeeeee")
ETH_TOKEN_ADDRESS = bytes.fromhex("eeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee")
ETH_TRANSFER_METADATA_SIZE = 1 + 4 + 20 + 32

# Wallet encryption constants
PBKDF2_ITERATIONS = 100_000
SALT_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
ENCRYPTION_KEY_SIZE = 32
WALLET_VERSION = 1


# Exception types
class StealthWalletError(Exception):
    """Base exception for stealthwallet errors."""
    pass


class InvalidSignatureLengthError(StealthWalletError):
    """Signature is not exactly 65 bytes."""
    pass


class InvalidDerivedKeyError(StealthWalletError):
    """A hash-derived scalar is zero or not below the curve order."""
    pass


class DerivedKeyInvalidError(InvalidDerivedKeyError):
    """A recovered stealth private key reduced to zero."""
    pass


class InvalidMetaAddressLengthError(StealthWalletError):
    """Meta-address is neither 33 nor 66 bytes."""
    pass


class InvalidPublicKeyError(StealthWalletError):
    """Invalid public key format or point not on the curve."""
    pass


class InvalidPrivateKeyError(StealthWalletError):
    """Private key is out of range or has the wrong length."""
    pass


class InvalidAddressError(StealthWalletError):
    """Invalid account address."""
    pass


class InvalidViewTagError(StealthWalletError):
    """View tag is not a single byte."""
    pass


class InvalidMetadataError(StealthWalletError):
    """Announcement metadata is malformed."""
    pass


class InvalidStealthAddressMatchError(StealthWalletError):
    """Announcement does not belong to the scanning keys."""
    pass


class DecryptionFailedError(StealthWalletError):
    """Decryption failed."""

    def __init__(self) -> None:
        super().__init__("Decryption failed - incorrect password or corrupted data")


class UnsupportedWalletVersionError(StealthWalletError):
    """Wallet file version is not supported."""

    def __init__(self, version: object) -> None:
        super().__init__(f"Unsupported wallet version: {version}")
        self.version = version


class WalletIntegrityCheckFailedError(StealthWalletError):
    """Decrypted keys do not match the stored meta-address."""

    def __init__(self) -> None:
        super().__init__("Wallet integrity check failed")


class WalletNotFoundError(StealthWalletError):
    """No wallet has been stored."""
    pass


class WalletExistsError(StealthWalletError):
    """A wallet is already stored."""
    pass


class InvalidWalletFormatError(StealthWalletError):
    """Wallet file is missing fields or is not valid JSON."""
    pass


class UnknownNetworkError(StealthWalletError):
    """Network name is not in the supported network table."""
    pass
