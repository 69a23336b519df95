"""
Encrypted wallet storage.

The key pair is serialized to JSON, encrypted with ``cipher.encrypt_data`` and
written as a versioned JSON record. Public data (address, meta-address,
creation time) stays readable without the password.

## Wallet File Format

    {
      "version": 1,
      "address": "0x...",          checksummed main address
      "metaAddress": "0x...",      66-byte meta-address, hex
      "ciphertext": "...",         AES-256-GCM ciphertext + tag, hex
      "salt": "...",               32 bytes, hex
      "nonce": "...",              12 bytes, hex
      "createdAt": 1700000000000   milliseconds since epoch
    }

## Security

- Keys are encrypted with AES-256-GCM under a PBKDF2-derived key
- After decryption the meta-address is re-derived from the private keys and
  compared with the stored one; a mismatch means a corrupted or partially
  written file
- The wallet file is written atomically with 600 permissions inside a 700
  directory
"""

import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..cipher import decrypt_data, encrypt_data
from ..curve import RandBytes
from ..keys import SpendViewKeyPair, derive_main_address
from ..meta_address import meta_address_to_hex
from ..primitives import Address, PrivateScalar, PublicPoint
from ..types import (
    NONCE_SIZE,
    SALT_SIZE,
    WALLET_VERSION,
    InvalidAddressError,
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidWalletFormatError,
    UnsupportedWalletVersionError,
    WalletExistsError,
    WalletIntegrityCheckFailedError,
    WalletNotFoundError,
)

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("address", "metaAddress", "ciphertext", "salt", "nonce")


@dataclass(frozen=True)
class WalletInfo:
    """Public wallet data, readable without the password."""
    address: Address
    meta_address: str
    created_at: int


@dataclass(frozen=True)
class WalletData:
    """A decrypted wallet."""
    address: Address
    meta_address: str
    keys: SpendViewKeyPair
    created_at: int


@dataclass(frozen=True)
class EncryptedWallet:
    """The persisted wallet record."""
    version: int
    address: str
    meta_address: str
    ciphertext: bytes
    salt: bytes
    nonce: bytes
    created_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "address": self.address,
            "metaAddress": self.meta_address,
            "ciphertext": self.ciphertext.hex(),
            "salt": self.salt.hex(),
            "nonce": self.nonce.hex(),
            "createdAt": self.created_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EncryptedWallet":
        """
        Parse a wallet record.

        Raises:
            UnsupportedWalletVersionError: If version is not 1
            InvalidWalletFormatError: If fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidWalletFormatError("Invalid wallet format")

        version = data.get("version")
        # bool is an int subclass, so compare the exact type
        if type(version) is not int or version != WALLET_VERSION:
            raise UnsupportedWalletVersionError(version)

        missing = [name for name in _REQUIRED_FIELDS if not data.get(name)]
        if missing:
            raise InvalidWalletFormatError(f"Invalid wallet format, missing: {', '.join(missing)}")

        not_text = [name for name in _REQUIRED_FIELDS if not isinstance(data[name], str)]
        if not_text:
            raise InvalidWalletFormatError(f"Invalid wallet format, not strings: {', '.join(not_text)}")

        try:
            salt = bytes.fromhex(data["salt"])
            nonce = bytes.fromhex(data["nonce"])
            ciphertext = bytes.fromhex(data["ciphertext"])
            created_at = int(data.get("createdAt", 0))
            address = Address.from_hex(data["address"])
        except (TypeError, ValueError, InvalidAddressError) as e:
            raise InvalidWalletFormatError(f"Invalid wallet format: {e}") from e

        if len(salt) != SALT_SIZE or len(nonce) != NONCE_SIZE:
            raise InvalidWalletFormatError("Invalid wallet format: bad salt or nonce length")

        return cls(
            version=version,
            address=address.checksum(),
            meta_address=data["metaAddress"],
            ciphertext=ciphertext,
            salt=salt,
            nonce=nonce,
            created_at=created_at,
        )

    @classmethod
    def from_json(cls, text: str) -> "EncryptedWallet":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidWalletFormatError(f"Wallet file is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def info(self) -> WalletInfo:
        return WalletInfo(
            address=Address.from_hex(self.address),
            meta_address=self.meta_address,
            created_at=self.created_at,
        )


def _keys_to_json(keys: SpendViewKeyPair) -> bytes:
    return json.dumps({
        "spendingPrivateKey": keys.spending_private.hex(),
        "spendingPublicKey": keys.spending_public.hex(),
        "viewingPrivateKey": keys.viewing_private.hex(),
        "viewingPublicKey": keys.viewing_public.hex(),
    }).encode("utf-8")


def _keys_from_json(data: bytes) -> SpendViewKeyPair:
    try:
        payload = json.loads(data.decode("utf-8"))
        keys = SpendViewKeyPair.from_private_keys(
            PrivateScalar.from_hex(payload["spendingPrivateKey"]),
            PrivateScalar.from_hex(payload["viewingPrivateKey"]),
        )
        stored_spending = PublicPoint.from_hex(payload["spendingPublicKey"])
        stored_viewing = PublicPoint.from_hex(payload["viewingPublicKey"])
    except (
        UnicodeDecodeError,
        json.JSONDecodeError,
        KeyError,
        TypeError,
        InvalidPrivateKeyError,
        InvalidPublicKeyError,
    ) as e:
        raise WalletIntegrityCheckFailedError() from e

    if keys.spending_public != stored_spending or keys.viewing_public != stored_viewing:
        raise WalletIntegrityCheckFailedError()

    return keys


def seal_wallet(
    keys: SpendViewKeyPair,
    password: str,
    randbytes: RandBytes = os.urandom,
    created_at: Optional[int] = None,
) -> EncryptedWallet:
    """Encrypt a key pair into a wallet record."""
    encrypted = encrypt_data(_keys_to_json(keys), password, randbytes)

    return EncryptedWallet(
        version=WALLET_VERSION,
        address=derive_main_address(keys.spending_public).checksum(),
        meta_address=meta_address_to_hex(keys),
        ciphertext=encrypted.ciphertext,
        salt=encrypted.salt,
        nonce=encrypted.nonce,
        created_at=created_at if created_at is not None else int(time.time() * 1000),
    )


def open_wallet(wallet: EncryptedWallet, password: str) -> WalletData:
    """
    Decrypt a wallet record and verify it.

    Raises:
        DecryptionFailedError: Wrong password or corrupted cipher fields
        WalletIntegrityCheckFailedError: Decrypted keys do not match the record
    """
    plaintext = decrypt_data(wallet.ciphertext, password, wallet.salt, wallet.nonce)
    keys = _keys_from_json(plaintext)

    if meta_address_to_hex(keys).lower() != wallet.meta_address.lower():
        raise WalletIntegrityCheckFailedError()

    return WalletData(
        address=Address.from_hex(wallet.address),
        meta_address=wallet.meta_address,
        keys=keys,
        created_at=wallet.created_at,
    )


class WalletStorage(ABC):
    """
    Interface for storing the encrypted wallet.

    Implementations provide raw record access; encryption, version checks and
    integrity checks are shared.
    """

    def __init__(self, randbytes: RandBytes = os.urandom) -> None:
        self._randbytes = randbytes

    @abstractmethod
    def _read_record(self) -> Optional[str]:
        """Return the stored record, or None if there is none."""
        ...

    @abstractmethod
    def _write_record(self, text: str) -> None:
        """Replace the stored record."""
        ...

    @abstractmethod
    def _remove_record(self) -> None:
        """Remove the stored record."""
        ...

    def exists(self) -> bool:
        """Check if a wallet is stored."""
        return self._read_record() is not None

    def save(
        self,
        keys: SpendViewKeyPair,
        password: str,
        overwrite: bool = False,
    ) -> WalletData:
        """
        Encrypt and store a key pair.

        Raises:
            WalletExistsError: If a wallet exists and overwrite is False
        """
        if not overwrite and self.exists():
            raise WalletExistsError("A wallet already exists")

        wallet = seal_wallet(keys, password, self._randbytes)
        self._write_record(wallet.to_json())
        logger.debug("Saved wallet %s", wallet.address)

        return WalletData(
            address=Address.from_hex(wallet.address),
            meta_address=wallet.meta_address,
            keys=keys,
            created_at=wallet.created_at,
        )

    def load_record(self) -> EncryptedWallet:
        """
        Read and parse the stored record without decrypting it.

        Raises:
            WalletNotFoundError: If no wallet is stored
        """
        text = self._read_record()
        if text is None:
            raise WalletNotFoundError("No wallet found. Run `init` first.")
        return EncryptedWallet.from_json(text)

    def load(self, password: str) -> WalletData:
        """Load and decrypt the wallet."""
        wallet = open_wallet(self.load_record(), password)
        logger.debug("Loaded wallet %s", wallet.address)
        return wallet

    def info(self) -> Optional[WalletInfo]:
        """Public wallet data, or None if no wallet is stored."""
        if not self.exists():
            return None
        return self.load_record().info()

    def delete(self) -> None:
        """
        Delete the wallet.

        Raises:
            WalletNotFoundError: If no wallet is stored
        """
        if not self.exists():
            raise WalletNotFoundError("No wallet to delete")
        self._remove_record()
        logger.debug("Deleted wallet")


class InMemoryWalletStorage(WalletStorage):
    """
    In-memory implementation of WalletStorage (for testing).

    The record is still encrypted, but it is lost when the process exits.
    """

    def __init__(self, randbytes: RandBytes = os.urandom) -> None:
        super().__init__(randbytes)
        self._record: Optional[str] = None

    def _read_record(self) -> Optional[str]:
        return self._record

    def _write_record(self, text: str) -> None:
        self._record = text

    def _remove_record(self) -> None:
        self._record = None


class FileWalletStorage(WalletStorage):
    """
    File-based wallet storage in ``~/.stealth-wallet/wallet.json``.

    Example usage:
        ```python
        storage = FileWalletStorage()
        storage.save(generate_random_keys(), "user-password")

        wallet = storage.load("user-password")
        ```
    """

    # Directory name for wallet storage
    DIRECTORY_NAME = ".stealth-wallet"

    # Wallet file name
    WALLET_FILE = "wallet.json"

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        randbytes: RandBytes = os.urandom,
    ) -> None:
        """
        Create a new file wallet storage.

        Args:
            directory: Storage directory (defaults to ~/.stealth-wallet)
            randbytes: Source of salts and nonces
        """
        super().__init__(randbytes)
        self._directory = Path(directory) if directory is not None else Path.home() / self.DIRECTORY_NAME

    @property
    def wallet_path(self) -> Path:
        return self._directory / self.WALLET_FILE

    def _read_record(self) -> Optional[str]:
        if not self.wallet_path.exists():
            return None
        return self.wallet_path.read_text(encoding="utf-8")

    def _write_record(self, text: str) -> None:
        directory = self._ensure_directory()

        # Write to a temporary file and rename so a crash never leaves a
        # half-written wallet behind
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".wallet-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            self._set_restrictive_permissions(Path(tmp_name))
            os.replace(tmp_name, self.wallet_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove_record(self) -> None:
        # Overwrite with "0" characters before deleting (best effort)
        size = self.wallet_path.stat().st_size
        with open(self.wallet_path, "r+b") as f:
            f.write(b"0" * size)
            f.flush()
            os.fsync(f.fileno())
        self.wallet_path.unlink()

    def export_to(self, target: Union[str, Path]) -> None:
        """
        Copy the encrypted wallet to a backup file.

        Raises:
            WalletNotFoundError: If no wallet is stored
        """
        text = self._read_record()
        if text is None:
            raise WalletNotFoundError("No wallet to export")

        target_path = Path(target)
        target_path.write_text(text, encoding="utf-8")
        self._set_restrictive_permissions(target_path)
        logger.debug("Exported wallet to %s", target_path)

    def import_from(self, source: Union[str, Path], overwrite: bool = False) -> WalletInfo:
        """
        Replace the stored wallet with a backup file.

        The backup is validated before anything is written.

        Raises:
            UnsupportedWalletVersionError: If the backup version is not 1
            InvalidWalletFormatError: If the backup is malformed
            WalletExistsError: If a wallet exists and overwrite is False
        """
        text = Path(source).read_text(encoding="utf-8")
        wallet = EncryptedWallet.from_json(text)

        if not overwrite and self.exists():
            raise WalletExistsError("A wallet already exists")

        self._write_record(text)
        logger.debug("Imported wallet %s", wallet.address)
        return wallet.info()

    def _ensure_directory(self) -> Path:
        """Ensure the wallet directory exists."""
        self._directory.mkdir(parents=True, exist_ok=True)
        # Set directory permissions to 700 (owner only)
        try:
            self._directory.chmod(0o700)
        except OSError:
            logger.debug("Could not set permissions on %s", self._directory)
        return self._directory

    def _set_restrictive_permissions(self, file_path: Path) -> None:
        """Set restrictive file permissions (600 on Unix)."""
        try:
            file_path.chmod(0o600)
        except OSError:
            logger.debug("Could not set permissions on %s", file_path)
