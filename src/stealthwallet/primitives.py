"""
Fixed-length value types for keys, addresses and view tags.

Each wrapper validates its length and range when it is constructed, so a
value that exists is always well formed. Hex input may carry a ``0x`` prefix
and may use either case.
"""

from dataclasses import dataclass, field
from typing import Union

from coincurve import PublicKey
from eth_utils import to_checksum_address

from .types import (
    ADDRESS_SIZE,
    COMPRESSED_PUBLIC_KEY_SIZE,
    CURVE_ORDER,
    PRIVATE_KEY_SIZE,
    UNCOMPRESSED_PUBLIC_KEY_SIZE,
    VIEW_TAG_SIZE,
    InvalidAddressError,
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidViewTagError,
)


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string with or without a ``0x`` prefix."""
    text = value.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    return bytes.fromhex(text)


def bytes_to_hex(data: bytes) -> str:
    """Encode bytes as a ``0x``-prefixed lowercase hex string."""
    return "0x" + data.hex()


@dataclass(frozen=True)
class PrivateScalar:
    """A secp256k1 private key, ``0 < value < CURVE_ORDER``."""
    value: int = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or not 0 < self.value < CURVE_ORDER:
            raise InvalidPrivateKeyError("Private key must be in range [1, n-1]")

    @classmethod
    def from_bytes(cls, data: bytes) -> "PrivateScalar":
        """Create a scalar from 32 big-endian bytes."""
        if len(data) != PRIVATE_KEY_SIZE:
            raise InvalidPrivateKeyError(
                f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(data)}"
            )
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_hex(cls, value: str) -> "PrivateScalar":
        """Create a scalar from a 64-character hex string."""
        try:
            data = hex_to_bytes(value)
        except ValueError as e:
            raise InvalidPrivateKeyError(f"Invalid private key hex: {e}") from e
        return cls.from_bytes(data)

    def to_bytes(self) -> bytes:
        """Return the 32-byte big-endian encoding."""
        return self.value.to_bytes(PRIVATE_KEY_SIZE, "big")

    def hex(self) -> str:
        return bytes_to_hex(self.to_bytes())

    def __repr__(self) -> str:
        return "PrivateScalar(<hidden>)"


@dataclass(frozen=True)
class PublicPoint:
    """A secp256k1 point in 33-byte compressed form."""
    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != COMPRESSED_PUBLIC_KEY_SIZE:
            raise InvalidPublicKeyError(
                f"Public key must be {COMPRESSED_PUBLIC_KEY_SIZE} bytes, got {len(self.data)}"
            )
        if self.data[0] not in (0x02, 0x03):
            raise InvalidPublicKeyError(f"Invalid public key prefix: 0x{self.data[0]:02x}")
        try:
            PublicKey(self.data)
        except ValueError as e:
            raise InvalidPublicKeyError("Public key is not a point on the curve") from e

    @classmethod
    def from_bytes(cls, data: bytes) -> "PublicPoint":
        """
        Create a point from compressed (33) or uncompressed (65) bytes.

        Uncompressed input is converted to compressed form.
        """
        if len(data) == UNCOMPRESSED_PUBLIC_KEY_SIZE:
            try:
                data = PublicKey(data).format(compressed=True)
            except ValueError as e:
                raise InvalidPublicKeyError("Public key is not a point on the curve") from e
        return cls(bytes(data))

    @classmethod
    def from_hex(cls, value: str) -> "PublicPoint":
        try:
            data = hex_to_bytes(value)
        except ValueError as e:
            raise InvalidPublicKeyError(f"Invalid public key hex: {e}") from e
        return cls.from_bytes(data)

    def to_bytes(self) -> bytes:
        return self.data

    def uncompressed(self) -> bytes:
        """Return the 65-byte uncompressed encoding (0x04 || x || y)."""
        return PublicKey(self.data).format(compressed=False)

    def hex(self) -> str:
        return bytes_to_hex(self.data)


@dataclass(frozen=True)
class Address:
    """A 20-byte account address. Comparison ignores hex case."""
    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != ADDRESS_SIZE:
            raise InvalidAddressError(
                f"Address must be {ADDRESS_SIZE} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        try:
            data = hex_to_bytes(value)
        except ValueError as e:
            raise InvalidAddressError(f"Invalid address hex: {e}") from e
        return cls(data)

    @classmethod
    def parse(cls, value: Union[str, bytes, "Address"]) -> "Address":
        """Accept an Address, 20 raw bytes or a hex string."""
        if isinstance(value, Address):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        return cls.from_hex(value)

    def checksum(self) -> str:
        """EIP-55 mixed-case checksum encoding."""
        return to_checksum_address(self.data)

    def hex(self) -> str:
        return bytes_to_hex(self.data)

    def __str__(self) -> str:
        return self.checksum()


@dataclass(frozen=True)
class ViewTag:
    """First byte of the hashed shared secret."""
    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or not 0 <= self.value <= 0xFF:
            raise InvalidViewTagError(f"View tag must be a single byte, got {self.value!r}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "ViewTag":
        if len(data) != VIEW_TAG_SIZE:
            raise InvalidViewTagError(f"View tag must be {VIEW_TAG_SIZE} byte, got {len(data)}")
        return cls(data[0])

    @classmethod
    def from_hex(cls, value: str) -> "ViewTag":
        try:
            data = hex_to_bytes(value)
        except ValueError as e:
            raise InvalidViewTagError(f"Invalid view tag hex: {e}") from e
        return cls.from_bytes(data)

    def to_bytes(self) -> bytes:
        return bytes([self.value])

    def hex(self) -> str:
        return f"0x{self.value:02x}"
