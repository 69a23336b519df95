"""
Stealth meta-address encoding and decoding.

A meta-address is the spending public key followed by the viewing public key,
both compressed (66 bytes). A single 33-byte key is also accepted and used for
both roles. The hex wire form is ``0x`` + 66 or 132 hex characters.
"""

from dataclasses import dataclass
from typing import Tuple

from coincurve import PublicKey

from .keys import SpendViewKeyPair
from .primitives import PublicPoint, bytes_to_hex, hex_to_bytes
from .types import (
    COMPRESSED_PUBLIC_KEY_SIZE,
    META_ADDRESS_SIZE,
    InvalidMetaAddressLengthError,
)


@dataclass(frozen=True)
class MetaAddress:
    """A recipient's published spending and viewing public keys."""
    spending_public: PublicPoint
    viewing_public: PublicPoint

    def to_bytes(self) -> bytes:
        return self.spending_public.to_bytes() + self.viewing_public.to_bytes()

    def hex(self) -> str:
        return bytes_to_hex(self.to_bytes())


def encode_meta_address(keys: SpendViewKeyPair) -> bytes:
    """
    Encode a key pair's public keys as a 66-byte meta-address.

    Args:
        keys: The recipient's key pair

    Returns:
        spending_public || viewing_public
    """
    return keys.spending_public.to_bytes() + keys.viewing_public.to_bytes()


def meta_address_to_hex(keys: SpendViewKeyPair) -> str:
    """Encode a key pair's meta-address in its 0x-prefixed hex wire form."""
    return bytes_to_hex(encode_meta_address(keys))


def split_meta_address(data: bytes) -> Tuple[bytes, bytes]:
    """
    Split a meta-address into raw spending and viewing key bytes.

    No curve validation is done here; see ``is_valid_public_key``.

    Raises:
        InvalidMetaAddressLengthError: If data is neither 33 nor 66 bytes
    """
    if len(data) == COMPRESSED_PUBLIC_KEY_SIZE:
        return bytes(data), bytes(data)

    if len(data) != META_ADDRESS_SIZE:
        raise InvalidMetaAddressLengthError(
            f"Invalid stealth meta-address length: {len(data)} bytes "
            f"(expected {COMPRESSED_PUBLIC_KEY_SIZE} or {META_ADDRESS_SIZE})"
        )

    return bytes(data[:COMPRESSED_PUBLIC_KEY_SIZE]), bytes(data[COMPRESSED_PUBLIC_KEY_SIZE:])


def decode_meta_address(data: bytes) -> MetaAddress:
    """
    Decode a meta-address into validated public keys.

    Raises:
        InvalidMetaAddressLengthError: If data is neither 33 nor 66 bytes
        InvalidPublicKeyError: If either key is malformed or off the curve
    """
    spending, viewing = split_meta_address(data)
    return MetaAddress(
        spending_public=PublicPoint(spending),
        viewing_public=PublicPoint(viewing),
    )


def parse_meta_address(text: str) -> MetaAddress:
    """Decode the 0x-prefixed hex wire form of a meta-address."""
    try:
        data = hex_to_bytes(text)
    except ValueError as e:
        raise InvalidMetaAddressLengthError(f"Invalid stealth meta-address hex: {e}") from e
    return decode_meta_address(data)


def is_valid_public_key(data: bytes) -> bool:
    """Check that data is a compressed public key of a point on the curve."""
    if len(data) != COMPRESSED_PUBLIC_KEY_SIZE:
        return False
    if data[0] not in (0x02, 0x03):
        return False
    try:
        PublicKey(bytes(data))
        return True
    except ValueError:
        return False
