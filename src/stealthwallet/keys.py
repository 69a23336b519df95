"""Key generation and derivation for stealthwallet."""

import os
from dataclasses import dataclass
from typing import Union

from .curve import RandBytes, address_from_point, keccak256, public_key, random_scalar
from .primitives import Address, PrivateScalar, PublicPoint, hex_to_bytes
from .types import (
    CURVE_ORDER,
    SIGNATURE_SIZE,
    InvalidDerivedKeyError,
    InvalidSignatureLengthError,
)


@dataclass(frozen=True)
class SpendViewKeyPair:
    """A recipient's long-lived spending and viewing keys."""
    spending_private: PrivateScalar
    spending_public: PublicPoint
    viewing_private: PrivateScalar
    viewing_public: PublicPoint

    @classmethod
    def from_private_keys(
        cls,
        spending_private: PrivateScalar,
        viewing_private: PrivateScalar,
    ) -> "SpendViewKeyPair":
        """Build a key pair, deriving both public keys."""
        return cls(
            spending_private=spending_private,
            spending_public=public_key(spending_private),
            viewing_private=viewing_private,
            viewing_public=public_key(viewing_private),
        )


@dataclass(frozen=True)
class EphemeralKeyPair:
    """Single-use sender key pair. Never persisted."""
    private: PrivateScalar
    public: PublicPoint


def generate_random_keys(randbytes: RandBytes = os.urandom) -> SpendViewKeyPair:
    """
    Generate spending and viewing keys from a secure random source.

    This is the recommended way to create new keys.

    Args:
        randbytes: Source of secure random bytes (defaults to os.urandom)

    Returns:
        A new SpendViewKeyPair with distinct private keys
    """
    spending_private = random_scalar(randbytes)
    viewing_private = random_scalar(randbytes)
    while viewing_private == spending_private:
        viewing_private = random_scalar(randbytes)

    return SpendViewKeyPair.from_private_keys(spending_private, viewing_private)


def _derive_scalar(portion: bytes, role: str) -> PrivateScalar:
    value = int.from_bytes(keccak256(portion), "big")
    if not 0 < value < CURVE_ORDER:
        raise InvalidDerivedKeyError(f"Derived {role} key is invalid")
    return PrivateScalar(value)


def derive_keys_from_signature(signature: Union[bytes, str]) -> SpendViewKeyPair:
    """
    Derive spending and viewing keys from a 65-byte signature.

    The first 32 bytes (r) hash to the spending key and the next 32 bytes (s)
    hash to the viewing key, each with Keccak-256. The recovery byte (v) is
    ignored. The same signature always yields the same keys, so a signature
    used here must never be reused in another context.

    Args:
        signature: 65 raw bytes, or a 0x-prefixed hex string of 65 bytes

    Returns:
        The derived SpendViewKeyPair

    Raises:
        InvalidSignatureLengthError: If the signature is not 65 bytes
        InvalidDerivedKeyError: If a hash lands outside [1, n-1]
    """
    if isinstance(signature, str):
        try:
            signature = hex_to_bytes(signature)
        except ValueError as e:
            raise InvalidSignatureLengthError(f"Invalid signature hex: {e}") from e

    if len(signature) != SIGNATURE_SIZE:
        raise InvalidSignatureLengthError(
            f"Invalid signature length. Expected {SIGNATURE_SIZE} bytes, got {len(signature)}"
        )

    spending_private = _derive_scalar(signature[0:32], "spending")
    viewing_private = _derive_scalar(signature[32:64], "viewing")

    return SpendViewKeyPair.from_private_keys(spending_private, viewing_private)


def generate_ephemeral_keypair(randbytes: RandBytes = os.urandom) -> EphemeralKeyPair:
    """Generate a random single-use key pair for one payment."""
    return ephemeral_keypair_from_private(random_scalar(randbytes))


def ephemeral_keypair_from_private(private: PrivateScalar) -> EphemeralKeyPair:
    """Build an ephemeral key pair from a known private scalar."""
    return EphemeralKeyPair(private=private, public=public_key(private))


def derive_main_address(spending_public: PublicPoint) -> Address:
    """Derive the wallet's main address from its spending public key."""
    return address_from_point(spending_public)
