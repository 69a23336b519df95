"""
secp256k1 scalar and point operations.

Thin adapter over coincurve. Random bytes come from an injected
``randbytes(n)`` callable so tests can supply fixed scalars.
"""

import os
from typing import Callable

from coincurve import PublicKey
from Crypto.Hash import keccak

from .primitives import Address, PrivateScalar, PublicPoint
from .types import (
    ADDRESS_SIZE,
    CURVE_ORDER,
    PRIVATE_KEY_SIZE,
    InvalidDerivedKeyError,
)

RandBytes = Callable[[int], bytes]

# Rejection sampling gives up after this many out-of-range draws. A healthy
# source fails a single draw with probability ~2^-128.
MAX_SAMPLE_ATTEMPTS = 64


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (the Ethereum hash, not NIST SHA3-256)."""
    return keccak.new(digest_bits=256, data=data).digest()


def random_scalar(randbytes: RandBytes = os.urandom) -> PrivateScalar:
    """
    Draw a uniformly random scalar in [1, CURVE_ORDER - 1].

    Args:
        randbytes: Source of secure random bytes

    Returns:
        A fresh private scalar

    Raises:
        RuntimeError: If the source keeps producing out-of-range values
    """
    for _ in range(MAX_SAMPLE_ATTEMPTS):
        candidate = int.from_bytes(randbytes(PRIVATE_KEY_SIZE), "big")
        if 0 < candidate < CURVE_ORDER:
            return PrivateScalar(candidate)
    raise RuntimeError("Random source did not produce a valid scalar")


def scalar_from_hash(digest: bytes) -> int:
    """
    Interpret a 32-byte hash as a curve scalar.

    Raises:
        InvalidDerivedKeyError: If the hash is zero or not below the curve order
    """
    value = int.from_bytes(digest, "big")
    if not 0 < value < CURVE_ORDER:
        raise InvalidDerivedKeyError("Hash does not map to a valid scalar")
    return value


def public_key(scalar: PrivateScalar) -> PublicPoint:
    """Compute scalar * G in compressed form."""
    return PublicPoint(PublicKey.from_secret(scalar.to_bytes()).format(compressed=True))


def shared_point(scalar: PrivateScalar, point: PublicPoint) -> bytes:
    """
    ECDH: compute scalar * point.

    Returns the 33-byte compressed shared point. The point is not hashed here;
    coincurve's own ``ecdh`` applies SHA-256 and is not used.
    """
    shared = PublicKey(point.to_bytes()).multiply(scalar.to_bytes())
    return shared.format(compressed=True)


def tweak_add(point: PublicPoint, tweak: int) -> PublicPoint:
    """
    Compute point + tweak * G.

    Raises:
        InvalidDerivedKeyError: If the tweak is out of range or the sum is infinity
    """
    try:
        result = PublicKey(point.to_bytes()).add(tweak.to_bytes(PRIVATE_KEY_SIZE, "big"))
    except (ValueError, OverflowError) as e:
        raise InvalidDerivedKeyError("Point tweak produced an invalid key") from e
    return PublicPoint(result.format(compressed=True))


def address_from_point(point: PublicPoint) -> Address:
    """
    Derive the account address of a public key.

    The address is the last 20 bytes of Keccak-256 over the 64-byte
    uncompressed point (without the 0x04 prefix).
    """
    uncompressed = point.uncompressed()
    return Address(keccak256(uncompressed[1:])[-ADDRESS_SIZE:])

