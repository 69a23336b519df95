"""
Stealth address generation and recognition (ERC-5564 SECP256k1 with view tags).

Sender:
    shared = ephemeral_private * viewing_public
    h = keccak256(compressed(shared))
    view_tag = h[0]
    stealth_public = spending_public + h * G

Recipient:
    shared = viewing_private * ephemeral_public     (same point as above)
    stealth_private = spending_private + h mod n

The view tag leaks 8 bits of h. In exchange a recipient rejects about 255 of
every 256 foreign announcements after one scalar multiplication, without the
point addition and address hash.
"""

import os
from dataclasses import dataclass
from typing import Optional, Union

from .curve import (
    RandBytes,
    address_from_point,
    keccak256,
    public_key,
    scalar_from_hash,
    shared_point,
    tweak_add,
)
from .keys import EphemeralKeyPair, generate_ephemeral_keypair
from .meta_address import MetaAddress, decode_meta_address, parse_meta_address
from .primitives import Address, PrivateScalar, PublicPoint, ViewTag
from .types import CURVE_ORDER, DerivedKeyInvalidError, InvalidStealthAddressMatchError


@dataclass(frozen=True)
class StealthAddressInfo:
    """Result of generating a stealth address for one payment."""
    address: Address
    ephemeral_public: PublicPoint
    view_tag: ViewTag


def _coerce_meta_address(meta: Union[MetaAddress, bytes, str]) -> MetaAddress:
    if isinstance(meta, MetaAddress):
        return meta
    if isinstance(meta, str):
        return parse_meta_address(meta)
    return decode_meta_address(meta)


def _coerce_point(value: Union[PublicPoint, bytes]) -> PublicPoint:
    if isinstance(value, PublicPoint):
        return value
    return PublicPoint.from_bytes(value)


def hashed_shared_secret(private: PrivateScalar, point: PublicPoint) -> bytes:
    """Keccak-256 of the compressed ECDH point private * point."""
    return keccak256(shared_point(private, point))


def generate_stealth_address(
    meta: Union[MetaAddress, bytes, str],
    ephemeral: Optional[EphemeralKeyPair] = None,
    randbytes: RandBytes = os.urandom,
) -> StealthAddressInfo:
    """
    Generate a one-time stealth address for a recipient.

    Args:
        meta: Recipient meta-address (decoded, raw bytes or 0x hex)
        ephemeral: Ephemeral key pair to use; a fresh one is drawn if omitted
        randbytes: Random source for the fresh ephemeral key

    Returns:
        StealthAddressInfo with the address, ephemeral public key and view tag

    Raises:
        InvalidMetaAddressLengthError: If the meta-address has the wrong length
        InvalidPublicKeyError: If a meta-address key is not on the curve
    """
    recipient = _coerce_meta_address(meta)

    if ephemeral is None:
        ephemeral = generate_ephemeral_keypair(randbytes)

    hashed = hashed_shared_secret(ephemeral.private, recipient.viewing_public)
    view_tag = ViewTag(hashed[0])

    stealth_public = tweak_add(recipient.spending_public, scalar_from_hash(hashed))

    return StealthAddressInfo(
        address=address_from_point(stealth_public),
        ephemeral_public=ephemeral.public,
        view_tag=view_tag,
    )


def check_stealth_address(
    ephemeral_public: Union[PublicPoint, bytes],
    spending_public: PublicPoint,
    viewing_private: PrivateScalar,
    claimed_address: Union[Address, bytes, str],
    claimed_view_tag: Union[ViewTag, int],
) -> bool:
    """
    Check whether an announced stealth address belongs to us.

    Only the viewing private key is needed. A view tag mismatch returns False
    before the stealth public key is computed.

    Args:
        ephemeral_public: Announced ephemeral public key
        spending_public: Our spending public key
        viewing_private: Our viewing private key
        claimed_address: Announced stealth address
        claimed_view_tag: View tag from the announcement metadata

    Returns:
        True if the address was generated for our keys
    """
    hashed = hashed_shared_secret(viewing_private, _coerce_point(ephemeral_public))

    tag = claimed_view_tag.value if isinstance(claimed_view_tag, ViewTag) else claimed_view_tag
    if hashed[0] != tag:
        return False

    stealth_public = tweak_add(spending_public, scalar_from_hash(hashed))
    return address_from_point(stealth_public) == Address.parse(claimed_address)


def compute_stealth_private_key(
    ephemeral_public: Union[PublicPoint, bytes],
    spending_private: PrivateScalar,
    viewing_private: PrivateScalar,
    expected_address: Optional[Union[Address, bytes, str]] = None,
) -> PrivateScalar:
    """
    Compute the private key controlling a stealth address.

    stealth_private = spending_private + keccak256(viewing_private * ephemeral_public) mod n

    Args:
        ephemeral_public: Announced ephemeral public key
        spending_private: Our spending private key
        viewing_private: Our viewing private key
        expected_address: If given, the recovered key must control this address

    Raises:
        InvalidDerivedKeyError: If the hash is zero or not below the curve order
        DerivedKeyInvalidError: If the sum reduces to zero
        InvalidStealthAddressMatchError: If the key does not control expected_address
    """
    hashed = hashed_shared_secret(viewing_private, _coerce_point(ephemeral_public))

    value = (spending_private.value + scalar_from_hash(hashed)) % CURVE_ORDER
    if value == 0:
        raise DerivedKeyInvalidError("Derived stealth private key is zero")

    private = PrivateScalar(value)
    if expected_address is not None:
        if stealth_address_from_private_key(private) != Address.parse(expected_address):
            raise InvalidStealthAddressMatchError("Recovered key does not control the stealth address")

    return private


def stealth_address_from_private_key(private: PrivateScalar) -> Address:
    """Address controlled by a private key, used to verify recovered keys."""
    return address_from_point(public_key(private))
