"""
Announcement metadata encoding.

The first metadata byte is always the view tag. Everything after it is opaque
to recognition. For native ETH transfers ERC-5564 lays out:

    [0]      view tag
    [1-4]    0xeeeeeeee
    [5-24]   0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE
    [25-56]  amount in wei (uint256, big-endian)
"""

from dataclasses import dataclass
from typing import Optional, Union

from .primitives import ViewTag
from .types import (
    ETH_TOKEN_ADDRESS,
    ETH_TRANSFER_MARKER,
    ETH_TRANSFER_METADATA_SIZE,
    InvalidMetadataError,
)


@dataclass(frozen=True)
class EthTransfer:
    """Parsed ETH transfer metadata."""
    view_tag: ViewTag
    amount_wei: int


def _tag_value(view_tag: Union[ViewTag, int]) -> int:
    return view_tag.value if isinstance(view_tag, ViewTag) else ViewTag(view_tag).value


def pack_metadata(view_tag: Union[ViewTag, int], extra: bytes = b"") -> bytes:
    """Create announcement metadata: the view tag followed by extra bytes."""
    return bytes([_tag_value(view_tag)]) + bytes(extra)


def unpack_view_tag(metadata: bytes) -> ViewTag:
    """
    Extract the view tag from announcement metadata.

    Raises:
        InvalidMetadataError: If metadata is empty
    """
    if not metadata:
        raise InvalidMetadataError("Announcement metadata is empty")
    return ViewTag(metadata[0])


def build_eth_transfer_metadata(view_tag: Union[ViewTag, int], amount_wei: int) -> bytes:
    """Create 57-byte ETH transfer metadata."""
    if amount_wei < 0 or amount_wei >= 1 << 256:
        raise InvalidMetadataError(f"Amount out of uint256 range: {amount_wei}")
    extra = ETH_TRANSFER_MARKER + ETH_TOKEN_ADDRESS + amount_wei.to_bytes(32, "big")
    return pack_metadata(view_tag, extra)


def parse_eth_transfer_metadata(metadata: bytes) -> Optional[EthTransfer]:
    """Parse ETH transfer metadata, or return None for any other layout."""
    if len(metadata) < ETH_TRANSFER_METADATA_SIZE:
        return None
    if metadata[1:5] != ETH_TRANSFER_MARKER or metadata[5:25] != ETH_TOKEN_ADDRESS:
        return None

    return EthTransfer(
        view_tag=ViewTag(metadata[0]),
        amount_wei=int.from_bytes(metadata[25:57], "big"),
    )
