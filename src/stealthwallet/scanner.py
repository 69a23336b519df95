"""
Announcement scanning.

Runs recognition over a finite, externally supplied sequence of announcements
and recovers the private key of every match. The scanner keeps no state
between calls: fetching, pagination and the scan cursor belong to the caller
(see ``storage.config_storage.ConfigStore`` for the cursor).
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from typing import Iterable, Iterator, Optional, TypeVar

from .metadata import unpack_view_tag
from .models import Announcement, ScanMatch
from .primitives import PrivateScalar, PublicPoint
from .stealth import check_stealth_address, compute_stealth_private_key
from .types import SCHEME_ID, InvalidMetadataError, InvalidPublicKeyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Block range size for log queries (RPC providers cap range sizes)
DEFAULT_BLOCK_CHUNK_SIZE = 10_000


def check_announcement(
    announcement: Announcement,
    spending_public: PublicPoint,
    viewing_private: PrivateScalar,
    spending_private: Optional[PrivateScalar] = None,
) -> Optional[ScanMatch]:
    """
    Check one announcement against our keys.

    Announcements for another scheme are ignored. Announcements with empty
    metadata or with an ephemeral key that is not a curve point are skipped
    with a warning.

    Returns:
        ScanMatch if the announcement is ours, None otherwise

    Raises:
        InvalidStealthAddressMatchError: If spending_private does not belong
            to spending_public, so the recovered key cannot spend the match
    """
    if announcement.scheme_id != SCHEME_ID:
        return None

    try:
        view_tag = unpack_view_tag(announcement.metadata)
        ephemeral_public = PublicPoint.from_bytes(announcement.ephemeral_public_key)
    except (InvalidMetadataError, InvalidPublicKeyError) as e:
        logger.warning(
            "Skipping malformed announcement in tx %s (block %d): %s",
            announcement.transaction_hash,
            announcement.block_number,
            e,
        )
        return None

    is_ours = check_stealth_address(
        ephemeral_public,
        spending_public,
        viewing_private,
        announcement.stealth_address,
        view_tag,
    )
    if not is_ours:
        return None

    private_key = None
    if spending_private is not None:
        private_key = compute_stealth_private_key(
            ephemeral_public,
            spending_private,
            viewing_private,
            expected_address=announcement.stealth_address,
        )

    return ScanMatch(announcement=announcement, private_key=private_key)


def scan_announcements(
    announcements: Iterable[Announcement],
    spending_public: PublicPoint,
    viewing_private: PrivateScalar,
    spending_private: Optional[PrivateScalar] = None,
) -> Iterator[ScanMatch]:
    """
    Yield the announcements that belong to our keys, in arrival order.

    This is a generator: callers can stop between items, and a later call
    can resume from any point of the sequence.

    Args:
        announcements: Announcements in chain order
        spending_public: Our spending public key
        viewing_private: Our viewing private key
        spending_private: Our spending private key; omit for a view-only scan

    Yields:
        ScanMatch for each owned announcement
    """
    scanned = 0
    found = 0
    for announcement in announcements:
        scanned += 1
        match = check_announcement(
            announcement, spending_public, viewing_private, spending_private
        )
        if match is not None:
            found += 1
            logger.debug(
                "Found stealth payment to %s in block %d",
                match.address,
                announcement.block_number,
            )
            yield match

        if scanned % 1000 == 0:
            logger.debug("Scanned %d announcements, %d found", scanned, found)

    logger.debug("Scan finished: %d announcements, %d found", scanned, found)


def scan_announcements_parallel(
    announcements: Iterable[Announcement],
    spending_public: PublicPoint,
    viewing_private: PrivateScalar,
    spending_private: Optional[PrivateScalar] = None,
    max_workers: Optional[int] = None,
) -> list[ScanMatch]:
    """
    Scan with a thread pool. Results keep arrival order.

    Checks are independent, so the order of evaluation does not matter;
    ``Executor.map`` returns results in input order.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(
            lambda a: check_announcement(a, spending_public, viewing_private, spending_private),
            announcements,
        )
        return [match for match in results if match is not None]


def iter_chunks(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Split items into lists of at most ``size`` elements."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")

    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def block_ranges(
    start_block: int,
    end_block: int,
    chunk_size: int = DEFAULT_BLOCK_CHUNK_SIZE,
) -> Iterator[tuple[int, int]]:
    """
    Yield inclusive (from, to) block ranges covering start..end.

    Used by chain clients to fetch announcement logs in pieces.
    """
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")

    start = start_block
    while start <= end_block:
        end = min(start + chunk_size - 1, end_block)
        yield start, end
        start = end + 1
