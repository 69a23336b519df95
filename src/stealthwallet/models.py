"""Models for announcements and discovered stealth payments."""

from dataclasses import dataclass
from typing import Optional

from .primitives import Address, PrivateScalar
from .types import SCHEME_ID


@dataclass(frozen=True)
class Announcement:
    """An ERC-5564 Announcement event, as delivered by the chain client."""
    stealth_address: Address
    ephemeral_public_key: bytes
    metadata: bytes
    block_number: int = 0
    transaction_hash: str = ""
    log_index: int = 0
    caller: Optional[Address] = None
    scheme_id: int = SCHEME_ID

    def sort_key(self) -> tuple[int, int]:
        """Chain ordering key (block height, log index)."""
        return (self.block_number, self.log_index)


@dataclass(frozen=True)
class ScanMatch:
    """An announcement that belongs to the scanning keys."""
    announcement: Announcement
    private_key: Optional[PrivateScalar] = None
    """Recovered stealth private key (None for view-only scans)."""

    @property
    def address(self) -> Address:
        """The stealth address that received the payment."""
        return self.announcement.stealth_address

    def can_spend(self) -> bool:
        """Whether the recovered private key is available."""
        return self.private_key is not None
