"""Port for reading amounts out of paid engagement receipts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tsunami.domain.model import RawRecord


@runtime_checkable
class ReceiptAmountExtractor(Protocol):
    """Return the amount in whole sats carried by a zap receipt, or 0."""

    def amount_sats(self, receipt: RawRecord) -> int: ...

    def sender_id(self, receipt: RawRecord) -> str | None: ...


__all__ = ["ReceiptAmountExtractor"]
