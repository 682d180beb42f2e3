"""Aggregate engagement receipts per target record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tsunami.domain.model import Comment, Deletion, EngagementReceipt, ReceiptType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from tsunami.domain.model import Coordinate


@dataclass(slots=True)
class EngagementTally:
    zap_count: int = 0
    zap_amount: int = 0
    reaction_count: int = 0
    comment_count: int = 0

    def __add__(self, other: EngagementTally) -> EngagementTally:
        return EngagementTally(
            zap_count=self.zap_count + other.zap_count,
            zap_amount=self.zap_amount + other.zap_amount,
            reaction_count=self.reaction_count + other.reaction_count,
            comment_count=self.comment_count + other.comment_count,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.zap_count or self.zap_amount or self.reaction_count or self.comment_count)


@dataclass(slots=True)
class EngagementTallies:
    """Tallies keyed by target global id or coordinate string."""

    by_target: dict[str, EngagementTally] = field(default_factory=dict[str, EngagementTally])

    def bucket(self, target: str) -> EngagementTally:
        tally = self.by_target.get(target)
        if tally is None:
            tally = self.by_target[target] = EngagementTally()
        return tally

    def for_record(self, global_id: str, coordinate: Coordinate | None = None) -> EngagementTally:
        """Combined tally of receipts naming the record by id or by coordinate."""

        total = EngagementTally()
        keys = (global_id,) if coordinate is None else (global_id, str(coordinate))
        for key in keys:
            if key in self.by_target:
                total = total + self.by_target[key]
        return total

    def __iter__(self) -> Iterator[str]:
        return iter(self.by_target)

    def __len__(self) -> int:
        return len(self.by_target)


def aggregate_engagement(records: Iterable[object]) -> EngagementTallies:
    """Tally zaps, reactions and comments per target.

    Zaps count only when they carry a positive amount. A reaction counts once per
    sender and target, and reactions withdrawn by their author's deletion
    record are ignored. Comments count against their root record.
    """

    items = list(records)
    withdrawn = {
        (deletion.author_id, target)
        for deletion in items
        if isinstance(deletion, Deletion)
        for target in deletion.target_ids
    }

    tallies = EngagementTallies()
    reacted: set[tuple[str, str]] = set()
    for record in items:
        match record:
            case EngagementReceipt(receipt_type=ReceiptType.ZAP) if record.amount > 0:
                if not record.target:
                    continue
                tally = tallies.bucket(record.target)
                tally.zap_count += 1
                tally.zap_amount += record.amount
            case EngagementReceipt(receipt_type=ReceiptType.REACTION):
                if (record.author_id, record.global_id) in withdrawn or not record.target:
                    continue
                if (record.sender_id, record.target) in reacted:
                    continue
                reacted.add((record.sender_id, record.target))
                tallies.bucket(record.target).reaction_count += 1
            case Comment() if record.target:
                tallies.bucket(record.target).comment_count += 1
            case _:
                continue
    return tallies
