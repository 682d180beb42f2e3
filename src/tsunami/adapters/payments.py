"""Read zap amounts from the zap request embedded in a receipt."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tsunami.domain.model import RawRecord

log = getLogger(__name__)

MSATS_PER_SAT = 1000


def _zap_request(receipt: RawRecord) -> dict[str, object] | None:
    description = receipt.first_value("description")
    if not description:
        return None
    try:
        request = json.loads(description)
    except json.JSONDecodeError:
        log.debug("Zap receipt %s carries an unparsable description", receipt.global_id)
        return None
    return request if isinstance(request, dict) else None


def _tag_value(request: dict[str, object], name: str) -> str | None:
    tags = request.get("tags")
    if not isinstance(tags, list):
        return None
    for tag in tags:
        if isinstance(tag, list) and len(tag) >= 2 and tag[0] == name:  # noqa: PLR2004
            return str(tag[1])
    return None


class DescriptionAmountExtractor:
    """Trust the millisat ``amount`` the sender asked for.

    The invoice itself is not decoded and nothing is verified, so amounts are
    only as honest as the zap request.
    """

    def amount_sats(self, receipt: RawRecord) -> int:
        request = _zap_request(receipt)
        if request is None:
            return 0
        raw = _tag_value(request, "amount")
        if raw is None:
            return 0
        try:
            msats = int(raw)
        except ValueError:
            return 0
        return max(msats, 0) // MSATS_PER_SAT

    def sender_id(self, receipt: RawRecord) -> str | None:
        request = _zap_request(receipt)
        if request is not None:
            pubkey = request.get("pubkey")
            if isinstance(pubkey, str) and pubkey:
                return pubkey
        return receipt.first_value("P")
