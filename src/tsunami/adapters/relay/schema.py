"""Wire schemas for relay gateway responses."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)

type HexId = str


class RelayBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Relay %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class RelayEventPayload(RelayBaseModel):
    """A signed event as relays serialize it (NIP-01)."""

    id: HexId
    pubkey: HexId
    kind: int = Field(ge=0)
    created_at: int
    tags: list[list[str]] = Field(default_factory=list)
    content: str = ""
    sig: str = ""

    @field_validator("tags", mode="before")
    @classmethod
    def _stringify_tags(cls, value: object) -> object:
        # some relays emit numbers inside tag arrays
        if not isinstance(value, list):
            return value
        return [
            [item if isinstance(item, str) else str(item) for item in tag]
            if isinstance(tag, list)
            else tag
            for tag in value
        ]
