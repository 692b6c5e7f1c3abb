"""Outfit schema."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Outfit:
    """A named top/bottom pairing.

    ``top_id`` and ``bottom_id`` are trusted as given; their clothing types are
    not checked when the outfit is written.
    """

    id: str
    user_id: str
    name: str
    top_id: str
    bottom_id: str
    tags: List[str] = field(default_factory=list)
    favorite: bool = False
    created_at: float = 0.0

    def references(self, item_id: str) -> bool:
        return item_id in (self.top_id, self.bottom_id)
