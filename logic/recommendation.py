"""Weather-driven filtering of the closet into recommended tops and bottoms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from models.clothing_item import ClothingItem


@dataclass(frozen=True)
class Recommendation:
    tag: str
    tops: List[ClothingItem] = field(default_factory=list)
    bottoms: List[ClothingItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tops and not self.bottoms


def recommend(wardrobe: Iterable[ClothingItem], tag: str) -> Recommendation:
    """Keep items suited to ``tag`` and split them by type, preserving order."""

    tops: List[ClothingItem] = []
    bottoms: List[ClothingItem] = []
    for item in wardrobe:
        if item.weather != tag:
            continue
        if item.type == "top":
            tops.append(item)
        elif item.type == "bottom":
            bottoms.append(item)
    return Recommendation(tag=tag, tops=tops, bottoms=bottoms)


def empty_state_message(kind: str, tag: str) -> str:
    """Explain an empty recommendation list (``kind`` is ``tops`` or ``bottoms``)."""

    return f"No matching {kind} found. Try adding some clothing items for {tag} weather."


__all__ = ["Recommendation", "recommend", "empty_state_message"]
