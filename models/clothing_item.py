"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import normalise_tags, validate_garment_type, validate_seasonal_tag


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


@dataclass
class ClothingItem:
    """A single garment in the user's closet.

    ``image`` is an opaque encoded blob (usually a ``data:`` URL) and is never
    inspected.
    """

    id: str
    user_id: str
    image: str
    type: str
    weather: str
    color: str
    style_tags: List[str] = field(default_factory=list)
    name: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None
    favorite: bool = False
    created_at: float = 0.0

    def __post_init__(self) -> None:
        self.type = validate_garment_type(self.type)
        self.weather = validate_seasonal_tag(self.weather)
        self.style_tags = normalise_tags(_ensure_list(self.style_tags))
        self.favorite = bool(self.favorite)


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose record."""

    required_fields = ["id", "user_id", "image", "type", "weather"]
    missing = [key for key in required_fields if not metadata.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        id=str(metadata["id"]),
        user_id=str(metadata["user_id"]),
        image=str(metadata["image"]),
        type=str(metadata["type"]),
        weather=str(metadata["weather"]),
        color=str(metadata.get("color") or ""),
        style_tags=_ensure_list(metadata.get("style_tags")),
        name=metadata.get("name"),
        brand=metadata.get("brand"),
        notes=metadata.get("notes"),
        favorite=bool(metadata.get("favorite", False)),
        created_at=float(metadata.get("created_at") or 0.0),
    )


__all__ = ["ClothingItem", "from_raw_metadata"]
