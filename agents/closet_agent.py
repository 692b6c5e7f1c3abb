"""Closet agent coordinating wardrobe mutations for the signed-in user."""

from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Any, Dict, List, Optional

from closet_app.errors import NotAuthenticatedError, NotFoundError, StorageError
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.validation import (
    ClothingItemInput,
    ClothingItemUpdate,
    OutfitInput,
    OutfitUpdate,
    parse_input,
)
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from tools.observability import instrument_operation
from tools.wardrobe_store import WardrobeStore


LOGGER = get_logger(__name__)


class ClosetAgent:
    """Keeps an in-memory view of the user's clothing and outfits.

    Every mutation is followed by :meth:`refresh`, which re-reads both lists in
    full from the store rather than patching the cached copies.
    """

    def __init__(self, store: WardrobeStore) -> None:
        self.store = store
        self.user_id: Optional[str] = None
        self.clothing_items: List[ClothingItem] = []
        self.outfits: List[Outfit] = []
        self.error: Optional[str] = None

    def set_user(self, user_id: Optional[str]) -> None:
        """Switch the active user; ``None`` clears the cached lists."""

        self.user_id = user_id
        self.error = None
        if user_id:
            self.refresh()
        else:
            self.clothing_items = []
            self.outfits = []

    def _require_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticatedError()
        return self.user_id

    def _fail(self, message: str) -> None:
        self.error = message

    def refresh(self) -> None:
        """Re-query clothing and outfits for the active user."""

        if not self.user_id:
            return
        try:
            self.clothing_items = self.store.list_clothing_for_user(self.user_id)
            self.outfits = self.store.list_outfits_for_user(self.user_id)
        except StorageError:
            self._fail("Failed to load your closet")
            raise

    # clothing

    @instrument_operation("closet.add_clothing_item")
    def add_clothing_item(self, payload: Dict[str, Any]) -> ClothingItem:
        user_id = self._require_user()
        data = parse_input(ClothingItemInput, payload)
        try:
            item = self.store.add_clothing(user_id, data.model_dump())
        except StorageError:
            self._fail("Failed to add clothing item")
            raise
        self.refresh()
        return item

    def get_clothing_item(self, item_id: str) -> ClothingItem:
        user_id = self._require_user()
        item = self.store.get_clothing(item_id)
        if not item or item.user_id != user_id:
            raise NotFoundError(f"Clothing item {item_id} not found")
        return item

    @instrument_operation("closet.update_clothing_item")
    def update_clothing_item(self, item_id: str, changes: Dict[str, Any]) -> ClothingItem:
        current = self.get_clothing_item(item_id)
        update = parse_input(ClothingItemUpdate, changes).model_dump(exclude_none=True)
        merged = ClothingItem(**{**asdict(current), **update})
        try:
            stored = self.store.update_clothing(merged)
        except StorageError:
            self._fail("Failed to update clothing item")
            raise
        self.refresh()
        return stored

    @instrument_operation("closet.delete_clothing_item")
    def delete_clothing_item(self, item_id: str) -> List[str]:
        """Delete an item and every outfit that uses it; return removed outfit ids."""

        with operation_context("agent:closet.delete_clothing_item") as correlation_id:
            self.get_clothing_item(item_id)
            try:
                self.store.delete_clothing(item_id)
            except StorageError:
                self._fail("Failed to delete clothing item")
                raise

            removed: List[str] = []
            for outfit in self.store.list_outfits_for_user(self._require_user()):
                if not outfit.references(item_id):
                    continue
                try:
                    self.store.delete_outfit(outfit.id)
                    removed.append(outfit.id)
                except StorageError as exc:
                    # Cascade order is best effort.
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "cascade_delete_skipped",
                        outfit_id=outfit.id,
                        correlation_id=correlation_id,
                        error=exc.message,
                    )
            self.refresh()
            log_event(
                LOGGER,
                logging.INFO,
                "clothing_item_deleted",
                item_id=item_id,
                cascaded_outfits=len(removed),
                correlation_id=correlation_id,
            )
            return removed

    @instrument_operation("closet.toggle_favorite")
    def toggle_favorite(self, item_id: str) -> ClothingItem:
        self.get_clothing_item(item_id)
        try:
            toggled = self.store.toggle_clothing_favorite(item_id)
        except StorageError:
            self._fail("Failed to update favorite status")
            raise
        self.refresh()
        if toggled is None:
            raise NotFoundError(f"Clothing item {item_id} not found")
        return toggled

    def get_favorites(self) -> List[ClothingItem]:
        if not self.user_id:
            return []
        return self.store.list_favorite_clothing(self.user_id)

    def get_by_type(self, garment_type: str) -> List[ClothingItem]:
        if not self.user_id:
            return []
        return self.store.list_clothing_by_type(self.user_id, garment_type)

    def get_by_weather(self, weather: str) -> List[ClothingItem]:
        if not self.user_id:
            return []
        return self.store.list_clothing_by_weather(self.user_id, weather)

    # outfits

    @instrument_operation("closet.create_outfit")
    def create_outfit(self, payload: Dict[str, Any]) -> Outfit:
        user_id = self._require_user()
        data = parse_input(OutfitInput, payload)
        try:
            outfit = self.store.create_outfit(
                user_id=user_id,
                name=data.name,
                top_id=data.top_id,
                bottom_id=data.bottom_id,
                tags=data.tags,
                favorite=False,
            )
        except StorageError:
            self._fail("Failed to create outfit")
            raise
        self.refresh()
        return outfit

    def get_outfit(self, outfit_id: str) -> Outfit:
        user_id = self._require_user()
        outfit = self.store.get_outfit(outfit_id)
        if not outfit or outfit.user_id != user_id:
            raise NotFoundError(f"Outfit {outfit_id} not found")
        return outfit

    @instrument_operation("closet.update_outfit")
    def update_outfit(self, outfit_id: str, changes: Dict[str, Any]) -> Outfit:
        current = self.get_outfit(outfit_id)
        update = parse_input(OutfitUpdate, changes).model_dump(exclude_none=True)
        try:
            stored = self.store.update_outfit(replace(current, **update))
        except StorageError:
            self._fail("Failed to update outfit")
            raise
        self.refresh()
        return stored

    @instrument_operation("closet.delete_outfit")
    def delete_outfit(self, outfit_id: str) -> None:
        self.get_outfit(outfit_id)
        try:
            self.store.delete_outfit(outfit_id)
        except StorageError:
            self._fail("Failed to delete outfit")
            raise
        self.refresh()

    @instrument_operation("closet.toggle_outfit_favorite")
    def toggle_outfit_favorite(self, outfit_id: str) -> Outfit:
        self.get_outfit(outfit_id)
        try:
            toggled = self.store.toggle_outfit_favorite(outfit_id)
        except StorageError:
            self._fail("Failed to update outfit favorite status")
            raise
        self.refresh()
        if toggled is None:
            raise NotFoundError(f"Outfit {outfit_id} not found")
        return toggled

    def get_favorite_outfits(self) -> List[Outfit]:
        if not self.user_id:
            return []
        return self.store.list_favorite_outfits(self.user_id)


__all__ = ["ClosetAgent"]
