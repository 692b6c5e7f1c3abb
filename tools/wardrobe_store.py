"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import contextlib
import json
import sqlite3
import time
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from uuid import uuid4

from closet_app.errors import StorageError
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit
from models.user import User, UserPreferences


class WardrobeStore:
    """Persistence interface for users, clothing items and outfits."""

    # users
    def create_user(self, name: str, email: str, gender: str | None = None,
                    preferences: UserPreferences | None = None) -> User:
        raise NotImplementedError

    def get_user(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def update_user(self, user: User) -> User:
        raise NotImplementedError

    def delete_user(self, user_id: str) -> bool:
        raise NotImplementedError

    # clothing
    def add_clothing(self, user_id: str, fields: Dict[str, Any]) -> ClothingItem:
        raise NotImplementedError

    def get_clothing(self, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_clothing_for_user(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def list_clothing_by_type(self, user_id: str, garment_type: str) -> List[ClothingItem]:
        raise NotImplementedError

    def list_clothing_by_weather(self, user_id: str, weather: str) -> List[ClothingItem]:
        raise NotImplementedError

    def list_favorite_clothing(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def update_clothing(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def toggle_clothing_favorite(self, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_clothing(self, item_id: str) -> bool:
        raise NotImplementedError

    # outfits
    def create_outfit(self, user_id: str, name: str, top_id: str, bottom_id: str,
                      tags: List[str] | None = None, favorite: bool = False) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        raise NotImplementedError

    def list_favorite_outfits(self, user_id: str) -> List[Outfit]:
        raise NotImplementedError

    def update_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def toggle_outfit_favorite(self, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, outfit_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store.

    Three collections (``users``, ``clothing``, ``outfits``) with secondary
    indexes by owner, type, weather and (owner, favorite). Every sqlite failure
    surfaces as :class:`StorageError`.
    """

    def __init__(self, database_path: str | Path = "data/closet.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not open closet database: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"Closet storage operation failed: {exc}") from exc
        finally:
            conn.close()

    def _ensure_tables(self) -> None:
        with self._transaction() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    gender TEXT,
                    preferences TEXT
                );
                CREATE TABLE IF NOT EXISTS clothing (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT,
                    image TEXT NOT NULL,
                    type TEXT NOT NULL,
                    weather TEXT NOT NULL,
                    color TEXT,
                    style_tags TEXT,
                    brand TEXT,
                    notes TEXT,
                    favorite INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL
                );
                CREATE INDEX IF NOT EXISTS clothing_by_user ON clothing(user_id);
                CREATE INDEX IF NOT EXISTS clothing_by_type ON clothing(type);
                CREATE INDEX IF NOT EXISTS clothing_by_weather ON clothing(weather);
                CREATE INDEX IF NOT EXISTS clothing_by_favorite ON clothing(user_id, favorite);
                CREATE TABLE IF NOT EXISTS outfits (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    top_id TEXT NOT NULL,
                    bottom_id TEXT NOT NULL,
                    tags TEXT,
                    favorite INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL
                );
                CREATE INDEX IF NOT EXISTS outfits_by_user ON outfits(user_id);
                CREATE INDEX IF NOT EXISTS outfits_by_favorite ON outfits(user_id, favorite);
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    # users

    def _row_to_user(self, row: sqlite3.Row) -> User:
        prefs = json.loads(row["preferences"]) if row["preferences"] else {}
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            gender=row["gender"],
            preferences=UserPreferences(
                dark_mode=bool(prefs.get("dark_mode", False)),
                location=prefs.get("location"),
            ),
        )

    def create_user(self, name: str, email: str, gender: str | None = None,
                    preferences: UserPreferences | None = None) -> User:
        user = User(
            id=str(uuid4()),
            name=name,
            email=email,
            gender=gender,
            preferences=preferences or UserPreferences(),
        )
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO users (id, name, email, gender, preferences) VALUES (?, ?, ?, ?, ?)",
                (user.id, user.name, user.email, user.gender, json.dumps(asdict(user.preferences))),
            )
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def update_user(self, user: User) -> User:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO users (id, name, email, gender, preferences) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name, email=excluded.email,
                    gender=excluded.gender, preferences=excluded.preferences
                """,
                (user.id, user.name, user.email, user.gender, json.dumps(asdict(user.preferences))),
            )
        return user

    def delete_user(self, user_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cursor.rowcount > 0

    # clothing

    def _row_to_item(self, row: sqlite3.Row) -> ClothingItem:
        record = dict(row)
        record["style_tags"] = self._deserialise_list(row["style_tags"])
        return from_raw_metadata(record)

    def _item_values(self, item: ClothingItem) -> tuple:
        return (
            item.user_id,
            item.name,
            item.image,
            item.type,
            item.weather,
            item.color,
            self._serialise_list(item.style_tags),
            item.brand,
            item.notes,
            int(item.favorite),
            item.created_at,
            item.id,
        )

    def add_clothing(self, user_id: str, fields: Dict[str, Any]) -> ClothingItem:
        """Insert a new item; id, favorite and created_at are assigned here."""

        fields = {k: v for k, v in fields.items() if k not in {"id", "user_id", "favorite", "created_at"}}
        try:
            item = ClothingItem(
                id=str(uuid4()),
                user_id=user_id,
                favorite=False,
                created_at=time.time(),
                **fields,
            )
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Invalid clothing record: {exc}") from exc
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO clothing (
                    user_id, name, image, type, weather, color, style_tags,
                    brand, notes, favorite, created_at, id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._item_values(item),
            )
        return item

    def get_clothing(self, item_id: str) -> Optional[ClothingItem]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM clothing WHERE id = ?", (item_id,)).fetchone()
        return self._row_to_item(row) if row else None

    def _select_items(self, where: str, params: tuple) -> List[ClothingItem]:
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM clothing WHERE {where} ORDER BY created_at, rowid",
                params,
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def list_clothing_for_user(self, user_id: str) -> List[ClothingItem]:
        return self._select_items("user_id = ?", (user_id,))

    def list_clothing_by_type(self, user_id: str, garment_type: str) -> List[ClothingItem]:
        return self._select_items("user_id = ? AND type = ?", (user_id, garment_type))

    def list_clothing_by_weather(self, user_id: str, weather: str) -> List[ClothingItem]:
        return self._select_items("user_id = ? AND weather = ?", (user_id, weather))

    def list_favorite_clothing(self, user_id: str) -> List[ClothingItem]:
        return self._select_items("user_id = ? AND favorite = 1", (user_id,))

    def update_clothing(self, item: ClothingItem) -> ClothingItem:
        """Write every field of ``item`` back, inserting it if missing."""

        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE clothing SET
                    user_id = ?, name = ?, image = ?, type = ?, weather = ?, color = ?,
                    style_tags = ?, brand = ?, notes = ?, favorite = ?, created_at = ?
                WHERE id = ?
                """,
                self._item_values(item),
            )
            if cursor.rowcount == 0:
                conn.execute(
                    """
                    INSERT INTO clothing (
                        user_id, name, image, type, weather, color, style_tags,
                        brand, notes, favorite, created_at, id
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    self._item_values(item),
                )
        return item

    def toggle_clothing_favorite(self, item_id: str) -> Optional[ClothingItem]:
        current = self.get_clothing(item_id)
        if not current:
            return None
        return self.update_clothing(replace(current, favorite=not current.favorite))

    def delete_clothing(self, item_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM clothing WHERE id = ?", (item_id,))
            return cursor.rowcount > 0

    # outfits

    def _row_to_outfit(self, row: sqlite3.Row) -> Outfit:
        return Outfit(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            top_id=row["top_id"],
            bottom_id=row["bottom_id"],
            tags=self._deserialise_list(row["tags"]),
            favorite=bool(row["favorite"]),
            created_at=row["created_at"],
        )

    def _outfit_values(self, outfit: Outfit) -> tuple:
        return (
            outfit.user_id,
            outfit.name,
            outfit.top_id,
            outfit.bottom_id,
            self._serialise_list(outfit.tags),
            int(outfit.favorite),
            outfit.created_at,
            outfit.id,
        )

    def create_outfit(self, user_id: str, name: str, top_id: str, bottom_id: str,
                      tags: List[str] | None = None, favorite: bool = False) -> Outfit:
        outfit = Outfit(
            id=str(uuid4()),
            user_id=user_id,
            name=name,
            top_id=top_id,
            bottom_id=bottom_id,
            tags=list(tags or []),
            favorite=favorite,
            created_at=time.time(),
        )
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO outfits (user_id, name, top_id, bottom_id, tags, favorite, created_at, id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._outfit_values(outfit),
            )
        return outfit

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM outfits WHERE id = ?", (outfit_id,)).fetchone()
        return self._row_to_outfit(row) if row else None

    def _select_outfits(self, where: str, params: tuple) -> List[Outfit]:
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM outfits WHERE {where} ORDER BY created_at, rowid",
                params,
            ).fetchall()
        return [self._row_to_outfit(row) for row in rows]

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        return self._select_outfits("user_id = ?", (user_id,))

    def list_favorite_outfits(self, user_id: str) -> List[Outfit]:
        return self._select_outfits("user_id = ? AND favorite = 1", (user_id,))

    def update_outfit(self, outfit: Outfit) -> Outfit:
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE outfits SET
                    user_id = ?, name = ?, top_id = ?, bottom_id = ?, tags = ?,
                    favorite = ?, created_at = ?
                WHERE id = ?
                """,
                self._outfit_values(outfit),
            )
            if cursor.rowcount == 0:
                conn.execute(
                    """
                    INSERT INTO outfits (user_id, name, top_id, bottom_id, tags, favorite, created_at, id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    self._outfit_values(outfit),
                )
        return outfit

    def toggle_outfit_favorite(self, outfit_id: str) -> Optional[Outfit]:
        current = self.get_outfit(outfit_id)
        if not current:
            return None
        return self.update_outfit(replace(current, favorite=not current.favorite))

    def delete_outfit(self, outfit_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM outfits WHERE id = ?", (outfit_id,))
            return cursor.rowcount > 0


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
