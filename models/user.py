"""User profile models."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class UserPreferences:
    dark_mode: bool = False
    location: Optional[str] = None


@dataclass
class User:
    id: str
    name: str
    email: str
    gender: Optional[str] = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
