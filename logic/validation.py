"""Pydantic schemas and helpers for validating user input before it is stored."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as SchemaValidationError

from closet_app.errors import ValidationError
from models.taxonomy import TIME_OF_DAY_HOURS, TODAY, WEEKDAYS

GarmentType = Literal["top", "bottom"]
SeasonalTag = Literal["summer", "winter", "inbetween"]

M = TypeVar("M", bound=BaseModel)

MIN_PASSWORD_LENGTH = 6


def _require_tags(tags: List[str]) -> List[str]:
    cleaned = [tag.strip() for tag in tags if tag and tag.strip()]
    if not cleaned:
        raise ValueError("Please select at least one style tag")
    return cleaned


class ClothingItemInput(BaseModel):
    """Fields a user supplies when adding a garment."""

    image: str
    type: GarmentType
    weather: SeasonalTag
    color: str = ""
    style_tags: List[str] = Field(default_factory=list, validate_default=True)
    name: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("image")
    @classmethod
    def _image_present(cls, image: str) -> str:
        if not image.strip():
            raise ValueError("Please upload an image")
        return image

    @field_validator("style_tags")
    @classmethod
    def _tags_present(cls, tags: List[str]) -> List[str]:
        return _require_tags(tags)


class ClothingItemUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    image: Optional[str] = Field(default=None, min_length=1)
    type: Optional[GarmentType] = None
    weather: Optional[SeasonalTag] = None
    color: Optional[str] = None
    style_tags: Optional[List[str]] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None
    favorite: Optional[bool] = None

    @field_validator("style_tags")
    @classmethod
    def _tags_present_when_given(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return None if tags is None else _require_tags(tags)


class OutfitInput(BaseModel):
    name: str = Field(min_length=1)
    top_id: str = Field(min_length=1)
    bottom_id: str = Field(min_length=1)
    tags: List[str] = []


class OutfitUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    top_id: Optional[str] = Field(default=None, min_length=1)
    bottom_id: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    favorite: Optional[bool] = None


class LoginInput(BaseModel):
    email: str
    password: str

    @model_validator(mode="after")
    def _credentials_present(self) -> "LoginInput":
        if not self.email or not self.password:
            raise ValueError("Email and password are required")
        return self


class SignupInput(LoginInput):
    name: str
    confirm_password: str

    @model_validator(mode="after")
    def _signup_rules(self) -> "SignupInput":
        if not self.name.strip():
            raise ValueError("Name is required")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return self


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    gender: Optional[str] = None
    dark_mode: Optional[bool] = None
    location: Optional[str] = None

    @field_validator("location")
    @classmethod
    def _blank_location_clears(cls, location: Optional[str]) -> Optional[str]:
        if location is None:
            return None
        return location.strip() or None


class SlotQuery(BaseModel):
    """A day/time-of-day selection from the home screen."""

    day: str = TODAY
    time_of_day: str = "morning"

    @field_validator("day")
    @classmethod
    def _known_day(cls, day: str) -> str:
        key = day.strip().lower()
        if key != TODAY and key not in WEEKDAYS:
            raise ValueError(f"day must be '{TODAY}' or one of {WEEKDAYS}")
        return key

    @field_validator("time_of_day")
    @classmethod
    def _known_time(cls, time_of_day: str) -> str:
        key = time_of_day.strip().lower()
        if key not in TIME_OF_DAY_HOURS:
            raise ValueError(f"time_of_day must be one of {sorted(TIME_OF_DAY_HOURS)}")
        return key


def _first_message(exc: SchemaValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    message = str(errors[0].get("msg", "Invalid input"))
    # Pydantic prefixes messages raised from validators.
    return message.removeprefix("Value error, ")


def parse_input(model: Type[M], payload: Dict[str, Any]) -> M:
    """Validate ``payload`` against ``model`` or raise :class:`ValidationError`."""

    try:
        return model.model_validate(payload)
    except SchemaValidationError as exc:
        details = [
            {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
            for error in exc.errors()
        ]
        raise ValidationError(_first_message(exc), details=details) from exc


__all__ = [
    "ClothingItemInput",
    "ClothingItemUpdate",
    "OutfitInput",
    "OutfitUpdate",
    "LoginInput",
    "SignupInput",
    "ProfileUpdate",
    "SlotQuery",
    "parse_input",
]
