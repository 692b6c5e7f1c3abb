"""Local sign-in stand-in backed by the session marker and the users collection."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from closet_app.errors import NotAuthenticatedError, ValidationError
from closet_app.logging_config import get_logger, log_event, operation_context
from logic.validation import LoginInput, ProfileUpdate, SignupInput, parse_input
from memory.local_storage import SessionMarkerStore
from models.user import User, UserPreferences
from tools.wardrobe_store import WardrobeStore


LOGGER = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthAgent:
    """Signs a single local user in and out.

    There is no server: the marker in local storage remembers who signed up on
    this device, and login compares against it.
    """

    def __init__(self, store: WardrobeStore, markers: SessionMarkerStore) -> None:
        self.store = store
        self.markers = markers
        self.current_user: Optional[User] = None

    def restore(self) -> Optional[User]:
        """Reload the remembered user, dropping a marker whose user is gone."""

        marker = self.markers.load()
        if not marker:
            return None
        user = self.store.get_user(marker.id)
        if user is None:
            self.markers.clear()
            return None
        self.current_user = user
        return user

    def signup(self, payload: Dict[str, Any]) -> User:
        data = parse_input(SignupInput, payload)
        with operation_context("agent:auth.signup") as correlation_id:
            user = self.store.create_user(
                name=data.name.strip(),
                email=data.email,
                preferences=UserPreferences(dark_mode=False),
            )
            self.markers.save(user.id, data.email, data.password)
            self.current_user = user
            log_event(LOGGER, logging.INFO, "user_signed_up", user_id=user.id, correlation_id=correlation_id)
            return user

    def login(self, payload: Dict[str, Any]) -> User:
        data = parse_input(LoginInput, payload)
        with operation_context("agent:auth.login") as correlation_id:
            marker = self.markers.load()
            user = None
            if marker and marker.matches(data.email, data.password):
                user = self.store.get_user(marker.id)
            if user is None:
                log_event(LOGGER, logging.INFO, "login_rejected", correlation_id=correlation_id)
                raise ValidationError(INVALID_CREDENTIALS)
            self.current_user = user
            log_event(LOGGER, logging.INFO, "user_logged_in", user_id=user.id, correlation_id=correlation_id)
            return user

    def logout(self) -> None:
        self.markers.clear()
        self.current_user = None

    def require_user(self) -> User:
        if not self.current_user:
            raise NotAuthenticatedError()
        return self.current_user

    def update_profile(self, changes: Dict[str, Any]) -> User:
        user = self.require_user()
        update = parse_input(ProfileUpdate, changes)
        preferences = user.preferences
        if update.dark_mode is not None:
            preferences = replace(preferences, dark_mode=update.dark_mode)
        if "location" in update.model_fields_set:
            preferences = replace(preferences, location=update.location or None)
        updated = replace(
            user,
            name=update.name if update.name is not None else user.name,
            gender=(update.gender or None) if "gender" in update.model_fields_set else user.gender,
            preferences=preferences,
        )
        self.store.update_user(updated)
        self.current_user = updated
        return updated


__all__ = ["AuthAgent", "INVALID_CREDENTIALS"]
