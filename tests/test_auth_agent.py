"""Local sign-in, session marker and profile update behaviour."""

from __future__ import annotations

import base64
import json

import pytest

from agents.auth_agent import INVALID_CREDENTIALS, AuthAgent
from closet_app.errors import NotAuthenticatedError, ValidationError
from memory.local_storage import (
    SESSION_MARKER_KEY,
    InMemoryLocalStorage,
    JSONLocalStorage,
    SessionMarkerStore,
    reveal_password,
)

SIGNUP = {
    "name": "Ada",
    "email": "ada@example.com",
    "password": "secret1",
    "confirm_password": "secret1",
}


@pytest.fixture()
def storage() -> InMemoryLocalStorage:
    return InMemoryLocalStorage()


@pytest.fixture()
def auth(store, storage) -> AuthAgent:
    return AuthAgent(store, SessionMarkerStore(storage))


def test_signup_creates_user_and_marker(auth, store, storage) -> None:
    user = auth.signup(SIGNUP)

    assert auth.current_user == user
    assert store.get_user(user.id) == user
    assert user.preferences.dark_mode is False
    marker = json.loads(storage.get_item(SESSION_MARKER_KEY))
    assert marker["id"] == user.id
    assert marker["email"] == "ada@example.com"
    assert marker["password"] == base64.b64encode(b"secret1").decode("ascii")


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"name": "  "}, "Name is required"),
        ({"confirm_password": "other1"}, "Passwords do not match"),
        ({"password": "abc", "confirm_password": "abc"}, "Password must be at least 6 characters"),
        ({"email": ""}, "Email and password are required"),
    ],
)
def test_signup_validation_messages(auth, store, changes, message) -> None:
    with pytest.raises(ValidationError) as excinfo:
        auth.signup({**SIGNUP, **changes})
    assert excinfo.value.message == message
    assert auth.current_user is None


def test_login_checks_marker_credentials(auth) -> None:
    auth.signup(SIGNUP)
    auth.logout()
    assert auth.current_user is None

    with pytest.raises(ValidationError) as excinfo:
        auth.login({"email": "ada@example.com", "password": "wrong!"})
    assert excinfo.value.message == INVALID_CREDENTIALS

    # Logout forgets the marker, so the device no longer knows this user.
    with pytest.raises(ValidationError):
        auth.login({"email": "ada@example.com", "password": "secret1"})


def test_login_after_restart(store, storage) -> None:
    first = AuthAgent(store, SessionMarkerStore(storage))
    user = first.signup(SIGNUP)

    second = AuthAgent(store, SessionMarkerStore(storage))
    assert second.login({"email": "ada@example.com", "password": "secret1"}) == user

    with pytest.raises(ValidationError) as excinfo:
        second.login({"email": "", "password": ""})
    assert excinfo.value.message == "Email and password are required"


def test_restore_reloads_user(store, storage) -> None:
    user = AuthAgent(store, SessionMarkerStore(storage)).signup(SIGNUP)

    restored = AuthAgent(store, SessionMarkerStore(storage)).restore()

    assert restored == user


def test_restore_drops_stale_marker(store, storage) -> None:
    user = AuthAgent(store, SessionMarkerStore(storage)).signup(SIGNUP)
    store.delete_user(user.id)

    agent = AuthAgent(store, SessionMarkerStore(storage))

    assert agent.restore() is None
    assert storage.get_item(SESSION_MARKER_KEY) is None


def test_restore_ignores_corrupt_marker(store, storage) -> None:
    storage.set_item(SESSION_MARKER_KEY, "{not json")

    assert AuthAgent(store, SessionMarkerStore(storage)).restore() is None


def test_profile_update_requires_user(auth) -> None:
    with pytest.raises(NotAuthenticatedError):
        auth.update_profile({"dark_mode": True})


def test_profile_update_persists_preferences(auth, store) -> None:
    user = auth.signup(SIGNUP)

    updated = auth.update_profile({"dark_mode": True, "location": "Lisbon", "gender": "female"})

    assert updated.preferences.dark_mode is True
    assert updated.preferences.location == "Lisbon"
    assert updated.gender == "female"
    assert store.get_user(user.id) == updated

    cleared = auth.update_profile({"location": ""})
    assert cleared.preferences.location is None
    assert cleared.preferences.dark_mode is True
    assert cleared.gender == "female"


def test_json_local_storage_survives_reopen(tmp_path) -> None:
    path = tmp_path / "local.json"
    JSONLocalStorage(path).set_item("theme", "dark")

    reopened = JSONLocalStorage(path)
    assert reopened.get_item("theme") == "dark"
    reopened.remove_item("theme")
    assert reopened.get_item("theme") is None
    reopened.set_item("a", "1")
    reopened.clear()
    assert reopened.get_item("a") is None


def test_reveal_password_rejects_garbage() -> None:
    assert reveal_password("c2VjcmV0MQ==") == "secret1"
    assert reveal_password("***") is None


def test_blank_profile_location_is_not_saved(auth, store) -> None:
    user = auth.signup(SIGNUP)
    auth.update_profile({"location": "Lisbon"})

    updated = auth.update_profile({"location": "   "})

    assert updated.preferences.location is None
    assert store.get_user(user.id).preferences.location is None
    assert auth.update_profile({"location": "  Porto "}).preferences.location == "Porto"
