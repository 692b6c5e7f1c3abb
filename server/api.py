"""FastAPI server exposing the Virtual Closet to a local front end."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from closet_app.app import VirtualClosetApp
from closet_app.errors import (
    ClosetError,
    NetworkError,
    NotAuthenticatedError,
    NotFoundError,
    ProviderError,
    StorageError,
    ValidationError,
)
from closet_app.logging_config import configure_logging

_STATUS_BY_ERROR = [
    (ValidationError, 422),
    (NotAuthenticatedError, 401),
    (NotFoundError, 404),
    (ProviderError, 502),
    (NetworkError, 503),
    (StorageError, 500),
]


class SignupRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ProfileRequest(BaseModel):
    name: Optional[str] = None
    gender: Optional[str] = None
    dark_mode: Optional[bool] = None
    location: Optional[str] = None


class ClothingRequest(BaseModel):
    """Request payload for adding a clothing item."""

    image: str = Field("", description="Encoded image, usually a data: URL")
    type: str
    weather: str
    color: str = ""
    style_tags: List[str] = []
    name: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None


class ClothingPatch(BaseModel):
    image: Optional[str] = None
    type: Optional[str] = None
    weather: Optional[str] = None
    color: Optional[str] = None
    style_tags: Optional[List[str]] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None
    favorite: Optional[bool] = None


class OutfitRequest(BaseModel):
    name: str = ""
    top_id: str = ""
    bottom_id: str = ""
    tags: List[str] = []


class OutfitPatch(BaseModel):
    name: Optional[str] = None
    top_id: Optional[str] = None
    bottom_id: Optional[str] = None
    tags: Optional[List[str]] = None
    favorite: Optional[bool] = None


class LocationRequest(BaseModel):
    city: str


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def create_app(closet: VirtualClosetApp | None = None) -> FastAPI:
    """Build the ASGI app around a :class:`VirtualClosetApp`."""

    configure_logging()
    closet = closet or VirtualClosetApp()
    closet.restore_session()
    app = FastAPI(title="Virtual Closet", version="0.1.0")
    app.state.closet = closet

    @app.exception_handler(ClosetError)
    async def closet_error_handler(_: Request, exc: ClosetError) -> JSONResponse:
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(exc, kind)), 400)
        body: dict = {"detail": exc.message}
        if isinstance(exc, ValidationError) and exc.details:
            body["errors"] = exc.details
        return JSONResponse(status_code=status, content=body)

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "virtual-closet",
            "environment": closet.config.environment or "local",
            "signed_in": closet.current_user is not None,
        }

    @app.post("/auth/signup")
    def signup(request: SignupRequest) -> dict:
        return _plain(closet.signup(request.model_dump()))

    @app.post("/auth/login")
    def login(request: LoginRequest) -> dict:
        return _plain(closet.login(request.model_dump()))

    @app.post("/auth/logout")
    def logout() -> dict:
        closet.logout()
        return {"status": "ok"}

    @app.get("/profile")
    def get_profile() -> dict:
        return _plain(closet.auth_agent.require_user())

    @app.put("/profile")
    def update_profile(request: ProfileRequest) -> dict:
        return _plain(closet.update_profile(request.model_dump(exclude_unset=True)))

    @app.get("/profile/export")
    def export_profile() -> dict:
        return closet.export_data()

    @app.post("/profile/reset")
    def reset_profile() -> dict:
        closet.reset_data()
        return {"status": "ok"}

    @app.get("/clothing")
    def list_clothing(type: Optional[str] = None, weather: Optional[str] = None) -> list:
        closet.auth_agent.require_user()
        if type and weather:
            raise HTTPException(status_code=400, detail="Filter by type or weather, not both")
        if type:
            return _plain(closet.closet_agent.get_by_type(type))
        if weather:
            return _plain(closet.closet_agent.get_by_weather(weather))
        return _plain(closet.closet_agent.clothing_items)

    @app.post("/clothing", status_code=201)
    def add_clothing(request: ClothingRequest) -> dict:
        return _plain(closet.closet_agent.add_clothing_item(request.model_dump()))

    @app.get("/clothing/favorites")
    def favorite_clothing() -> list:
        closet.auth_agent.require_user()
        return _plain(closet.closet_agent.get_favorites())

    @app.get("/clothing/{item_id}")
    def get_clothing(item_id: str) -> dict:
        return _plain(closet.closet_agent.get_clothing_item(item_id))

    @app.patch("/clothing/{item_id}")
    def update_clothing(item_id: str, request: ClothingPatch) -> dict:
        changes = request.model_dump(exclude_unset=True)
        return _plain(closet.closet_agent.update_clothing_item(item_id, changes))

    @app.delete("/clothing/{item_id}")
    def delete_clothing(item_id: str) -> dict:
        removed = closet.closet_agent.delete_clothing_item(item_id)
        return {"status": "ok", "deleted_outfits": removed}

    @app.post("/clothing/{item_id}/favorite")
    def toggle_clothing_favorite(item_id: str) -> dict:
        return _plain(closet.closet_agent.toggle_favorite(item_id))

    @app.get("/outfits")
    def list_outfits() -> list:
        closet.auth_agent.require_user()
        return _plain(closet.closet_agent.outfits)

    @app.post("/outfits", status_code=201)
    def create_outfit(request: OutfitRequest) -> dict:
        return _plain(closet.closet_agent.create_outfit(request.model_dump()))

    @app.get("/outfits/favorites")
    def favorite_outfits() -> list:
        closet.auth_agent.require_user()
        return _plain(closet.closet_agent.get_favorite_outfits())

    @app.patch("/outfits/{outfit_id}")
    def update_outfit(outfit_id: str, request: OutfitPatch) -> dict:
        changes = request.model_dump(exclude_unset=True)
        return _plain(closet.closet_agent.update_outfit(outfit_id, changes))

    @app.delete("/outfits/{outfit_id}")
    def delete_outfit(outfit_id: str) -> dict:
        closet.closet_agent.delete_outfit(outfit_id)
        return {"status": "ok"}

    @app.post("/outfits/{outfit_id}/favorite")
    def toggle_outfit_favorite(outfit_id: str) -> dict:
        return _plain(closet.closet_agent.toggle_outfit_favorite(outfit_id))

    @app.get("/weather")
    def weather() -> dict:
        return _plain(closet.weather_agent.summary())

    @app.post("/weather/refresh")
    def refresh_weather() -> dict:
        refreshed = closet.retry_weather()
        return {"refreshed": refreshed, **_plain(closet.weather_agent.summary())}

    @app.put("/weather/location")
    def update_location(request: LocationRequest) -> dict:
        closet.weather_agent.update_location(request.city)
        return _plain(closet.weather_agent.summary())

    @app.get("/weather/forecast")
    def forecast_slot(day: str = "today", time: str = "morning") -> dict:
        slot = closet.weather_agent.forecast_for_slot(day, time)
        return {"day": day, "time_of_day": time, "slot": _plain(slot)}

    @app.get("/home")
    def home(day: str = "today", time: str = "morning") -> dict:
        closet.auth_agent.require_user()
        return _plain(closet.orchestrator.plan_home(day, time))

    return app


_app: FastAPI | None = None


def get_app() -> FastAPI:
    """Expose a lazily built FastAPI instance for ASGI servers."""

    global _app
    if _app is None:
        _app = create_app()
    return _app


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=int(os.getenv("PORT", "8080")), reload=False)
