from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, Field, ValidationError

from . import settings
from .errors import UpstreamError
from .http import get_json


class PlayerProfile(BaseModel):
    """Public profile fields, reshaped from the chess.com player endpoint."""

    id: str | None = None
    url: str | None = None
    username: str
    player_id: int | None = None
    title: str = "No title"
    status: str | None = None
    name: str = "Name not specified"
    avatar: str = "No avatar available"
    location: str = "Unknown location"
    country: str | None = None
    joined: str | None = None
    last_online: str | None = None
    followers: int = 0
    is_streamer: bool = False
    verified: bool = False
    league: str = "No league"
    streaming_platforms: Any = Field(default="No streaming platform")


def _iso_timestamp(value: Any) -> str | None:
    """Unix seconds -> ISO-8601 UTC with millisecond precision and a Z suffix."""
    if value is None:
        return None
    try:
        dt = datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def profile_from_payload(data: dict[str, Any]) -> PlayerProfile:
    """Copy the provider fields we expose, filling readable defaults."""
    defaults = PlayerProfile.model_fields

    def _or_default(key: str) -> Any:
        v = data.get(key)
        return v if v else defaults[key].default

    return PlayerProfile(
        id=data.get("@id"),
        url=data.get("url"),
        username=data.get("username") or "",
        player_id=data.get("player_id"),
        title=_or_default("title"),
        status=data.get("status"),
        name=_or_default("name"),
        avatar=_or_default("avatar"),
        location=_or_default("location"),
        country=data.get("country"),
        joined=_iso_timestamp(data.get("joined")),
        last_online=_iso_timestamp(data.get("last_online")),
        followers=_or_default("followers"),
        is_streamer=bool(data.get("is_streamer")),
        verified=bool(data.get("verified")),
        league=_or_default("league"),
        # An empty platform list is a real answer; only a missing key falls back.
        streaming_platforms=(
            data["streaming_platforms"]
            if data.get("streaming_platforms") is not None
            else defaults["streaming_platforms"].default
        ),
    )


class ChessComClient:
    """Thin gateway over the chess.com Published-Data API.

    Holds no state beyond its configuration, so one instance can serve
    concurrent fetches from several threads.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        self.base_url = (base_url or settings.api_base()).rstrip("/")
        self.timeout = settings.http_timeout() if timeout is None else timeout
        self.max_retries = settings.http_max_retries() if max_retries is None else max_retries

    def _player_url(self, username: str, *suffix: str) -> str:
        parts = [self.base_url, "player", quote(username.strip().lower(), safe="")]
        parts.extend(suffix)
        return "/".join(parts)

    def _get_object(self, url: str) -> dict[str, Any]:
        data = get_json(url, timeout=self.timeout, max_retries=self.max_retries)
        if not isinstance(data, dict):
            raise UpstreamError(f"GET {url} returned {type(data).__name__}, expected an object")
        return data

    def fetch_profile(self, username: str) -> PlayerProfile:
        url = self._player_url(username)
        data = self._get_object(url)
        try:
            return profile_from_payload(data)
        except ValidationError as e:
            raise UpstreamError(f"GET {url}: unexpected profile fields\n{e}") from e

    def fetch_archive_index(self, username: str) -> list[str]:
        """Return the monthly archive URLs for a player, oldest first."""
        url = self._player_url(username, "games", "archives")
        archives = self._get_object(url).get("archives")
        if not isinstance(archives, list):
            raise UpstreamError(f"GET {url}: response has no 'archives' list")
        return [str(a) for a in archives]

    def fetch_games(self, locator: str) -> list[dict[str, Any]]:
        """Return the raw game objects of one monthly archive."""
        games = self._get_object(locator).get("games")
        if not isinstance(games, list):
            raise UpstreamError(f"GET {locator}: response has no 'games' list")
        if not all(isinstance(g, dict) for g in games):
            raise UpstreamError(f"GET {locator}: 'games' holds a non-object entry")
        return games
