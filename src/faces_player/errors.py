# noqa: D401
"""Exceptions raised while playing a faces game."""

from __future__ import annotations

from typing import Optional


class FacesPlayerError(Exception):
    """Base class for every error raised by faces_player."""


class AuthenticationFailed(FacesPlayerError):
    """The portal rejected the login form."""


class TokenNotFound(AuthenticationFailed):
    """The login page did not carry an anti-forgery token."""


class HttpError(FacesPlayerError):
    """A request came back with a non-success status."""

    def __init__(self, status: int, url: Optional[str] = None) -> None:
        self.status = status
        self.url = url
        target = f" from {url}" if url else ""
        super().__init__(f"HTTP {status}{target}")


class GameStartFailed(HttpError):
    """Creating a game was refused by the service."""


class MalformedResponse(FacesPlayerError):
    """A response body did not match the expected shape."""


class UnknownAnswer(FacesPlayerError):
    """The remembered answer is not one of the offered suggestions."""

    def __init__(self, fingerprint: int, name: str) -> None:
        self.fingerprint = fingerprint
        self.name = name
        super().__init__(
            f"Stored answer {name!r} for fingerprint {fingerprint} is not among the suggestions"
        )


class GameStateError(FacesPlayerError):
    """Operation is not allowed in the current game state."""


class StorageCorrupt(FacesPlayerError):
    """The persisted answer table exists but cannot be parsed."""


class StorageWriteError(FacesPlayerError):
    """Writing the answer table to disk failed."""


__all__ = [
    "AuthenticationFailed",
    "FacesPlayerError",
    "GameStartFailed",
    "GameStateError",
    "HttpError",
    "MalformedResponse",
    "StorageCorrupt",
    "StorageWriteError",
    "TokenNotFound",
    "UnknownAnswer",
]
