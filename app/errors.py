"""Exception hierarchy shared by the discovery core."""

from __future__ import annotations


class MovieMitraError(Exception):
    """Base class for every error raised by the discovery core."""


class ConfigError(MovieMitraError):
    """Raised when required configuration is missing at startup."""


class FetchError(MovieMitraError):
    """Base class for catalog request failures."""

    @property
    def reason(self) -> str:
        return str(self) or self.__class__.__name__


class TransportError(FetchError):
    """The catalog could not be reached (DNS, connection, timeout...)."""


class HttpError(FetchError):
    """The catalog answered with a non-2xx status code."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DecodeError(FetchError):
    """The catalog response body was not a JSON object."""


class GenerationError(MovieMitraError):
    """The AI generation collaborator failed or is unavailable."""
