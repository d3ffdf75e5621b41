"""Single-attempt HTTP requests against the catalog with typed outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from ..config import Settings
from ..errors import DecodeError, FetchError, HttpError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    body: dict[str, Any]


@dataclass(frozen=True, slots=True)
class FetchFailure:
    error: FetchError

    @property
    def reason(self) -> str:
        return self.error.reason


FetchOutcome = FetchSuccess | FetchFailure


class CatalogFetcher:
    """Issue authenticated GET requests and classify how they ended.

    Every call makes exactly one attempt; retry policy belongs to the caller.
    Errors are returned as :class:`FetchFailure` values instead of raised so
    each call site can map them onto its own user-facing message.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        token = settings.require_catalog_token()
        self._client = http_client
        self._headers = {
            "accept": "application/json",
            "Authorization": f"Bearer {token}",
        }

    async def request(
        self, path: str, *, params: Mapping[str, Any] | None = None
    ) -> FetchOutcome:
        try:
            response = await self._client.get(
                path, params=dict(params or {}), headers=self._headers
            )
        except httpx.RequestError as exc:
            logger.warning("Catalog request to %s failed: %s", path, exc)
            return FetchFailure(TransportError(str(exc) or exc.__class__.__name__))

        if not response.is_success:
            logger.warning(
                "Catalog request to %s returned %s", path, response.status_code
            )
            return FetchFailure(
                HttpError(response.status_code, response.reason_phrase or None)
            )

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Catalog response from %s was not JSON: %s", path, exc)
            return FetchFailure(DecodeError("Response body is not valid JSON"))
        if not isinstance(body, dict):
            return FetchFailure(DecodeError("Response body is not a JSON object"))
        return FetchSuccess(body)
