"""Integration helpers for the OpenRouter API."""

from __future__ import annotations

import logging

import httpx

from ..config import Settings
from ..errors import GenerationError
from ..utils import unwrap_code_fence

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are MovieMitra, a friendly film companion. You write short, vivid and "
    "accurate insights about movies and the people who make them. Reply with two "
    "or three sentences of light markdown and never include HTML."
)


class OpenRouterClient:
    """Client responsible for talking to OpenRouter's /chat/completions endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def available(self) -> bool:
        return bool(self._settings.openrouter_api_key)

    async def generate_summary(self, prompt: str) -> str:
        """Return the model's answer to ``prompt``.

        Raises :class:`GenerationError` for every failure mode, including a
        missing API key, so callers only have one thing to absorb.
        """

        api_key = self._settings.openrouter_api_key
        if not api_key:
            raise GenerationError("OpenRouter API key is required to generate summaries")

        payload = {
            "model": self._settings.openrouter_model,
            "temperature": 0.7,
            "max_tokens": self._settings.summary_max_tokens,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": self._settings.app_name,
        }

        try:
            response = await self._client.post(
                "/chat/completions", json=payload, headers=headers
            )
        except httpx.HTTPError as exc:
            raise GenerationError(f"OpenRouter request failed: {exc}") from exc
        if response.status_code >= 400:
            raise GenerationError(
                f"OpenRouter returned {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError("OpenRouter returned invalid JSON") from exc
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            raise GenerationError("Model returned no choices")
        message = choices[0].get("message", {}) if isinstance(choices[0], dict) else {}
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise GenerationError("Model response missing content")
        return unwrap_code_fence(content)
