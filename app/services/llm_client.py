"""
Client for the external text-generation service.

The explorer only needs "prompt in, text out", expressed by the
``GeneradorTexto`` protocol.  ``OpenAIGenerador`` implements it on top of
the ``openai`` SDK against any OpenAI-compatible chat completions endpoint
(Gemini's compatibility endpoint by default, see ``app.config``).

Requests use temperature 0, the configured timeout and no retries.
"""

from __future__ import annotations

import logging
from typing import Protocol

from openai import OpenAI

from app.config import Settings

logger = logging.getLogger(__name__)


class GeneradorTexto(Protocol):
    def generar(self, prompt: str) -> str:
        """Return the raw text produced for ``prompt``."""
        ...


class OpenAIGenerador:
    """``GeneradorTexto`` backed by an OpenAI-compatible API.

    The underlying SDK client is created on first use so that a missing
    API key surfaces as a failed query instead of a startup crash.

    Args:
        api_key: Key for the text-generation service.
        model: Model name, e.g. ``"gemini-2.5-flash"``.
        base_url: OpenAI-compatible endpoint; ``None`` for OpenAI itself.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url or None
        self._timeout = timeout
        self._client: OpenAI | None = None

    @classmethod
    def desde_settings(cls, settings: Settings) -> "OpenAIGenerador":
        if not settings.LLM_API_KEY:
            logger.error("LLM_API_KEY is not set; explorer queries will fail.")
        return cls(
            api_key=settings.LLM_API_KEY,
            model=settings.LLM_MODEL,
            base_url=settings.LLM_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
        )

    def _cliente(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    def generar(self, prompt: str) -> str:
        respuesta = self._cliente().chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0,
        )
        return respuesta.choices[0].message.content or ""
