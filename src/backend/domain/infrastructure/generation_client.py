"""Async client for a locally hosted Ollama text-generation endpoint."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import httpx
from loguru import logger

from application.exceptions import GenerationError
from domain.models import FALLBACK_MESSAGE


class OllamaGenerationClient:
    """Sends one non-streaming ``/api/generate`` request per call.

    Failures never reach the caller: transport errors, non-2xx statuses,
    malformed bodies and timeouts are logged and replaced by
    ``FALLBACK_MESSAGE``.  There is no retry.

    Parameters
    ----------
    base_url:
        Ollama server root, e.g. ``http://localhost:11434``.
    model:
        Model tag to run (``llama3.1``).
    temperature:
        Sampling temperature; kept low so answers stick to the supplied facts.
    max_tokens:
        Cap on generated tokens (Ollama's ``num_predict``).
    stop:
        Stop sequences matching the prompt's section markers.
    timeout:
        Overall deadline for one request, in seconds.
    client:
        Optional pre-built ``httpx.AsyncClient`` (tests pass one with a
        ``MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        *,
        temperature: float = 0.1,
        max_tokens: int = 500,
        stop: Sequence[str] = (),
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.stop = list(stop)
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/generate"

    def build_payload(self, prompt: str) -> dict:
        """Request body for one generation call."""
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
                "stop": self.stop,
            },
        }

    async def generate(self, prompt: str) -> str:
        """Return the model's reply, or ``FALLBACK_MESSAGE`` if anything goes wrong."""
        t0 = time.perf_counter()
        try:
            text = await self._request(prompt)
        except GenerationError as exc:
            logger.warning("Generation failed, returning fallback | model={} | {}", self.model, exc)
            return FALLBACK_MESSAGE

        logger.info(
            "Generation completed | model={} | latency={}ms | chars={}",
            self.model,
            int((time.perf_counter() - t0) * 1000),
            len(text),
        )
        return text

    async def _request(self, prompt: str) -> str:
        """Perform the HTTP call; every failure mode surfaces as ``GenerationError``."""
        try:
            response = await asyncio.wait_for(
                self._client.post(self.endpoint, json=self.build_payload(prompt)),
                timeout=self.timeout,
            )
        except TimeoutError as exc:
            raise GenerationError(f"no reply from {self.endpoint} within {self.timeout}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GenerationError(f"could not reach {self.endpoint}: {exc!r}") from exc

        if not response.is_success:
            raise GenerationError(f"{self.endpoint} returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise GenerationError("response body is not JSON") from exc

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise GenerationError("response body has no 'response' text")
        return text

    async def aclose(self) -> None:
        """Close the underlying connection pool if this client created it."""
        if self._owns_client:
            await self._client.aclose()
