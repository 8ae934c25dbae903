"""Minimal Gemini ``generateContent`` client used by the AI task services."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 15.0
API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

JSON_ARRAY_PATTERN = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)
JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class GeminiError(Exception):
    """Raised when Gemini is unreachable or returns an unusable response."""


class GeminiClient:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        if api_key is None or model is None or timeout is None:
            from taskmanager.config import settings

            api_key = settings.gemini_api_key if api_key is None else api_key
            model = model or settings.gemini_model
            timeout = settings.gemini_timeout_seconds if timeout is None else timeout

        self.api_key = api_key
        self.model = model or DEFAULT_MODEL
        self.timeout = timeout
        if client is None:
            self._client = httpx.Client(timeout=timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.2,
        max_output_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """Send a single-turn prompt and return the first text part."""
        if not self.api_key:
            raise GeminiError("Gemini API key not configured")

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        }
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        try:
            response = self._client.post(
                f"{API_BASE}/{self.model}:generateContent",
                params={"key": self.api_key},
                json={
                    "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                    "generationConfig": generation_config,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeminiError(f"Gemini request failed: {exc}") from exc

        return self._extract_text(payload)

    def _extract_text(self, payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates", [])
        if not candidates:
            raise GeminiError("No Gemini candidates returned")

        parts = candidates[0].get("content", {}).get("parts", [])
        for part in parts:
            if part.get("text"):
                return part["text"]

        raise GeminiError("No text payload returned from Gemini")


def load_json_array(text: str) -> list[Any]:
    """Parse a JSON array, digging it out of surrounding prose if needed."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = JSON_ARRAY_PATTERN.search(text)
        if not match:
            raise GeminiError("No JSON array found in Gemini response") from None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise GeminiError(f"Malformed JSON array in Gemini response: {exc}") from exc

    if not isinstance(data, list):
        raise GeminiError("Gemini response is not a JSON array")
    return data


def load_json_object(text: str) -> dict[str, Any] | None:
    """Parse a JSON object out of ``text``; None when there is none."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = JSON_OBJECT_PATTERN.search(text)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client
