import asyncio
import json
import logging
from typing import Any, Optional

import httpx

from checkin_api.core.config import Settings
from checkin_api.core.errors import ProviderError, ProviderErrorKind

log = logging.getLogger(__name__)

SUGGESTION_COUNT = 5

PROMPT = (
  "Based on an energy level of {energy_level}/10 and mood: \"{mood}\", "
  "provide {count} helpful suggestions for improving wellbeing. "
  "Return only a JSON array like this:\n"
  "[\"suggestion 1\",\"suggestion 2\",\"suggestion 3\",\"suggestion 4\",\"suggestion 5\"] "
  "no extra text or formatting"
)

_decoder = json.JSONDecoder()


def build_prompt(mood: str, energy_level: int) -> str:
    return PROMPT.format(energy_level=energy_level, mood=mood, count=SUGGESTION_COUNT)


def extract_suggestions(raw: Any) -> list[str]:
    """
    Pull the first JSON array out of free-form model output.
    Commentary around the array is ignored; non-string and blank items are dropped.
    Never raises: anything unparseable yields [].
    """
    if not isinstance(raw, str):
        return []
    pos = raw.find("[")
    while pos != -1:
        try:
            value, _ = _decoder.raw_decode(raw, pos)
        except (json.JSONDecodeError, RecursionError):
            value = None
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        pos = raw.find("[", pos + 1)
    return []


def _completion_text(data: Any) -> Optional[str]:
    """First completion's text; chat-shaped responses carry it under message.content."""
    choice = data["choices"][0]
    if not isinstance(choice, dict):
        return None
    text = choice.get("text")
    if text is None and isinstance(choice.get("message"), dict):
        text = choice["message"].get("content")
    return text


class SuggestionProvider:
    """
    Wellbeing suggestions from an OpenRouter-compatible completions endpoint.
    One request per call, bounded by `timeout` seconds, no retry.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str,
        base_url: str,
        timeout: float = 12.0,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/completions"
        self.timeout = timeout
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "SuggestionProvider":
        return cls(
            settings.OPENROUTER_API_KEY,
            model=settings.OPENROUTER_MODEL,
            base_url=settings.OPENROUTER_BASE_URL,
            timeout=settings.SUGGESTION_TIMEOUT_SECONDS,
            temperature=settings.SUGGESTION_TEMPERATURE,
        )

    async def suggest(self, mood: str, energy_level: int) -> list[str]:
        """
        Returns extracted suggestions (possibly empty).
        Raises ProviderError for missing credentials, timeouts, HTTP failures
        and responses without completions.
        """
        if not self.api_key:
            raise ProviderError(ProviderErrorKind.UNAUTHENTICATED, "OPENROUTER_API_KEY is not configured")

        req = {
          "model": self.model,
          "prompt": build_prompt(mood, energy_level),
          "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        log.info("Requesting suggestions from %s (model=%s, timeout=%.1fs)", self.url, self.model, self.timeout)

        try:
            data = await asyncio.wait_for(self._post(req, headers), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ProviderError(ProviderErrorKind.TIMEOUT, f"no response within {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                ProviderErrorKind.UPSTREAM,
                f"HTTP {e.response.status_code} {e.response.reason_phrase}",
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise ProviderError(ProviderErrorKind.UPSTREAM, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise ProviderError(ProviderErrorKind.UPSTREAM, "response body is not JSON") from e

        if not isinstance(data, dict) or not data.get("choices"):
            raise ProviderError(ProviderErrorKind.EMPTY_RESPONSE, "no completions returned")

        try:
            text = _completion_text(data)
        except (KeyError, IndexError, TypeError):
            text = None
        suggestions = extract_suggestions(text)
        if not suggestions:
            log.warning("Provider returned no parseable suggestions")
        return suggestions

    async def _post(self, req: dict, headers: dict) -> Any:
        timeout_config = httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0))
        async with httpx.AsyncClient(timeout=timeout_config) as client:
            r = await client.post(self.url, json=req, headers=headers)
            r.raise_for_status()
            return r.json()
