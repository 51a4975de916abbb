"""
HTTP client for the AI tutor gateway.

The gateway speaks the OpenAI-compatible chat completions protocol. Plain
completions are used for question generation; streamed completions
(Server-Sent Events) are used for the tutoring chat.
"""

import json
import logging
import os
from collections.abc import Iterable, Iterator

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 20.0

SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment and try again."
QUOTA_EXHAUSTED_MESSAGE = "AI credits exhausted. Please try again later."
GENERIC_ERROR_MESSAGE = "Failed to get a response. Please try again."


class TutorError(Exception):
    """A failed call to the tutor gateway, carrying a user-facing message."""

    user_message = GENERIC_ERROR_MESSAGE


class RateLimitedError(TutorError):
    user_message = RATE_LIMITED_MESSAGE


class QuotaExhaustedError(TutorError):
    user_message = QUOTA_EXHAUSTED_MESSAGE


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code == 429:
        raise RateLimitedError("Tutor gateway rate limit exceeded")
    if response.status_code == 402:
        raise QuotaExhaustedError("Tutor gateway credits exhausted")
    if response.status_code >= 400:
        raise TutorError(f"Tutor gateway error: {response.status_code}")


def _delta_content(payload: str) -> str:
    """Extract choices[0].delta.content from one SSE data payload."""
    try:
        chunk = json.loads(payload)
        return chunk["choices"][0]["delta"].get("content") or ""
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        logger.debug(f"Skipping unparseable stream chunk: {payload[:80]}")
        return ""


def iter_sse_content(lines: Iterable[str]) -> Iterator[str]:
    """
    Yield text deltas from Server-Sent Event lines.

    Lines not starting with "data: " (including ":" comment lines and blank
    separators) are ignored. Iteration stops at "data: [DONE]".
    """
    for line in lines:
        line = line.rstrip("\r")
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        payload = line[len(SSE_DATA_PREFIX):].strip()
        if payload == SSE_DONE:
            return
        content = _delta_content(payload)
        if content:
            yield content


class TutorClient:
    """Synchronous client for the chat completions gateway."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        api_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key or os.environ.get("TUTOR_API_KEY")
        if not self.api_key:
            raise ValueError("TUTOR_API_KEY is not configured")
        self.api_url = api_url or os.environ.get("TUTOR_API_URL", DEFAULT_API_URL)
        self.model = model or os.environ.get("TUTOR_MODEL", DEFAULT_MODEL)
        if timeout is None:
            timeout = float(os.environ.get("TUTOR_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def complete(self, messages: list[dict], *, temperature: float | None = None) -> str:
        """
        Request a whole completion.

        Args:
            messages: Chat messages as {"role", "content"} dictionaries.
            temperature: Optional sampling temperature.

        Returns:
            The content of the first choice.

        Raises:
            TutorError: On network failure, error status or unexpected payload.
        """
        payload: dict = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            response = self._client.post(self.api_url, headers=self._headers, json=payload)
        except httpx.RequestError as err:
            raise TutorError(f"Tutor gateway unreachable: {err}") from err

        _raise_for_status(response)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as err:
            raise TutorError(f"Unexpected tutor response: {response.text[:200]}") from err
        if not content:
            raise TutorError("No content in tutor response")
        return content

    def stream(self, messages: list[dict]) -> Iterator[str]:
        """
        Stream a completion as text deltas.

        Raises:
            TutorError: On network failure or error status. Raised on the
                first iteration, since the request is made lazily.
        """
        payload = {"model": self.model, "messages": messages, "stream": True}

        try:
            with self._client.stream(
                "POST", self.api_url, headers=self._headers, json=payload
            ) as response:
                if response.status_code >= 400:
                    response.read()
                    logger.warning(f"Tutor gateway error {response.status_code}: {response.text[:200]}")
                _raise_for_status(response)
                yield from iter_sse_content(response.iter_lines())
        except httpx.RequestError as err:
            raise TutorError(f"Tutor gateway unreachable: {err}") from err

    def stream_text(self, messages: list[dict]) -> str:
        """Collect a streamed completion into one string."""
        return "".join(self.stream(messages))

    def close(self) -> None:
        self._client.close()


_shared_client: TutorClient | None = None


def get_tutor_client() -> TutorClient | None:
    """Get the shared client, or None when no API key is set."""
    global _shared_client
    if not os.environ.get("TUTOR_API_KEY"):
        logger.info("TUTOR_API_KEY not set, running with local content only")
        return None
    if _shared_client is None:
        _shared_client = TutorClient()
    return _shared_client
