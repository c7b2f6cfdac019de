"""LUIS prediction client."""

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from gracebot.core.exceptions import ClassificationError
from gracebot.services.intent.base import IntentResult

logger = structlog.get_logger()

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class _TransientError(Exception):
    """A failure worth retrying (network error, throttling, 5xx)."""


class LuisClient:
    """Classifies text with the LUIS v3 prediction API.

    Transient failures (network errors, 429 and 5xx) are retried with
    exponential backoff; anything else fails immediately.
    """

    def __init__(
        self,
        endpoint: str,
        app_id: str,
        api_key: str,
        slot: str = "production",
        timeout: float = 5.0,
        max_attempts: int = 3,
        wait: wait_base | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.app_id = app_id
        self.api_key = api_key
        self.slot = slot
        self.max_attempts = max_attempts
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=10)
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

        logger.info("LUIS client initialized", endpoint=self.endpoint, app_id=app_id)

    @property
    def prediction_url(self) -> str:
        return f"{self.endpoint}/luis/prediction/v3.0/apps/{self.app_id}/slots/{self.slot}/predict"

    async def classify(self, text: str) -> IntentResult:
        """Classify text into an intent.

        Raises:
            ClassificationError: If the service keeps failing or rejects the request.
        """
        if not text.strip():
            return IntentResult(query=text, top_intent="None", score=0.0)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self._wait,
                retry=retry_if_exception_type(_TransientError),
                reraise=False,
            ):
                with attempt:
                    payload = await self._predict(text)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error("LUIS prediction failed", error=str(cause), attempts=self.max_attempts)
            raise ClassificationError(f"LUIS prediction failed: {cause}", provider="luis") from cause

        return self._parse(text, payload)

    async def _predict(self, text: str) -> dict[str, Any]:
        try:
            response = await self._client.get(
                self.prediction_url,
                params={
                    "subscription-key": self.api_key,
                    "query": text,
                    "show-all-intents": "true",
                },
            )
        except httpx.TransportError as e:
            raise _TransientError(str(e)) from e

        if response.status_code in RETRYABLE_STATUS:
            raise _TransientError(f"HTTP {response.status_code}")
        if response.is_error:
            raise ClassificationError(
                f"LUIS rejected the request: HTTP {response.status_code}",
                provider="luis",
            )
        return response.json()

    @staticmethod
    def _parse(text: str, payload: dict[str, Any]) -> IntentResult:
        prediction = payload.get("prediction") or {}
        intents = {
            name: float((data or {}).get("score", 0.0))
            for name, data in (prediction.get("intents") or {}).items()
        }
        top_intent = prediction.get("topIntent") or "None"

        result = IntentResult(
            query=payload.get("query", text),
            top_intent=top_intent,
            score=intents.get(top_intent, 0.0),
            intents=intents,
            entities=prediction.get("entities") or {},
        )

        logger.debug("LUIS prediction", intent=result.top_intent, score=round(result.score, 3))
        return result

    async def close(self) -> None:
        await self._client.aclose()
