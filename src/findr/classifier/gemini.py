"""Image classifier backed by Google's Gemini ``generateContent`` REST API.

The whole classify call is bounded by ``classify_timeout`` and the image
read/encode step by ``encode_timeout``. Both bounds cancel the pending
work (``asyncio.wait_for``), so an abandoned HTTP request is closed
rather than left running.

Example:
    >>> from findr.classifier.gemini import GeminiClassifier
    >>> from findr.core.config import Settings
    >>>
    >>> classifier = GeminiClassifier.from_settings(Settings(gemini_api_key="..."))
    >>> result = await classifier.classify("file:///photos/IMG_0042.jpg")
    >>> if result.is_confident():
    ...     print(result.name, result.confidence)
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any

import httpx

from findr.classifier.parser import parse_response
from findr.classifier.prompt import ANALYSIS_PROMPT
from findr.core.config import Settings, is_placeholder
from findr.core.exceptions import ClassificationError
from findr.http.client import HttpClient, HttpClientError
from findr.models.classification import ClassificationResult
from findr.utils.images import content_type_for, read_image

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to analyze image with AI"


class GeminiClassifier:
    """ImageClassifier for a hosted multimodal model.

    No retries: a failed call raises ClassificationError and the caller
    decides whether to try again or fall back to manual entry.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com",
        classify_timeout: float = 30.0,
        encode_timeout: float = 10.0,
        prompt: str = ANALYSIS_PROMPT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._classify_timeout = classify_timeout
        self._encode_timeout = encode_timeout
        self._prompt = prompt
        # The overall bound is enforced by wait_for; the client timeout only
        # keeps a single stuck socket from outliving it.
        self._http = HttpClient(
            base_url,
            timeout=classify_timeout,
            headers={"x-goog-api-key": api_key},
            transport=transport,
        )
        # Fetching remote photos shares the transport so tests can fake both.
        self._image_http = HttpClient(timeout=encode_timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> GeminiClassifier:
        return cls(
            settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            classify_timeout=settings.classify_timeout,
            encode_timeout=settings.encode_timeout,
            **kwargs,
        )

    @property
    def configured(self) -> bool:
        return not is_placeholder(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    async def close(self) -> None:
        await self._http.close()
        await self._image_http.close()

    async def __aenter__(self) -> GeminiClassifier:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # --- Public API ---

    async def classify(self, image_uri: str) -> ClassificationResult:
        """Classify the photo behind ``image_uri``.

        Raises:
            ClassificationError: Timeout, unreadable image, transport error,
                or a reply that neither parse tier understands.
        """
        return await self._bounded(self._classify_uri(image_uri))

    async def classify_bytes(self, data: bytes, mime_type: str = "image/jpeg") -> ClassificationResult:
        """Classify image bytes the caller already holds."""
        encoded = base64.b64encode(data).decode("ascii")
        return await self._bounded(self._generate(encoded, mime_type))

    # --- Internals ---

    async def _bounded(self, work: Any) -> ClassificationResult:
        if not self.configured:
            work.close()
            logger.error("Classifier API key is not configured")
            raise ClassificationError(FAILURE_MESSAGE)
        try:
            return await asyncio.wait_for(work, timeout=self._classify_timeout)
        except TimeoutError as e:
            logger.error("AI analysis timed out after %.0f seconds", self._classify_timeout)
            raise ClassificationError(FAILURE_MESSAGE) from e
        except ClassificationError as e:
            logger.error("AI analysis failed: %s", e)
            raise ClassificationError(FAILURE_MESSAGE) from e
        except Exception as e:
            logger.exception("Unexpected error during AI analysis")
            raise ClassificationError(FAILURE_MESSAGE) from e

    async def _classify_uri(self, image_uri: str) -> ClassificationResult:
        encoded = await self._encode(image_uri)
        return await self._generate(encoded, content_type_for(image_uri))

    async def _encode(self, image_uri: str) -> str:
        """Read and base64-encode the image within ``encode_timeout``."""
        try:
            data = await asyncio.wait_for(read_image(image_uri, self._image_http), timeout=self._encode_timeout)
        except TimeoutError as e:
            raise ClassificationError("Image conversion timed out") from e
        except (OSError, HttpClientError) as e:
            raise ClassificationError(f"Failed to process image: {e}") from e
        if not data:
            raise ClassificationError("Image is empty")
        return base64.b64encode(data).decode("ascii")

    async def _generate(self, encoded: str, mime_type: str) -> ClassificationResult:
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": self._prompt},
                        {"inline_data": {"mime_type": mime_type, "data": encoded}},
                    ]
                }
            ]
        }
        try:
            response = await self._http.post(f"/v1beta/models/{self._model}:generateContent", json=body)
            payload = response.json()
        except HttpClientError as e:
            raise ClassificationError(f"Model request failed: {e}") from e
        except ValueError as e:
            raise ClassificationError("Model returned a non-JSON body") from e

        return parse_response(reply_text(payload))


def reply_text(payload: Any) -> str:
    """Concatenate the text parts of the first candidate.

    Example:
        >>> reply_text({"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]})
        'ab'
        >>> reply_text({"promptFeedback": {"blockReason": "SAFETY"}})
        ''
    """
    if not isinstance(payload, dict):
        return ""
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
