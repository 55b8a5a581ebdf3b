# agents/llm_client.py
"""
HTTP client for the AI review endpoint.

The endpoint answers with a JSON envelope whose `response` field (configurable
via ReviewServiceConfig.response_field) holds a JSON-encoded string of the form
{"reviews": [{"lineNumber": "42", "reviewComment": "..."}]}. Every failure on
the way there is turned into a failed ReviewOutcome; review() never raises.
"""

import json
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from config import ReviewServiceConfig
from errors import ResponseFormatError
from models import ReviewOutcome, ReviewSuggestion

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence, if any."""
    s = text.strip()
    if s.startswith("```json"):
        s = s[len("```json"):]
    elif s.startswith("```"):
        s = s[len("```"):]
    else:
        return s
    s = s.strip()
    if s.endswith("```"):
        s = s[:-3]
    return s.strip()


def _unwrap_envelope(body: Any, field_path: str) -> Any:
    node = body
    for key in field_path.split("."):
        if not isinstance(node, dict) or key not in node:
            raise ResponseFormatError(f"response envelope has no '{field_path}' field")
        node = node[key]
    return node


def extract_suggestions(body: Any, field_path: str = "response") -> List[ReviewSuggestion]:
    """
    Pull validated suggestions out of a decoded response body.

    Raises ResponseFormatError (or ValueError for undecodable JSON) when the
    envelope or payload has the wrong shape. Single malformed items are
    dropped with a warning.
    """
    payload = _unwrap_envelope(body, field_path)
    if isinstance(payload, str):
        payload = json.loads(strip_code_fence(payload))

    if not isinstance(payload, dict):
        raise ResponseFormatError(f"expected a JSON object payload, got {type(payload).__name__}")
    reviews = payload.get("reviews")
    if not isinstance(reviews, list):
        raise ResponseFormatError("payload has no 'reviews' list")

    suggestions = []
    for index, item in enumerate(reviews):
        try:
            suggestions.append(ReviewSuggestion.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping malformed review item #%d: %s", index, e.errors(include_url=False))
    return suggestions


class ReviewClient:
    """Sends one rendered prompt per call to the review service."""

    def __init__(self, config: ReviewServiceConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def build_payload(self, prompt: str) -> dict:
        payload = {
            "user_prompt": prompt,
            "model_name": self.config.model_name,
        }
        if self.config.prompt_name:
            payload["prompt_name"] = self.config.prompt_name
        return payload

    @property
    def headers(self) -> dict:
        return {
            API_KEY_HEADER: self.config.api_key,
            "Content-Type": "application/json",
        }

    async def review(self, prompt: str) -> ReviewOutcome:
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout,
                headers=self.headers,
                transport=self._transport,
            ) as client:
                resp = await client.post(self.config.api_url, json=self.build_payload(prompt))
                resp.raise_for_status()
            logger.debug("Review service raw response: %s", resp.text)
            suggestions = extract_suggestions(resp.json(), self.config.response_field)
        except httpx.HTTPStatusError as e:
            return self._failed(f"review service returned {e.response.status_code}")
        except httpx.HTTPError as e:
            return self._failed(f"review service request failed: {e!r}")
        except ResponseFormatError as e:
            return self._failed(str(e))
        except ValueError as e:
            return self._failed(f"review service sent invalid JSON: {e}")
        except Exception as e:
            logger.exception("Unexpected error while calling review service")
            return ReviewOutcome.failed(f"unexpected error: {e!r}")

        return ReviewOutcome.ok(suggestions)

    @staticmethod
    def _failed(reason: str) -> ReviewOutcome:
        logger.warning("No review for this chunk: %s", reason)
        return ReviewOutcome.failed(reason)
