"""
llm_client.py

A blocking client for OpenAI-style chat-completion endpoints (llama.cpp server,
llamafile, vLLM, ...). One POST per call, no retries.
"""

import logging
from dataclasses import dataclass

import requests

from ..config import settings as defaults
from .errors import InferenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionResponse:
    """The model's chosen completion text, before sanitization."""

    raw_text: str = ""


class LLMClient:
    """Client for obtaining completions from a chat-completion service."""

    def __init__(self, endpoint=None, api_key=None, timeout=None):
        """
        :param endpoint: Optional override for the endpoint URL.
        :param api_key:  Bearer token; llama.cpp accepts any value.
        :param timeout:  Request timeout in seconds, or None for no timeout.
        """
        # If no endpoint is provided here, fall back to settings
        self.endpoint = endpoint or defaults.LLM_ENDPOINT
        self.api_key = api_key or defaults.LLM_API_KEY
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings):
        return cls(endpoint=settings.endpoint, api_key=settings.api_key, timeout=settings.request_timeout)

    def build_payload(self, request):
        """Serialize a CompletionRequest into the chat-completion wire schema."""
        return {
            "model": request.model,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
        }

    def call(self, request) -> CompletionResponse:
        """
        Send `request` and wait for the answer.

        :return: The first choice's message content, or an empty response when
                 the server returned no choices.
        :raises InferenceError: on transport failure, non-2xx status or a
                 malformed response body.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = self.build_payload(request)
        logger.debug("POST %s (max_tokens=%s, language=%s)", self.endpoint, request.max_tokens, request.language_tag)

        try:
            response = requests.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise InferenceError("request to completion endpoint failed", detail=str(e)) from e

        try:
            response.raise_for_status()  # Raises an HTTPError if the status is 4xx, 5xx
        except requests.HTTPError as e:
            raise InferenceError(
                "completion endpoint returned an error",
                status_code=response.status_code,
                detail=response.text[:500] or str(e),
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise InferenceError("completion endpoint returned invalid JSON", detail=str(e)) from e

        return self._parse(data)

    def _parse(self, data):
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list):
            raise InferenceError("malformed completion response", detail="missing 'choices' list")
        if not choices:
            logger.info("Completion endpoint returned zero choices")
            return CompletionResponse("")

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict) or "content" not in message:
            raise InferenceError("malformed completion response", detail="choices[0] has no message content")

        content = message["content"]
        if content is None:
            return CompletionResponse("")
        if not isinstance(content, str):
            raise InferenceError("malformed completion response", detail="message content is not a string")
        return CompletionResponse(content)
