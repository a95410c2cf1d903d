from __future__ import annotations

from typing import Optional
import requests

from ...domain.errors import GenerationError
from ...domain.interfaces import AnswerGenerator
from ..timeouts import http_timeout_seconds, provider_call
from ..config import chat_model, openai_api_key, openai_base_url


class OpenAIAnswerGenerator(AnswerGenerator):
    """Answer generator for OpenAI-compatible /chat/completions endpoints."""

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        self._api_key = api_key
        self._http = session or requests.Session()

    def generate(self, content: str, query: str) -> str:
        url = f"{openai_base_url()}/chat/completions"
        timeout = http_timeout_seconds()
        body = {
            "model": chat_model(),
            "messages": [{"role": "user", "content": f"Based on the document: {content}, {query}"}],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        with provider_call("openai", GenerationError, timeout):
            r = self._http.post(url, json=body, headers=headers, timeout=timeout)
            r.raise_for_status()
            data = r.json()
        try:
            answer = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as ex:
            raise GenerationError("Chat completion response has no message content") from ex
        if not isinstance(answer, str):
            raise GenerationError("Chat completion content is not text")
        return answer


def build_answer_generator() -> Optional[OpenAIAnswerGenerator]:
    """Return a generator when OPENAI_API_KEY is configured, else None."""
    key = openai_api_key()
    return OpenAIAnswerGenerator(api_key=key) if key else None
