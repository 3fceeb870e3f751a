"""Vision model client (OpenAI-compatible chat completions with image parts)."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_part(url: str) -> Dict[str, Any]:
    """``url`` may be a data URL or a public http(s) URL."""
    return {"type": "image_url", "image_url": {"url": url}}


def extract_json(text: str) -> dict:
    """Parse the first ``{`` .. last ``}`` span; models sometimes wrap JSON in prose."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        text = text[start : end + 1]
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Respuesta del modelo no es un objeto JSON")
    return data


class VisionClient:
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        timeout_seconds: float = 30.0,
        client: Optional[Any] = None,
    ):
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = float(timeout_seconds)
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    @staticmethod
    def _normalize_content(content: Any) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            chunks: List[str] = []
            for part in content:
                if isinstance(part, dict) and part.get("type") == "text":
                    chunks.append(str(part.get("text", "")))
            return "".join(chunks)
        return str(content or "")

    def generate_json(self, parts: List[Dict[str, Any]], *, temperature: float = 0.1) -> dict:
        """Send one multimodal user message and return the decoded JSON answer.

        Any transport, timeout or parse problem propagates; callers at the
        adapter boundary decide how to degrade.
        """
        response = self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": parts}],
            temperature=temperature,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            raise ValueError("Respuesta vacía del modelo")
        message = response.choices[0].message
        text = self._normalize_content(message.content if message else "")
        if not text:
            raise ValueError("Respuesta vacía del modelo")
        return extract_json(text)
