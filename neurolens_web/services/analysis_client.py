from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

import requests

from neurolens_web.domain.errors import MalformedResponse, TransportFailure
from neurolens_web.domain.models import AnalysisReport, EncodedFile
from neurolens_web.services.prompts import AnalysisPrompts

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-pro-preview"


class AnalysisClient(Protocol):
    """Strategy interface: one batch of files in, one report out."""
    def analyze(self, files: Sequence[EncodedFile]) -> AnalysisReport: ...


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return f"HTTP {resp.status_code}: {err['message']}"

    text = (resp.text or "").strip()
    return f"HTTP {resp.status_code}: {text[:300]}" if text else f"HTTP {resp.status_code}"


def _response_text(body: Any) -> str:
    if not isinstance(body, dict):
        raise MalformedResponse("response body is not a JSON object")

    candidates = body.get("candidates") or []
    if not isinstance(candidates, list):
        raise MalformedResponse("'candidates' is not a list")
    if not candidates:
        feedback = body.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise MalformedResponse(f"request was blocked ({block_reason})")
        raise MalformedResponse("no candidates in response")

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise MalformedResponse("candidate is not a JSON object")

    content = candidate.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if parts is None:
        parts = []
    if not isinstance(parts, list):
        raise MalformedResponse("'parts' is not a list")

    chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            raise MalformedResponse("content part is not a JSON object")
        text = part.get("text", "")
        if not isinstance(text, str):
            raise MalformedResponse("content part text is not a string")
        chunks.append(text)

    text = "".join(chunks)
    if not text.strip():
        reason = candidate.get("finishReason")
        raise MalformedResponse(f"no response text (finishReason={reason})" if reason else "no response text")
    return text


@dataclass
class GeminiAnalysisClient:
    """
    Calls the Gemini generateContent endpoint once per analysis.
    No retry, no streaming, no caching: a call either yields a full report or raises.
    """
    api_key: str
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: int = 120
    prompts: AnalysisPrompts = field(default_factory=AnalysisPrompts)
    http: Any = field(default_factory=requests.Session)

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"

    def build_request(self, files: Sequence[EncodedFile]) -> dict[str, Any]:
        if not files:
            raise ValueError("At least one file is required.")

        parts: list[dict[str, Any]] = [
            {"inlineData": {"mimeType": f.content_type, "data": f.payload}}
            for f in files
        ]
        parts.append({"text": self.prompts.instruction})

        return {
            "systemInstruction": {"parts": [{"text": self.prompts.system_directive}]},
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": self.prompts.response_schema(),
            },
        }

    def parse_response(self, body: Any) -> AnalysisReport:
        text = _response_text(body)
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedResponse(f"response text is not valid JSON ({e})") from e
        return AnalysisReport.from_mapping(data)

    def analyze(self, files: Sequence[EncodedFile]) -> AnalysisReport:
        payload = self.build_request(files)

        if not (self.api_key or "").strip():
            raise TransportFailure("API key is not configured.")

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        logger.info(
            "Submitting %d file(s) to %s: %s",
            len(files),
            self.model,
            ", ".join(f.content_type for f in files),
        )

        try:
            resp = self.http.post(self.endpoint, headers=headers, json=payload, timeout=self.timeout_seconds)
        except requests.Timeout as e:
            raise TransportFailure(f"request timed out after {self.timeout_seconds}s") from e
        except requests.RequestException as e:
            raise TransportFailure(str(e) or e.__class__.__name__) from e

        if not 200 <= resp.status_code < 300:
            detail = _error_detail(resp)
            logger.warning("Gemini rejected request: %s", detail)
            raise TransportFailure(detail)

        try:
            body = resp.json()
        except ValueError as e:
            raise MalformedResponse("response body is not JSON") from e

        return self.parse_response(body)
