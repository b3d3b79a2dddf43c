"""HTTP client for the Gemini ``generateContent`` API."""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable

import httpx

from imob_control.config import GeminiConfig
from imob_control.exceptions import AIGatewayError

log = logging.getLogger(__name__)


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_part(data: bytes, mime_type: str) -> dict[str, Any]:
    """Document payload inlined as base64."""
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(data).decode("ascii"),
        }
    }


def response_text(data: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


class GeminiClient:
    """Thin synchronous wrapper over the REST endpoint.

    Every failure (missing key, transport error, HTTP error status,
    undecodable body) surfaces as :class:`AIGatewayError`. There is no
    retry; callers decide on fallbacks.
    """

    def __init__(self, config: GeminiConfig, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self._http = http_client or httpx.Client(timeout=config.timeout_seconds)

    def close(self) -> None:
        self._http.close()

    def generate(
        self,
        parts: list[dict[str, Any]],
        *,
        system_instruction: str | None = None,
        history: Iterable[tuple[str, str]] = (),
        json_response: bool = False,
    ) -> str:
        """Send one user turn and return the reply text.

        Parameters
        ----------
        parts : list[dict]
            Parts of the user turn (see :func:`text_part`, :func:`inline_part`).
        system_instruction : str | None
            Optional system instruction.
        history : Iterable[tuple[str, str]]
            Prior ``(role, text)`` turns, role being ``user`` or ``model``.
        json_response : bool
            Ask the model for ``application/json`` output.
        """
        if not self.config.api_key:
            raise AIGatewayError("API key missing, set GEMINI_API_KEY")

        contents = [
            {"role": role, "parts": [text_part(text)]}
            for role, text in history
        ]
        contents.append({"role": "user", "parts": parts})

        payload: dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [text_part(system_instruction)]}
        if json_response:
            payload["generationConfig"] = {"responseMimeType": "application/json"}

        try:
            resp = self._http.post(
                self.config.endpoint(),
                json=payload,
                headers={"x-goog-api-key": self.config.api_key},
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            log.error("Gemini request failed: %s", e)
            raise AIGatewayError(f"Model request failed: {e}") from e
        except ValueError as e:
            log.error("Gemini returned an undecodable body: %s", e)
            raise AIGatewayError(f"Model response is not JSON: {e}") from e

        return response_text(data)
