"""Validation of model replies into tagged results.

The model is asked for JSON but nothing guarantees it. Each reply is turned
into an :class:`AIResponse` whose status says which branch the caller is
on: a usable value, a reply that could not be parsed, or no reply at all.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from imob_control.ingest import records_from_raw
from imob_control.models import FinancialRecord

T = TypeVar("T")

_CODE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


class ResponseStatus(str, Enum):
    OK = "OK"
    MALFORMED = "MALFORMED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class AIResponse(Generic[T]):
    """Outcome of one model call."""

    status: ResponseStatus
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ResponseStatus.OK

    @classmethod
    def success(cls, value: T) -> "AIResponse[T]":
        return cls(ResponseStatus.OK, value)

    @classmethod
    def malformed(cls, error: str) -> "AIResponse[T]":
        return cls(ResponseStatus.MALFORMED, error=error)

    @classmethod
    def failed(cls, error: str) -> "AIResponse[T]":
        return cls(ResponseStatus.FAILED, error=error)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    match = _CODE_FENCE.match(text)
    return match.group(1).strip() if match else text.strip()


def parse_json_array(text: str) -> AIResponse[list[Any]]:
    """Parse a reply that should be a JSON array."""
    body = strip_code_fence(text or "")
    if not body:
        return AIResponse.malformed("empty reply")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        return AIResponse.malformed(f"invalid JSON: {e}")
    if not isinstance(data, list):
        return AIResponse.malformed(f"expected a JSON array, got {type(data).__name__}")
    return AIResponse.success(data)


def parse_records(text: str) -> AIResponse[list[FinancialRecord]]:
    """Parse extracted statement records.

    An empty reply means nothing was found. Items are normalized at the
    ingestion boundary: absolute amounts, revenue unless ``expense``.
    """
    if not (text or "").strip():
        return AIResponse.success([])
    parsed = parse_json_array(text)
    if not parsed.ok:
        return AIResponse(parsed.status, error=parsed.error)
    return AIResponse.success(records_from_raw(parsed.value))


def parse_string_list(text: str) -> AIResponse[list[str]]:
    """Parse a reply that should be a JSON array of strings."""
    parsed = parse_json_array(text)
    if not parsed.ok:
        return AIResponse(parsed.status, error=parsed.error)
    strings = [s.strip() for s in parsed.value if isinstance(s, str) and s.strip()]
    if not strings:
        return AIResponse.malformed("no strings in reply")
    return AIResponse.success(strings)
