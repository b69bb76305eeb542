"""Requests and responses exchanged between timer clients and servers.

Each message travels as one line of compact JSON ended by a newline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .timer import Timer


def _encode(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":")).encode("utf-8") + b"\n"


def _decode(data: bytes) -> Any:
    return json.loads(data)


def _split(data: Any, what: str) -> tuple[str, Any, bool]:
    if isinstance(data, str):
        return data, None, False
    if isinstance(data, dict) and len(data) == 1:
        ((tag, payload),) = data.items()
        return tag, payload, True
    raise ValueError(f"invalid {what}: {data!r}")


class RequestKind(Enum):
    START = "start"
    GET = "get"
    SET = "set"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"


@dataclass(frozen=True)
class Request:
    """A client request; only ``SET`` carries a duration."""

    kind: RequestKind
    duration: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is RequestKind.SET:
            d = self.duration
            if isinstance(d, bool) or not isinstance(d, int) or d < 0:
                raise ValueError(f"set request needs a non-negative duration, got {d!r}")
        elif self.duration is not None:
            raise ValueError(f"{self.kind.value} request takes no duration")

    def to_json(self) -> Any:
        if self.kind is RequestKind.SET:
            return {self.kind.value: self.duration}
        return self.kind.value

    @classmethod
    def from_json(cls, data: Any) -> Request:
        tag, payload, has_payload = _split(data, "request")
        try:
            kind = RequestKind(tag)
        except ValueError:
            raise ValueError(f"unknown request: {tag!r}") from None
        if (kind is RequestKind.SET) != has_payload:
            raise ValueError(f"invalid request: {data!r}")
        return cls(kind, payload if has_payload else None)

    def to_bytes(self) -> bytes:
        return _encode(self.to_json())

    @classmethod
    def from_bytes(cls, data: bytes) -> Request:
        return cls.from_json(_decode(data))


class ResponseKind(Enum):
    OK = "ok"
    TIMER = "timer"


@dataclass(frozen=True)
class Response:
    """A server response; ``TIMER`` carries the current timer."""

    kind: ResponseKind
    timer: Optional[Timer] = None

    def __post_init__(self) -> None:
        if self.kind is ResponseKind.TIMER and self.timer is None:
            raise ValueError("timer response needs a timer")
        if self.kind is ResponseKind.OK and self.timer is not None:
            raise ValueError("ok response takes no timer")

    def to_json(self) -> Any:
        if self.timer is None:
            return self.kind.value
        return {self.kind.value: self.timer.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> Response:
        tag, payload, has_payload = _split(data, "response")
        try:
            kind = ResponseKind(tag)
        except ValueError:
            raise ValueError(f"unknown response: {tag!r}") from None
        if (kind is ResponseKind.TIMER) != has_payload:
            raise ValueError(f"invalid response: {data!r}")
        return cls(kind, Timer.from_json(payload) if has_payload else None)

    def to_bytes(self) -> bytes:
        return _encode(self.to_json())

    @classmethod
    def from_bytes(cls, data: bytes) -> Response:
        return cls.from_json(_decode(data))