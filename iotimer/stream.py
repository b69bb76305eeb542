"""I/O-free coroutines and the helpers that drive them over real streams.

A coroutine is a generator that yields :class:`Io` requests. The driver
performs each request and sends the result back: the bytes read for a
read request, the number of bytes written for a write request. The
coroutine's return value is its result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generator, TypeVar

T = TypeVar("T")

IoCoroutine = Generator["Io", Any, T]

READ_SIZE = 4096

logger = logging.getLogger(__name__)


class IoKind(Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class Io:
    """An I/O request emitted by a coroutine."""

    kind: IoKind
    data: bytes = b""

    @classmethod
    def read(cls) -> Io:
        return cls(IoKind.READ)

    @classmethod
    def write(cls, data: bytes) -> Io:
        return cls(IoKind.WRITE, bytes(data))


def handle(stream: Any, io: Io) -> Any:
    """Perform one I/O request on a socket or a binary file-like object."""
    if io.kind is IoKind.READ:
        if hasattr(stream, "recv"):
            return stream.recv(READ_SIZE)
        reader = getattr(stream, "read1", None) or stream.read
        return bytes(reader(READ_SIZE))

    if hasattr(stream, "sendall"):
        stream.sendall(io.data)
        return len(io.data)

    view = memoryview(io.data)
    while view:
        written = stream.write(view)
        if written is None:
            written = len(view)
        if not written:
            raise ConnectionError("stream accepted no bytes")
        view = view[written:]
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()
    return len(io.data)


def run(coroutine: IoCoroutine[T], stream: Any) -> T:
    """Drive a coroutine to completion against a stream and return its result."""
    try:
        io = next(coroutine)
        while True:
            io = coroutine.send(handle(stream, io))
    except StopIteration as stop:
        return stop.value


def read_line(buffer: bytes = b"") -> IoCoroutine[bytes]:
    """Read chunks until one holds a newline.

    Returns the bytes gathered so far, starting with ``buffer``, up to the
    last newline of the chunk that contained one.
    """
    collected = bytearray(buffer)
    while True:
        chunk = yield Io.read()
        if not chunk:
            raise ConnectionError("stream closed before a full line was received")
        chunk = bytes(chunk)
        end = chunk.rfind(b"\n")
        if end >= 0:
            collected += chunk[:end]
            return bytes(collected)
        logger.debug("no new line found, need more chunks")
        collected += chunk