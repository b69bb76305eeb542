"""Client coroutines: send one request to a timer server, get its response."""

from __future__ import annotations

import logging

from .protocol import Request, RequestKind, Response
from .stream import Io, IoCoroutine, read_line

logger = logging.getLogger(__name__)


def send_request(request: Request) -> IoCoroutine[Response]:
    """Write the request, then read and parse the one-line response."""
    logger.debug("need to send request")
    yield Io.write(request.to_bytes())
    line = yield from read_line()
    response = Response.from_bytes(line)
    logger.debug("got complete response: %r", response)
    return response


def get_timer() -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.GET))


def start_timer() -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.START))


def set_timer(duration: int) -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.SET, duration))


def pause_timer() -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.PAUSE))


def resume_timer() -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.RESUME))


def stop_timer() -> IoCoroutine[Response]:
    return send_request(Request(RequestKind.STOP))