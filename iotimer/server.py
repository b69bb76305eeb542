"""Server coroutine: read one request, apply it to the timer, answer."""

from __future__ import annotations

import logging
from dataclasses import replace

from .protocol import Request, RequestKind, Response, ResponseKind
from .stream import Io, IoCoroutine, read_line
from .timer import Timer, TimerConfig, TimerEvent

logger = logging.getLogger(__name__)


def _snapshot(timer: Timer) -> Timer:
    config = TimerConfig(list(timer.config.cycles), timer.config.cycles_count)
    return replace(timer, config=config)


def process_request(timer: Timer, request: Request) -> tuple[Response, list[TimerEvent]]:
    """Apply a request to the timer and return the response and the events."""
    events: list[TimerEvent] = []
    if request.kind is RequestKind.START:
        events.extend(timer.start())
    elif request.kind is RequestKind.GET:
        return Response(ResponseKind.TIMER, _snapshot(timer)), events
    elif request.kind is RequestKind.SET:
        events.extend(timer.set(request.duration))
    elif request.kind is RequestKind.PAUSE:
        # Pausing reports no event to the server side.
        timer.pause()
    elif request.kind is RequestKind.RESUME:
        events.extend(timer.resume())
    elif request.kind is RequestKind.STOP:
        events.extend(timer.stop())
    return Response(ResponseKind.OK), events


def handle_request(timer: Timer) -> IoCoroutine[list[TimerEvent]]:
    """Serve one request against ``timer`` and return the events it caused."""
    line = yield from read_line()
    request = Request.from_bytes(line)
    logger.debug("got complete request: %r", request)
    response, events = process_request(timer, request)
    logger.debug("successfully processed request: %r", response)
    yield Io.write(response.to_bytes())
    logger.debug("generated %d events to be processed", len(events))
    return events