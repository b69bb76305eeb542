"""Demonstration: a timer served over a socket, driven by a local client."""

from __future__ import annotations

import argparse
import json
import logging
import os
import queue
import socket
import threading
import time
from typing import Optional, Sequence

from .client import get_timer, start_timer
from .protocol import ResponseKind
from .server import handle_request
from .stream import handle, run
from .timer import Timer, TimerConfig, TimerCycle, TimerLoop

logger = logging.getLogger(__name__)

# Guards the timer shared between the tick and server threads.
_timer_lock = threading.Lock()


def _serve_one(timer: Timer, stream: socket.socket) -> list:
    coroutine = handle_request(timer)
    arg = None
    while True:
        with _timer_lock:
            try:
                io = coroutine.send(arg)
            except StopIteration as stop:
                return stop.value
        arg = handle(stream, io)


def serve(timer: Timer, listener: socket.socket, events: "queue.Queue") -> None:
    """Accept one connection and answer its requests until it closes."""
    logger.info("start server")
    connection, _ = listener.accept()
    logger.debug("server received connection")
    with connection:
        while True:
            try:
                produced = _serve_one(timer, connection)
            except (ConnectionError, OSError) as error:
                logger.debug("connection closed: %s", error)
                return
            for event in produced:
                events.put(event)


def tick(
    timer: Timer,
    events: "queue.Queue",
    interval: float = 1.0,
    stop: Optional[threading.Event] = None,
) -> None:
    """Update the timer every ``interval`` seconds until ``stop`` is set."""
    stop = stop or threading.Event()
    while True:
        with _timer_lock:
            produced = timer.update()
            logger.debug("timer: tick")
        for event in produced:
            events.put(event)
        if stop.wait(interval):
            return


def _notify(events: "queue.Queue") -> None:
    while True:
        event = events.get()
        if event is None:
            return
        logger.debug("received event %r", event)


def _parse(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a timer and query it.")
    parser.add_argument("--host", default=os.environ.get("HOST", "localhost"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "0")))
    parser.add_argument("--socket", default=os.environ.get("SOCKET"), help="unix socket path")
    parser.add_argument("--delay", type=float, default=3.0)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def _listen(args: argparse.Namespace) -> tuple[socket.socket, object, int]:
    if args.socket:
        family = getattr(socket, "AF_UNIX", None)
        if family is None:
            raise SystemExit("unix sockets are not available on this platform")
        listener = socket.socket(family, socket.SOCK_STREAM)
        listener.bind(args.socket)
        listener.listen(1)
        return listener, args.socket, family
    listener = socket.create_server((args.host, args.port))
    return listener, listener.getsockname()[:2], listener.family


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = TimerConfig([TimerCycle("Work", 2), TimerCycle("Rest", 3)], TimerLoop.infinite())
    timer = Timer.from_config(config)
    events: "queue.Queue" = queue.Queue()
    stop = threading.Event()

    listener, address, family = _listen(args)
    notifier = threading.Thread(target=_notify, args=(events,), daemon=True)
    ticker = threading.Thread(target=tick, args=(timer, events, 1.0, stop), daemon=True)
    server = threading.Thread(target=serve, args=(timer, listener, events), daemon=True)
    notifier.start()
    ticker.start()
    server.start()

    try:
        time.sleep(args.delay)
        logger.debug("connect to %s", address)
        with socket.socket(family, socket.SOCK_STREAM) as stream:
            stream.connect(address)
            run(start_timer(), stream)
            time.sleep(args.delay)
            response = run(get_timer(), stream)
        server.join(timeout=5)
    finally:
        stop.set()
        ticker.join(timeout=5)
        events.put(None)
        notifier.join(timeout=5)
        listener.close()
        if args.socket:
            try:
                os.unlink(args.socket)
            except OSError:
                pass

    if response.kind is not ResponseKind.TIMER:
        raise RuntimeError(f"unexpected response: {response!r}")
    print(json.dumps(response.timer.to_json(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())