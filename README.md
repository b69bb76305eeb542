# iotimer

A cycling timer (think Pomodoro: *Work*, then *Rest*, then again) and a
small line-based JSON protocol to control it. The protocol side is
written as I/O-free coroutines. A coroutine never touches a socket. It
yields what it needs, which is to read some bytes or to write some
bytes, and you send the results back to it. So the same coroutines work
with TCP sockets, Unix sockets, binary files, threads or your own loop.

The package has no dependencies outside the standard library.

## Installation

```sh
pip install iotimer
```

## The timer (`iotimer.timer`)

- `TimerCycle(name, duration)`: a named step. In a configuration the
  duration is the cycle's full length in seconds. On a timer it is the
  time left in the cycle.
- `TimerLoop`: how many times the cycles repeat. Use
  `TimerLoop.infinite()` or `TimerLoop.from_count(n)`, where a count of
  `0` means infinite. `TimerLoop(fixed=n)` gives a fixed count.
- `TimerConfig(cycles, cycles_count)`: the cycles and the loop.
  `first_cycle()` raises `LookupError` when there are no cycles.
- `TimerState`: `RUNNING`, `PAUSED` or `STOPPED`.
- `TimerEvent(kind, cycle)` with `TimerEventKind`: `STARTED`, `BEGAN`,
  `RUNNING`, `SET`, `PAUSED`, `RESUMED`, `ENDED` and `STOPPED`. Only
  `STARTED` and `STOPPED` carry no cycle.
- `Timer`: the timer itself. `Timer.from_config(config, clock=None)`
  builds a stopped timer set on the first cycle. You can pass any
  zero-argument function that returns seconds as the clock; the default
  is `time.monotonic`.

Each operation returns a list of the `TimerEvent`s it produced:

| method          | effect                                                                  |
|-----------------|-------------------------------------------------------------------------|
| `start()`       | if stopped: runs from the first cycle (`STARTED`, `BEGAN`)              |
| `update()`      | if running: reports `RUNNING`, plus `ENDED`/`BEGAN` on a cycle change   |
| `set(duration)` | sets the remaining duration of the current cycle (`SET`)                |
| `pause()`       | if running: freezes the timer (`PAUSED`)                                |
| `resume()`      | if paused: runs it again (`RESUMED`)                                    |
| `stop()`        | if running: stops it and resets it to the first cycle (`ENDED`, `STOPPED`) |

`elapsed()` returns the whole seconds spent running, with pauses left
out.

Call `update()` regularly, for example once a second. A timer with a
fixed loop count switches to `STOPPED` on the first `update()` after all
of its loops are done.

Two timers are equal when their state, current cycle and elapsed time
are equal.

All model classes have `to_json()` and `from_json()` methods, which
convert to and from plain Python data with kebab-case keys. A timer's
JSON form holds its configuration, state, cycle, loop count and the
`elapsed` seconds stored at the last pause. It does not hold the running
clock reading.

## The protocol (`iotimer.protocol`)

- `Request(kind, duration=None)` with `RequestKind`: `START`, `GET`,
  `SET`, `PAUSE`, `RESUME` and `STOP`. Only `SET` carries a duration.
- `Response(kind, timer=None)` with `ResponseKind`: `OK`, or `TIMER`,
  which carries a `Timer`.

Each message on the wire is one compact JSON document followed by a
newline. `to_bytes()` and `from_bytes()` convert to and from that form.
`to_json()` and `from_json()` convert to and from plain Python data.
Malformed messages raise `ValueError`.

## Coroutines and streams (`iotimer.stream`)

A coroutine is a generator that yields `Io` requests:

- `Io.read()` wants the bytes of one read.
- `Io.write(data)` wants `data` written and the byte count sent back.

The coroutine's return value is its result.

- `handle(stream, io)` performs one request on a socket (`recv`,
  `sendall`) or on a binary file-like object (`read1`/`read`, `write`).
- `run(coroutine, stream)` drives a coroutine to the end and returns
  its result.
- `read_line(buffer=b"")` reads chunks until one of them contains a
  newline. It raises `ConnectionError` if the stream closes first.

## Client (`iotimer.client`)

There is one coroutine per request: `start_timer()`, `get_timer()`,
`set_timer(duration)`, `pause_timer()`, `resume_timer()` and
`stop_timer()`. All of them are built on `send_request(request)`. Each
returns the server's `Response`.

```python
import socket

from iotimer.client import get_timer, start_timer
from iotimer.stream import run

with socket.create_connection(("localhost", 7777)) as sock:
    run(start_timer(), sock)
    response = run(get_timer(), sock)
    print(response.timer.to_json())
```

## Server (`iotimer.server`)

- `handle_request(timer)` reads one request, applies it to the timer,
  writes the response, and returns the timer events the request caused.
- `process_request(timer, request)` does the same work without any I/O.
  It returns `(response, events)`.

A `GET` answers with a copy of the timer. `PAUSE` pauses the timer but
reports no events.

To serve a connection, run `handle_request(timer)` in a loop over it and
forward the returned events wherever you need them.

## Demo

The `iotimer-demo` command runs a timer in one process. The timer
alternates a 2-second *Work* cycle and a 3-second *Rest* cycle and
repeats without end. The demo then:

1. ticks the timer once a second in a thread;
2. serves the timer on one connection in another thread;
3. waits, connects as a client and starts the timer;
4. waits again and fetches the timer;
5. prints the timer as indented JSON.

```sh
iotimer-demo
iotimer-demo --verbose --delay 1
iotimer-demo --socket /tmp/iotimer.sock
```

Options:

- `--host`: listening host. Defaults to `$HOST`, otherwise `localhost`.
- `--port`: listening port. Defaults to `$PORT`, otherwise `0`, which
  picks any free port.
- `--socket`: use a Unix socket at this path instead. Defaults to
  `$SOCKET`.
- `--delay`: seconds to wait before each client step. Defaults to `3`.
- `--verbose`: log at debug level, including every timer event.

The building blocks of the demo are also available as functions:

- `iotimer.demo.serve(timer, listener, events)` accepts one connection
  and puts the resulting events on a queue.
- `iotimer.demo.tick(timer, events, interval=1.0, stop=None)` updates
  the timer every `interval` seconds until `stop` is set.

## What it does not do

There is no standalone timer daemon and no command-line client for a
timer that is already running. The only command is the self-contained
demo, and its server answers a single connection. Timers are not
persisted; they live only in memory.

## Running the tests

```sh
pip install "iotimer[test]"
pytest
```