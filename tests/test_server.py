import pytest

from iotimer.protocol import Request, RequestKind, Response, ResponseKind
from iotimer.server import handle_request, process_request
from iotimer.stream import Io, IoKind
from iotimer.timer import (
    Timer,
    TimerConfig,
    TimerCycle,
    TimerEvent,
    TimerEventKind,
    TimerState,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def timer():
    config = TimerConfig([TimerCycle("a", 3), TimerCycle("b", 2), TimerCycle("c", 1)])
    return Timer.from_config(config, FakeClock())


OK = Response(ResponseKind.OK)


def test_start(timer):
    response, events = process_request(timer, Request(RequestKind.START))
    assert response == OK
    assert events == [
        TimerEvent(TimerEventKind.STARTED),
        TimerEvent(TimerEventKind.BEGAN, TimerCycle("a", 3)),
    ]
    assert timer.state is TimerState.RUNNING


def test_get_returns_snapshot(timer):
    process_request(timer, Request(RequestKind.START))
    response, events = process_request(timer, Request(RequestKind.GET))
    assert events == []
    assert response.kind is ResponseKind.TIMER
    assert response.timer == timer
    assert response.timer is not timer
    timer.stop()
    assert response.timer.state is TimerState.RUNNING


def test_set(timer):
    process_request(timer, Request(RequestKind.START))
    response, events = process_request(timer, Request(RequestKind.SET, 21))
    assert response == OK
    assert events == [TimerEvent(TimerEventKind.SET, TimerCycle("a", 21))]


def test_pause_reports_no_event(timer):
    process_request(timer, Request(RequestKind.START))
    response, events = process_request(timer, Request(RequestKind.PAUSE))
    assert response == OK
    assert events == []
    assert timer.state is TimerState.PAUSED


def test_resume_and_stop(timer):
    process_request(timer, Request(RequestKind.START))
    process_request(timer, Request(RequestKind.PAUSE))
    _, resumed = process_request(timer, Request(RequestKind.RESUME))
    assert resumed == [TimerEvent(TimerEventKind.RESUMED, TimerCycle("a", 3))]
    _, stopped = process_request(timer, Request(RequestKind.STOP))
    assert stopped == [
        TimerEvent(TimerEventKind.ENDED, TimerCycle("a", 3)),
        TimerEvent(TimerEventKind.STOPPED),
    ]
    assert timer.state is TimerState.STOPPED


def test_handle_request_full_exchange(timer):
    coroutine = handle_request(timer)
    assert next(coroutine) == Io.read()
    reply = coroutine.send(Request(RequestKind.START).to_bytes())
    assert reply == Io.write(OK.to_bytes())
    with pytest.raises(StopIteration) as stop:
        coroutine.send(len(reply.data))
    assert stop.value.value == [
        TimerEvent(TimerEventKind.STARTED),
        TimerEvent(TimerEventKind.BEGAN, TimerCycle("a", 3)),
    ]


def test_handle_request_in_chunks(timer):
    coroutine = handle_request(timer)
    next(coroutine)
    data = Request(RequestKind.SET, 7).to_bytes()
    assert coroutine.send(data[:3]) == Io.read()
    reply = coroutine.send(data[3:])
    assert reply.kind is IoKind.WRITE
    assert Response.from_bytes(reply.data) == OK
    assert timer.cycle == TimerCycle("a", 7)


def test_handle_request_garbage(timer):
    coroutine = handle_request(timer)
    next(coroutine)
    with pytest.raises(ValueError):
        coroutine.send(b"not json\n")