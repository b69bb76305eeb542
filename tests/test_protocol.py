import pytest

from iotimer.protocol import Request, RequestKind, Response, ResponseKind
from iotimer.timer import Timer, TimerConfig, TimerCycle, TimerLoop


class FakeClock:
    def __init__(self):
        self.now = 50.0

    def __call__(self):
        return self.now


ALL_REQUESTS = [
    Request(RequestKind.START),
    Request(RequestKind.GET),
    Request(RequestKind.SET, 21),
    Request(RequestKind.PAUSE),
    Request(RequestKind.RESUME),
    Request(RequestKind.STOP),
]


def make_timer():
    config = TimerConfig(
        cycles=[TimerCycle("Work", 2), TimerCycle("Rest", 3)],
        cycles_count=TimerLoop.infinite(),
    )
    return Timer.from_config(config, FakeClock())


def test_start_request_wire_bytes():
    assert Request(RequestKind.START).to_bytes() == b'"start"\n'


def test_set_request_wire_bytes():
    assert Request(RequestKind.SET, 21).to_bytes() == b'{"set":21}\n'


def test_ok_response_wire_bytes():
    assert Response(ResponseKind.OK).to_bytes() == b'"ok"\n'


@pytest.mark.parametrize("request_", ALL_REQUESTS)
def test_request_round_trip(request_):
    encoded = request_.to_bytes()
    assert encoded.endswith(b"\n")
    assert encoded.count(b"\n") == 1
    assert Request.from_bytes(encoded) == request_


def test_request_from_bytes_without_newline():
    assert Request.from_bytes(b'"get"') == Request(RequestKind.GET)


def test_set_request_requires_duration():
    with pytest.raises(ValueError):
        Request(RequestKind.SET)
    with pytest.raises(ValueError):
        Request(RequestKind.SET, -1)


def test_unit_request_rejects_duration():
    with pytest.raises(ValueError):
        Request(RequestKind.STOP, 3)
    with pytest.raises(ValueError):
        Request.from_json({"stop": 3})


def test_unknown_request_rejected():
    with pytest.raises(ValueError):
        Request.from_json("explode")


def test_invalid_json_rejected():
    with pytest.raises(ValueError):
        Request.from_bytes(b"{not json\n")
    with pytest.raises(ValueError):
        Response.from_bytes(b"\n")


def test_ok_response_round_trip():
    response = Response(ResponseKind.OK)
    assert Response.from_bytes(response.to_bytes()) == response


def test_timer_response_round_trip():
    timer = make_timer()
    timer.set(7)
    response = Response(ResponseKind.TIMER, timer)
    decoded = Response.from_bytes(response.to_bytes())
    assert decoded == response
    assert decoded.kind is ResponseKind.TIMER
    assert decoded.timer.config == timer.config
    assert decoded.timer.cycle == TimerCycle("Work", 7)


def test_timer_response_fields():
    payload = Response(ResponseKind.TIMER, make_timer()).to_json()["timer"]
    assert set(payload) == {"config", "state", "cycle", "cycles-count", "elapsed"}
    assert payload["state"] == "stopped"


def test_timer_response_requires_timer():
    with pytest.raises(ValueError):
        Response(ResponseKind.TIMER)
    with pytest.raises(ValueError):
        Response.from_json("timer")


def test_ok_response_rejects_timer():
    with pytest.raises(ValueError):
        Response(ResponseKind.OK, make_timer())