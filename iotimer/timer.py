"""Timer state machine: cycles, loops, states and the events they emit."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

Clock = Callable[[], float]


def _uint(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def _member(data: Any, key: str, what: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {data!r}")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r} in {what}") from None


def _tagged(data: Any, what: str) -> tuple[str, Any, bool]:
    """Split an externally tagged value into (tag, payload, has_payload)."""
    if isinstance(data, str):
        return data, None, False
    if isinstance(data, dict) and len(data) == 1:
        ((tag, payload),) = data.items()
        return tag, payload, True
    raise ValueError(f"invalid {what}: {data!r}")


@dataclass(frozen=True)
class TimerLoop:
    """How many times the cycles are run through; ``fixed=None`` means forever."""

    fixed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.fixed is not None:
            _uint(self.fixed, "loop count")

    @property
    def is_infinite(self) -> bool:
        return self.fixed is None

    @classmethod
    def infinite(cls) -> TimerLoop:
        return cls()

    @classmethod
    def from_count(cls, count: int) -> TimerLoop:
        """Build a loop from a count, where zero means infinite."""
        _uint(count, "loop count")
        return cls() if count == 0 else cls(count)

    def to_json(self) -> Any:
        return "infinite" if self.fixed is None else {"fixed": self.fixed}

    @classmethod
    def from_json(cls, data: Any) -> TimerLoop:
        tag, payload, has_payload = _tagged(data, "timer loop")
        if tag == "infinite" and not has_payload:
            return cls()
        if tag == "fixed" and has_payload:
            return cls(_uint(payload, "loop count"))
        raise ValueError(f"invalid timer loop: {data!r}")


@dataclass(frozen=True)
class TimerCycle:
    """A named step of the timer.

    In a configuration the duration is the cycle's total length; on a
    running timer it is the time left before the cycle ends.
    """

    name: str = ""
    duration: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))
        _uint(self.duration, "cycle duration")

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "duration": self.duration}

    @classmethod
    def from_json(cls, data: Any) -> TimerCycle:
        name = _member(data, "name", "timer cycle")
        if not isinstance(name, str):
            raise ValueError(f"cycle name must be a string, got {name!r}")
        duration = _uint(_member(data, "duration", "timer cycle"), "cycle duration")
        return cls(name, duration)


class TimerState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class TimerEventKind(Enum):
    STARTED = "started"
    BEGAN = "began"
    RUNNING = "running"
    SET = "set"
    PAUSED = "paused"
    RESUMED = "resumed"
    ENDED = "ended"
    STOPPED = "stopped"

    @property
    def carries_cycle(self) -> bool:
        return self not in (TimerEventKind.STARTED, TimerEventKind.STOPPED)


@dataclass(frozen=True)
class TimerEvent:
    """Something that happened during the timer's lifetime."""

    kind: TimerEventKind
    cycle: Optional[TimerCycle] = None

    def __post_init__(self) -> None:
        if self.kind.carries_cycle and self.cycle is None:
            raise ValueError(f"{self.kind.value} event needs a cycle")
        if not self.kind.carries_cycle and self.cycle is not None:
            raise ValueError(f"{self.kind.value} event takes no cycle")

    def to_json(self) -> Any:
        if self.cycle is None:
            return self.kind.value
        return {self.kind.value: self.cycle.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> TimerEvent:
        tag, payload, has_payload = _tagged(data, "timer event")
        try:
            kind = TimerEventKind(tag)
        except ValueError:
            raise ValueError(f"unknown timer event: {tag!r}") from None
        if kind.carries_cycle != has_payload:
            raise ValueError(f"invalid timer event: {data!r}")
        cycle = TimerCycle.from_json(payload) if has_payload else None
        return cls(kind, cycle)


@dataclass
class TimerConfig:
    """The cycles to run and how many times to loop over them."""

    cycles: list[TimerCycle] = field(default_factory=list)
    cycles_count: TimerLoop = field(default_factory=TimerLoop)

    def first_cycle(self) -> TimerCycle:
        if not self.cycles:
            raise LookupError("cannot find first cycle from timer config")
        return self.cycles[0]

    def to_json(self) -> dict[str, Any]:
        return {
            "cycles": [cycle.to_json() for cycle in self.cycles],
            "cycles-count": self.cycles_count.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> TimerConfig:
        cycles = _member(data, "cycles", "timer config")
        if not isinstance(cycles, list):
            raise ValueError(f"cycles must be a list, got {cycles!r}")
        return cls(
            [TimerCycle.from_json(cycle) for cycle in cycles],
            TimerLoop.from_json(_member(data, "cycles-count", "timer config")),
        )


@dataclass(eq=False)
class Timer:
    """The timer itself.

    ``accumulated`` holds the seconds elapsed before the last resume;
    ``started_at`` is the clock reading when the timer last started
    running, or ``None`` when it is not running.
    """

    config: TimerConfig = field(default_factory=TimerConfig)
    state: TimerState = TimerState.STOPPED
    cycle: TimerCycle = field(default_factory=TimerCycle)
    cycles_count: TimerLoop = field(default_factory=TimerLoop)
    started_at: Optional[float] = None
    accumulated: int = 0
    clock: Clock = field(default=time.monotonic, repr=False)

    @classmethod
    def from_config(cls, config: TimerConfig, clock: Optional[Clock] = None) -> Timer:
        """Build a stopped timer set on the first configured cycle."""
        return cls(
            config=config,
            cycle=config.first_cycle(),
            cycles_count=config.cycles_count,
            clock=clock or time.monotonic,
        )

    def elapsed(self) -> int:
        """Whole seconds the timer has been running, pauses excluded."""
        running = 0
        if self.started_at is not None:
            running = max(0, int(self.clock() - self.started_at))
        return running + self.accumulated

    def update(self) -> list[TimerEvent]:
        """Move the running timer to where the clock says it is."""
        events: list[TimerEvent] = []
        if self.state is not TimerState.RUNNING:
            return events

        elapsed = self.elapsed()
        cumulative: list[TimerCycle] = []
        total = 0
        for cycle in self.config.cycles:
            total += cycle.duration
            cumulative.append(replace(cycle, duration=total))

        if self.cycles_count.fixed is not None and elapsed >= total * self.cycles_count.fixed:
            self.state = TimerState.STOPPED
            return events

        elapsed %= total
        next_cycle = next(
            (
                replace(cycle, duration=cycle.duration - elapsed)
                for cycle in cumulative
                if elapsed < cycle.duration
            ),
            cumulative[-1],
        )

        events.append(TimerEvent(TimerEventKind.RUNNING, self.cycle))
        if self.cycle.name != next_cycle.name:
            events.append(TimerEvent(TimerEventKind.ENDED, replace(self.cycle, duration=0)))
            events.append(TimerEvent(TimerEventKind.BEGAN, next_cycle))

        self.cycle = next_cycle
        return events

    def start(self) -> list[TimerEvent]:
        if self.state is not TimerState.STOPPED:
            return []
        self.state = TimerState.RUNNING
        self.cycle = self.config.first_cycle()
        self.cycles_count = self.config.cycles_count
        self.started_at = self.clock()
        self.accumulated = 0
        return [
            TimerEvent(TimerEventKind.STARTED),
            TimerEvent(TimerEventKind.BEGAN, self.cycle),
        ]

    def set(self, duration: int) -> list[TimerEvent]:
        self.cycle = replace(self.cycle, duration=_uint(duration, "duration"))
        return [TimerEvent(TimerEventKind.SET, self.cycle)]

    def pause(self) -> list[TimerEvent]:
        if self.state is not TimerState.RUNNING:
            return []
        self.state = TimerState.PAUSED
        self.accumulated = self.elapsed()
        self.started_at = None
        return [TimerEvent(TimerEventKind.PAUSED, self.cycle)]

    def resume(self) -> list[TimerEvent]:
        if self.state is not TimerState.PAUSED:
            return []
        self.state = TimerState.RUNNING
        self.started_at = self.clock()
        return [TimerEvent(TimerEventKind.RESUMED, self.cycle)]

    def stop(self) -> list[TimerEvent]:
        if self.state is not TimerState.RUNNING:
            return []
        self.state = TimerState.STOPPED
        events = [
            TimerEvent(TimerEventKind.ENDED, self.cycle),
            TimerEvent(TimerEventKind.STOPPED),
        ]
        self.cycle = self.config.first_cycle()
        self.cycles_count = self.config.cycles_count
        self.started_at = None
        self.accumulated = 0
        return events

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timer):
            return NotImplemented
        return (
            self.state == other.state
            and self.cycle == other.cycle
            and self.elapsed() == other.elapsed()
        )

    __hash__ = None  # type: ignore[assignment]

    def to_json(self) -> dict[str, Any]:
        return {
            "config": self.config.to_json(),
            "state": self.state.value,
            "cycle": self.cycle.to_json(),
            "cycles-count": self.cycles_count.to_json(),
            "elapsed": self.accumulated,
        }

    @classmethod
    def from_json(cls, data: Any, clock: Optional[Clock] = None) -> Timer:
        state = _member(data, "state", "timer")
        try:
            parsed_state = TimerState(state)
        except ValueError:
            raise ValueError(f"unknown timer state: {state!r}") from None
        return cls(
            config=TimerConfig.from_json(_member(data, "config", "timer")),
            state=parsed_state,
            cycle=TimerCycle.from_json(_member(data, "cycle", "timer")),
            cycles_count=TimerLoop.from_json(_member(data, "cycles-count", "timer")),
            accumulated=_uint(_member(data, "elapsed", "timer"), "elapsed"),
            clock=clock or time.monotonic,
        )