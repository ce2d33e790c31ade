"""Dual-clock controller: an up-counting game clock and a down-counting shot clock.

The controller holds no timers of its own. The scheduler calls the tick
operations once per elapsed second while the matching running flag is set.
Every operation returns the fields it changed with their absolute resulting
values, so a retried write never double-applies a delta.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_SHOT_CLOCK_SEC = 24
SHOT_CLOCK_MIN = 0
SHOT_CLOCK_MAX = 99

GAME_CLOCK = 'game'
SHOT_CLOCK = 'shot'
CLOCKS = (GAME_CLOCK, SHOT_CLOCK)

Changes = Dict[str, Any]


@dataclass
class ClockState:
    game_time: int = 0
    is_game_clock_running: bool = False
    shot_clock_time: int = DEFAULT_SHOT_CLOCK_SEC
    is_shot_clock_running: bool = False
    current_period: int = 1

    @classmethod
    def from_game(cls, game) -> 'ClockState':
        return cls(
            game_time=int(game.game_time or 0),
            is_game_clock_running=bool(game.is_game_clock_running),
            shot_clock_time=int(game.shot_clock_time or 0),
            is_shot_clock_running=bool(game.is_shot_clock_running),
            current_period=int(game.current_period or 1),
        )


class DualClock:
    def __init__(
        self,
        state: ClockState,
        has_shot_clock: bool,
        total_periods: int,
        shot_clock_reset: int = DEFAULT_SHOT_CLOCK_SEC,
        on_shot_clock_expired: Optional[Callable[[], None]] = None,
    ):
        self.state = state
        self.has_shot_clock = has_shot_clock
        self.total_periods = max(1, int(total_periods))
        self.shot_clock_reset = _clamp(int(shot_clock_reset), SHOT_CLOCK_MIN, SHOT_CLOCK_MAX)
        self.on_shot_clock_expired = on_shot_clock_expired

    @classmethod
    def for_game(cls, game, sport, **kwargs) -> 'DualClock':
        return cls(ClockState.from_game(game), sport.has_shot_clock, sport.total_periods, **kwargs)

    def toggle_game_clock(self) -> Changes:
        self.state.is_game_clock_running = not self.state.is_game_clock_running
        return {'is_game_clock_running': self.state.is_game_clock_running}

    def toggle_shot_clock(self) -> Changes:
        if not self.has_shot_clock:
            return {}
        self.state.is_shot_clock_running = not self.state.is_shot_clock_running
        return {'is_shot_clock_running': self.state.is_shot_clock_running}

    def tick_game_clock(self) -> Changes:
        self.state.game_time += 1
        return {'game_time': self.state.game_time}

    def tick_shot_clock(self) -> Changes:
        remaining = max(SHOT_CLOCK_MIN, self.state.shot_clock_time - 1)
        if remaining > 0:
            self.state.shot_clock_time = remaining
            return {'shot_clock_time': remaining}
        # Expiry halts the clock and reloads it; the operator restarts it.
        self.state.shot_clock_time = self.shot_clock_reset
        self.state.is_shot_clock_running = False
        if self.on_shot_clock_expired is not None:
            self.on_shot_clock_expired()
        return {
            'shot_clock_time': self.state.shot_clock_time,
            'is_shot_clock_running': False,
        }

    def adjust_game_time(self, delta_minutes: int) -> Changes:
        self.state.game_time = max(0, self.state.game_time + int(delta_minutes) * 60)
        return {'game_time': self.state.game_time}

    def adjust_shot_clock(self, delta_seconds: int) -> Changes:
        if not self.has_shot_clock:
            return {}
        self.state.shot_clock_time = _clamp(
            self.state.shot_clock_time + int(delta_seconds), SHOT_CLOCK_MIN, SHOT_CLOCK_MAX
        )
        return {'shot_clock_time': self.state.shot_clock_time}

    def advance_period(self, direction: int) -> Changes:
        if direction not in (1, -1):
            raise ValueError('direction must be +1 or -1')
        target = _clamp(self.state.current_period + direction, 1, self.total_periods)
        if target == self.state.current_period:
            return {}
        self.state.current_period = target
        self.state.is_game_clock_running = False
        self.state.is_shot_clock_running = False
        return {
            'current_period': target,
            'is_game_clock_running': False,
            'is_shot_clock_running': False,
        }


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def format_game_time(seconds: int) -> str:
    """Render elapsed seconds as ``M:SS``."""
    minutes, rest = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{rest:02d}"
