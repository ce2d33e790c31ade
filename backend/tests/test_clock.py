import random

import pytest

from scoreboard.services.games.clock import ClockState, DualClock, format_game_time
from scoreboard.sports import SPORTS, get_sport


def basketball_clock(**state):
    sport = get_sport('basketball')
    return DualClock(ClockState(**state), sport.has_shot_clock, sport.total_periods)


def test_period_stays_within_bounds_for_every_sport():
    rng = random.Random(1234)
    for sport in SPORTS:
        clock = DualClock(ClockState(), sport.has_shot_clock, sport.total_periods)
        for _ in range(200):
            clock.advance_period(rng.choice((1, -1)))
            assert 1 <= clock.state.current_period <= sport.total_periods


def test_period_change_stops_both_clocks_but_keeps_values():
    clock = basketball_clock(game_time=300, shot_clock_time=14,
                             is_game_clock_running=True, is_shot_clock_running=True)
    changes = clock.advance_period(1)
    assert changes == {'current_period': 2, 'is_game_clock_running': False, 'is_shot_clock_running': False}
    assert clock.state.game_time == 300
    assert clock.state.shot_clock_time == 14


def test_advance_past_last_period_is_a_noop():
    clock = basketball_clock(current_period=4, is_game_clock_running=True, is_shot_clock_running=False)
    assert clock.advance_period(1) == {}
    assert clock.state.current_period == 4
    assert clock.state.is_game_clock_running is True
    assert clock.state.is_shot_clock_running is False


def test_retreat_before_first_period_is_a_noop():
    clock = basketball_clock(current_period=1, is_game_clock_running=True)
    assert clock.advance_period(-1) == {}
    assert clock.state.is_game_clock_running is True


def test_advance_period_rejects_other_directions():
    with pytest.raises(ValueError):
        basketball_clock().advance_period(2)


def test_shot_clock_expires_reloads_and_stops():
    expired = []
    sport = get_sport('basketball')
    clock = DualClock(ClockState(shot_clock_time=24, is_shot_clock_running=True),
                      sport.has_shot_clock, sport.total_periods,
                      on_shot_clock_expired=lambda: expired.append(True))
    seen = []
    for _ in range(24):
        clock.tick_shot_clock()
        seen.append(clock.state.shot_clock_time)
    assert min(seen) >= 0
    assert seen[:3] == [23, 22, 21]
    assert clock.state.shot_clock_time == 24
    assert clock.state.is_shot_clock_running is False
    assert expired == [True]


def test_shot_clock_tick_at_zero_reloads():
    clock = basketball_clock(shot_clock_time=0, is_shot_clock_running=True)
    assert clock.tick_shot_clock() == {'shot_clock_time': 24, 'is_shot_clock_running': False}


def test_shot_clock_reload_value_is_configurable():
    clock = DualClock(ClockState(shot_clock_time=1, is_shot_clock_running=True), True, 4, shot_clock_reset=30)
    clock.tick_shot_clock()
    assert clock.state.shot_clock_time == 30


@pytest.mark.parametrize('start,delta,expected', [
    (24, 5, 29),
    (24, -30, 0),
    (90, 50, 99),
    (10, -1000, 0),
    (0, 1000, 99),
])
def test_adjust_shot_clock_clamps(start, delta, expected):
    clock = basketball_clock(shot_clock_time=start)
    assert clock.adjust_shot_clock(delta) == {'shot_clock_time': expected}


def test_adjust_game_time_floors_at_zero():
    clock = basketball_clock(game_time=90)
    assert clock.adjust_game_time(1) == {'game_time': 150}
    assert clock.adjust_game_time(-5) == {'game_time': 0}


def test_game_clock_ticks_without_upper_bound():
    clock = basketball_clock(game_time=10 ** 6)
    assert clock.tick_game_clock() == {'game_time': 10 ** 6 + 1}


def test_shot_clock_controls_are_noops_without_shot_clock():
    soccer = get_sport('soccer')
    clock = DualClock(ClockState(shot_clock_time=0), soccer.has_shot_clock, soccer.total_periods)
    assert clock.toggle_shot_clock() == {}
    assert clock.adjust_shot_clock(5) == {}
    assert clock.state.is_shot_clock_running is False
    assert clock.state.shot_clock_time == 0


def test_toggles_flip_flags():
    clock = basketball_clock()
    assert clock.toggle_game_clock() == {'is_game_clock_running': True}
    assert clock.toggle_shot_clock() == {'is_shot_clock_running': True}
    assert clock.toggle_game_clock() == {'is_game_clock_running': False}


def test_format_game_time():
    assert format_game_time(0) == '0:00'
    assert format_game_time(65) == '1:05'
    assert format_game_time(3600) == '60:00'
