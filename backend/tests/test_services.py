import gc

import pytest
from sqlalchemy.exc import OperationalError

from scoreboard import db
from scoreboard.errors import NotFoundError, PersistenceError, ValidationError
from scoreboard.models import Game, Team, Player
from scoreboard.services.games import scheduler
from scoreboard.services import store
from scoreboard.services.games.scoring import update_score, update_fouls, set_status
from scoreboard.services.store import (
    create_record, create_records, get_record, list_records, mutate_game, require_record, update_record,
)


def _teams():
    return create_records(Team, [{'name': 'Home'}, {'name': 'Away'}])


def _game(sport_id='basketball', **fields):
    home, away = _teams()
    base = {'sport_id': sport_id, 'team1_id': home.id, 'team2_id': away.id,
            'shot_clock_time': 24 if sport_id == 'basketball' else 0}
    base.update(fields)
    return create_record(Game, base)


# ---- scoring ----

def test_score_never_goes_negative():
    game = Game(sport_id='basketball', team1_score=2, team2_score=0)
    assert update_score(game, 'team1', -5) == {'team1_score': 0}
    assert update_score(game, 'team2', -1) == {'team2_score': 0}


def test_score_defaults_to_sport_increment():
    game = Game(sport_id='rugby', team1_score=3)
    assert update_score(game, 'team1') == {'team1_score': 4}


def test_fouls_never_go_negative():
    game = Game(sport_id='soccer', team1_fouls=0, team2_fouls=3)
    assert update_fouls(game, 'team1', -1) == {'team1_fouls': 0}
    assert update_fouls(game, 'team2') == {'team2_fouls': 4}


def test_unknown_team_is_rejected():
    with pytest.raises(ValidationError):
        update_score(Game(sport_id='basketball'), 'team3', 1)


def test_pausing_stops_clocks():
    game = Game(sport_id='basketball', is_game_clock_running=True)
    assert set_status(game, 'paused') == {
        'game_status': 'paused', 'is_game_clock_running': False, 'is_shot_clock_running': False,
    }
    assert set_status(game, 'active') == {'game_status': 'active'}
    with pytest.raises(ValidationError):
        set_status(game, 'abandoned')


# ---- store ----

def test_absolute_update_is_idempotent(flask_app):
    game = _game()
    update_record(Game, game.id, {'team1_score': 7})
    once = get_record(Game, game.id).to_dict()
    update_record(Game, game.id, {'team1_score': 7})
    twice = get_record(Game, game.id).to_dict()
    assert once == twice
    assert twice['team1_score'] == 7


def test_update_is_partial(flask_app):
    game = _game(team2_score=5)
    updated = update_record(Game, game.id, {'team1_score': 3})
    assert updated.team1_score == 3
    assert updated.team2_score == 5


def test_update_rejects_unknown_fields(flask_app):
    game = _game()
    with pytest.raises(ValidationError):
        update_record(Game, game.id, {'bogus': 1})


def test_list_filters_orders_and_limits(flask_app):
    home, away = _teams()
    create_records(Player, [
        {'name': 'Cara', 'team_id': home.id},
        {'name': 'Abe', 'team_id': home.id},
        {'name': 'Bea', 'team_id': home.id},
        {'name': 'Zed', 'team_id': away.id},
    ])
    names = [p.name for p in list_records(Player, filters={'team_id': home.id}, order_by='name')]
    assert names == ['Abe', 'Bea', 'Cara']
    names = [p.name for p in list_records(Player, filters={'team_id': home.id}, order_by='name', descending=True, limit=2)]
    assert names == ['Cara', 'Bea']


def test_require_record_raises_not_found(flask_app):
    with pytest.raises(NotFoundError):
        require_record(Game, 999)


def test_failed_commit_keeps_committed_state(flask_app, monkeypatch):
    game = _game(team1_score=4)

    def _boom():
        raise OperationalError('UPDATE games', {}, Exception('store unavailable'))

    monkeypatch.setattr(db.session.registry(), 'commit', _boom)
    with pytest.raises(PersistenceError):
        update_record(Game, game.id, {'team1_score': 9})
    monkeypatch.undo()

    stored, _ = mutate_game(game.id, lambda g: None)
    assert stored.team1_score == 4


def test_mutator_errors_write_nothing(flask_app):
    game = _game(team1_score=1)

    def _bad(g):
        g.team1_score = 50
        raise ValidationError('nope')

    with pytest.raises(ValidationError):
        mutate_game(game.id, _bad)
    stored, _ = mutate_game(game.id, lambda g: None)
    assert stored.team1_score == 1


def test_game_locks_are_dropped_once_unused(flask_app):
    game = _game()
    held = store._lock_for(game.id)
    assert store._lock_for(game.id) is held
    del held
    gc.collect()
    assert game.id not in store._game_locks

    mutate_game(game.id, lambda g: {'team1_score': 2})
    gc.collect()
    assert game.id not in store._game_locks


# ---- clock ticks ----

def test_tick_requires_running_flag(flask_app):
    game = _game()
    assert scheduler.tick_clock(flask_app, game.id, 'game') is False
    assert get_record(Game, game.id).game_time == 0


def test_five_game_clock_ticks_then_stop(flask_app):
    game = _game()
    update_record(Game, game.id, {'is_game_clock_running': True})
    for _ in range(5):
        assert scheduler.tick_clock(flask_app, game.id, 'game') is True
    update_record(Game, game.id, {'is_game_clock_running': False})
    assert scheduler.tick_clock(flask_app, game.id, 'game') is False
    stored = get_record(Game, game.id)
    assert stored.game_time == 5
    assert stored.is_game_clock_running is False


def test_basketball_shot_clock_runs_out(flask_app):
    game = _game(is_shot_clock_running=True)
    results = [scheduler.tick_clock(flask_app, game.id, 'shot') for _ in range(24)]
    assert results[:-1] == [True] * 23
    assert results[-1] is False
    stored = get_record(Game, game.id)
    assert stored.shot_clock_time == 24
    assert stored.is_shot_clock_running is False


def test_shot_clock_flag_is_cleared_for_sports_without_one(flask_app):
    game = _game('soccer', is_shot_clock_running=True)
    assert scheduler.tick_clock(flask_app, game.id, 'shot') is False
    assert get_record(Game, game.id).is_shot_clock_running is False


def test_finished_games_do_not_tick(flask_app):
    game = _game(is_game_clock_running=True, game_status='finished')
    assert scheduler.tick_clock(flask_app, game.id, 'game') is False
    assert get_record(Game, game.id).game_time == 0


def test_scheduler_is_disabled_in_tests(flask_app):
    game = _game(is_game_clock_running=True)
    scheduler.sync_clocks(flask_app, game)
    assert not scheduler.is_clock_scheduled(game.id, 'game')
