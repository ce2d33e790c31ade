from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from scoreboard.errors import ValidationError, PersistenceError
from scoreboard.models import Game, Team, Player, PlayerStat, GAME_STATUSES
from scoreboard.services.store import list_records, require_record, create_record, mutate_game
from scoreboard.services.games.clock import (
    DualClock, GAME_CLOCK, SHOT_CLOCK, CLOCKS, DEFAULT_SHOT_CLOCK_SEC, SHOT_CLOCK_MIN, SHOT_CLOCK_MAX,
)
from scoreboard.services.games.scoring import update_score, update_fouls, set_status, ensure_not_finished
from scoreboard.services.games.scheduler import emit_state, sync_clocks
from scoreboard.sports import require_sport
from scoreboard.utils import check_owner, parse_int, require_text


games = Blueprint('games', __name__)

TEAM1_COLOR = '#3B82F6'
TEAM2_COLOR = '#EF4444'

_COUNTER_FIELDS = ('team1_score', 'team2_score', 'team1_fouls', 'team2_fouls', 'game_time')
_FLAG_FIELDS = ('is_game_clock_running', 'is_shot_clock_running')
PATCHABLE_FIELDS = _COUNTER_FIELDS + _FLAG_FIELDS + ('shot_clock_time', 'current_period', 'game_status')


def _shot_clock_reset() -> int:
    return int(current_app.config.get('SHOT_CLOCK_RESET_SEC', DEFAULT_SHOT_CLOCK_SEC))


def _controller(game: Game) -> DualClock:
    sport = require_sport(game.sport_id)
    return DualClock.for_game(game, sport, shot_clock_reset=_shot_clock_reset())


def _apply(game_id: int, build, allow_finished: bool = False):
    """Run ``build(game)`` under the game's write lock and publish the result."""
    def _mutator(game: Game):
        check_owner(game, 'game')
        if not allow_finished:
            ensure_not_finished(game)
        return build(game)

    try:
        game, changes = mutate_game(game_id, _mutator)
    except PersistenceError:
        current_app.logger.error(f"[game-update-failed] game={game_id}")
        raise
    if changes:
        current_app.logger.debug(f"[game-update] game={game_id} changes={changes}")
        emit_state(game)
        sync_clocks(current_app._get_current_object(), game)
    return jsonify(game.to_dict())


def _json() -> dict:
    return request.get_json(silent=True) or {}


@games.route('', methods=['GET'])
@login_required
def list_games():
    limit = parse_int(request.args.get('limit'), 'limit')
    status = request.args.get('status') or None
    if status is not None and status not in GAME_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(GAME_STATUSES)}")
    found = list_records(
        Game,
        filters={'user_id': current_user.id, 'sport_id': request.args.get('sport') or None, 'game_status': status},
        order_by='created_at',
        descending=True,
        limit=limit,
    )
    return jsonify([g.to_dict() for g in found])


@games.route('', methods=['POST'])
@login_required
def create_game():
    """
    Creates a game for two existing teams, or for two new teams given by name.
    """
    data = _json()
    sport = require_sport(data.get('sport_id'))

    if data.get('team1_id') is not None or data.get('team2_id') is not None:
        team1 = require_record(Team, parse_int(data.get('team1_id'), 'team1_id', required=True))
        team2 = require_record(Team, parse_int(data.get('team2_id'), 'team2_id', required=True))
        if team1.id == team2.id:
            raise ValidationError('A game needs two different teams')
        check_owner(team1, 'team')
        check_owner(team2, 'team')
    else:
        team1_name = require_text(data.get('team1_name'), 'team1_name')
        team2_name = require_text(data.get('team2_name'), 'team2_name')
        team1 = create_record(Team, {'name': team1_name, 'color': TEAM1_COLOR, 'sport': sport.sport_id, 'user_id': current_user.id})
        team2 = create_record(Team, {'name': team2_name, 'color': TEAM2_COLOR, 'sport': sport.sport_id, 'user_id': current_user.id})

    game = create_record(Game, {
        'sport_id': sport.sport_id,
        'team1_id': team1.id,
        'team2_id': team2.id,
        'team1_score': 0,
        'team2_score': 0,
        'team1_fouls': 0,
        'team2_fouls': 0,
        'current_period': 1,
        'game_time': 0,
        'shot_clock_time': _shot_clock_reset() if sport.has_shot_clock else 0,
        'is_game_clock_running': False,
        'is_shot_clock_running': False,
        'game_status': 'active',
        'user_id': current_user.id,
    })
    current_app.logger.info(f"[game-create] game={game.id} sport={sport.sport_id} teams={team1.id},{team2.id}")
    return jsonify(game.to_dict(include_details=True)), 201


@games.route('/<int:game_id>', methods=['GET'])
@login_required
def get_game(game_id):
    game = require_record(Game, game_id)
    check_owner(game, 'game')
    sync_clocks(current_app._get_current_object(), game)
    return jsonify(game.to_dict(include_details=True))


def _validate_patch(game: Game, data: dict) -> dict:
    unknown = sorted(set(data) - set(PATCHABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Field(s) cannot be updated: {', '.join(unknown)}")
    sport = require_sport(game.sport_id)
    changes = {}
    for key, value in data.items():
        if key in _FLAG_FIELDS:
            if not isinstance(value, bool):
                raise ValidationError(f'{key} must be a boolean')
            if key == 'is_shot_clock_running' and value and not sport.has_shot_clock:
                raise ValidationError(f'{sport.name} has no shot clock')
            changes[key] = value
        elif key == 'game_status':
            if value not in GAME_STATUSES:
                raise ValidationError(f"game_status must be one of {', '.join(GAME_STATUSES)}")
            changes[key] = value
        else:
            number = parse_int(value, key, required=True)
            if key == 'shot_clock_time' and not SHOT_CLOCK_MIN <= number <= SHOT_CLOCK_MAX:
                raise ValidationError(f'shot_clock_time must be between {SHOT_CLOCK_MIN} and {SHOT_CLOCK_MAX}')
            if key == 'current_period' and not 1 <= number <= sport.total_periods:
                raise ValidationError(f'current_period must be between 1 and {sport.total_periods}')
            if number < 0:
                raise ValidationError(f'{key} cannot be negative')
            changes[key] = number
    if changes.get('game_status', game.game_status) != 'active':
        if changes.get('is_game_clock_running') or changes.get('is_shot_clock_running'):
            raise ValidationError('Clocks cannot run unless the game is active')
        changes.update(set_status(game, changes.get('game_status', game.game_status)))
        if 'game_status' not in data:
            changes.pop('game_status')
    return changes


@games.route('/<int:game_id>', methods=['PATCH'])
@login_required
def patch_game(game_id):
    """
    Partial update with absolute values; sending the same body twice leaves the same state.
    """
    data = _json()
    return _apply(game_id, lambda game: _validate_patch(game, data), allow_finished='game_status' in data)


@games.route('/<int:game_id>/clock/<string:clock>/toggle', methods=['POST'])
@login_required
def toggle_clock(game_id, clock):
    if clock not in CLOCKS:
        raise ValidationError(f"clock must be one of {', '.join(CLOCKS)}")

    def _toggle(game):
        controller = _controller(game)
        if clock == GAME_CLOCK:
            changes = controller.toggle_game_clock()
        else:
            if not controller.has_shot_clock:
                raise ValidationError(f'{game.sport.name} has no shot clock')
            changes = controller.toggle_shot_clock()
        if game.game_status == 'paused' and any(changes.values()):
            # Starting a clock resumes a paused game.
            changes['game_status'] = 'active'
        return changes

    return _apply(game_id, _toggle)


@games.route('/<int:game_id>/clock/<string:clock>/adjust', methods=['POST'])
@login_required
def adjust_clock(game_id, clock):
    data = _json()
    if clock == GAME_CLOCK:
        minutes = parse_int(data.get('minutes'), 'minutes', required=True)
        return _apply(game_id, lambda game: _controller(game).adjust_game_time(minutes))
    if clock == SHOT_CLOCK:
        seconds = parse_int(data.get('seconds'), 'seconds', required=True)

        def _adjust(game):
            controller = _controller(game)
            if not controller.has_shot_clock:
                raise ValidationError(f'{game.sport.name} has no shot clock')
            return controller.adjust_shot_clock(seconds)

        return _apply(game_id, _adjust)
    raise ValidationError(f"clock must be one of {', '.join(CLOCKS)}")


@games.route('/<int:game_id>/period', methods=['POST'])
@login_required
def change_period(game_id):
    direction = parse_int(_json().get('direction'), 'direction', required=True)
    if direction not in (1, -1):
        raise ValidationError('direction must be 1 or -1')
    return _apply(game_id, lambda game: _controller(game).advance_period(direction))


@games.route('/<int:game_id>/score', methods=['POST'])
@login_required
def change_score(game_id):
    data = _json()
    change = parse_int(data.get('change'), 'change')
    return _apply(game_id, lambda game: update_score(game, data.get('team'), change))


@games.route('/<int:game_id>/fouls', methods=['POST'])
@login_required
def change_fouls(game_id):
    data = _json()
    change = parse_int(data.get('change'), 'change', default=1)
    return _apply(game_id, lambda game: update_fouls(game, data.get('team'), change))


@games.route('/<int:game_id>/status', methods=['POST'])
@login_required
def change_status(game_id):
    status = _json().get('status')
    result = _apply(game_id, lambda game: set_status(game, status), allow_finished=True)
    current_app.logger.info(f"[game-status] game={game_id} status={status}")
    return result


@games.route('/<int:game_id>/stats', methods=['GET'])
@login_required
def list_game_stats(game_id):
    game = require_record(Game, game_id)
    check_owner(game, 'game')
    stats = list_records(PlayerStat, filters={'game_id': game.id}, order_by='created_at')
    return jsonify([s.to_dict() for s in stats])


@games.route('/<int:game_id>/stats', methods=['POST'])
@login_required
def record_stat(game_id):
    """
    Appends a stat line for a player. The stat type must be tracked by the game's sport.
    """
    game = require_record(Game, game_id)
    check_owner(game, 'game')
    data = _json()
    player = require_record(Player, parse_int(data.get('player_id'), 'player_id', required=True))
    check_owner(player, 'player')
    if player.team_id not in (game.team1_id, game.team2_id):
        raise ValidationError('Player is not on either team in this game')
    sport = require_sport(game.sport_id)
    stat_type = data.get('stat_type')
    if stat_type not in sport.stat_type_ids:
        raise ValidationError(f'{stat_type} is not tracked for {sport.name}')
    value = data.get('value', 1)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError('value must be a number')
    stat = create_record(PlayerStat, {
        'game_id': game.id,
        'player_id': player.id,
        'stat_type': stat_type,
        'value': value,
        'user_id': current_user.id,
    })
    return jsonify(stat.to_dict()), 201
