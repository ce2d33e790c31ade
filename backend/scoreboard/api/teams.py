from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from scoreboard.errors import ValidationError
from scoreboard.models import Team, Player
from scoreboard.services.store import list_records, require_record, create_record, create_records
from scoreboard.sports import require_sport
from scoreboard.utils import check_owner, parse_int, require_text

teams = Blueprint('teams', __name__)

DEFAULT_TEAM_COLOR = '#000000'


@teams.route('', methods=['GET'])
@login_required
def list_teams():
    sport = request.args.get('sport') or None
    found = list_records(Team, filters={'user_id': current_user.id, 'sport': sport}, order_by='name')
    return jsonify([t.to_dict() for t in found])


@teams.route('', methods=['POST'])
@login_required
def create_team():
    """
    Creates a team, optionally with an initial roster of player names.
    """
    data = request.get_json(silent=True) or {}
    name = require_text(data.get('name'), 'name')
    sport_id = data.get('sport') or None
    if sport_id is not None:
        require_sport(sport_id)
    roster = data.get('players') or []
    if not isinstance(roster, list) or any(not isinstance(p, str) or not p.strip() for p in roster):
        raise ValidationError('Every player needs a name')

    team = create_record(Team, {
        'name': name,
        'color': data.get('color') or DEFAULT_TEAM_COLOR,
        'sport': sport_id,
        'user_id': current_user.id,
    })
    if roster:
        create_records(Player, [
            {'name': p.strip(), 'team_id': team.id, 'user_id': current_user.id} for p in roster
        ])
    current_app.logger.info(f"[team-create] team={team.id} players={len(roster)}")
    return jsonify(team.to_dict(include_players=True)), 201


@teams.route('/<int:team_id>', methods=['GET'])
@login_required
def get_team(team_id):
    team = require_record(Team, team_id)
    check_owner(team, 'team')
    return jsonify(team.to_dict(include_players=True))


@teams.route('/<int:team_id>/players', methods=['POST'])
@login_required
def add_player(team_id):
    team = require_record(Team, team_id)
    check_owner(team, 'team')
    data =request.get_json(silent=True) or {}
    player = create_record(Player, {
        'name': require_text(data.get('name'), 'name'),
        'team_id': team.id,
        'position': (data.get('position') or None),
        'jersey_number': parse_int(data.get('jersey_number'), 'jersey_number'),
        'user_id': current_user.id,
    })
    return jsonify(player.to_dict()), 201
