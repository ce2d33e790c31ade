from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from scoreboard.models import Player, PlayerStat, Team
from scoreboard.services.store import list_records, require_record, create_record
from scoreboard.utils import check_owner, parse_int, require_text

players = Blueprint('players', __name__)


@players.route('', methods=['GET'])
@login_required
def list_players():
    team_id = parse_int(request.args.get('team_id'), 'team_id')
    found = list_records(Player, filters={'user_id': current_user.id, 'team_id': team_id}, order_by='created_at', descending=True)
    return jsonify([p.to_dict() for p in found])


@players.route('', methods=['POST'])
@login_required
def create_player():
    data = request.get_json(silent=True) or {}
    name = require_text(data.get('name'), 'name')
    team_id = parse_int(data.get('team_id'), 'team_id', required=True)
    check_owner(require_record(Team, team_id), 'team')
    player = create_record(Player, {
        'name': name,
        'team_id': team_id,
        'position': data.get('position') or None,
        'jersey_number': parse_int(data.get('jersey_number'), 'jersey_number'),
        'user_id': current_user.id,
    })
    return jsonify(player.to_dict()), 201


@players.route('/<int:player_id>', methods=['GET'])
@login_required
def get_player(player_id):
    """
    Returns a player together with every stat recorded for them.
    """
    player = require_record(Player, player_id)
    check_owner(player, 'player')
    stats = list_records(PlayerStat, filters={'player_id': player.id}, order_by='created_at')
    totals = {}
    for s in stats:
        totals[s.stat_type] = totals.get(s.stat_type, 0) + s.value
    payload = player.to_dict()
    payload['stats'] = [s.to_dict() for s in stats]
    payload['totals'] = totals
    return jsonify(payload)
