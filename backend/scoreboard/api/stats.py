from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from scoreboard.models import Game, Team
from scoreboard.services.games.clock import format_game_time
from scoreboard.services.store import list_records
from scoreboard.sports import SPORTS, get_sport, require_sport

stats = Blueprint('stats', __name__)


def summarize_games(games, teams_by_id, recent_limit=10):
    """Aggregate a newest-first list of games into the overview payload."""
    total = len(games)
    total_score = sum(g.team1_score + g.team2_score for g in games)

    def _team_name(team_id):
        team = teams_by_id.get(team_id)
        return team.name if team else 'Unknown Team'

    recent = []
    for g in games[:recent_limit]:
        sport = get_sport(g.sport_id)
        recent.append({
            'id': g.id,
            'sport': sport.name if sport else 'Unknown Sport',
            'team1': _team_name(g.team1_id),
            'team2': _team_name(g.team2_id),
            'score': f"{g.team1_score} - {g.team2_score}",
            'game_time': format_game_time(g.game_time),
            'game_status': g.game_status,
            'created_at': g.created_at.isoformat() if g.created_at else None,
        })

    return {
        'total_games': total,
        'active_games': sum(1 for g in games if g.game_status == 'active'),
        'completed_games': sum(1 for g in games if g.game_status == 'finished'),
        'average_score': round(total_score / total, 1) if total else 0,
        'recent_games': recent,
    }


def sport_breakdown(games):
    total = len(games)
    rows = []
    for sport in SPORTS:
        count = sum(1 for g in games if g.sport_id == sport.sport_id)
        rows.append({
            'sport_id': sport.sport_id,
            'name': sport.name,
            'games': count,
            'percentage': round(count / total * 100, 1) if total else 0,
        })
    return rows


@stats.route('/overview', methods=['GET'])
@login_required
def overview():
    sport_id = request.args.get('sport') or None
    if sport_id == 'all':
        sport_id = None
    if sport_id is not None:
        require_sport(sport_id)

    all_games = list_records(Game, filters={'user_id': current_user.id}, order_by='created_at', descending=True)
    teams_by_id = {t.id: t for t in list_records(Team, filters={'user_id': current_user.id})}
    filtered = [g for g in all_games if sport_id is None or g.sport_id == sport_id]

    payload = summarize_games(filtered, teams_by_id, int(current_app.config.get('RECENT_GAMES_LIMIT', 10)))
    payload['sports_played'] = len({g.sport_id for g in all_games})
    payload['by_sport'] = sport_breakdown(all_games)
    return jsonify(payload)
