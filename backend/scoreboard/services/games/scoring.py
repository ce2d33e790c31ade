from typing import Any, Dict, Optional

from scoreboard.errors import ValidationError
from scoreboard.models import Game, GAME_STATUSES

TEAMS = ('team1', 'team2')


def _counter_field(team: str, suffix: str) -> str:
    if team not in TEAMS:
        raise ValidationError("team must be 'team1' or 'team2'")
    return f'{team}_{suffix}'


def update_score(game: Game, team: str, change: Optional[int] = None) -> Dict[str, Any]:
    """Adjust a team's score, floored at 0.

    ``change`` defaults to the sport's score increment.
    """
    key = _counter_field(team, 'score')
    if change is None:
        sport = game.sport
        change = sport.score_increment if sport else 1
    return {key: max(0, int(getattr(game, key) or 0) + int(change))}


def update_fouls(game: Game, team: str, change: int = 1) -> Dict[str, Any]:
    key = _counter_field(team, 'fouls')
    return {key: max(0, int(getattr(game, key) or 0) + int(change))}


def set_status(game: Game, status: str) -> Dict[str, Any]:
    """Move the game between active, paused and finished.

    Pausing or finishing stops both clocks.
    """
    if status not in GAME_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(GAME_STATUSES)}")
    changes: Dict[str, Any] = {'game_status': status}
    if status != 'active':
        changes['is_game_clock_running'] = False
        changes['is_shot_clock_running'] = False
    return changes


def ensure_not_finished(game: Game) -> None:
    if game.game_status == 'finished':
        raise ValidationError('Game is finished')
