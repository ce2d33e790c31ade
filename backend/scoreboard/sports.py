"""Static sport rule table.

Each sport declares its period structure, scoring increment, shot-clock
capability and the ordered statistic categories tracked for players.
The table is built once at import and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import ValidationError


@dataclass(frozen=True)
class StatType:
    stat_id: str
    name: str


@dataclass(frozen=True)
class Sport:
    sport_id: str
    name: str
    has_shot_clock: bool
    period_name: str
    total_periods: int
    score_increment: int = 1
    stat_types: Tuple[StatType, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.total_periods < 1:
            raise ValueError(f"{self.sport_id}: total_periods must be >= 1")
        if self.score_increment <= 0:
            raise ValueError(f"{self.sport_id}: score_increment must be > 0")

    @property
    def stat_type_ids(self) -> List[str]:
        return [s.stat_id for s in self.stat_types]

    def to_dict(self) -> Dict[str, object]:
        return {
            'id': self.sport_id,
            'name': self.name,
            'has_shot_clock': self.has_shot_clock,
            'period_name': self.period_name,
            'total_periods': self.total_periods,
            'score_increment': self.score_increment,
            'stat_types': [{'id': s.stat_id, 'name': s.name} for s in self.stat_types],
        }


def _stats(*pairs: Tuple[str, str]) -> Tuple[StatType, ...]:
    return tuple(StatType(stat_id, name) for stat_id, name in pairs)


SPORTS: Tuple[Sport, ...] = (
    Sport('basketball', 'Basketball', True, 'Quarter', 4, 1, _stats(
        ('points', 'Points'), ('assists', 'Assists'), ('rebounds', 'Rebounds'),
        ('steals', 'Steals'), ('fouls', 'Fouls'),
    )),
    Sport('soccer', 'Soccer', False, 'Half', 2, 1, _stats(
        ('goals', 'Goals'), ('assists', 'Assists'), ('fouls', 'Fouls'),
        ('yellowCards', 'Yellow Cards'), ('redCards', 'Red Cards'),
    )),
    Sport('afl', 'AFL', False, 'Quarter', 4, 1, _stats(
        ('goals', 'Goals'), ('marks', 'Marks'), ('kicks', 'Kicks'),
        ('tackles', 'Tackles'), ('fouls', 'Fouls'),
    )),
    Sport('tennis', 'Tennis', False, 'Set', 5, 1, _stats(
        ('setsWon', 'Sets Won'), ('aces', 'Aces'), ('doubleFaults', 'Double Faults'),
        ('fouls', 'Fouls'),
    )),
    Sport('netball', 'Netball', True, 'Quarter', 4, 1, _stats(
        ('goals', 'Goals'), ('goalAssists', 'Goal Assists'), ('intercepts', 'Intercepts'),
        ('fouls', 'Fouls'),
    )),
    Sport('rugby', 'Rugby', False, 'Half', 2, 1, _stats(
        ('tries', 'Tries'), ('conversions', 'Conversions'), ('tackles', 'Tackles'),
        ('penalties', 'Penalties'),
    )),
    Sport('nfl', 'NFL', False, 'Quarter', 4, 1, _stats(
        ('touchdowns', 'Touchdowns'), ('tackles', 'Tackles'),
        ('interceptions', 'Interceptions'), ('penalties', 'Penalties'),
    )),
    Sport('baseball', 'Baseball', False, 'Inning', 9, 1, _stats(
        ('hits', 'Hits'), ('runs', 'Runs'), ('homeRuns', 'Home Runs'),
        ('strikeouts', 'Strikeouts'), ('walks', 'Walks'), ('catches', 'Catches'),
        ('errors', 'Errors'),
    )),
)

_BY_ID: Dict[str, Sport] = {s.sport_id: s for s in SPORTS}


def get_sport(sport_id: Optional[str]) -> Optional[Sport]:
    if not sport_id:
        return None
    return _BY_ID.get(sport_id)


def require_sport(sport_id: Optional[str]) -> Sport:
    sport = get_sport(sport_id)
    if sport is None:
        raise ValidationError(f'Unknown sport: {sport_id}')
    return sport


def sport_ids() -> List[str]:
    return [s.sport_id for s in SPORTS]
