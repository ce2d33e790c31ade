from typing import Any, Optional

from flask_login import current_user

from scoreboard.errors import ScoreboardError, ValidationError


def parse_int(value: Any, field: str, default: Optional[int] = None, required: bool = False) -> Optional[int]:
    """Coerce a JSON/query value to int, raising ValidationError on junk."""
    if value is None or value == '':
        if required:
            raise ValidationError(f'{field} is required')
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')


def require_text(value: Any, field: str) -> str:
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        raise ValidationError(f'{field} is required')
    return text


def check_owner(record, kind: str) -> None:
    """Refuse access (403) to a record another user created."""
    if record.user_id is not None and record.user_id != current_user.id:
        raise ScoreboardError(f'You do not own this {kind}', 403)
