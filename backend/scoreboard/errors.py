"""Error taxonomy shared by routes and services.

Each error carries the HTTP status it maps to; ``register_error_handlers``
turns them into ``{"error": message}`` JSON responses.
"""

from typing import Any, Dict, Optional

from flask import jsonify, current_app


class ScoreboardError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.message}


class NotFoundError(ScoreboardError):
    """A referenced game, team or player id does not exist."""
    status_code = 404

    def __init__(self, kind: str, record_id: Any):
        super().__init__(f'{kind} not found')
        self.kind = kind
        self.record_id = record_id


class ValidationError(ScoreboardError):
    """Rejected input. Raised before anything is written."""
    status_code = 400


class PersistenceError(ScoreboardError):
    """The store failed to commit. The previously committed state is kept."""
    status_code = 503


def register_error_handlers(flask_app) -> None:
    @flask_app.errorhandler(ScoreboardError)
    def handle_scoreboard_error(exc):
        if isinstance(exc, PersistenceError):
            current_app.logger.error(f"[persistence-error] {exc.message}")
        else:
            current_app.logger.info(f"[request-error] status={exc.status_code} {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({'error': 'Not found'}), 404
