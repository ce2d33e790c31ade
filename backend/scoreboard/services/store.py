"""Record store adapter over the SQLAlchemy models.

Routes and services go through these helpers rather than touching the
session directly, so every write either commits fully or rolls back and
raises ``PersistenceError``. Game writes are serialized per game id.
"""

import threading
import weakref
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from scoreboard import db
from scoreboard.errors import NotFoundError, PersistenceError, ValidationError
from scoreboard.models import Game

# Locks live only while some writer holds a reference to them.
_game_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_game_locks_guard = threading.Lock()


def _columns(model) -> set:
    return set(model.__table__.columns.keys())


def _check_fields(model, fields: Iterable[str], allow_id: bool = False) -> None:
    allowed = _columns(model)
    if not allow_id:
        allowed.discard('id')
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValidationError(f"Unknown field(s) for {model.__tablename__}: {', '.join(unknown)}")


def _commit(what: str) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[store-commit-failed] {what} error={exc}")
        raise PersistenceError(f'Failed to save {what}') from exc


def list_records(model, filters: Optional[Dict[str, Any]] = None, order_by: Optional[str] = None,
                 descending: bool = False, limit: Optional[int] = None) -> List[Any]:
    """Exact-match filtering, single-field ordering and an optional limit."""
    filters = {k: v for k, v in (filters or {}).items() if v is not None}
    _check_fields(model, filters, allow_id=True)
    query = model.query
    if filters:
        query = query.filter_by(**filters)
    if order_by:
        _check_fields(model, [order_by], allow_id=True)
        column = getattr(model, order_by)
        query = query.order_by(column.desc() if descending else column.asc())
    if limit is not None:
        query = query.limit(int(limit))
    try:
        return query.all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[store-list-failed] table={model.__tablename__} error={exc}")
        raise PersistenceError(f'Failed to load {model.__tablename__}') from exc


def get_record(model, record_id) -> Optional[Any]:
    try:
        return db.session.get(model, record_id)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(f'Failed to load {model.__tablename__}') from exc


def require_record(model, record_id, kind: Optional[str] = None) -> Any:
    record = get_record(model, record_id)
    if record is None:
        raise NotFoundError(kind or model.__name__, record_id)
    return record


def create_record(model, fields: Dict[str, Any]) -> Any:
    _check_fields(model, fields)
    record = model(**fields)
    db.session.add(record)
    _commit(model.__tablename__)
    return record


def create_records(model, rows: List[Dict[str, Any]]) -> List[Any]:
    """Insert all rows in one transaction."""
    for fields in rows:
        _check_fields(model, fields)
    records = [model(**fields) for fields in rows]
    db.session.add_all(records)
    _commit(model.__tablename__)
    return records


def update_record(model, record_id, fields: Dict[str, Any]) -> Any:
    """Partial update with absolute values; returns the stored record."""
    _check_fields(model, fields)
    if model is Game:
        game, _ = mutate_game(record_id, lambda _game: dict(fields))
        return game
    record = require_record(model, record_id)
    for key, value in fields.items():
        setattr(record, key, value)
    _commit(f"{model.__tablename__} id={record_id}")
    return record


def _lock_for(game_id: int) -> threading.Lock:
    with _game_locks_guard:
        lock = _game_locks.get(game_id)
        if lock is None:
            lock = threading.Lock()
            _game_locks[game_id] = lock
        return lock


def mutate_game(game_id: int, mutator: Callable[[Game], Optional[Dict[str, Any]]]) -> Tuple[Game, Dict[str, Any]]:
    """Apply ``mutator`` to the committed game row under the game's write lock.

    The mutator returns the changed fields (absolute values). An empty or
    ``None`` result writes nothing. Exceptions from the mutator propagate
    before any write; a failed commit rolls back and raises PersistenceError.
    """
    with _lock_for(game_id):
        try:
            game = db.session.get(Game, game_id, populate_existing=True)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceError('Failed to load game') from exc
        if game is None:
            raise NotFoundError('Game', game_id)
        try:
            changes = mutator(game) or {}
        except Exception:
            db.session.rollback()
            raise
        if not changes:
            return game, {}
        _check_fields(Game, changes)
        for key, value in changes.items():
            setattr(game, key, value)
        _commit(f"game id={game_id}")
        return game, changes
