import threading
from typing import Dict, Optional, Tuple

from scoreboard import socketio
from scoreboard.errors import NotFoundError
from scoreboard.models import Game
from scoreboard.services.store import mutate_game
from .clock import DualClock, GAME_CLOCK, SHOT_CLOCK, CLOCKS, DEFAULT_SHOT_CLOCK_SEC


# Generation of the live worker per (game_id, clock). A worker whose
# generation is no longer current has been cancelled or superseded.
_active_clocks: Dict[Tuple[int, str], int] = {}
_generation = 0
_clocks_lock = threading.Lock()


def room_for(game_id: int) -> str:
    return f"game:{game_id}"


def emit_state(game: Game) -> None:
    socketio.emit('state_update', {'game_id': game.id, 'game': game.to_dict()}, to=room_for(game.id), namespace='/ws')


def schedule_clock(app, game_id: int, clock: str) -> None:
    """Start a tick worker for ``clock`` of the given game.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Supersedes any worker already running for the same clock
    """
    global _generation
    if clock not in CLOCKS:
        raise ValueError(f"unknown clock {clock!r}")
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    key = (game_id, clock)
    with _clocks_lock:
        _generation += 1
        gen = _generation
        _active_clocks[key] = gen
    interval = float(app.config.get('CLOCK_TICK_SEC', 1))
    app.logger.info(f"[clock-start] game={game_id} clock={clock} gen={gen} interval={interval}s")

    def _worker(gid: int, which: str, expected_gen: int):
        while True:
            socketio.sleep(interval)
            if not _is_current((gid, which), expected_gen):
                app.logger.info(f"[clock-abort] game={gid} clock={which} gen={expected_gen} cancelled")
                return
            with app.app_context():
                try:
                    running = tick_clock(app, gid, which)
                except NotFoundError:
                    app.logger.warning(f"[clock-orphaned] game={gid} clock={which} game no longer exists")
                    running = False
                except Exception:
                    # A failed write keeps the committed state; try again next tick.
                    app.logger.exception(f"[clock-tick-failed] game={gid} clock={which}")
                    running = True
            if not running:
                with _clocks_lock:
                    if _active_clocks.get((gid, which)) == expected_gen:
                        _active_clocks.pop((gid, which), None)
                app.logger.info(f"[clock-stop] game={gid} clock={which} gen={expected_gen}")
                return

    socketio.start_background_task(_worker, game_id, clock, gen)


def _is_current(key: Tuple[int, str], gen: int) -> bool:
    with _clocks_lock:
        return _active_clocks.get(key) == gen


def cancel_clock(game_id: int, clock: str) -> None:
    """Stop future ticks of ``clock``. Writes already issued are left to finish."""
    with _clocks_lock:
        gen = _active_clocks.pop((game_id, clock), None)
    if gen is not None:
        try:
            from flask import current_app
            current_app.logger.info(f"[clock-cancel] game={game_id} clock={clock} gen={gen}")
        except RuntimeError:
            pass


def is_clock_scheduled(game_id: int, clock: str) -> bool:
    with _clocks_lock:
        return (game_id, clock) in _active_clocks


def sync_clocks(app, game: Game) -> None:
    """Start or cancel workers so they match the game's stored running flags."""
    for clock, running in ((GAME_CLOCK, game.is_game_clock_running), (SHOT_CLOCK, game.is_shot_clock_running)):
        if running and game.game_status != 'finished':
            if not is_clock_scheduled(game.id, clock):
                schedule_clock(app, game.id, clock)
        else:
            cancel_clock(game.id, clock)


def tick_clock(app, game_id: int, clock: str) -> bool:
    """Apply one tick to ``clock`` and return whether it is still running.

    The tick runs under the game's write lock against the committed row, so
    it is ordered with user actions on the same game. A stopped clock, a
    finished game or a missing sport leaves the row untouched.
    """
    expired = []

    def _tick(game: Game) -> Optional[dict]:
        sport = game.sport
        if sport is None or game.game_status == 'finished':
            return None
        if clock == GAME_CLOCK:
            if not game.is_game_clock_running:
                return None
        elif not game.is_shot_clock_running:
            return None
        elif not sport.has_shot_clock:
            return {'is_shot_clock_running': False}
        controller = DualClock.for_game(
            game, sport,
            shot_clock_reset=int(app.config.get('SHOT_CLOCK_RESET_SEC', DEFAULT_SHOT_CLOCK_SEC)),
            on_shot_clock_expired=lambda: expired.append(game.id),
        )
        if clock == GAME_CLOCK:
            return controller.tick_game_clock()
        return controller.tick_shot_clock()

    game, changes = mutate_game(game_id, _tick)
    if not changes:
        return False
    emit_state(game)
    if expired:
        app.logger.info(f"[shot-clock-expired] game={game_id} reset={game.shot_clock_time}")
        socketio.emit('shot_clock_expired', {'game_id': game_id}, to=room_for(game_id), namespace='/ws')
    still_running = game.is_game_clock_running if clock == GAME_CLOCK else game.is_shot_clock_running
    return bool(still_running)
