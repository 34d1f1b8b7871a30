import threading
from typing import Optional

from .broadcast import EventBroadcaster
from .hits import HitArbiter
from .lifecycle import SessionLifecycle
from .registry import ConnectionRegistry, Rect
from .scheduler import SocketIOScheduler


def _bounds_from_config(config) -> Rect:
    radius = float(config.get('PLAYER_RADIUS', 15))
    return Rect(
        radius,
        radius,
        float(config.get('WORLD_WIDTH', 1920)) - radius,
        float(config.get('WORLD_HEIGHT', 1080)) - radius,
    )


def _spawn_area_from_config(config) -> Rect:
    x = float(config.get('SPAWN_X', 100))
    y = float(config.get('SPAWN_Y', 100))
    return Rect(x, y, x + float(config.get('SPAWN_WIDTH', 800)), y + float(config.get('SPAWN_HEIGHT', 500)))


class MatchSession:
    """Single owner of all live match state.

    Socket handlers and timer callbacks both enter through this object and
    run one at a time under ``lock``; nothing outside holds references to
    the player or score tables.
    """

    def __init__(self, app, socketio, store, scheduler=None, rng=None):
        self.app = app
        self.lock = threading.RLock()
        self.scheduler = scheduler or SocketIOScheduler(socketio)
        config = app.config
        self.registry = ConnectionRegistry(_bounds_from_config(config), _spawn_area_from_config(config), rng=rng)
        self.broadcaster = EventBroadcaster(socketio, config.get('SOCKETIO_NAMESPACE', '/'), logger=app.logger)
        self.arbiter = HitArbiter(
            self.registry,
            self.broadcaster,
            self._call_later,
            respawn_delay=float(config.get('RESPAWN_DELAY_SEC', 3)),
            logger=app.logger,
        )
        self.lifecycle = SessionLifecycle(
            self.registry,
            self.broadcaster,
            store,
            self._call_later,
            duration=float(config.get('MATCH_DURATION_SEC', 120)),
            min_players=int(config.get('MIN_PLAYERS', 2)),
            clock=self.scheduler.time,
            logger=app.logger,
        )

    def _call_later(self, delay, callback, *args):
        def _reenter():
            with self.lock, self.app.app_context():
                try:
                    callback(*args)
                except Exception:
                    self.app.logger.exception(f"[timer-failed] callback={getattr(callback, '__name__', callback)}")

        return self.scheduler.call_later(delay, _reenter)

    # ---- inbound events ----

    def check_name(self, name) -> bool:
        with self.lock:
            return self.registry.is_name_taken(name)

    def register(self, sid: str, name):
        with self.lock:
            snapshot = self.registry.register(sid, name)
            if snapshot is None:
                self.app.logger.info(f"[register-rejected] sid={sid} name={name!r}")
                return None
            self.broadcaster.to_sender(sid, 'init', snapshot.to_dict())
            self.broadcaster.to_others(sid, 'playerJoined', self.registry.players[name].to_dict())
            self.app.logger.info(f"[register] sid={sid} name={name} population={self.registry.population_count()}")
            self.lifecycle.on_registered()
            return snapshot

    def update_position(self, sid: str, pos) -> None:
        if not isinstance(pos, dict):
            return
        with self.lock:
            player = self.registry.update_position(sid, pos.get('x'), pos.get('y'))
            if player is None:
                return
            self.broadcaster.to_others(sid, 'updatePosition', {
                'name': player.name,
                'pos': {'x': player.x, 'y': player.y},
            })

    def shoot(self, sid: str, bullet) -> bool:
        if not isinstance(bullet, dict):
            return False
        payload = {}
        for key in ('x', 'y', 'dx', 'dy'):
            value = bullet.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            payload[key] = value
        with self.lock:
            name = self.registry.name_for(sid)
            if name is None or name not in self.registry.players:
                return False
            self.broadcaster.to_all('shoot', {'bullet': payload, 'name': name})
            return True

    def hit(self, claim) -> bool:
        if not isinstance(claim, dict):
            return False
        with self.lock:
            return self.arbiter.resolve_hit(claim.get('shooter'), claim.get('target'))

    def disconnect(self, sid: str) -> Optional[str]:
        with self.lock:
            name = self.registry.unbind(sid)
            if name is None:
                return None
            self.broadcaster.to_all('playerLeft', name)
            self.app.logger.info(f"[disconnect] sid={sid} name={name} population={self.registry.population_count()}")
            self.lifecycle.on_departed()
            return name

    def state(self) -> dict:
        with self.lock:
            return self.lifecycle.state()
