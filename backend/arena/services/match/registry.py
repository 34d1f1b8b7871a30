import random
from dataclasses import dataclass
from typing import Dict, Optional

MAX_NAME_LENGTH = 64


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    def clamp(self, x: float, y: float):
        return (
            max(self.left, min(x, self.right)),
            max(self.top, min(y, self.bottom)),
        )

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def random_point(self, rng: random.Random):
        return (
            self.left + rng.random() * (self.right - self.left),
            self.top + rng.random() * (self.bottom - self.top),
        )


@dataclass
class Player:
    name: str
    x: float
    y: float

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'name': self.name}


@dataclass
class RosterSnapshot:
    players: Dict[str, dict]
    scores: Dict[str, int]

    def to_dict(self):
        return {'players': self.players, 'scores': self.scores}


def _as_number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value != value:  # NaN
        return None
    return float(value)


class ConnectionRegistry:
    """Live player table, score table and connection bindings.

    Not thread safe on its own; the session actor serializes access.
    """

    def __init__(self, bounds: Rect, spawn_area: Rect, rng: Optional[random.Random] = None):
        self.bounds = bounds
        self.spawn_area = spawn_area
        self.rng = rng or random.Random()
        self.players: Dict[str, Player] = {}
        self.scores: Dict[str, int] = {}
        self._sid_to_name: Dict[str, str] = {}
        self._name_to_sid: Dict[str, str] = {}

    def is_name_taken(self, name) -> bool:
        # Only live players hold a name; a player waiting to respawn does not
        return isinstance(name, str) and name in self.players

    def name_for(self, sid: str) -> Optional[str]:
        return self._sid_to_name.get(sid)

    def sid_for(self, name: str) -> Optional[str]:
        return self._name_to_sid.get(name)

    def register(self, sid: str, name) -> Optional[RosterSnapshot]:
        """Bind ``name`` to ``sid`` and spawn the player.

        Returns the full roster snapshot, or None when the name is invalid,
        taken, or the connection already plays under another name. A name
        whose player is waiting to respawn passes to the new connection; the
        old one is unbound and its pending respawn is dropped.
        """
        if not isinstance(name, str) or not name or len(name) > MAX_NAME_LENGTH:
            return None
        if self.is_name_taken(name) or sid in self._sid_to_name:
            return None
        previous_sid = self._name_to_sid.pop(name, None)
        if previous_sid is not None:
            self._sid_to_name.pop(previous_sid, None)
        x, y = self.spawn_area.random_point(self.rng)
        self.players[name] = Player(name=name, x=x, y=y)
        self.scores[name] = 0
        self._sid_to_name[sid] = name
        self._name_to_sid[name] = sid
        return self.snapshot()

    def update_position(self, sid: str, x, y) -> Optional[Player]:
        name = self._sid_to_name.get(sid)
        player = self.players.get(name) if name else None
        if player is None:
            return None
        x, y = _as_number(x), _as_number(y)
        if x is None or y is None:
            return None
        player.x, player.y = self.bounds.clamp(x, y)
        return player

    def despawn(self, name: str) -> Optional[Player]:
        return self.players.pop(name, None)

    def respawn(self, name: str) -> Player:
        x, y = self.spawn_area.random_point(self.rng)
        player = Player(name=name, x=x, y=y)
        self.players[name] = player
        return player

    def add_point(self, name: str) -> int:
        self.scores[name] = self.scores.get(name, 0) + 1
        return self.scores[name]

    def remove(self, name: str) -> None:
        self.players.pop(name, None)
        self.scores.pop(name, None)
        sid = self._name_to_sid.pop(name, None)
        if sid is not None:
            self._sid_to_name.pop(sid, None)

    def unbind(self, sid: str) -> Optional[str]:
        """Forget the connection and its player. Returns the freed name."""
        name = self._sid_to_name.get(sid)
        if name is not None:
            self.remove(name)
        return name

    def population_count(self) -> int:
        return len(self.players)

    def player_map(self) -> Dict[str, dict]:
        return {name: p.to_dict() for name, p in self.players.items()}

    def score_map(self) -> Dict[str, int]:
        return dict(self.scores)

    def snapshot(self) -> RosterSnapshot:
        return RosterSnapshot(players=self.player_map(), scores=self.score_map())

    def clear(self) -> None:
        self.players.clear()
        self.scores.clear()
        self._sid_to_name.clear()
        self._name_to_sid.clear()
