import logging
import time
from enum import Enum
from typing import Optional


class MatchPhase(str, Enum):
    IDLE = 'idle'
    ACTIVE = 'active'


class SessionLifecycle:
    """Idle/Active state machine for the single global match.

    - Idle -> Active when a registration brings population to ``min_players``
    - Active -> Idle when the deadline fires: persist, gameOver, clear
    - Active -> Idle when a disconnect drops population below ``min_players``:
      timer cancelled, nothing persisted, no gameOver
    """

    def __init__(self, registry, broadcaster, store, schedule, duration: float = 120.0,
                 min_players: int = 2, clock=time.time, logger=None):
        self.registry = registry
        self.broadcaster = broadcaster
        self.store = store
        self.schedule = schedule
        self.duration = duration
        self.min_players = min_players
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self.phase = MatchPhase.IDLE
        self.deadline: Optional[float] = None
        self._timer = None

    @property
    def active(self) -> bool:
        return self.phase is MatchPhase.ACTIVE

    def on_registered(self) -> None:
        if self.registry.population_count() >= self.min_players:
            self.start()

    def on_departed(self) -> None:
        if self.active and self.registry.population_count() < self.min_players:
            self.abort()

    def start(self) -> bool:
        if self.active:
            return False
        self.phase = MatchPhase.ACTIVE
        self.deadline = self.clock() + self.duration
        self._timer = self.schedule(self.duration, self._on_deadline, self.deadline)
        self.logger.info(
            f"[match-start] population={self.registry.population_count()} duration={self.duration}s deadline={self.deadline}"
        )
        return True

    def abort(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._reset()
        self.logger.info(f"[match-abort] population={self.registry.population_count()} scores not saved")

    def _on_deadline(self, deadline: float) -> None:
        # A deadline left over from an aborted match must not end the next one
        if not self.active or self.deadline != deadline:
            self.logger.info(f"[timer-abort] deadline={deadline} current={self.deadline}")
            return
        self.end()

    def end(self) -> None:
        """Conclude the match: save scores, announce results, clear the tables."""
        scores = self.registry.score_map()
        players = self.registry.player_map()
        for name, score in scores.items():
            try:
                self.store.upsert_max(name, score)
            except Exception:
                self.logger.exception(f"[persist-failed] name={name} score={score}")
        self.broadcaster.to_all('gameOver', scores, players)
        self.registry.clear()
        self._reset()
        self.logger.info(f"[match-end] scores={scores}")

    def _reset(self) -> None:
        self.phase = MatchPhase.IDLE
        self.deadline = None
        self._timer = None

    def state(self) -> dict:
        return {
            'phase': self.phase.value,
            'deadline': self.deadline,
            'population': self.registry.population_count(),
            'min_players': self.min_players,
        }
