import random

import pytest

from arena.services.match.hits import HitArbiter
from arena.services.match.lifecycle import MatchPhase, SessionLifecycle
from arena.services.match.registry import ConnectionRegistry, Rect
from conftest import ManualScheduler


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    def to_sender(self, sid, event, *args):
        self.sent.append(('sender', event, args))

    def to_others(self, sid, event, *args):
        self.sent.append(('others', event, args))

    def to_all(self, event, *args):
        self.sent.append(('all', event, args))

    def events(self):
        return [event for _, event, _ in self.sent]


class FlakyStore:
    def __init__(self, fail_for=()):
        self.rows = {}
        self.fail_for = set(fail_for)

    def upsert_max(self, name, score):
        if name in self.fail_for:
            raise RuntimeError('database is locked')
        self.rows[name] = max(self.rows.get(name, score), score)
        return self.rows[name]


@pytest.fixture()
def parts():
    scheduler = ManualScheduler()
    registry = ConnectionRegistry(Rect(15, 15, 1905, 1065), Rect(100, 100, 900, 600), rng=random.Random(3))
    broadcaster = RecordingBroadcaster()
    store = FlakyStore(fail_for={'B'})
    lifecycle = SessionLifecycle(registry, broadcaster, store, scheduler.call_later, clock=scheduler.time)
    arbiter = HitArbiter(registry, broadcaster, scheduler.call_later)
    return scheduler, registry, broadcaster, store, lifecycle, arbiter


def test_start_is_idempotent(parts):
    scheduler, registry, _, _, lifecycle, _ = parts
    registry.register('a', 'A')
    registry.register('b', 'B')
    assert lifecycle.start() is True
    assert lifecycle.start() is False
    assert len(scheduler.pending()) == 1
    assert lifecycle.phase is MatchPhase.ACTIVE


def test_persist_failure_still_announces_game_over(parts):
    scheduler, registry, broadcaster, store, lifecycle, _ = parts
    registry.register('a', 'A')
    registry.register('b', 'B')
    lifecycle.on_registered()
    scheduler.advance(120)
    assert store.rows == {'A': 0}
    assert broadcaster.events()[-1] == 'gameOver'
    assert lifecycle.phase is MatchPhase.IDLE
    assert registry.population_count() == 0


def test_stale_deadline_does_not_end_next_match(parts):
    scheduler, registry, broadcaster, _, lifecycle, _ = parts
    registry.register('a', 'A')
    registry.register('b', 'B')
    lifecycle.on_registered()
    first_deadline = lifecycle.deadline
    registry.unbind('b')
    lifecycle.on_departed()
    scheduler.advance(10)
    registry.register('c', 'C')
    lifecycle.on_registered()
    lifecycle._on_deadline(first_deadline)
    assert lifecycle.active
    assert 'gameOver' not in broadcaster.events()


def test_respawn_skipped_when_name_rebound_to_new_connection(parts):
    scheduler, registry, broadcaster, _, _, arbiter = parts
    registry.register('a', 'A')
    registry.register('b', 'B')
    assert arbiter.resolve_hit('A', 'B') is True
    registry.unbind('b')
    registry.register('b2', 'B')
    scheduler.advance(3)
    assert 'respawn' not in broadcaster.events()
    assert registry.sid_for('B') == 'b2'


def test_hit_effects_in_order(parts):
    _, registry, broadcaster, _, _, arbiter = parts
    registry.register('a', 'A')
    registry.register('b', 'B')
    arbiter.resolve_hit('A', 'B')
    assert broadcaster.sent == [
        ('all', 'scoreUpdate', ({'A': 1, 'B': 0},)),
        ('all', 'playerHit', ('B',)),
    ]
    assert 'B' not in registry.players
    assert registry.scores['B'] == 0
