import logging


class HitArbiter:
    """Turns client-reported hit claims into score and respawn bookkeeping.

    Claims are authorized by existence only: both shooter and target must be
    alive in the player table. No geometry is checked here; clients simulate
    bullets and report what they saw.
    """

    def __init__(self, registry, broadcaster, schedule, respawn_delay: float = 3.0, logger=None):
        self.registry = registry
        self.broadcaster = broadcaster
        self.schedule = schedule
        self.respawn_delay = respawn_delay
        self.logger = logger or logging.getLogger(__name__)

    def resolve_hit(self, shooter, target) -> bool:
        players = self.registry.players
        if not isinstance(shooter, str) or not isinstance(target, str):
            return False
        if shooter not in players or target not in players:
            self.logger.debug(f"[hit-stale] shooter={shooter} target={target}")
            return False

        score = self.registry.add_point(shooter)
        self.broadcaster.to_all('scoreUpdate', self.registry.score_map())
        self.broadcaster.to_all('playerHit', target)
        self.registry.despawn(target)
        self.logger.info(f"[hit] shooter={shooter} target={target} score={score}")

        self.schedule(self.respawn_delay, self.respawn, target, self.registry.sid_for(target))
        return True

    def respawn(self, name: str, sid) -> bool:
        # The player may have left, been cleared by game over, or re-registered
        # from another connection while the timer was pending.
        registry = self.registry
        if name not in registry.scores or registry.sid_for(name) != sid or name in registry.players:
            self.logger.info(f"[respawn-skip] name={name}")
            return False
        player = registry.respawn(name)
        self.broadcaster.to_all('respawn', player.to_dict())
        self.broadcaster.to_all('nameUpdate', registry.player_map())
        self.logger.info(f"[respawn] name={name} x={player.x:.1f} y={player.y:.1f}")
        return True
