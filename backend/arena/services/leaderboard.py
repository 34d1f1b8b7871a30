"""Leaderboard persistence: best score per player name."""

from typing import List, Tuple

from arena import db
from arena.models import LeaderboardEntry


class LeaderboardStore:
    """Durable name -> best score mapping with max-merge upserts.

    Every call runs against the current Flask-SQLAlchemy session, so callers
    need an application context.
    """

    def upsert_max(self, name: str, score: int) -> int:
        """Insert ``name`` or raise its stored score to ``score``.

        Returns the stored value after the merge. A lower score never
        overwrites a higher one.
        """
        try:
            entry = db.session.get(LeaderboardEntry, name)
            if entry is None:
                entry = LeaderboardEntry(name=name, score=int(score))
            elif int(score) > (entry.score or 0):
                entry.score = int(score)
            db.session.add(entry)
            db.session.commit()
            return entry.score
        except Exception:
            db.session.rollback()
            raise

    def list_all_descending(self) -> List[Tuple[str, int]]:
        rows = (
            LeaderboardEntry.query
            .order_by(LeaderboardEntry.score.desc(), LeaderboardEntry.name.asc())
            .all()
        )
        return [(row.name, row.score) for row in rows]
