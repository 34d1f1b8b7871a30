"""Live match session: registry, broadcast fan-out, hits and lifecycle.

Everything here is driven through ``MatchSession``; socket handlers never
touch the tables directly.
"""

from .lifecycle import MatchPhase
from .session import MatchSession

__all__ = ['MatchPhase', 'MatchSession']
