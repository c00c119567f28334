"""Game domain services: score ledger, budgets, statistics and the challenge clock.

This package holds the scoring and timer rules used by the HTTP routes,
keeping transport concerns separated from core game mechanics.
"""

from .session import GameSession, GameSnapshot, seed_defaults

__all__ = ['GameSession', 'GameSnapshot', 'seed_defaults']
