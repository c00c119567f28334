from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from scoreboard import db
from scoreboard.errors import PersistenceUnavailable, ScoreboardError
from scoreboard.models import DEFAULT_GAME_ID, GameState, Team, utcnow
from . import budget
from .ledger import ScoreLedger
from .stats import TeamStats, compute_team_stats
from .timer import ChallengeTimer, TimerSnapshot, reset_statement as timer_reset_statement, start_statement


@dataclass(frozen=True)
class TeamView:
    id: str
    name: str
    remaining_points: int
    stats: TeamStats

    def to_dict(self):
        payload = {
            'id': self.id,
            'name': self.name,
            'remainingPoints': self.remaining_points,
        }
        payload.update(self.stats.to_dict())
        return payload


@dataclass(frozen=True)
class GameSnapshot:
    timer: TimerSnapshot
    teams: List[TeamView] = field(default_factory=list)

    def to_dict(self):
        payload = self.timer.to_dict()
        payload['teams'] = [t.to_dict() for t in self.teams]
        return payload


class GameSession:
    """Aggregate root over the timer, the teams and the score ledger.

    Every write runs in one transaction and either commits in full or rolls
    back; concurrency control lives in the SQL statements, not in Python.
    """

    def __init__(
        self,
        starting_points: int,
        duration_ms: int,
        teams: Sequence[Tuple[str, str]],
        configured: bool = True,
        clock: Callable = utcnow,
        logger=None,
    ):
        self.starting_points = int(starting_points)
        self.duration_ms = int(duration_ms)
        self.teams = list(teams)
        self.configured = configured
        self.clock = clock
        self.logger = logger
        self.ledger = ScoreLedger()

    @classmethod
    def from_app(cls, app=None):
        app = app or current_app
        cfg = app.config
        return cls(
            starting_points=int(cfg.get('STARTING_POINTS', 100000)),
            duration_ms=int(cfg.get('CHALLENGE_DURATION_SEC', 12 * 60 * 60)) * 1000,
            teams=cfg.get('TEAMS') or [('team1', 'Team 1'), ('team2', 'Team 2')],
            configured=bool(cfg.get('DATABASE_CONFIGURED', True)),
            logger=app.logger,
        )

    def _log(self, level, msg):
        if self.logger is not None:
            getattr(self.logger, level)(msg)

    def _require_store(self):
        if not self.configured:
            raise PersistenceUnavailable(
                'Database not connected. Set DATABASE_URL or POSTGRES_URL.',
                configured=False,
            )

    # Reads

    def fallback_snapshot(self) -> GameSnapshot:
        """Both teams at full budget and a clock that has not started."""
        timer = ChallengeTimer(self.duration_ms).snapshot(self.clock())
        teams = [TeamView(tid, name, self.starting_points, TeamStats()) for tid, name in self.teams]
        return GameSnapshot(timer=timer, teams=teams)

    def snapshot(self, now=None) -> GameSnapshot:
        if not self.configured:
            self._log('warning', '[snapshot-fallback] no database configured')
            return self.fallback_snapshot()
        now = now or self.clock()
        try:
            state = db.session.get(GameState, DEFAULT_GAME_ID)
            started_at = state.started_at if state else None
            teams = [
                (t.id, t.name)
                for t in db.session.execute(select(Team).order_by(Team.id)).scalars()
            ]
            values = self.ledger.values_by_team()
            # End the read transaction so the next poll sees fresh rows
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            self._log('warning', f'[snapshot-fallback] store read failed: {exc}')
            return self.fallback_snapshot()
        if not teams:
            self._log('warning', '[snapshot-fallback] no team rows; run `flask seed`')
            return self.fallback_snapshot()

        timer = ChallengeTimer(self.duration_ms, started_at).snapshot(now)
        views = []
        for team_id, name in teams:
            team_values = values.get(team_id, [])
            views.append(TeamView(
                id=team_id,
                name=name,
                remaining_points=budget.remaining_from_ledger(self.starting_points, team_values),
                stats=compute_team_stats(team_values),
            ))
        return GameSnapshot(timer=timer, teams=views)

    # Writes

    def add_score(self, team_id, value, now=None) -> int:
        """Record a visit and return the team's new balance."""
        self._require_store()
        now = now or self.clock()
        try:
            entry = self.ledger.record(team_id, value, now=now)
            recorded_team, recorded_value = entry.team_id, entry.score
            db.session.execute(budget.decrement_statement(recorded_team, recorded_value, now))
            # Reported balance is the ledger fold, same as snapshot()
            remaining = budget.remaining_from_ledger(
                self.starting_points,
                [e.score for e in self.ledger.entries_for(recorded_team)],
            )
            db.session.commit()
        except ScoreboardError:
            db.session.rollback()
            raise
        except SQLAlchemyError as exc:
            db.session.rollback()
            self._log('error', f'[score-add-failed] team={team_id} error={exc}')
            raise PersistenceUnavailable('Failed to add score', configured=True) from exc
        self._log('info', f'[score-add] team={recorded_team} value={recorded_value} remaining={remaining}')
        return int(remaining)

    def start_timer(self, now=None) -> bool:
        """Start the clock if it is not already set. Returns True if this call started it."""
        self._require_store()
        now = now or self.clock()
        try:
            result = db.session.execute(start_statement(now))
            if result.rowcount == 0 and db.session.get(GameState, DEFAULT_GAME_ID) is None:
                raise PersistenceUnavailable('Game state row missing; run `flask seed`', configured=True)
            db.session.commit()
        except PersistenceUnavailable:
            db.session.rollback()
            raise
        except SQLAlchemyError as exc:
            db.session.rollback()
            self._log('error', f'[timer-start-failed] error={exc}')
            raise PersistenceUnavailable('Failed to update game', configured=True) from exc
        started = result.rowcount == 1
        if started:
            self._log('info', f'[timer-start] started_at={now.isoformat()}')
        else:
            self._log('info', '[timer-skip] already started')
        return started

    def reset_game(self, now=None) -> None:
        """Clear the clock, restore every budget and empty the ledger together."""
        self._require_store()
        now = now or self.clock()
        try:
            db.session.execute(timer_reset_statement(now))
            db.session.execute(budget.reset_statement(self.starting_points, now))
            self.ledger.clear()
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            self._log('error', f'[game-reset-failed] error={exc}')
            raise PersistenceUnavailable('Failed to update game', configured=True) from exc
        self._log('info', f'[game-reset] teams restored to {self.starting_points}')


def seed_defaults(app=None, session=None) -> None:
    """Insert the game state row and configured teams if they are missing."""
    app = app or current_app
    session = session or db.session
    if session.get(GameState, DEFAULT_GAME_ID) is None:
        session.add(GameState(id=DEFAULT_GAME_ID))
    starting = int(app.config.get('STARTING_POINTS', 100000))
    for team_id, name in app.config.get('TEAMS') or []:
        if session.get(Team, team_id) is None:
            session.add(Team(id=team_id, name=name, remaining_points=starting))
    session.commit()
