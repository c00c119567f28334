from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update

from scoreboard.models import DEFAULT_GAME_ID, GameState, isoformat

NOT_STARTED = 'not_started'
RUNNING = 'running'
EXPIRED = 'expired'

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class TimerSnapshot:
    started_at: Optional[datetime]
    remaining_ms: int
    is_running: bool

    @property
    def status(self) -> str:
        if self.started_at is None:
            return NOT_STARTED
        return RUNNING if self.is_running else EXPIRED

    def to_dict(self):
        return {
            'startedAt': isoformat(self.started_at),
            'remainingMs': self.remaining_ms,
            'isRunning': self.is_running,
            'status': self.status,
        }


class ChallengeTimer:
    """Shared countdown: NotStarted -> Running -> Expired.

    Nothing ticks. Expiry is derived from ``now - started_at`` whenever a
    snapshot is taken, and only ``reset()`` leads back to NotStarted.
    """

    def __init__(self, duration_ms: int, started_at: Optional[datetime] = None):
        self.duration_ms = int(duration_ms)
        self.started_at = started_at

    def start(self, now: datetime) -> bool:
        """Returns True if this call started the clock."""
        if self.started_at is not None:
            return False
        self.started_at = now
        return True

    def reset(self) -> None:
        self.started_at = None

    def snapshot(self, now: datetime) -> TimerSnapshot:
        if self.started_at is None:
            return TimerSnapshot(None, self.duration_ms, False)
        # A reader whose clock lags the writer's must not see extra time
        elapsed_ms = max(0, (now - self.started_at) // _ONE_MS)
        remaining_ms = max(0, self.duration_ms - elapsed_ms)
        return TimerSnapshot(self.started_at, remaining_ms, remaining_ms > 0)


def start_statement(now: datetime, game_id: str = DEFAULT_GAME_ID):
    """Conditional start: matches no row once the clock is already set."""
    return (
        update(GameState)
        .where(GameState.id == game_id, GameState.started_at.is_(None))
        .values(started_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )


def reset_statement(now: datetime, game_id: str = DEFAULT_GAME_ID):
    return (
        update(GameState)
        .where(GameState.id == game_id)
        .values(started_at=None, updated_at=now)
        .execution_options(synchronize_session=False)
    )
