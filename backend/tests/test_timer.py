from datetime import datetime, timedelta

from scoreboard.services.game.timer import (
    EXPIRED,
    NOT_STARTED,
    RUNNING,
    ChallengeTimer,
)

DURATION_MS = 12 * 60 * 60 * 1000
T0 = datetime(2026, 3, 14, 9, 0, 0)


def test_not_started_snapshot():
    snap = ChallengeTimer(DURATION_MS).snapshot(T0)
    assert snap.started_at is None
    assert snap.remaining_ms == DURATION_MS
    assert snap.is_running is False
    assert snap.status == NOT_STARTED
    assert snap.to_dict()['startedAt'] is None


def test_start_is_idempotent():
    timer = ChallengeTimer(DURATION_MS)
    assert timer.start(T0) is True
    assert timer.start(T0 + timedelta(hours=1)) is False
    assert timer.started_at == T0


def test_running_then_expired():
    timer = ChallengeTimer(DURATION_MS)
    timer.start(T0)

    snap = timer.snapshot(T0)
    assert snap.remaining_ms == DURATION_MS
    assert snap.is_running is True
    assert snap.status == RUNNING

    snap = timer.snapshot(T0 + timedelta(hours=1, milliseconds=500))
    assert snap.remaining_ms == DURATION_MS - 3600500

    snap = timer.snapshot(T0 + timedelta(milliseconds=DURATION_MS + 1))
    assert snap.remaining_ms == 0
    assert snap.is_running is False
    assert snap.status == EXPIRED
    assert snap.started_at == T0


def test_exactly_at_deadline_is_expired():
    timer = ChallengeTimer(DURATION_MS, started_at=T0)
    snap = timer.snapshot(T0 + timedelta(milliseconds=DURATION_MS))
    assert snap.remaining_ms == 0
    assert snap.is_running is False


def test_reader_clock_behind_start_never_exceeds_duration():
    timer = ChallengeTimer(DURATION_MS, started_at=T0)
    snap = timer.snapshot(T0 - timedelta(seconds=5))
    assert snap.remaining_ms == DURATION_MS
    assert snap.is_running is True


def test_reset_returns_to_not_started():
    timer = ChallengeTimer(DURATION_MS, started_at=T0)
    timer.reset()
    assert timer.snapshot(T0 + timedelta(days=1)).status == NOT_STARTED
    assert timer.start(T0 + timedelta(days=1)) is True


def test_iso_serialization():
    timer = ChallengeTimer(DURATION_MS, started_at=T0)
    assert timer.snapshot(T0).to_dict()['startedAt'] == '2026-03-14T09:00:00.000Z'
