from typing import Iterable

from sqlalchemy import case, update

from scoreboard.models import Team


def apply(remaining: int, value: int) -> int:
    """Deduct one visit from a balance, flooring at zero.

    Overshooting visits are accepted; only the displayed balance is floored.
    """
    return max(0, remaining - value)


def remaining_from_ledger(starting_points: int, values: Iterable[int]) -> int:
    remaining = starting_points
    for v in values:
        remaining = apply(remaining, v)
    return remaining


def decrement_statement(team_id: str, value: int, now):
    """Single-statement floored decrement.

    The new balance is computed by the database from the row it locks, so two
    scorers submitting at once cannot overwrite each other's deduction.
    """
    return (
        update(Team)
        .where(Team.id == team_id)
        .values(
            remaining_points=case(
                (Team.remaining_points - value < 0, 0),
                else_=Team.remaining_points - value,
            ),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )


def reset_statement(starting_points: int, now):
    return (
        update(Team)
        .values(remaining_points=starting_points, updated_at=now)
        .execution_options(synchronize_session=False)
    )
