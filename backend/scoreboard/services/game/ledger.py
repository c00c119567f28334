from typing import Dict, List, Optional

from sqlalchemy import delete, select

from scoreboard import db
from scoreboard.errors import NotFoundError, ValidationError
from scoreboard.models import Score, Team, utcnow

MIN_VISIT = 0
MAX_VISIT = 180
# Longer strings are malformed input, never a visit score
MAX_VISIT_DIGITS = 8


def parse_visit(raw) -> int:
    """Coerce a submitted visit score to an int in [0, 180].

    Numeric strings are accepted since the scorer form posts them as text.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError('Invalid teamId or score (must be 0-180)')
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith(('+', '-')):
            digits = text[1:]
        else:
            digits = text
        # isdigit() alone admits superscripts and other non-ASCII digits
        if len(digits) > MAX_VISIT_DIGITS or not (digits.isascii() and digits.isdecimal()):
            raise ValidationError('Invalid teamId or score (must be 0-180)')
        try:
            value = int(text)
        except ValueError as exc:
            raise ValidationError('Invalid teamId or score (must be 0-180)') from exc
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    else:
        raise ValidationError('Invalid teamId or score (must be 0-180)')
    if value < MIN_VISIT or value > MAX_VISIT:
        raise ValidationError('Invalid teamId or score (must be 0-180)')
    return value


class ScoreLedger:
    """Append-only visit log backed by the ``scores`` table.

    Does not commit; callers own the transaction.
    """

    def __init__(self, session=None):
        self.session = session or db.session

    def record(self, team_id, value, now=None) -> Score:
        if not team_id or not isinstance(team_id, str):
            raise ValidationError('Invalid teamId or score (must be 0-180)')
        value = parse_visit(value)
        if self.session.get(Team, team_id) is None:
            raise NotFoundError('Team not found', teamId=team_id)
        entry = Score(team_id=team_id, score=value, created_at=now or utcnow())
        self.session.add(entry)
        self.session.flush()
        return entry

    def entries_for(self, team_id: str) -> List[Score]:
        stmt = select(Score).where(Score.team_id == team_id).order_by(Score.id)
        return list(self.session.execute(stmt).scalars())

    def entries(self, team_id: Optional[str] = None) -> List[Score]:
        if team_id is not None:
            return self.entries_for(team_id)
        return list(self.session.execute(select(Score).order_by(Score.id)).scalars())

    def values_by_team(self) -> Dict[str, List[int]]:
        grouped: Dict[str, List[int]] = {}
        for entry in self.entries():
            grouped.setdefault(entry.team_id, []).append(entry.score)
        return grouped

    def clear(self) -> None:
        self.session.execute(delete(Score))
