from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence, Tuple

MILESTONES = (100, 140, 180)
HISTORY_SIZE = 3


@dataclass(frozen=True)
class TeamStats:
    average: float = 0.0
    last3: Tuple[int, ...] = ()
    count100: int = 0
    count140: int = 0
    count180: int = 0

    def to_dict(self):
        return {
            'threeDartAverage': self.average,
            'last3Scores': list(self.last3),
            'count100': self.count100,
            'count140': self.count140,
            'count180': self.count180,
        }


def three_dart_average(values: Sequence[int]) -> float:
    """Mean visit score, rounded half-up to one decimal.

    Each entry is already a full three-dart visit, so no scaling applies.
    """
    if not values:
        return 0.0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def last_scores(values: Sequence[int], size: int = HISTORY_SIZE) -> List[int]:
    """Most recent ``size`` values, newest first."""
    if size <= 0:
        return []
    return list(reversed(values[-size:]))


def milestone_counts(values: Iterable[int]) -> dict:
    counts = {m: 0 for m in MILESTONES}
    for v in values:
        if v in counts:
            counts[v] += 1
    return counts


def compute_team_stats(values: Sequence[int]) -> TeamStats:
    values = list(values)
    counts = milestone_counts(values)
    return TeamStats(
        average=three_dart_average(values),
        last3=tuple(last_scores(values)),
        count100=counts[100],
        count140=counts[140],
        count180=counts[180],
    )
