"""
Derived scoring fields for performance records.

All functions here are pure: they read values and return numbers, the
callers decide when to write them back.
"""
import math
from typing import Iterable, Optional


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def achievement_percent(achieved: float, target: float) -> float:
    """Achieved/target as a whole percentage clamped to [0, 100]. 0 when target <= 0."""
    if not target or target <= 0:
        return 0
    pct = round_half_up((achieved or 0) / target * 100)
    return max(0, min(100, pct))


def kpi_progress(achieved: float, target: float) -> float:
    return achievement_percent(achieved, target)


def kpi_score(achieved: float, target: float) -> float:
    """Score awarded once a KPI reaches a terminal status."""
    return achievement_percent(achieved, target)


def average(values: Iterable[float]) -> Optional[float]:
    values = [v for v in values if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def appraisal_final_score(completed_kpi_scores: Iterable[float], reviewer_score: Optional[float]) -> Optional[float]:
    """
    Mean of the owner's completed KPI scores plus the reviewer score.

    With no completed KPIs the reviewer score stands alone (and may be None).
    A missing reviewer score counts as 0 when there is a KPI average.
    """
    avg = average(completed_kpi_scores)
    if avg is None:
        return reviewer_score
    return avg + (reviewer_score or 0)
