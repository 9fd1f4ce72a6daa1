"""
Deadline-based grade penalty.

Pure functions only: no database, no clock. Callers pass ``now`` in,
so the same (task, now) pair always projects the same score.

Polarity note: the schedule is evaluated against days *remaining*
until the deadline, and the withheld fraction shrinks as that number
grows. This mirrors the behaviour the product shipped with; whether
the penalty should instead grow with days past due is an open product
decision, and swapping the policy only means replacing
``penalty_fraction`` / ``days_remaining`` below.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from app.core.config import PENALTY_STEP_PERCENT_PER_DAY
from app.core.enums import Urgency
from app.services.urgency import classify

ONE_DAY_SECONDS = 24 * 60 * 60


class ScorableTask(Protocol):
    due_at: datetime
    max_score: float
    penalty_rate_percent: float


@dataclass(frozen=True)
class Projection:
    days_remaining: int
    penalty_fraction: float
    potential_score: float
    urgency: Urgency


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def penalty_fraction(penalty_rate_percent: float, days_overdue: float) -> float:
    """
    Fraction of max score to withhold.

    ``max(0, rate - days * 2) / 100``, capped at the configured rate so
    overdue tasks (negative ``days``) never lose more than ``rate / 100``.
    The result lies in [0, rate / 100] and never increases as ``days`` grows.
    """
    raw_percent = penalty_rate_percent - days_overdue * PENALTY_STEP_PERCENT_PER_DAY
    raw_percent = min(penalty_rate_percent, max(0.0, raw_percent))
    return raw_percent / 100


def days_remaining(due_at: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``due_at``, rounded up (negative once overdue)."""
    delta = _as_utc(due_at) - _as_utc(now)
    return int(math.ceil(delta.total_seconds() / ONE_DAY_SECONDS))


def project_score(task: ScorableTask, now: datetime) -> float:
    days = days_remaining(task.due_at, now)
    fraction = penalty_fraction(task.penalty_rate_percent, days)
    # rates above 100% would otherwise push the score below zero
    return max(0.0, task.max_score * (1 - fraction))


def projection(task: ScorableTask, now: datetime) -> Projection:
    days = days_remaining(task.due_at, now)
    fraction = penalty_fraction(task.penalty_rate_percent, days)
    return Projection(
        days_remaining=days,
        penalty_fraction=fraction,
        potential_score=project_score(task, now),
        urgency=classify(days),
    )
