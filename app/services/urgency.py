from app.core.config import HIGH_BEFORE_DAYS, MEDIUM_BEFORE_DAYS, URGENT_BEFORE_DAYS
from app.core.enums import Urgency


def classify(days_remaining: float) -> Urgency:
    """Bucket remaining days for alerting. Exact thresholds fall into the calmer bucket."""
    if days_remaining < URGENT_BEFORE_DAYS:
        return Urgency.URGENT
    if days_remaining < HIGH_BEFORE_DAYS:
        return Urgency.HIGH
    if days_remaining < MEDIUM_BEFORE_DAYS:
        return Urgency.MEDIUM
    return Urgency.LOW
