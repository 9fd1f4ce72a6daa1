import pytest

from app.core.enums import Urgency
from app.services.urgency import classify


@pytest.mark.parametrize(
    "days, expected",
    [
        (-3, Urgency.URGENT),
        (0, Urgency.URGENT),
        (1, Urgency.URGENT),
        (2, Urgency.HIGH),
        (4, Urgency.HIGH),
        (5, Urgency.MEDIUM),
        (9, Urgency.MEDIUM),
        (10, Urgency.LOW),
        (45, Urgency.LOW),
    ],
)
def test_classify(days, expected):
    assert classify(days) is expected


def test_classify_returns_plain_string_values():
    assert classify(1) == "urgent"
    assert classify(4) == "high"
    assert classify(9) == "medium"
    assert classify(10) == "low"
