from __future__ import annotations

import pytest

from voicerouter.core.providers.base import num, span


@pytest.mark.parametrize(
    "value,expected",
    [
        (1, 1.0),
        ("2.5", 2.5),
        (True, None),
        (None, None),
        ("nan", None),
        (float("inf"), None),
        (10**400, None),
        ("1e999", None),
        ([1], None),
    ],
)
def test_num_accepts_only_finite_numbers(value, expected) -> None:
    assert num(value) == expected


def test_span_with_unusable_bounds() -> None:
    assert span("nan", 2) == (0.0, 2.0)
    assert span(3, "inf") == (3.0, 3.0)
