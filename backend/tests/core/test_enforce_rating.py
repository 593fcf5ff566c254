"""Rating Validation — tests for the 1–10 integer rule.

Tests cover:
    - every integer 1..10 accepted
    - out-of-range, fractional, string, bool, None rejected with VALIDATION_ERROR
    - integral floats normalized to int
"""

import pytest

from admissions.core.enforce_rating import validate_rating
from admissions.core.errors import ValidationError


@pytest.mark.parametrize("value", range(1, 11))
def test_integers_in_range_accepted(value):
    assert validate_rating(value) == value


@pytest.mark.parametrize("value", [0, 11, -3, 100, 1.5, 9.99, "5", "ten", None, True, False])
def test_invalid_ratings_rejected(value):
    with pytest.raises(ValidationError) as exc:
        validate_rating(value)
    assert exc.value.code == "VALIDATION_ERROR"
    assert exc.value.field == "rating"
    assert exc.value.http_status == 400


def test_integral_float_normalized_to_int():
    result = validate_rating(7.0)
    assert result == 7
    assert isinstance(result, int)


def test_integral_float_out_of_range_still_rejected():
    with pytest.raises(ValidationError):
        validate_rating(11.0)
