"""Rating Validation — the single rule deciding whether a rating value is acceptable.

Invariants:
    - Accepted values are integers in [MIN_RATING, MAX_RATING] (1–10)
    - bool is rejected even though it subclasses int
    - Integral floats (5.0) are accepted and normalized to int; 1.5 is rejected
    - Strings are rejected, even numeric ones ("5")
"""

from admissions.core.domain_types import MAX_RATING, MIN_RATING, RatingValue
from admissions.core.errors import ValidationError

_RATING_MESSAGE = f"Rating must be an int from {MIN_RATING} - {MAX_RATING}."


def validate_rating(value: object) -> RatingValue:
    """Return the normalized rating or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(_RATING_MESSAGE, field="rating")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(_RATING_MESSAGE, field="rating")
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(_RATING_MESSAGE, field="rating")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(_RATING_MESSAGE, field="rating")
    return RatingValue(value)
