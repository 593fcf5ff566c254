"""Offer Validity Policy — decides whether an admission offer can still be accepted.

Invariants:
    - Valid iff status == OFFERED and now <= offer_date + window
    - The window is passed in (configuration), never hardcoded here
    - Naive datetimes are interpreted as UTC (SQLite drops tzinfo on round-trip)
"""

from datetime import datetime, timedelta, timezone

from admissions.core.domain_types import StudentStatus


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def offer_expires_at(
    offer_date: datetime | None, window: timedelta,
) -> datetime | None:
    if offer_date is None:
        return None
    return as_utc(offer_date) + window


def offer_cutoff(now: datetime, window: timedelta) -> datetime:
    """Oldest offer_date that is still inside the window at `now`."""
    return as_utc(now) - window


def has_valid_admission_offer(
    status: str,
    offer_date: datetime | None,
    now: datetime,
    window: timedelta,
) -> bool:
    """True when the student holds an unexpired offer."""
    if status != StudentStatus.OFFERED or offer_date is None:
        return False
    return as_utc(offer_date) >= offer_cutoff(now, window)
