"""Ranking Engine — tests for the leaderboard over in-memory fakes.

Tests cover:
    - ties {S1: [8, 10], S2: [9], S3: [9]} ordered by id, identically on every call
    - skip/take page the grouped result
    - output order ignores fetch order (fake fetch returns reversed)
    - unrated students never appear; track filter applies
"""

import uuid

import pytest

from admissions.core.domain_types import Track
from admissions.services.ranking_engine import RankingEngine
from tests.services.fakes import (
    FakeRating, InMemoryRatingRepository, InMemoryStore, InMemoryStudentRepository,
)


def _rate(store, student, *values):
    for i, v in enumerate(values):
        store.ratings.append(FakeRating(student.id, f"reviewer-{i}", v))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def engine(store):
    return RankingEngine(InMemoryStudentRepository(store), InMemoryRatingRepository(store))


async def test_equal_means_ordered_by_id_deterministically(store, engine):
    s1 = store.add_student("s1", id=uuid.UUID(int=3))
    s2 = store.add_student("s2", id=uuid.UUID(int=1))
    s3 = store.add_student("s3", id=uuid.UUID(int=2))
    _rate(store, s1, 8, 10)
    _rate(store, s2, 9)
    _rate(store, s3, 9)

    first = await engine.top_rated()
    second = await engine.top_rated()

    assert [r.student.username for r in first] == ["s2", "s3", "s1"]
    assert [r.average_admission_rating for r in first] == [9.0, 9.0, 9.0]
    assert [r.student.id for r in first] == [r.student.id for r in second]


async def test_order_is_mean_descending(store, engine):
    low = store.add_student("low")
    high = store.add_student("high")
    mid = store.add_student("mid")
    _rate(store, low, 2, 4)
    _rate(store, high, 10, 9)
    _rate(store, mid, 6)

    result = await engine.top_rated()
    assert [r.student.username for r in result] == ["high", "mid", "low"]
    assert result[0].average_admission_rating == 9.5


async def test_skip_take_returns_exactly_second_ranked(store, engine):
    for name, score in [("a", 10), ("b", 8), ("c", 6), ("d", 4)]:
        _rate(store, store.add_student(name), score)

    result = await engine.top_rated(skip=1, take=1)
    assert [r.student.username for r in result] == ["b"]


async def test_pagination_counts_students_not_ratings(store, engine):
    many = store.add_student("many")
    _rate(store, many, 9, 9, 9, 9, 9)
    _rate(store, store.add_student("one"), 5)

    result = await engine.top_rated(take=2)
    assert [r.student.username for r in result] == ["many", "one"]


async def test_unrated_students_never_appear(store, engine):
    store.add_student("unrated")
    _rate(store, store.add_student("rated"), 7)

    result = await engine.top_rated()
    assert [r.student.username for r in result] == ["rated"]


async def test_track_filter(store, engine):
    _rate(store, store.add_student("beg", track="BEGINNER"), 10)
    _rate(store, store.add_student("adv", track="ADVANCED"), 3)

    result = await engine.top_rated(track=Track.ADVANCED)
    assert [r.student.username for r in result] == ["adv"]


async def test_no_ratings_returns_empty(engine):
    assert await engine.top_rated() == []
