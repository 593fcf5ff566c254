"""Admission State Machine — tests for offer/reset/accept/reject over in-memory fakes.

Tests cover:
    - offer sets OFFERED + offer_date=now from any state; re-offer moves the clock
    - reset moves offer_date without touching status
    - accept inside window -> ACCEPTED (offer_date kept); outside window or not OFFERED -> INVALID_TRANSITION
    - accept resolves the student from the caller's username only
    - a rejection racing between accept's read and write wins (no accept after reject)
    - reject defaults reason to OTHER
    - re-offering a rejected student clears the rejection reason
    - a student deleted between accept's read and write still yields INVALID_TRANSITION
    - end-to-end: offer -> expire -> accept fails -> reset -> accept succeeds
"""

from datetime import timedelta

import pytest

from admissions.core.domain_types import RejectionReason, StudentStatus
from admissions.core.errors import InvalidTransitionError, ResourceNotFoundError
from admissions.services.admission_state_machine import AdmissionStateMachine
from tests.services.fakes import (
    FakeClock, InMemoryStore, InMemoryStudentRepository, Ref,
)

WINDOW = timedelta(days=7)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def students(store):
    return InMemoryStudentRepository(store)


@pytest.fixture
def machine(students, clock):
    return AdmissionStateMachine(students, WINDOW, now=clock)


async def test_offer_sets_status_and_offer_date(store, machine, clock):
    store.add_student("ada")
    student = await machine.offer_admission(Ref(username="ada"))
    assert student.status == StudentStatus.OFFERED
    assert student.offer_date == clock()


async def test_second_offer_moves_offer_date(store, machine, clock):
    store.add_student("ada")
    await machine.offer_admission(Ref(username="ada"))
    first = store.students[next(iter(store.students))].offer_date
    clock.advance(hours=5)
    student = await machine.offer_admission(Ref(username="ada"))
    assert student.offer_date == first + timedelta(hours=5)


@pytest.mark.parametrize("prior", list(StudentStatus))
async def test_offer_legal_from_any_state(store, machine, prior):
    store.add_student("ada", status=prior.value)
    student = await machine.offer_admission(Ref(username="ada"))
    assert student.status == StudentStatus.OFFERED


async def test_reset_changes_only_offer_date(store, machine, clock):
    s = store.add_student("ada", status=StudentStatus.PENDING.value)
    clock.advance(days=1)
    student = await machine.reset_admission_offer(Ref(id=s.id))
    assert student.status == StudentStatus.PENDING
    assert student.offer_date == clock()


async def test_accept_inside_window(store, machine, clock):
    store.add_student("ada")
    offered = await machine.offer_admission(Ref(username="ada"))
    offer_date = offered.offer_date
    clock.advance(days=6)

    student = await machine.accept_offer("ada")
    assert student.status == StudentStatus.ACCEPTED
    assert student.offer_date == offer_date


async def test_accept_after_window_fails(store, machine, clock):
    store.add_student("ada")
    await machine.offer_admission(Ref(username="ada"))
    clock.advance(days=7, seconds=1)

    with pytest.raises(InvalidTransitionError) as exc:
        await machine.accept_offer("ada")
    assert exc.value.code == "INVALID_TRANSITION"
    assert exc.value.current_status == StudentStatus.OFFERED


@pytest.mark.parametrize("status", [
    StudentStatus.PENDING, StudentStatus.REJECTED, StudentStatus.ACCEPTED,
])
async def test_accept_without_offer_fails(store, machine, clock, status):
    store.add_student("ada", status=status.value, offer_date=clock())
    with pytest.raises(InvalidTransitionError):
        await machine.accept_offer("ada")
    assert store.writes == 0


async def test_accept_unknown_identity_not_found(machine):
    with pytest.raises(ResourceNotFoundError):
        await machine.accept_offer("nobody")


async def test_accept_only_touches_callers_own_record(store, machine):
    store.add_student("ada")
    other = store.add_student("bob")
    await machine.offer_admission(Ref(username="ada"))
    await machine.offer_admission(Ref(username="bob"))

    await machine.accept_offer("ada")
    assert other.status == StudentStatus.OFFERED


async def test_concurrent_rejection_beats_accept(store, students, machine):
    s = store.add_student("ada")
    await machine.offer_admission(Ref(username="ada"))

    def _reject_concurrently():
        s.status = StudentStatus.REJECTED.value

    students.before_conditional_update = _reject_concurrently
    with pytest.raises(InvalidTransitionError) as exc:
        await machine.accept_offer("ada")
    assert exc.value.current_status == StudentStatus.REJECTED
    assert s.status == StudentStatus.REJECTED


async def test_accept_reports_status_read_when_student_vanishes(store, students, machine):
    s = store.add_student("ada")
    await machine.offer_admission(Ref(username="ada"))

    def _delete_concurrently():
        # mimic an ORM instance expired by the rollback
        del store.students[s.id]
        del s.status

    students.before_conditional_update = _delete_concurrently
    with pytest.raises(InvalidTransitionError) as exc:
        await machine.accept_offer("ada")
    assert exc.value.current_status == StudentStatus.OFFERED


async def test_reject_defaults_reason_to_other(store, machine):
    store.add_student("ada")
    student = await machine.reject_student(Ref(username="ada"))
    assert student.status == StudentStatus.REJECTED
    assert student.rejection_reason == RejectionReason.OTHER


async def test_reject_with_reason(store, machine):
    store.add_student("ada", status=StudentStatus.OFFERED.value)
    student = await machine.reject_student(
        Ref(username="ada"), RejectionReason.TIME_COMMITMENT,
    )
    assert student.rejection_reason == RejectionReason.TIME_COMMITMENT


async def test_operations_on_unknown_student_not_found(machine):
    for op in (machine.offer_admission, machine.reset_admission_offer, machine.reject_student):
        with pytest.raises(ResourceNotFoundError):
            await op(Ref(username="ghost"))


async def test_offer_expire_reset_accept_end_to_end(store, machine, clock):
    store.add_student("ada")
    offered = await machine.offer_admission(Ref(username="ada"))
    assert offered.status == StudentStatus.OFFERED
    t0 = offered.offer_date

    clock.advance(days=8)
    with pytest.raises(InvalidTransitionError):
        await machine.accept_offer("ada")

    reset = await machine.reset_admission_offer(Ref(username="ada"))
    assert reset.offer_date == t0 + timedelta(days=8)

    accepted = await machine.accept_offer("ada")
    assert accepted.status == StudentStatus.ACCEPTED


async def test_reoffer_after_rejection_clears_reason(store, machine, clock):
    store.add_student("ada")
    rejected = await machine.reject_student(Ref(username="ada"), RejectionReason.CAPACITY)
    assert rejected.rejection_reason == RejectionReason.CAPACITY

    offered = await machine.offer_admission(Ref(username="ada"))
    assert offered.status == StudentStatus.OFFERED
    assert offered.rejection_reason is None

    accepted = await machine.accept_offer("ada")
    assert accepted.rejection_reason is None


async def test_reset_keeps_rejection_reason(store, machine):
    store.add_student("ada")
    await machine.reject_student(Ref(username="ada"))
    student = await machine.reset_admission_offer(Ref(username="ada"))
    assert student.status == StudentStatus.REJECTED
    assert student.rejection_reason == RejectionReason.OTHER
