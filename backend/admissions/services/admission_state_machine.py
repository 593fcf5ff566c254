"""Admission State Machine — offer, reset, accept, and reject transitions.

Invariants:
    - offer_admission: any state -> OFFERED, offer_date = now (re-offer restarts the clock),
      rejection_reason cleared
    - reset_admission_offer: offer_date = now, status unchanged
    - accept_offer: target resolved ONLY from the caller's own username;
      OFFERED and inside the validity window -> ACCEPTED, offer_date kept
    - reject_student: any state -> REJECTED, reason defaults to OTHER
    - accept_offer re-checks status and window at write time (compare-and-transition)
    - Every check that can fail runs before the write

Design Decisions:
    - Clock injected as a callable: window expiry is testable without sleeping
    - Window injected from Settings.offer_validity_window (business rule, not a constant)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from admissions.core.domain_types import RejectionReason, StudentStatus
from admissions.core.errors import (
    ErrorContext, InvalidTransitionError, ResourceNotFoundError,
)
from admissions.core.offer_policy import has_valid_admission_offer, offer_cutoff
from admissions.core.repository_protocols import (
    StudentLike, StudentRef, StudentRepository,
)
from admissions.core.student_ref import describe_ref

logger = logging.getLogger(__name__)

_OFFER_INVALID = "Admission has not been offered, or your offer expired."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AdmissionStateMachine:
    """Student status transitions."""

    def __init__(
        self,
        students: StudentRepository,
        offer_window: timedelta,
        now: Callable[[], datetime] = utc_now,
    ):
        self.students = students
        self.offer_window = offer_window
        self.now = now

    async def offer_admission(self, ref: StudentRef) -> StudentLike:
        student = await self._resolve(ref, "offer_admission")
        updated = await self.students.update_status(
            student.id,
            status=StudentStatus.OFFERED,
            offer_date=self.now(),
            clear_rejection_reason=True,
        )
        logger.info(
            "Admission offered",
            extra={"student_id": student.id, "status": StudentStatus.OFFERED.value},
        )
        return updated

    async def reset_admission_offer(self, ref: StudentRef) -> StudentLike:
        student = await self._resolve(ref, "reset_admission_offer")
        updated = await self.students.update_status(
            student.id, offer_date=self.now(),
        )
        logger.info("Admission offer clock reset", extra={"student_id": student.id})
        return updated

    async def accept_offer(self, username: str) -> StudentLike:
        """Accept the caller's own offer. `username` comes from the auth token."""
        student = await self.students.find_by_username(username)
        if student is None:
            raise ResourceNotFoundError(
                "Application", username,
                ErrorContext(caller=username, operation="accept_offer"),
            )

        at = self.now()
        if not has_valid_admission_offer(
            student.status, student.offer_date, at, self.offer_window,
        ):
            raise InvalidTransitionError(_OFFER_INVALID, student.status)

        # update_status_if rolls back on a lost race, which expires `student`
        status_at_read = student.status
        updated = await self.students.update_status_if(
            student.id,
            expected_status=StudentStatus.OFFERED,
            offered_after=offer_cutoff(at, self.offer_window),
            new_status=StudentStatus.ACCEPTED,
        )
        if updated is None:
            # status or offer_date changed between the read and the write
            current = await self.students.find_by_username(username)
            raise InvalidTransitionError(
                _OFFER_INVALID, current.status if current else status_at_read,
            )
        logger.info(
            "Admission offer accepted",
            extra={"student_id": student.id, "status": StudentStatus.ACCEPTED.value},
        )
        return updated

    async def reject_student(
        self, ref: StudentRef, reason: RejectionReason | None = None,
    ) -> StudentLike:
        student = await self._resolve(ref, "reject_student")
        reason = reason or RejectionReason.OTHER
        updated = await self.students.update_status(
            student.id, status=StudentStatus.REJECTED, rejection_reason=reason,
        )
        logger.info(
            f"Student rejected ({reason.value})",
            extra={"student_id": student.id, "status": StudentStatus.REJECTED.value},
        )
        return updated

    async def _resolve(self, ref: StudentRef, operation: str) -> StudentLike:
        student = await self.students.find_by_ref(ref)
        if student is None:
            raise ResourceNotFoundError(
                "Student", describe_ref(ref),
                ErrorContext(student_ref=describe_ref(ref), operation=operation),
            )
        return student
