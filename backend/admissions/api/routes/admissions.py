"""Admission Routes — leaderboard and the offer/accept/reject transitions.

Invariants:
    - top-rated, offer, reset-offer, reject require ADMIN
    - accept requires STUDENT with a username; it takes no body
    - Responses are StudentResponse (camelCase)
"""

import logging

from fastapi import APIRouter, Depends, Query

from admissions.api.dependencies import (
    get_clock, get_ranking_engine, get_state_machine, require_admin, require_student,
)
from admissions.config import Settings, get_settings
from admissions.core.domain_types import Track
from admissions.core.enforce_roles import CallerContext
from admissions.schemas.student import (
    RejectStudentRequest, StudentResponse, StudentTarget,
)
from admissions.services.admission_state_machine import AdmissionStateMachine
from admissions.services.ranking_engine import RankingEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admissions", tags=["admissions"])


@router.get("/top-rated", response_model=list[StudentResponse])
async def students_top_rated(
    skip: int | None = Query(None, ge=0),
    take: int | None = Query(None, ge=1, le=500),
    track: Track | None = Query(None),
    _: CallerContext = Depends(require_admin),
    engine: RankingEngine = Depends(get_ranking_engine),
    settings: Settings = Depends(get_settings),
    clock=Depends(get_clock),
):
    """Students ordered by mean admission rating, best first."""
    ranked = await engine.top_rated(skip=skip, take=take, track=track)
    now = clock()
    return [
        StudentResponse.from_student(
            r.student, settings.offer_validity_window, now,
            average_admission_rating=r.average_admission_rating,
        )
        for r in ranked
    ]


@router.post("/offer", response_model=StudentResponse)
async def offer_student_admission(
    body: StudentTarget,
    _: CallerContext = Depends(require_admin),
    machine: AdmissionStateMachine = Depends(get_state_machine),
):
    student = await machine.offer_admission(body.where)
    return StudentResponse.from_student(student, machine.offer_window, machine.now())


@router.post("/reset-offer", response_model=StudentResponse)
async def reset_student_admission_offer(
    body: StudentTarget,
    _: CallerContext = Depends(require_admin),
    machine: AdmissionStateMachine = Depends(get_state_machine),
):
    student = await machine.reset_admission_offer(body.where)
    return StudentResponse.from_student(student, machine.offer_window, machine.now())


@router.post("/accept", response_model=StudentResponse)
async def accept_student_offer(
    caller: CallerContext = Depends(require_student),
    machine: AdmissionStateMachine = Depends(get_state_machine),
):
    """Accept the caller's own offer."""
    student = await machine.accept_offer(caller.username)
    return StudentResponse.from_student(student, machine.offer_window, machine.now())


@router.post("/reject", response_model=StudentResponse)
async def reject_student(
    body: RejectStudentRequest,
    _: CallerContext = Depends(require_admin),
    machine: AdmissionStateMachine = Depends(get_state_machine),
):
    student = await machine.reject_student(body.where, body.reason)
    return StudentResponse.from_student(student, machine.offer_window, machine.now())
