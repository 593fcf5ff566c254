"""Review Routes — reviewer queue and rating submission.

Invariants:
    - Both routes require REVIEWER (or ADMIN) with a username on the token
    - The reviewer identity is the token username, never a body field
    - An empty queue returns null with 200
"""

import logging

from fastapi import APIRouter, Depends, Query

from admissions.api.dependencies import get_clock, get_rating_store, require_reviewer
from admissions.config import Settings, get_settings
from admissions.core.domain_types import Track
from admissions.core.enforce_roles import CallerContext
from admissions.schemas.student import RatingSubmission, StudentResponse
from admissions.services.rating_store import RatingStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/review", tags=["review"])


@router.get("/next-student", response_model=StudentResponse | None)
async def next_student_needing_rating(
    track: Track | None = Query(None),
    caller: CallerContext = Depends(require_reviewer),
    store: RatingStore = Depends(get_rating_store),
    settings: Settings = Depends(get_settings),
    clock=Depends(get_clock),
):
    """Oldest student this reviewer has not rated yet."""
    student = await store.next_unrated_student(caller.username, track)
    if student is None:
        return None
    return StudentResponse.from_student(
        student, settings.offer_validity_window, clock(),
    )


@router.post("/ratings", response_model=bool)
async def submit_student_rating(
    body: RatingSubmission,
    caller: CallerContext = Depends(require_reviewer),
    store: RatingStore = Depends(get_rating_store),
):
    return await store.submit_rating(body.where, caller.username, body.rating)
