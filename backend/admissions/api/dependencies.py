"""Request Dependencies — caller resolution, role gate, and service construction.

Invariants:
    - The caller is built only from a verified bearer token; request bodies never
      name the acting identity
    - Missing, expired, or forged tokens yield an anonymous caller, which the
      role gate rejects with AuthorizationError
    - require_role() runs core.enforce_roles.authorize before the route body executes
    - Services receive repositories bound to the request's DB session
"""

import logging
from datetime import datetime
from typing import Callable

import jwt
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.config import Settings, get_settings
from admissions.core.domain_types import AuthRole
from admissions.core.enforce_roles import CallerContext, authorize
from admissions.core.errors import AdmissionsError
from admissions.infrastructure.database import begin_snapshot_read, get_db
from admissions.services.admission_state_machine import AdmissionStateMachine, utc_now
from admissions.services.ranking_engine import RankingEngine
from admissions.services.rating_store import RatingStore
from admissions.services.sql_repositories import SqlRatingRepository, SqlStudentRepository

logger = logging.getLogger(__name__)


def decode_caller(token: str, settings: Settings) -> CallerContext:
    """Verify a bearer token and read its role/username claims."""
    try:
        claims = jwt.decode(
            token, settings.auth_jwt_secret, algorithms=[settings.auth_jwt_algorithm],
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return CallerContext()

    try:
        role = AuthRole(claims.get("role"))
    except ValueError:
        role = None
    username = claims.get("username")
    return CallerContext(
        role=role, username=username if isinstance(username, str) else None,
    )


async def get_caller(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> CallerContext:
    if not authorization:
        return CallerContext()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return CallerContext()
    return decode_caller(token.strip(), settings)


def require_role(
    required: AuthRole, needs_identity: bool = False,
) -> Callable[..., CallerContext]:
    """Dependency factory: gate a route on `required` (and a username if asked)."""

    async def gate(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        try:
            return authorize(required, caller, needs_identity)
        except AdmissionsError as e:
            logger.warning(
                f"Gate rejected caller for {required.value}",
                extra={"error_code": e.code},
            )
            raise

    return gate


require_reviewer = require_role(AuthRole.REVIEWER, needs_identity=True)
require_admin = require_role(AuthRole.ADMIN)
require_student = require_role(AuthRole.STUDENT, needs_identity=True)


def get_clock() -> Callable[[], datetime]:
    """Overridable in tests to move time past the offer window."""
    return utc_now


def get_rating_store(db: AsyncSession = Depends(get_db)) -> RatingStore:
    return RatingStore(SqlStudentRepository(db), SqlRatingRepository(db))


async def get_ranking_engine(db: AsyncSession = Depends(get_db)) -> RankingEngine:
    # aggregate and fetch must see the same committed data
    await begin_snapshot_read(db)
    return RankingEngine(SqlStudentRepository(db), SqlRatingRepository(db))


def get_state_machine(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> AdmissionStateMachine:
    return AdmissionStateMachine(
        SqlStudentRepository(db), settings.offer_validity_window, now=clock,
    )
