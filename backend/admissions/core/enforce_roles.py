"""Authorization Gate — pure guard chain run before any operation touches business data.

Invariants:
    - Role check runs first; identity check second; business logic never runs on failure
    - ADMIN satisfies ADMIN and REVIEWER; REVIEWER satisfies REVIEWER; STUDENT satisfies STUDENT
    - An anonymous caller (no role) fails the role check, not the identity check
    - Identity-scoped operations return the caller's own username; targets are never
      taken from request input

Design Decisions:
    - Raise instead of returning error dicts: routes surface these through the
      global AdmissionsError handler unchanged
"""

from dataclasses import dataclass

from admissions.core.domain_types import AuthRole
from admissions.core.errors import (
    AuthorizationError, ErrorContext, IdentityMissingError,
)

_SATISFIES: dict[AuthRole, frozenset[AuthRole]] = {
    AuthRole.ADMIN: frozenset({AuthRole.ADMIN, AuthRole.REVIEWER}),
    AuthRole.REVIEWER: frozenset({AuthRole.REVIEWER}),
    AuthRole.STUDENT: frozenset({AuthRole.STUDENT}),
}


@dataclass(frozen=True)
class CallerContext:
    """Already-authenticated caller: role and (optional) username."""
    role: AuthRole | None = None
    username: str | None = None


def role_satisfies(caller_role: AuthRole | None, required: AuthRole) -> bool:
    if caller_role is None:
        return False
    return required in _SATISFIES.get(caller_role, frozenset())


def check_role(required: AuthRole, caller: CallerContext) -> None:
    """Rule 1: caller must hold (or outrank) the required role."""
    if not role_satisfies(caller.role, required):
        raise AuthorizationError(
            required.value,
            ErrorContext(caller=caller.username),
        )


def check_identity(required: AuthRole, caller: CallerContext) -> str:
    """Rule 2: identity-scoped operations need a username on the token."""
    if not caller.username:
        raise IdentityMissingError(required.value)
    return caller.username


def authorize(
    required: AuthRole, caller: CallerContext, needs_identity: bool = False,
) -> CallerContext:
    """Chain all gate checks. Returns the caller unchanged on success."""
    check_role(required, caller)
    if needs_identity:
        check_identity(required, caller)
    return caller
