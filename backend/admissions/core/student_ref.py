"""Student reference helpers — the id-or-username selector used by admin and reviewer operations."""

from admissions.core.repository_protocols import StudentRef


def describe_ref(ref: StudentRef) -> str:
    """Human-readable form of a selector, for errors and logs."""
    if ref.id is not None:
        return str(ref.id)
    return ref.username or "<empty>"
