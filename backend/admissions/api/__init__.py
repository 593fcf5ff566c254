"""API Layer — FastAPI routes, auth dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every business route is gated by a require_role dependency
    - Routes contain no business rules (delegate to services/)
"""
