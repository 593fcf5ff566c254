"""API Schemas — Pydantic models validating request bodies and shaping responses."""
