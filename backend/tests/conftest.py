"""Root conftest — shared test configuration."""

import os

# Must be set before admissions.main builds its cached Settings
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault(
    "AUTH_JWT_SECRET", "test-secret-key-for-admissions-suite-0001",
)
os.environ.setdefault("OFFER_VALIDITY_DAYS", "7")
os.environ.setdefault("LOG_FORMAT", "text")
