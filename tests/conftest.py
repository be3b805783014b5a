"""Root conftest — shared test configuration."""

import os

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
