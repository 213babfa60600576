"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to real infrastructure
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("RESEND_API_KEY", "re_test_fake_key")
os.environ.setdefault("LOG_FORMAT", "text")
