# backend/tests/conftest.py
"""
Session-wide test configuration.

Environment variables are pinned before any ``app`` module is imported so
settings never pick up a developer's .env: in-memory database, console
email, inline notifications.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["ASYNC_NOTIFICATIONS"] = "false"
os.environ["BOOKING_TIMEZONE"] = "UTC"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("LOG_LEVEL", "WARNING")
