"""Root test configuration.

Points the application at an in-memory SQLite database and a throwaway
media directory before any ``parley`` module is imported.
"""

from __future__ import annotations

import os
import tempfile

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="parley-media-"))
os.environ.setdefault("ENABLE_FILE_LOGGING", "false")
os.environ["LOGFIRE_ENABLED"] = "false"
