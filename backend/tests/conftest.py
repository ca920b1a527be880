import os

# Settings are loaded at import time; give them a test environment first.
os.environ.setdefault("MIKROTIK_USERNAME", "api")
os.environ.setdefault("MIKROTIK_PASSWORD", "secret")
os.environ.setdefault("CUSTOM_DNS", "1.1.1.1")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STATIC_DIR", "/nonexistent-static-dir")

import pytest

from fakes import FakeLeaseStore


@pytest.fixture
def store():
    return FakeLeaseStore()
