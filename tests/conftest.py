"""Fixtures shared by the Keyper tests."""

from typing import Any, Dict

import pytest

from keyper import passwords
from keyper.services.store.memory import MemoryStore

# Argon2 parameters cheap enough to hash many times per test run.
passwords.configure(time_cost=1, memory_cost=8, parallelism=1)

SETTINGS: Dict[str, Any] = {
    'API_KEY_LENGTH': 9,
    'PLATFORM_ID_LENGTH': 6,
    'TOKEN_LENGTH': 6,
    'ISSUE_ATTEMPTS': 10,
    'TOKEN_TTL_SECONDS': 600,
    'PHONE_PATTERN': r'^[6-9]\d{9}$',
    'REDIRECT_BASE_URL': 'https://authkeyper.vercel.app',
}


@pytest.fixture
def settings() -> Dict[str, Any]:
    return dict(SETTINGS)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(timeout=1.0, retry_delay=0)

