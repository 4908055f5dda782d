"""
Password hashing.

Passwords arrive already hashed by the calling platform; that value is hashed
again here with argon2id before it is stored, so nothing in the store can be
replayed as a credential.
"""

import logging
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from . import config

logger = logging.getLogger(__name__)

_hasher: Optional[PasswordHasher] = None


def get_hasher() -> PasswordHasher:
    global _hasher
    if _hasher is None:
        _hasher = PasswordHasher(time_cost=config.ARGON2_TIME_COST,
                                 memory_cost=config.ARGON2_MEMORY_COST,
                                 parallelism=config.ARGON2_PARALLELISM)
    return _hasher


def configure(time_cost: int, memory_cost: int, parallelism: int) -> None:
    """Replace the hasher, e.g. with cheaper parameters for testing."""
    global _hasher
    _hasher = PasswordHasher(time_cost=time_cost, memory_cost=memory_cost,
                             parallelism=parallelism)


def hash_password(password: str) -> str:
    """Generate a salted argon2id hash of a password."""
    return get_hasher().hash(password)


def check_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash."""
    try:
        return get_hasher().verify(hashed, password)
    except VerificationError:
        return False
    except InvalidHashError:
        logger.error('Stored password hash is not a valid argon2 hash')
        return False


def needs_rehash(hashed: str) -> bool:
    """Whether ``hashed`` was made with parameters other than the current."""
    return get_hasher().check_needs_rehash(hashed)
