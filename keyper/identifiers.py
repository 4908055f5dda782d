"""
Random identifiers: API keys, platform IDs and session tokens.

An identifier is drawn at random and checked against the store; on a
collision another is drawn, up to a fixed number of attempts. The check and
the subsequent write are not transactional, so two concurrent issuances can
in principle both pass the check with the same value. With 62 symbols and six
or more positions that is vanishingly unlikely at this service's volume.
"""

import logging
import secrets
import string
from typing import NamedTuple, Optional, Union

from .services.store import DocumentStore

logger = logging.getLogger(__name__)

ALPHANUMERIC = string.ascii_letters + string.digits


class Keyspace(NamedTuple):
    """Where an identifier must be unique."""

    collection: str
    field: Optional[str] = None
    """Document field holding the value; ``None`` if the value is the key."""


class Issued(NamedTuple):
    value: str


class Exhausted(NamedTuple):
    attempts: int


IssueResult = Union[Issued, Exhausted]


def random_string(length: int, alphabet: str = ALPHANUMERIC) -> str:
    """Draw ``length`` symbols independently and uniformly from ``alphabet``."""
    if length < 1:
        raise ValueError('length must be positive')
    if not alphabet:
        raise ValueError('alphabet must not be empty')
    return ''.join(secrets.choice(alphabet) for _ in range(length))


async def is_taken(store: DocumentStore, keyspace: Keyspace,
                   value: str) -> bool:
    """Whether ``value`` is already in use within ``keyspace``."""
    if keyspace.field is None:
        return await store.get(keyspace.collection, value) is not None
    matches = await store.query(keyspace.collection, keyspace.field, value,
                                limit=1)
    return len(matches) > 0


async def issue(store: DocumentStore, keyspace: Keyspace, length: int,
                alphabet: str = ALPHANUMERIC,
                attempts: int = 10) -> IssueResult:
    """
    Draw an identifier that is not yet in use in ``keyspace``.

    Parameters
    ----------
    store : :class:`.DocumentStore`
    keyspace : :class:`.Keyspace`
    length : int
        Number of symbols in the identifier.
    alphabet : str
    attempts : int
        Number of candidates to try before giving up.

    Returns
    -------
    :class:`.Issued` or :class:`.Exhausted`

    Raises
    ------
    :class:`.DependencyError`
        If the store could not be consulted.
    """
    for attempt in range(1, attempts + 1):
        candidate = random_string(length, alphabet)
        if not await is_taken(store, keyspace, candidate):
            return Issued(candidate)
        logger.debug('Identifier collision in %s (attempt %i of %i)',
                     keyspace.collection, attempt, attempts)
    logger.error('No free identifier in %s after %i attempts',
                 keyspace.collection, attempts)
    return Exhausted(attempts)
