"""
Document store for clients, users and session tokens.

:class:`DocumentStore` is the only interface the flows depend on: get by key,
set or create by key, equality query on one field, partial update by key, and
an atomic commit of several writes. Backends implement the underscored
methods; the public methods add the collection prefix, a per-call timeout,
bounded retries for reads, and translate every backend failure to
:class:`.DependencyError`.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, \
    Optional, Tuple, TypeVar

from fastapi import status

from ...exceptions import DependencyError

logger = logging.getLogger(__name__)

T = TypeVar('T')

Document = Dict[str, Any]


class DocumentExists(RuntimeError):
    """A document was to be created under a key that is already in use."""


class Write(NamedTuple):
    """One write within an atomic :meth:`DocumentStore.commit`."""

    collection: str
    key: str
    data: Optional[Document] = None
    """Fields to set. With ``replace``, the whole new document."""

    appends: Optional[Dict[str, Any]] = None
    """Array field name to the element appended to it.

    Appends have set semantics, like Firestore's ``ArrayUnion``: an element
    equal to one already in the array is not added again. Activity log entries
    carry a timestamp and a request id, so only a repeated request id within
    the same millisecond is collapsed."""

    replace: bool = False
    """Overwrite (or create) the document instead of updating it."""


class DocumentStore(object):
    """Base class for document store backends."""

    def __init__(self, prefix: str = '', timeout: float = 5.0,
                 read_attempts: int = 2, retry_delay: float = 0.1) -> None:
        self.prefix = prefix
        self.timeout = timeout
        self.read_attempts = max(1, read_attempts)
        self.retry_delay = retry_delay

    def collection_name(self, collection: str) -> str:
        return f'{self.prefix}{collection}'

    async def get(self, collection: str, key: str) -> Optional[Document]:
        """Get a document by key, or ``None`` if there is no such document."""
        return await self._read(self._get, self.collection_name(collection),
                                key)

    async def query(self, collection: str, field: str, value: Any,
                    limit: Optional[int] = None) -> List[Tuple[str, Document]]:
        """Find ``(key, document)`` pairs whose ``field`` equals ``value``."""
        return await self._read(self._query, self.collection_name(collection),
                                field, value, limit)

    async def set(self, collection: str, key: str, data: Document) -> None:
        """Create or overwrite a document."""
        await self._write(self._set, self.collection_name(collection), key,
                          data)

    async def create(self, collection: str, key: str, data: Document) \
            -> None:
        """
        Create a document, failing if one already exists under ``key``.

        Raises
        ------
        :class:`.DocumentExists`
        """
        await self._write(self._create, self.collection_name(collection), key,
                          data)

    async def update(self, collection: str, key: str, fields: Document) \
            -> None:
        """Merge ``fields`` into an existing document."""
        await self._write(self._update, self.collection_name(collection), key,
                          fields)

    async def commit(self, writes: List[Write]) -> None:
        """Apply several writes atomically: all of them, or none."""
        writes = [w._replace(collection=self.collection_name(w.collection))
                  for w in writes]
        await self._write(self._commit, writes)

    async def _read(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._call(fn, *args)
            except DependencyError:
                logger.error('Store read failed (attempt %i of %i)',
                             attempt, self.read_attempts)
                if attempt >= self.read_attempts:
                    raise
            await asyncio.sleep(self.retry_delay)

    async def _write(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        return await self._call(fn, *args)

    async def _call(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        try:
            return await asyncio.wait_for(fn(*args), timeout=self.timeout)
        except DocumentExists:
            raise
        except asyncio.TimeoutError as e:
            logger.error('Store call %s timed out after %.1fs', fn.__name__,
                         self.timeout)
            raise DependencyError('The service is temporarily unavailable',
                                  'SERVICE_UNAVAILABLE',
                                  status.HTTP_503_SERVICE_UNAVAILABLE) from e
        except Exception as e:
            logger.error('Store call %s failed: %s', fn.__name__, e)
            raise DependencyError('Internal server error') from e

    async def _get(self, collection: str, key: str) -> Optional[Document]:
        raise NotImplementedError

    async def _query(self, collection: str, field: str, value: Any,
                     limit: Optional[int]) -> List[Tuple[str, Document]]:
        raise NotImplementedError

    async def _set(self, collection: str, key: str, data: Document) -> None:
        raise NotImplementedError

    async def _create(self, collection: str, key: str, data: Document) \
            -> None:
        raise NotImplementedError

    async def _update(self, collection: str, key: str, fields: Document) \
            -> None:
        raise NotImplementedError

    async def _commit(self, writes: List[Write]) -> None:
        raise NotImplementedError


def init_store(config: Dict[str, Any]) -> DocumentStore:
    """Build the store backend named by ``STORE_BACKEND``."""
    backend = config.get('STORE_BACKEND', 'firestore')
    params = dict(
        prefix=config.get('COLLECTION_PREFIX', ''),
        timeout=float(config.get('STORE_TIMEOUT', 5.0)),
        read_attempts=int(config.get('STORE_READ_ATTEMPTS', 2)),
        retry_delay=float(config.get('STORE_RETRY_DELAY', 0.1)),
    )
    logger.debug('New %s store with prefix %r', backend, params['prefix'])
    if backend == 'memory':
        from .memory import MemoryStore
        return MemoryStore(**params)
    if backend == 'firestore':
        from .firestore import FirestoreStore
        return FirestoreStore(project=config.get('FIRESTORE_PROJECT'),
                              database=config.get('FIRESTORE_DATABASE'),
                              **params)
    raise ValueError(f'Unknown store backend: {backend}')
