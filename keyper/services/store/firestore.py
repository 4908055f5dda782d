"""Cloud Firestore backend for :class:`.DocumentStore`."""

import logging
from typing import Any, List, Optional, Tuple

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from . import DocumentExists, DocumentStore, Document, Write

logger = logging.getLogger(__name__)


class FirestoreStore(DocumentStore):
    """
    Documents in Firestore collections, via the async client.

    The client is created on first use; credentials are resolved by the
    Google client libraries from the environment.
    """

    def __init__(self, project: Optional[str] = None,
                 database: Optional[str] = None,
                 client: Optional[firestore.AsyncClient] = None,
                 **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.project = project
        self.database = database
        self._client = client

    @property
    def client(self) -> firestore.AsyncClient:
        if self._client is None:
            logger.debug('Connecting to Firestore project %s, database %s',
                         self.project, self.database)
            self._client = firestore.AsyncClient(project=self.project,
                                                 database=self.database)
        return self._client

    def _ref(self, collection: str, key: str) -> Any:
        return self.client.collection(collection).document(key)

    async def _get(self, collection: str, key: str) -> Optional[Document]:
        snapshot = await self._ref(collection, key).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    async def _query(self, collection: str, field: str, value: Any,
                     limit: Optional[int]) -> List[Tuple[str, Document]]:
        query = self.client.collection(collection) \
            .where(filter=FieldFilter(field, '==', value))
        if limit is not None:
            query = query.limit(limit)
        return [(snapshot.id, snapshot.to_dict())
                async for snapshot in query.stream()]

    async def _set(self, collection: str, key: str, data: Document) -> None:
        await self._ref(collection, key).set(data)

    async def _create(self, collection: str, key: str, data: Document) \
            -> None:
        try:
            await self._ref(collection, key).create(data)
        except AlreadyExists as e:
            raise DocumentExists(f'{collection}/{key}') from e

    async def _update(self, collection: str, key: str, fields: Document) \
            -> None:
        await self._ref(collection, key).update(fields)

    async def _commit(self, writes: List[Write]) -> None:
        batch = self.client.batch()
        for write in writes:
            ref = self._ref(write.collection, write.key)
            fields = dict(write.data or {})
            for name, element in (write.appends or {}).items():
                fields[name] = firestore.ArrayUnion([element])
            if write.replace:
                batch.set(ref, fields)
            else:
                batch.update(ref, fields)
        await batch.commit()
