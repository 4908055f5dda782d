"""In-process backend for :class:`.DocumentStore`, for development and tests."""

from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple

from . import DocumentExists, DocumentStore, Document, Write


class MemoryStore(DocumentStore):
    """Documents held in nested dicts. Nothing survives a restart."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.collections: Dict[str, Dict[str, Document]] = {}

    def _collection(self, name: str) -> Dict[str, Document]:
        return self.collections.setdefault(name, {})

    async def _get(self, collection: str, key: str) -> Optional[Document]:
        doc = self._collection(collection).get(key)
        return deepcopy(doc) if doc is not None else None

    async def _query(self, collection: str, field: str, value: Any,
                     limit: Optional[int]) -> List[Tuple[str, Document]]:
        matches = [(key, deepcopy(doc))
                   for key, doc in self._collection(collection).items()
                   if field in doc and doc[field] == value]
        return matches if limit is None else matches[:limit]

    async def _set(self, collection: str, key: str, data: Document) -> None:
        self._collection(collection)[key] = deepcopy(data)

    async def _create(self, collection: str, key: str, data: Document) \
            -> None:
        docs = self._collection(collection)
        if key in docs:
            raise DocumentExists(f'{collection}/{key}')
        docs[key] = deepcopy(data)

    async def _update(self, collection: str, key: str, fields: Document) \
            -> None:
        docs = self._collection(collection)
        if key not in docs:
            raise KeyError(f'No document {key} in {collection}')
        docs[key].update(deepcopy(fields))

    async def _commit(self, writes: List[Write]) -> None:
        staged = deepcopy(self.collections)
        for write in writes:
            docs = staged.setdefault(write.collection, {})
            if write.replace:
                doc = {}
            elif write.key in docs:
                doc = docs[write.key]
            else:
                raise KeyError(f'No document {write.key} in'
                               f' {write.collection}')
            doc.update(deepcopy(write.data or {}))
            for name, element in (write.appends or {}).items():
                array = doc.setdefault(name, [])
                if element not in array:
                    array.append(deepcopy(element))
            docs[write.key] = doc
        self.collections = staged
