"""
Инфраструктурный слой документного хранилища.

Содержит реализацию хранилища в памяти и ее вариант с сохранением
в JSON-файл. Обе реализации поддерживают транзакции: транзакции с одним
ключом выполняются строго последовательно, записи буферизуются и
применяются при фиксации, а прочитанные документы проверяются на
изменение (оптимистичная блокировка).
"""

import asyncio
import copy
import json
import os
from contextlib import asynccontextmanager, nullcontext
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from ..shared_kernel import ConcurrencyException, ILogger, StdLogger, generate_id
from . import interfaces as ports
from .interfaces import Document, document_path, split_document_path

# Ключ документа в буфере транзакции: (коллекция, id)
_WriteKey = Tuple[str, str]


def _matches(document: Document, filters: Dict[str, Any]) -> bool:
    return all(document.get(field) == value for field, value in filters.items())


class InMemoryTransaction(ports.IDocumentTransaction):
    """Транзакция над хранилищем в памяти."""

    def __init__(self, store: "InMemoryDocumentStore"):
        self._store = store
        self._writes: Dict[_WriteKey, Document] = {}
        self._read_versions: Dict[_WriteKey, int] = {}
        self._read_queries: List[Tuple[str, Dict[str, Any], Dict[str, int]]] = []
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Транзакция уже завершена")

    def _current(self, collection: str, document_id: str) -> Optional[Document]:
        key = (collection, document_id)
        if key in self._writes:
            return self._writes[key]
        return self._store._documents.get(collection, {}).get(document_id)

    async def get(self, collection: str, document_id: str) -> Optional[Document]:
        self._check_open()
        key = (collection, document_id)
        if key not in self._writes:
            self._read_versions[key] = self._store._version(collection, document_id)
        document = self._current(collection, document_id)
        if document is None:
            return None
        return {**copy.deepcopy(document), "id": document_id}

    async def query(self, collection: str, **filters: Any) -> List[Document]:
        self._check_open()
        self._read_queries.append(
            (collection, filters, self._store._query_versions(collection, filters))
        )
        merged: Dict[str, Document] = dict(self._store._documents.get(collection, {}))
        for (write_collection, document_id), document in self._writes.items():
            if write_collection == collection:
                merged[document_id] = document
        return [
            {**copy.deepcopy(document), "id": document_id}
            for document_id, document in merged.items()
            if _matches(document, filters)
        ]

    async def insert(self, collection: str, fields: Document) -> str:
        self._check_open()
        document_id = generate_id()
        self._writes[(collection, document_id)] = copy.deepcopy(fields)
        return document_id

    async def set(self, collection: str, document_id: str, fields: Document) -> None:
        self._check_open()
        self._writes[(collection, document_id)] = copy.deepcopy(fields)

    async def update(self, path: str, fields: Document) -> None:
        self._check_open()
        collection, document_id = split_document_path(path)
        current = self._current(collection, document_id)
        if current is None:
            raise KeyError(f"Документ {path} не найден")
        self._writes[(collection, document_id)] = {
            **copy.deepcopy(current),
            **copy.deepcopy(fields),
        }

    def _validate(self) -> None:
        for (collection, document_id), version in self._read_versions.items():
            if self._store._version(collection, document_id) != version:
                raise ConcurrencyException(
                    f"Документ {document_path(collection, document_id)} изменен "
                    "другой транзакцией"
                )
        for collection, filters, versions in self._read_queries:
            if self._store._query_versions(collection, filters) != versions:
                raise ConcurrencyException(
                    f"Результат запроса к {collection} изменен другой транзакцией"
                )

    async def commit(self) -> None:
        """Проверяет прочитанные данные и применяет записи."""
        self._check_open()
        self._closed = True
        async with self._store._commit_lock:
            self._validate()
            await self._store._apply(self._writes)

    def rollback(self) -> None:
        """Отбрасывает буферизованные записи."""
        self._closed = True
        self._writes.clear()


class InMemoryDocumentStore(ports.IDocumentStore):
    """Реализация документного хранилища в памяти."""

    def __init__(self, logger: Optional[ILogger] = None):
        self._documents: Dict[str, Dict[str, Document]] = {}
        self._versions: Dict[_WriteKey, int] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._commit_lock = asyncio.Lock()
        self._logger = logger or StdLogger(__name__)

    def _version(self, collection: str, document_id: str) -> int:
        return self._versions.get((collection, document_id), 0)

    def _query_versions(self, collection: str, filters: Dict[str, Any]) -> Dict[str, int]:
        return {
            document_id: self._version(collection, document_id)
            for document_id, document in self._documents.get(collection, {}).items()
            if _matches(document, filters)
        }

    @asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        """Блокировка по ключу; удаляется, когда ее никто не держит и не ждет."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _apply(self, writes: Dict[_WriteKey, Document]) -> None:
        """Применяет записи транзакции.

        Новое состояние собирается в копии и подменяет текущее только после
        успешного сохранения, поэтому ошибка сохранения ничего не меняет.
        """
        if not writes:
            return
        documents = {
            collection: dict(items) for collection, items in self._documents.items()
        }
        for (collection, document_id), document in writes.items():
            documents.setdefault(collection, {})[document_id] = document
        await self._persist(documents)

        self._documents = documents
        for collection, document_id in writes:
            self._versions[(collection, document_id)] = (
                self._version(collection, document_id) + 1
            )

    async def _persist(self, documents: Dict[str, Dict[str, Document]]) -> None:
        """Сохраняет новое состояние до того, как оно станет видимым."""
        pass

    @asynccontextmanager
    async def transaction(
        self, key: Optional[str] = None
    ) -> AsyncIterator[InMemoryTransaction]:
        """Открывает транзакцию; транзакции с одним ключом не пересекаются."""
        guard = self._key_lock(key) if key is not None else nullcontext()
        async with guard:
            tx = InMemoryTransaction(self)
            try:
                yield tx
            except BaseException:
                tx.rollback()
                raise
            await tx.commit()

    async def get(self, collection: str, document_id: str) -> Optional[Document]:
        document = self._documents.get(collection, {}).get(document_id)
        if document is None:
            return None
        return {**copy.deepcopy(document), "id": document_id}

    async def query(self, collection: str, **filters: Any) -> List[Document]:
        return [
            {**copy.deepcopy(document), "id": document_id}
            for document_id, document in self._documents.get(collection, {}).items()
            if _matches(document, filters)
        ]

    async def insert(self, collection: str, fields: Document) -> str:
        async with self.transaction() as tx:
            return await tx.insert(collection, fields)

    async def set(self, collection: str, document_id: str, fields: Document) -> None:
        async with self.transaction() as tx:
            await tx.set(collection, document_id, fields)

    async def update(self, path: str, fields: Document) -> None:
        async with self.transaction() as tx:
            await tx.update(path, fields)


class JsonFileDocumentStore(InMemoryDocumentStore):
    """Хранилище в памяти, сохраняющее все документы в JSON-файл при каждой фиксации.

    Файл перезаписывается целиком в отдельном потоке; изменения становятся
    видны в памяти только после успешной записи.
    """

    def __init__(self, file_path: str, logger: Optional[ILogger] = None):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к JSON-файлу с данными
            logger: Логгер
        """
        super().__init__(logger)
        self._file_path = Path(file_path)
        self._load_data()

    def _load_data(self) -> None:
        """Загружает данные из JSON-файла."""
        if not self._file_path.exists():
            return

        raw_data = self._file_path.read_text(encoding="utf-8")
        if not raw_data.strip():
            return

        self._documents = json.loads(raw_data)
        self._versions = {
            (collection, document_id): 1
            for collection, documents in self._documents.items()
            for document_id in documents
        }
        self._logger.info(
            "Хранилище загружено",
            path=str(self._file_path),
            collections=len(self._documents),
        )

    def _save_data(self, documents: Dict[str, Dict[str, Document]]) -> None:
        """Сохраняет данные в JSON-файл через временный файл."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(documents, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self._file_path)

    async def _persist(self, documents: Dict[str, Dict[str, Document]]) -> None:
        # Запись файла не блокирует цикл событий
        await asyncio.to_thread(self._save_data, documents)


class DocumentUnitOfWork:
    """Единица работы поверх транзакции документного хранилища.

    Подклассы добавляют свойства-репозитории, работающие через ``session``.
    При выходе без исключения транзакция фиксируется, иначе откатывается.
    """

    def __init__(self, store: ports.IDocumentStore, key: Optional[str] = None):
        self._store = store
        self._key = key
        self._context: Any = None
        self._session: Optional[ports.IDocumentTransaction] = None

    @property
    def session(self) -> ports.IDocumentTransaction:
        if self._session is None:
            raise RuntimeError("Единица работы не открыта")
        return self._session

    async def __aenter__(self):
        self._context = self._store.transaction(self._key)
        self._session = await self._context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            return await self._context.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            self._context = None
            self._session = None
