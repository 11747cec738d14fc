"""
Интерфейсы (порты) документного хранилища.

Хранилище оперирует коллекциями документов, адресуемыми путями вида
``teams/{team_id}/resources``. Документ - это словарь JSON-совместимых
значений; при чтении идентификатор документа возвращается в поле ``id``.
"""

from __future__ import annotations

from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol

Document = Dict[str, Any]


def document_path(collection: str, document_id: str) -> str:
    """Собирает путь документа из пути коллекции и идентификатора."""
    return f"{collection}/{document_id}"


def split_document_path(path: str) -> tuple[str, str]:
    """Разделяет путь документа на путь коллекции и идентификатор."""
    collection, _, document_id = path.rpartition("/")
    if not collection or not document_id:
        raise ValueError(f"Некорректный путь документа: {path!r}")
    return collection, document_id


class IDocumentSession(Protocol):
    """Операции чтения и записи, общие для хранилища и транзакции."""

    async def get(self, collection: str, document_id: str) -> Optional[Document]: ...
    async def query(self, collection: str, **filters: Any) -> List[Document]: ...
    async def insert(self, collection: str, fields: Document) -> str: ...
    async def set(self, collection: str, document_id: str, fields: Document) -> None: ...
    async def update(self, path: str, fields: Document) -> None: ...


class IDocumentTransaction(IDocumentSession, Protocol):
    """Транзакция: чтения видят собственные записи, записи применяются атомарно."""


class IDocumentStore(IDocumentSession, Protocol):
    """Интерфейс документного хранилища."""

    def transaction(
        self, key: Optional[str] = None
    ) -> AsyncContextManager[IDocumentTransaction]: ...
