"""Document store over named collections, persisted in a JSON database file."""
import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from src.services.storage_service import database_lock, read_database, write_database
from src.utils.config import get_db_file
from src.utils.exceptions import TransientIOError

logger = logging.getLogger(__name__)

REGISTRATIONS = "registrations"
USERS = "users"
ADMINS = "admins"
ACCOUNTS = "accounts"

_STORE_ERRORS = (OSError, json.JSONDecodeError, TimeoutError)


def _new_id() -> str:
    return uuid.uuid4().hex[:20]


def _with_id(doc_id: str, document: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": doc_id, **document}


class JsonDocumentStore:
    """
    Collections of JSON documents keyed by id.

    File layout: {"<collection>": {"<id>": {...document...}}}. Documents
    returned to callers are copies with their key added under "id".
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _read(self) -> Dict[str, Any]:
        try:
            return read_database(self.file_path)
        except _STORE_ERRORS as e:
            logger.error(f"Document store read failed ({self.file_path}): {e}")
            raise TransientIOError("Document store unavailable", e) from e

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._read().get(collection, {})

    def _write(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        try:
            with database_lock(self.file_path):
                data = read_database(self.file_path)
                data.setdefault(collection, {})[doc_id] = document
                write_database(self.file_path, data)
        except _STORE_ERRORS as e:
            logger.error(f"Document store write to {collection} failed: {e}")
            raise TransientIOError("Document store unavailable", e) from e

    def insert(self, collection: str, document: Dict[str, Any]) -> str:
        """
        Add a document under a generated id.

        Returns:
            The generated document id

        Raises:
            TransientIOError: If the database cannot be read or written
        """
        doc_id = _new_id()
        payload = {k: v for k, v in document.items() if k != "id"}
        self._write(collection, doc_id, payload)
        return doc_id

    def set(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        """Create or replace the document stored at doc_id."""
        payload = {k: v for k, v in document.items() if k != "id"}
        self._write(collection, doc_id, payload)

    def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document; returns False if it didn't exist."""
        try:
            with database_lock(self.file_path):
                data = read_database(self.file_path)
                removed = data.get(collection, {}).pop(doc_id, None)
                if removed is None:
                    return False
                write_database(self.file_path, data)
                return True
        except _STORE_ERRORS as e:
            logger.error(f"Document store delete in {collection} failed: {e}")
            raise TransientIOError("Document store unavailable", e) from e

    def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        document = self._collection(collection).get(doc_id)
        if document is None:
            return None
        return _with_id(doc_id, document)

    def query_where(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Documents whose field equals value exactly."""
        return [
            _with_id(doc_id, document)
            for doc_id, document in self._collection(collection).items()
            if document.get(field) == value
        ]

    def list_all(
        self,
        collection: str,
        order_by: Optional[str] = None,
        direction: str = "asc"
    ) -> List[Dict[str, Any]]:
        """
        All documents of a collection, optionally ordered by one field.

        Documents missing the order field sort before the others in
        ascending order, like a missing value in a managed document store.
        """
        documents = [
            _with_id(doc_id, document)
            for doc_id, document in self._collection(collection).items()
        ]

        if order_by:
            documents.sort(
                key=lambda doc: (doc.get(order_by) is not None, str(doc.get(order_by) or "")),
                reverse=direction == "desc"
            )

        return documents


def get_document_store() -> JsonDocumentStore:
    """Store backed by the configured database file."""
    return JsonDocumentStore(get_db_file())
