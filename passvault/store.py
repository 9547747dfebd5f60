"""
PassVault - Document Store

A small document database on top of SQLite, shaped like a hosted
document service:
- Documents live in collections addressed by a path ("users/<uid>/credentials")
- Each document has an opaque generated ID and a JSON body
- The store assigns created_at / updated_at timestamps
- Updates merge fields into the existing body

Database structure:
- documents: one row per document, body stored as JSON text
"""

import json
import logging
import sqlite3
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE SCHEMA
# =============================================================================

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,              -- JSON object
    created_at REAL NOT NULL,        -- Unix seconds, assigned by the store
    updated_at REAL NOT NULL,
    PRIMARY KEY (collection, id)
);

CREATE INDEX IF NOT EXISTS idx_documents_created ON documents(collection, created_at);
"""

PRAGMAS = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=FULL;
PRAGMA secure_delete=ON;
"""


class StoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"Document {collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


@dataclass
class Document:
    id: str
    data: Dict[str, Any]
    created_at: float
    updated_at: float


def new_id() -> str:
    """Fresh document ID, for callers that need it before the insert."""
    return str(uuid.uuid4())


def collection_path(*segments: str) -> str:
    """
    Join path segments into a collection path.

    collection_path("users", uid, "credentials") -> "users/<uid>/credentials"
    """
    for segment in segments:
        if not segment or "/" in segment:
            raise StoreError(f"Invalid collection path segment: {segment!r}")
    return "/".join(segments)


# =============================================================================
# DOCUMENT STORE
# =============================================================================

class DocumentStore:
    """
    SQLite-backed document collections.

    Usage:
        with DocumentStore("passvault.db") as store:
            doc_id = store.add("users/u1/credentials", {"site": "github.com"})
            store.update("users/u1/credentials", doc_id, {"notes": "2FA on"})
            for doc in store.list("users/u1/credentials"):
                print(doc.id, doc.data)
    """

    def __init__(self, db_path: str):
        """
        Args:
            db_path: Path to SQLite database file (":memory:" works for tests)
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None

    def open(self) -> "DocumentStore":
        """Connect and create tables if needed."""
        if self.conn is None:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self.conn.executescript(PRAGMAS)
            self.conn.executescript(SCHEMA)
            logger.debug("Opened document store at %s", self.db_path)
        return self

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "DocumentStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def add(self, collection: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        """
        Create a document.

        Args:
            doc_id: ID reserved with new_id(); generated when omitted

        Returns:
            Document ID (UUID)
        """
        self._require_open()
        doc_id = doc_id or new_id()
        now = time.time()
        self.conn.execute(
            """INSERT INTO documents (collection, id, data, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (collection, doc_id, json.dumps(data), now, now)
        )
        self.conn.commit()
        return doc_id

    def get(self, collection: str, doc_id: str) -> Document:
        self._require_open()
        row = self.conn.execute(
            "SELECT * FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id)
        ).fetchone()
        if not row:
            raise DocumentNotFound(collection, doc_id)
        return self._to_document(row)

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """
        Merge fields into an existing document and bump updated_at.

        Fields not named in `fields` are left as they are.

        Raises:
            DocumentNotFound: If the document does not exist
        """
        current = self.get(collection, doc_id)
        merged = dict(current.data)
        merged.update(fields)
        self.conn.execute(
            """UPDATE documents SET data = ?, updated_at = ?
               WHERE collection = ? AND id = ?""",
            (json.dumps(merged), time.time(), collection, doc_id)
        )
        self.conn.commit()

    def delete(self, collection: str, doc_id: str) -> None:
        """
        Raises:
            DocumentNotFound: If the document does not exist
        """
        self._require_open()
        cur = self.conn.execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id)
        )
        self.conn.commit()
        if cur.rowcount == 0:
            raise DocumentNotFound(collection, doc_id)

    def list(self, collection: str, order_by: str = "created_at",
             descending: bool = True) -> List[Document]:
        """
        All documents of a collection, sorted.

        Documents created in the same instant keep insertion order. When
        sorting by a data field, ties fall back to newest first.

        Args:
            order_by: "created_at", "updated_at", or a top-level data field (e.g. "site")
            descending: Sort direction for order_by
        """
        self._require_open()
        direction = "DESC" if descending else "ASC"
        if order_by in ("created_at", "updated_at"):
            sql = f"""SELECT * FROM documents WHERE collection = ?
                      ORDER BY {order_by} {direction}, rowid {direction}"""
            params = (collection,)
        else:
            sql = f"""SELECT * FROM documents WHERE collection = ?
                      ORDER BY json_extract(data, ?) {direction}, created_at DESC, rowid DESC"""
            params = (collection, f'$."{order_by}"')
        rows = self.conn.execute(sql, params).fetchall()
        return [self._to_document(row) for row in rows]

    def find(self, collection: str, field: str, value: Any) -> List[Document]:
        """Documents whose `field` equals `value` (oldest first)."""
        return [doc for doc in self.list(collection, descending=False)
                if doc.data.get(field) == value]

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _to_document(self, row: sqlite3.Row) -> Document:
        return Document(
            id=row['id'],
            data=json.loads(row['data']),
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _require_open(self) -> None:
        if not self.conn:
            raise StoreError("Document store is closed. Call open() first.")
