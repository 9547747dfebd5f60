"""
PassVault - Credentials Service

Maps CredentialFormData to documents in the signed-in user's collection
(users/<uid>/credentials) and back.

The password field is sealed with the session's content key before it is
written and opened again when read, so the store never holds it in the
clear. Every other field is stored as typed.

Each operation wraps failures the same way: log the underlying error,
then raise CredentialsError with a short message suitable for the user.
"""

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, List, Union

from . import config, crypto
from .auth import Session
from .models import ALL_CATEGORIES, Credential, CredentialFormData
from .store import Document, DocumentStore, collection_path, new_id


logger = logging.getLogger(__name__)

SEALED_FIELD = 'password'


class CredentialsError(Exception):
    """User-facing failure of a credentials operation."""


class CredentialsService:
    """
    Usage:
        service = CredentialsService(store, session)
        cred_id = service.add_credential(CredentialFormData("github.com", "alice", "s3cret!A1"))
        service.update_credential(cred_id, {"notes": "work account"})
        for cred in service.get_credentials():
            print(cred.site, cred.username)
    """

    def __init__(self, store: DocumentStore, session: Session):
        self.store = store
        self.session = session
        self.collection = collection_path(
            config.USERS_COLLECTION, session.uid, config.CREDENTIALS_COLLECTION
        )

    def add_credential(self, form: CredentialFormData) -> str:
        """
        Store a new credential.

        Returns:
            Generated credential ID
        """
        try:
            data = form.to_document()
            # Sealing binds to the ID, so reserve it before the single insert
            doc_id = new_id()
            data[SEALED_FIELD] = self._seal(doc_id, data[SEALED_FIELD])
            return self.store.add(self.collection, data, doc_id=doc_id)
        except Exception as e:
            logger.error("Error adding credential: %s", e)
            raise CredentialsError("Failed to add credential") from e

    def update_credential(self, credential_id: str,
                          fields: Union[CredentialFormData, Dict[str, Any]]) -> None:
        """
        Merge changed fields into an existing credential.

        Args:
            credential_id: ID returned by add_credential()
            fields: Full form data or a dict with only the changed fields
        """
        try:
            changes = asdict(fields) if is_dataclass(fields) else dict(fields)
            if SEALED_FIELD in changes:
                changes[SEALED_FIELD] = self._seal(credential_id, changes[SEALED_FIELD])
            self.store.update(self.collection, credential_id, changes)
        except Exception as e:
            logger.error("Error updating credential: %s", e)
            raise CredentialsError("Failed to update credential") from e

    def delete_credential(self, credential_id: str) -> None:
        try:
            self.store.delete(self.collection, credential_id)
        except Exception as e:
            logger.error("Error deleting credential: %s", e)
            raise CredentialsError("Failed to delete credential") from e

    def get_credentials(self) -> List[Credential]:
        """All credentials, newest first."""
        try:
            return [self._to_credential(doc) for doc in self.store.list(self.collection)]
        except Exception as e:
            logger.error("Error fetching credentials: %s", e)
            raise CredentialsError("Failed to fetch credentials") from e

    def search_credentials(self, search_term: str) -> List[Credential]:
        """
        Case-insensitive substring search over site, username and category.

        Results are ordered by site, then newest first. An empty term
        returns everything.
        """
        try:
            docs = self.store.list(self.collection, order_by="site", descending=False)
            credentials = [self._to_credential(doc) for doc in docs]
            return filter_credentials(credentials, search_term)
        except Exception as e:
            logger.error("Error searching credentials: %s", e)
            raise CredentialsError("Failed to search credentials") from e

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _context(self, credential_id: str) -> dict:
        return {
            "ctx": "credential_field",
            "uid": self.session.uid,
            "doc_id": credential_id,
            "field": SEALED_FIELD,
        }

    def _seal(self, credential_id: str, value: str) -> str:
        return crypto.seal_field(self.session.data_key, value, self._context(credential_id))

    def _to_credential(self, doc: Document) -> Credential:
        data = dict(doc.data)
        if data.get(SEALED_FIELD):
            data[SEALED_FIELD] = crypto.open_field(
                self.session.data_key, data[SEALED_FIELD], self._context(doc.id)
            )
        return Credential.from_document(doc.id, data, doc.created_at, doc.updated_at)


def filter_credentials(credentials: Iterable[Credential], search_term: str = "",
                       category: str = ALL_CATEGORIES) -> List[Credential]:
    """
    In-memory filter used by the list view.

    Args:
        credentials: Credentials to filter (order is preserved)
        search_term: Substring matched against site, username, category
        category: Exact category, or "All" for no category filter
    """
    term = (search_term or "").lower()
    result = []
    for cred in credentials:
        if term and not (term in cred.site.lower()
                         or term in cred.username.lower()
                         or term in (cred.category or "").lower()):
            continue
        if category and category != ALL_CATEGORIES and cred.category != category:
            continue
        result.append(cred)
    return result
