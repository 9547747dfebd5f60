"""
PassVault - Credential records

Plain data holders passed between the menu, the credentials service and
the document store. No behaviour beyond conversion helpers.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


CREDENTIAL_CATEGORIES = (
    "Social Media",
    "Work",
    "Banking",
    "Shopping",
    "Entertainment",
    "Education",
    "Other",
)

DEFAULT_CATEGORY = "Other"

# Pseudo-category used by list filters to mean "no category filter"
ALL_CATEGORIES = "All"


@dataclass
class CredentialFormData:
    """Edit buffer for the add/edit form."""
    site: str
    username: str
    password: str
    category: str = DEFAULT_CATEGORY
    notes: str = ""

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Credential:
    """A stored credential, as read back from the database."""
    id: Optional[str]
    site: str
    username: str
    password: str
    category: str
    notes: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any],
                      created_at: Optional[float] = None,
                      updated_at: Optional[float] = None) -> "Credential":
        """
        Build a Credential from a stored document body.

        Missing category becomes "Other", missing notes become "", and
        missing timestamps fall back to the current time.
        """
        now = datetime.now()
        return cls(
            id=doc_id,
            site=data.get('site', ""),
            username=data.get('username', ""),
            password=data.get('password', ""),
            category=data.get('category') or DEFAULT_CATEGORY,
            notes=data.get('notes') or "",
            created_at=datetime.fromtimestamp(created_at) if created_at is not None else now,
            updated_at=datetime.fromtimestamp(updated_at) if updated_at is not None else now,
        )

    def to_form_data(self) -> CredentialFormData:
        return CredentialFormData(
            site=self.site,
            username=self.username,
            password=self.password,
            category=self.category or DEFAULT_CATEGORY,
            notes=self.notes or "",
        )
