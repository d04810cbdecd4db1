"""Registration data model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.utils.date_utils import parse_timestamp

# dataclass attribute -> stored document key
_DOCUMENT_KEYS = {
    "full_name": "fullName",
    "email": "email",
    "company": "company",
    "position": "position",
    "phone": "phone",
    "country": "country",
    "interests": "interests",
    "other_interest": "otherInterest",
    "timestamp": "timestamp",
    "creator_email": "creatorEmail",
    "user_id": "userId",
    "team_member": "teamMember",
    "status": "status",
}

NOT_AVAILABLE = "N/A"


@dataclass
class Registration:
    """One attendee's stored submission."""

    full_name: str
    email: str
    timestamp: str  # ISO 8601 format
    company: str = ""
    position: str = ""
    phone: str = ""
    country: str = ""
    interests: List[str] = field(default_factory=list)
    other_interest: Optional[str] = None
    creator_email: Optional[str] = None
    user_id: Optional[str] = None
    team_member: Optional[str] = None
    status: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        """Validate registration data."""
        if not self.email or not self.email.strip():
            raise ValueError("Email cannot be empty")

        if parse_timestamp(self.timestamp) is None:
            raise ValueError(f"Invalid timestamp format: {self.timestamp}")

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    @property
    def submitter_label(self) -> str:
        """Team member who entered the record, else the account that created it."""
        return self.team_member or self.creator_email or NOT_AVAILABLE

    def all_interests(self) -> List[str]:
        """Selected tags followed by the free-text interest, if any."""
        values = list(self.interests)
        if self.other_interest:
            values.append(self.other_interest)
        return values

    def to_document(self) -> Dict[str, Any]:
        """
        Document shape persisted in the registrations collection.

        Optional attributes that are unset are left out entirely, so a
        registration without an "other" answer has no otherInterest key.
        """
        document = {}
        for attr, key in _DOCUMENT_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            document[key] = list(value) if attr == "interests" else value
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Registration":
        """
        Build from a stored document.

        Older account-linked documents carry "createdAt" instead of
        "timestamp"; both are accepted.

        Raises:
            ValueError: If the document lacks an email or a usable timestamp
        """
        values = {}
        for attr, key in _DOCUMENT_KEYS.items():
            if key in document and document[key] is not None:
                values[attr] = document[key]

        if "timestamp" not in values and document.get("createdAt"):
            values["timestamp"] = document["createdAt"]

        interests = values.get("interests", [])
        values["interests"] = [str(tag) for tag in interests] if isinstance(interests, list) else []

        values.setdefault("full_name", "")
        values.setdefault("email", "")
        values.setdefault("timestamp", "")

        return cls(id=document.get("id"), **values)
