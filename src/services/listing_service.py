"""Admin listing: fetch once, then search, sort and paginate in memory."""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from src.models.registration import Registration
from src.services.document_store import REGISTRATIONS, JsonDocumentStore, get_document_store
from src.utils.config import get_page_size
from src.utils.exceptions import LoadError, TransientIOError

logger = logging.getLogger(__name__)

ASCENDING = "asc"
DESCENDING = "desc"

SORTABLE_FIELDS = ("full_name", "email", "company", "country", "timestamp")
SEARCH_FIELDS = ("full_name", "email", "company", "country", "submitter")


def load_registrations(store: Optional[JsonDocumentStore] = None) -> List[Registration]:
    """
    Read the whole registrations collection, newest first.

    Documents that can't be turned into a Registration are skipped with a
    warning.

    Raises:
        LoadError: If the store is unavailable
    """
    store = store or get_document_store()
    try:
        documents = store.list_all(REGISTRATIONS, order_by="timestamp", direction=DESCENDING)
    except TransientIOError as e:
        raise LoadError("Could not load registrations") from e

    registrations = []
    for document in documents:
        try:
            registrations.append(Registration.from_document(document))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed registration {document.get('id')}: {e}")

    # Older pending documents only carry createdAt, so order on the parsed value
    registrations.sort(key=lambda reg: reg.created_at, reverse=True)
    return registrations


def _search_value(registration: Registration, name: str) -> str:
    if name == "submitter":
        return " ".join(str(value) for value in (registration.team_member, registration.creator_email) if value)
    return str(getattr(registration, name) or "")


def _sort_value(registration: Registration, key: str) -> Any:
    if key == "timestamp":
        return registration.created_at
    return str(getattr(registration, key) or "")


@dataclass
class RegistrationListing:
    """
    Registrations fetched for one dashboard session.

    The fetched order is kept untouched; the sort key and direction are
    view state applied on top of it.
    """

    records: List[Registration] = field(default_factory=list)
    load_failed: bool = False
    sort_key: str = "timestamp"
    sort_direction: str = DESCENDING
    page_size: int = 10

    @classmethod
    def fetch(cls, store: Optional[JsonDocumentStore] = None, page_size: Optional[int] = None) -> "RegistrationListing":
        """
        Load the listing once; a failed load yields an empty listing flagged
        as failed rather than a partial one.
        """
        page_size = page_size or get_page_size()
        try:
            records = load_registrations(store)
        except LoadError as e:
            logger.error(f"Error fetching registrations: {e.__cause__ or e}")
            return cls(records=[], load_failed=True, page_size=page_size)
        return cls(records=records, page_size=page_size)

    @property
    def is_empty(self) -> bool:
        """Loaded successfully but holds no registrations."""
        return not self.load_failed and not self.records

    def search(self, query: str = "") -> List[Registration]:
        """
        Case-insensitive substring match on name, email, company, country
        and submitter. Only an empty query returns everything; whitespace
        is matched literally.
        """
        if not query:
            return list(self.records)
        needle = query.lower()
        return [
            reg for reg in self.records
            if any(needle in _search_value(reg, name).lower() for name in SEARCH_FIELDS)
        ]

    def toggle_sort(self, key: str) -> Tuple[str, str]:
        """
        Choose a sort column.

        Choosing the current key while ascending switches to descending;
        any other choice sorts ascending.

        Returns:
            The new (key, direction)
        """
        if key not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {key}")

        if self.sort_key == key and self.sort_direction == ASCENDING:
            direction = DESCENDING
        else:
            direction = ASCENDING

        self.sort_key = key
        self.sort_direction = direction
        return key, direction

    def sort_by(self, key: str, query: str = "") -> List[Registration]:
        """Toggle the sort on key and return the resulting view."""
        self.toggle_sort(key)
        return self.view(query)

    def sorted(self, records: Optional[List[Registration]] = None) -> List[Registration]:
        """
        Records ordered by the current sort state.

        Ties keep their fetched order in both directions.
        """
        records = self.records if records is None else records
        return sorted(
            records,
            key=lambda reg: _sort_value(reg, self.sort_key),
            reverse=self.sort_direction == DESCENDING
        )

    def view(self, query: str = "") -> List[Registration]:
        """Filtered then sorted records."""
        return self.sorted(self.search(query))

    def page_count(self, query: str = "") -> int:
        return math.ceil(len(self.search(query)) / self.page_size)

    def clamp_page(self, page: int, query: str = "") -> int:
        """Nearest page number in [1, page_count]; 1 when there are no results."""
        return max(1, min(page, self.page_count(query)))

    def paginate(self, page: int, query: str = "") -> List[Registration]:
        """
        Records of a 1-based page of the current view.

        Pages outside [1, page_count] are empty; use clamp_page first to
        stay in range.
        """
        if page < 1:
            return []
        start = (page - 1) * self.page_size
        return self.view(query)[start:start + self.page_size]

    def page_bounds(self, page: int, query: str = "") -> Tuple[int, int, int]:
        """
        1-based (first, last, total) shown on a page, for "showing X to Y of Z".
        """
        total = len(self.search(query))
        if total == 0:
            return 0, 0, 0
        page = self.clamp_page(page, query)
        first = (page - 1) * self.page_size + 1
        last = min(page * self.page_size, total)
        return first, last, total
