"""Integration tests for the admin dashboard flow."""
from datetime import datetime, timedelta, timezone

import pytest

from src.models.account import Identity
from src.models.registration import Registration
from src.services.admin_service import can_access_dashboard, grant_admin
from src.services.document_store import REGISTRATIONS, JsonDocumentStore
from src.services.export_service import render_csv, render_pdf
from src.services.identity_service import get_session_context
from src.services.listing_service import RegistrationListing

BASE_TIME = datetime(2025, 10, 28, 8, 0, tzinfo=timezone.utc)
COUNTRIES = ["Morocco", "France", "Senegal"]


@pytest.fixture
def populated_store(tmp_path):
    """23 registrations, one minute apart."""
    store = JsonDocumentStore(str(tmp_path / "registration_db.json"))
    for index in range(23):
        registration = Registration(
            full_name=f"Attendee {index:02d}",
            email=f"attendee{index:02d}@x.com",
            company="Acme" if index % 2 else "Globex",
            country=COUNTRIES[index % 3],
            interests=["AquaEdge"],
            timestamp=(BASE_TIME + timedelta(minutes=index)).isoformat(),
        )
        store.insert(REGISTRATIONS, registration.to_document())
    return store


class TestDashboardFlow:
    """Admin listing over a populated database."""

    def test_admin_guard(self, mock_st, populated_store):
        staff = Identity(uid="u1", email="staff@x.com")
        get_session_context().sign_in(staff)
        assert can_access_dashboard(staff, populated_store) is False

        other = Identity(uid="u2", email="boss@x.com")
        grant_admin("boss@x.com", populated_store)
        get_session_context().sign_in(other)
        assert can_access_dashboard(other, populated_store) is True

    def test_pages_of_ten(self, populated_store):
        listing = RegistrationListing.fetch(populated_store, page_size=10)

        assert listing.page_count() == 3
        assert [len(listing.paginate(page)) for page in (1, 2, 3, 4)] == [10, 10, 3, 0]
        assert listing.paginate(1)[0].email == "attendee22@x.com"

    def test_search_then_sort_then_page(self, populated_store):
        listing = RegistrationListing.fetch(populated_store, page_size=5)
        query = "france"

        matches = listing.search(query)
        assert len(matches) == 8
        assert all(reg.country == "France" for reg in matches)

        listing.toggle_sort("full_name")
        first_page = listing.paginate(1, query)
        assert [reg.full_name for reg in first_page] == sorted(reg.full_name for reg in matches)[:5]
        assert listing.page_bounds(2, query) == (6, 8, 8)

    def test_exports_cover_every_registration(self, populated_store):
        listing = RegistrationListing.fetch(populated_store, page_size=10)

        csv_lines = render_csv(listing.records).decode("utf-8-sig").splitlines()
        assert len(csv_lines) == 24

        pdf = render_pdf(listing.view())
        assert pdf.startswith(b"%PDF")
