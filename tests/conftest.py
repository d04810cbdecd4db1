"""Shared fixtures for registration tests."""
from unittest.mock import patch

import pytest

from src.models.interest import InterestCatalogue, InterestOption
from src.services import catalogue_service
from src.services.document_store import JsonDocumentStore


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Keep bcrypt cheap in tests."""
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")


@pytest.fixture(autouse=True)
def clear_catalogue_cache():
    catalogue_service._clear_cache()
    yield
    catalogue_service._clear_cache()


@pytest.fixture
def store(tmp_path):
    """Empty document store in a temporary directory."""
    return JsonDocumentStore(str(tmp_path / "db.json"))


@pytest.fixture
def catalogue():
    """Product-line interest catalogue."""
    return InterestCatalogue(
        revision="solutions-2025",
        options=[
            InterestOption(value="aquaedge", label="AquaEdge"),
            InterestOption(value="fertiedge", label="FertiEdge"),
            InterestOption(value="yieldedge", label="YieldEdge"),
            InterestOption(value="trialedge", label="TrialEdge"),
        ],
    )


@pytest.fixture
def valid_draft():
    """Draft that passes every field rule."""
    return {
        "fullName": "Jane Doe",
        "email": "JANE@X.com",
        "company": "Acme",
        "position": "",
        "phone": "0612345678",
        "country": "Morocco",
        "interests": ["AquaEdge"],
        "otherInterest": "",
    }


@pytest.fixture
def session_state():
    """Plain dict standing in for st.session_state."""
    return {}


@pytest.fixture
def mock_st(session_state):
    """Patch streamlit in the identity service with a dict-backed session."""
    with patch("src.services.identity_service.st") as mock:
        mock.session_state = session_state
        yield mock
