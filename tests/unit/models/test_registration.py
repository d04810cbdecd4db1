"""Unit tests for registration, interest and form state models."""
import pytest

from src.models.form_state import FORM_FIELDS, RegistrationForm, empty_draft
from src.models.interest import InterestCatalogue, InterestOption, InterestSelection
from src.models.registration import Registration


class TestRegistration:
    """Tests for Registration dataclass."""

    def test_create_valid_registration(self):
        reg = Registration(full_name="Jane Doe", email="jane@x.com", timestamp="2025-10-28T14:30:00+00:00")
        assert reg.full_name == "Jane Doe"
        assert reg.interests == []
        assert reg.other_interest is None

    def test_empty_email_raises(self):
        with pytest.raises(ValueError, match="Email cannot be empty"):
            Registration(full_name="Jane", email="  ", timestamp="2025-10-28T14:30:00+00:00")

    def test_invalid_timestamp_raises(self):
        with pytest.raises(ValueError, match="Invalid timestamp format"):
            Registration(full_name="Jane", email="jane@x.com", timestamp="yesterday")

    def test_zulu_timestamp_accepted(self):
        reg = Registration(full_name="Jane", email="jane@x.com", timestamp="2025-10-28T14:30:00Z")
        assert reg.created_at.year == 2025

    def test_to_document_omits_unset_optionals(self):
        """A registration without an "other" answer has no otherInterest key."""
        reg = Registration(
            full_name="Jane Doe",
            email="jane@x.com",
            timestamp="2025-10-28T14:30:00+00:00",
            interests=["AquaEdge"],
        )
        document = reg.to_document()
        assert document["fullName"] == "Jane Doe"
        assert document["interests"] == ["AquaEdge"]
        assert "otherInterest" not in document
        assert "creatorEmail" not in document
        assert "id" not in document

    def test_from_document_round_trip_keeps_id(self):
        document = {
            "id": "abc123",
            "fullName": "Jane Doe",
            "email": "jane@x.com",
            "company": "Acme",
            "interests": ["AquaEdge", "other"],
            "otherInterest": "Drones",
            "timestamp": "2025-10-28T14:30:00+00:00",
            "teamMember": "Karim",
        }
        reg = Registration.from_document(document)
        assert reg.id == "abc123"
        assert reg.other_interest == "Drones"
        assert reg.team_member == "Karim"

    def test_from_document_accepts_created_at(self):
        """Pending account registrations only carry createdAt."""
        reg = Registration.from_document({
            "fullName": "Jane",
            "email": "jane@x.com",
            "createdAt": "2025-10-28T14:30:00+00:00",
            "status": "pending",
        })
        assert reg.timestamp == "2025-10-28T14:30:00+00:00"
        assert reg.status == "pending"

    def test_from_document_without_timestamp_raises(self):
        with pytest.raises(ValueError):
            Registration.from_document({"fullName": "Jane", "email": "jane@x.com"})

    def test_submitter_label_prefers_team_member(self):
        reg = Registration(
            full_name="Jane", email="jane@x.com", timestamp="2025-10-28T14:30:00+00:00",
            creator_email="staff@x.com", team_member="Karim",
        )
        assert reg.submitter_label == "Karim"

    def test_submitter_label_falls_back(self):
        reg = Registration(full_name="Jane", email="jane@x.com", timestamp="2025-10-28T14:30:00+00:00")
        assert reg.submitter_label == "N/A"
        reg.creator_email = "staff@x.com"
        assert reg.submitter_label == "staff@x.com"

    def test_all_interests_appends_other_text(self):
        reg = Registration(
            full_name="Jane", email="jane@x.com", timestamp="2025-10-28T14:30:00+00:00",
            interests=["AquaEdge", "other"], other_interest="Drones",
        )
        assert reg.all_interests() == ["AquaEdge", "other", "Drones"]


class TestInterestModels:
    """Tests for the interest catalogue and selection."""

    def test_label_for_value_or_label(self, catalogue):
        assert catalogue.label_for("aquaedge") == "AquaEdge"
        assert catalogue.label_for("AQUAEDGE") == "AquaEdge"
        assert catalogue.label_for("Unknown") is None

    def test_other_is_reserved(self):
        with pytest.raises(ValueError, match="reserved"):
            InterestOption(value="other", label="Other")

    def test_accepts_sentinel(self, catalogue):
        assert catalogue.accepts("other") is True
        assert catalogue.accepts("Precision Agriculture") is False

    def test_empty_catalogue(self):
        assert InterestCatalogue(revision="empty").labels() == []

    def test_selection_with_other(self):
        selection = InterestSelection.from_form(["AquaEdge", "other"], "Drones")
        assert selection.tags == ["AquaEdge"]
        assert selection.has_other is True
        assert selection.other == "Drones"

    def test_selection_without_other_drops_text(self):
        """Free text is discarded when "other" isn't selected."""
        selection = InterestSelection.from_form(["AquaEdge"], "Drones")
        assert selection.has_other is False
        assert selection.other is None

    def test_empty_selection(self):
        assert InterestSelection.from_form([]).is_empty() is True


class TestRegistrationForm:
    """Tests for per-session form state."""

    def test_empty_draft_shape(self):
        draft = empty_draft()
        assert set(draft) == set(FORM_FIELDS)
        assert draft["interests"] == []
        assert draft["fullName"] == ""

    def test_untouched_field_not_validated(self, catalogue):
        form = RegistrationForm()
        assert form.set_field("email", "nope", catalogue) is None
        assert form.errors == {}

    def test_touch_then_change_revalidates(self, catalogue):
        form = RegistrationForm()
        form.set_field("email", "nope", catalogue)
        assert form.touch("email", catalogue) is not None

        assert form.set_field("email", "jane@x.com", catalogue) is None
        assert "email" not in form.errors

    def test_deselecting_other_clears_other_interest(self, catalogue):
        form = RegistrationForm()
        form.set_field("interests", ["other"], catalogue)
        form.touch("otherInterest", catalogue)
        assert "otherInterest" in form.errors

        form.set_field("interests", ["AquaEdge"], catalogue)
        assert form.draft["otherInterest"] == ""
        assert "otherInterest" not in form.errors

    def test_unknown_field(self, catalogue):
        with pytest.raises(KeyError):
            RegistrationForm().set_field("nickname", "x", catalogue)

    def test_reset(self, catalogue, valid_draft):
        form = RegistrationForm(draft=dict(valid_draft))
        form.touch("email", catalogue)
        form.show_errors({"phone": "bad"})
        form.submitting = True

        form.reset()

        assert form.draft == empty_draft()
        assert form.touched == set()
        assert form.errors == {}
        assert form.submitting is False
