"""Tests for registration field validation."""
import pytest

from src.utils.validation import (
    normalize_email,
    validate_company,
    validate_country,
    validate_email,
    validate_field,
    validate_full_name,
    validate_interests,
    validate_other_interest,
    validate_password,
    validate_phone,
    validate_position,
    validate_registration,
)


class TestValidateFullName:
    """Tests for validate_full_name function."""

    def test_valid_name(self):
        """Plain name should pass validation."""
        assert validate_full_name("Jane Doe") == (True, "")

    def test_accented_apostrophe_and_hyphen(self):
        """Accented letters, apostrophes and hyphens are allowed."""
        is_valid, message = validate_full_name("Zoé O'Brien-Lefèvre")
        assert is_valid is True
        assert message == ""

    def test_empty_name(self):
        """Empty name should fail validation."""
        is_valid, message = validate_full_name("")
        assert is_valid is False
        assert "requis" in message

    def test_whitespace_only_name(self):
        """Whitespace-only name counts as empty."""
        is_valid, message = validate_full_name("   ")
        assert is_valid is False
        assert "required" in message

    def test_single_character(self):
        """Names shorter than 2 characters are rejected."""
        is_valid, message = validate_full_name("J")
        assert is_valid is False
        assert "2" in message

    @pytest.mark.parametrize("name", ["Jane2", "Jane_Doe", "Jane@Doe", "Jane.Doe"])
    def test_invalid_characters(self, name):
        """Digits and punctuation other than ' and - are rejected."""
        is_valid, _ = validate_full_name(name)
        assert is_valid is False

    def test_none_is_treated_as_empty(self):
        """Missing values behave like empty strings."""
        is_valid, _ = validate_full_name(None)
        assert is_valid is False


class TestValidateEmail:
    """Tests for validate_email function."""

    def test_valid_email(self):
        assert validate_email("jane@x.com") == (True, "")

    def test_mixed_case_email(self):
        """Case doesn't matter for the shape check."""
        assert validate_email("JANE@X.com")[0] is True

    @pytest.mark.parametrize("email", ["jane", "jane@", "jane@x", "@x.com", "ja ne@x.com"])
    def test_malformed_email(self, email):
        is_valid, message = validate_email(email)
        assert is_valid is False
        assert "invalide" in message

    def test_empty_email(self):
        is_valid, message = validate_email("")
        assert is_valid is False
        assert "requis" in message


class TestValidateCompanyAndPosition:
    """Tests for company and position charset rules."""

    def test_company_with_allowed_symbols(self):
        """Digits and '&._- are allowed in company names."""
        assert validate_company("AT&T Labs_2.0 - R'D")[0] is True

    def test_company_too_short(self):
        assert validate_company("A")[0] is False

    def test_company_required(self):
        assert validate_company("  ")[0] is False

    def test_company_rejects_symbols(self):
        assert validate_company("Acme <script>")[0] is False

    def test_position_optional(self):
        """Empty position is valid."""
        assert validate_position("") == (True, "")

    def test_position_charset(self):
        assert validate_position("Directeur R&D")[0] is True
        assert validate_position("Boss!")[0] is False


class TestValidatePhone:
    """Tests for validate_phone function."""

    def test_ten_digit_national_number(self):
        assert validate_phone("0612345678") == (True, "")

    def test_international_format(self):
        """Spaces, dashes, parentheses and leading + are accepted."""
        assert validate_phone("+212 (6) 12-34-56-78")[0] is True

    def test_too_few_digits(self):
        is_valid, message = validate_phone("061234567")
        assert is_valid is False
        assert "10" in message

    def test_letters_rejected(self):
        assert validate_phone("06123456ab")[0] is False

    def test_required(self):
        assert validate_phone("")[0] is False


class TestValidateCountry:
    """Tests for validate_country function."""

    def test_valid_country(self):
        assert validate_country("Côte d'Ivoire")[0] is True

    def test_hyphenated_country(self):
        assert validate_country("Guinée-Bissau")[0] is True

    def test_digits_rejected(self):
        assert validate_country("Morocco1")[0] is False

    def test_required(self):
        assert validate_country("")[0] is False


class TestValidateInterests:
    """Tests for interest selection rules."""

    def test_catalogue_label(self, catalogue):
        assert validate_interests(["AquaEdge"], catalogue) == (True, "")

    def test_catalogue_value(self, catalogue):
        """Option values are accepted as well as labels."""
        assert validate_interests(["fertiedge"], catalogue)[0] is True

    def test_other_sentinel(self, catalogue):
        assert validate_interests(["other"], catalogue)[0] is True

    def test_empty_selection(self, catalogue):
        is_valid, message = validate_interests([], catalogue)
        assert is_valid is False
        assert "au moins un" in message

    def test_unknown_tag(self, catalogue):
        """Tags from another catalogue revision are rejected."""
        is_valid, message = validate_interests(["Precision Agriculture"], catalogue)
        assert is_valid is False
        assert "Precision Agriculture" in message


class TestValidateOtherInterest:
    """Tests for the conditional free-text interest."""

    def test_ignored_without_other(self):
        """Any value passes when "other" isn't selected."""
        assert validate_other_interest("", ["AquaEdge"]) == (True, "")
        assert validate_other_interest("<bad>", ["AquaEdge"]) == (True, "")

    def test_required_with_other(self):
        is_valid, message = validate_other_interest("", ["other"])
        assert is_valid is False
        assert "Précisez" in message

    def test_whitespace_with_other(self):
        assert validate_other_interest("   ", ["AquaEdge", "other"])[0] is False

    def test_charset_with_other(self):
        assert validate_other_interest("Drones & Robotique", ["other"])[0] is True
        assert validate_other_interest("Drones!", ["other"])[0] is False


class TestValidateRegistration:
    """Tests for whole-draft validation."""

    def test_valid_draft(self, valid_draft, catalogue):
        assert validate_registration(valid_draft, catalogue) == {}

    def test_collects_every_error(self, catalogue):
        """All failing fields are reported together, not just the first."""
        draft = {
            "fullName": "",
            "email": "nope",
            "company": "",
            "position": "",
            "phone": "123",
            "country": "",
            "interests": [],
            "otherInterest": "",
        }
        errors = validate_registration(draft, catalogue)
        assert set(errors) == {"fullName", "email", "company", "phone", "country", "interests"}

    def test_other_without_text(self, valid_draft, catalogue):
        valid_draft["interests"] = ["other"]
        valid_draft["otherInterest"] = ""
        errors = validate_registration(valid_draft, catalogue)
        assert list(errors) == ["otherInterest"]

    def test_does_not_mutate_draft(self, valid_draft, catalogue):
        snapshot = dict(valid_draft)
        validate_registration(valid_draft, catalogue)
        assert valid_draft == snapshot

    def test_validate_field_unknown_name(self, valid_draft, catalogue):
        with pytest.raises(KeyError):
            validate_field("nickname", valid_draft, catalogue)


class TestNormalizeEmail:
    """Tests for normalize_email function."""

    def test_trim_and_lowercase(self):
        assert normalize_email("  Jane@X.COM ") == "jane@x.com"


class TestValidatePassword:
    """Tests for account password rules."""

    def test_matching_passwords(self):
        assert validate_password("secret1", "secret1") == (True, "")

    def test_too_short(self):
        assert validate_password("abc", "abc")[0] is False

    def test_mismatch(self):
        is_valid, message = validate_password("secret1", "secret2")
        assert is_valid is False
        assert "correspondent" in message
