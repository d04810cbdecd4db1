"""Field validation rules for the registration form."""
import re
from typing import Any, Callable, Dict, List, Tuple

from src.models.interest import InterestCatalogue, OTHER_INTEREST

NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ '\-]+$")
ORGANISATION_PATTERN = re.compile(r"^[A-Za-z0-9À-ÖØ-öø-ÿ '&._\-]+$")
COUNTRY_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ '\-]+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[0-9 ().\-]+$")

MIN_TEXT_LENGTH = 2
MIN_PHONE_DIGITS = 10
MIN_PASSWORD_LENGTH = 6

ValidationResult = Tuple[bool, str]


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_full_name(full_name: str) -> ValidationResult:
    """
    Validate attendee full name.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, message) if empty, shorter than 2 characters or containing
          anything but letters, spaces, apostrophes and hyphens
    """
    value = _text(full_name)
    if not value:
        return False, "Le nom complet est requis / Full name is required"
    if len(value) < MIN_TEXT_LENGTH:
        return False, "Le nom doit contenir au moins 2 caractères / Name must be at least 2 characters"
    if not NAME_PATTERN.match(value):
        return False, "Le nom ne peut contenir que des lettres, espaces, apostrophes et tirets / Name may only contain letters, spaces, apostrophes and hyphens"
    return True, ""


def validate_email(email: str) -> ValidationResult:
    """Validate email shape (local@domain.tld)."""
    value = _text(email)
    if not value:
        return False, "L'email est requis / Email is required"
    if not EMAIL_PATTERN.match(value):
        return False, "Format d'email invalide / Invalid email format"
    return True, ""


def validate_company(company: str) -> ValidationResult:
    value = _text(company)
    if not value:
        return False, "L'entreprise est requise / Company is required"
    if len(value) < MIN_TEXT_LENGTH:
        return False, "L'entreprise doit contenir au moins 2 caractères / Company must be at least 2 characters"
    if not ORGANISATION_PATTERN.match(value):
        return False, "Caractères non autorisés dans l'entreprise / Company contains invalid characters"
    return True, ""


def validate_position(position: str) -> ValidationResult:
    """Position is optional; when given it uses the company character set."""
    value = _text(position)
    if value and not ORGANISATION_PATTERN.match(value):
        return False, "Caractères non autorisés dans le poste / Position contains invalid characters"
    return True, ""


def validate_phone(phone: str) -> ValidationResult:
    """
    Validate a free-form phone number.

    Digits, spaces, dots, hyphens, parentheses and a leading "+" are
    accepted; at least 10 digits are required.
    """
    value = _text(phone)
    if not value:
        return False, "Le téléphone est requis / Phone number is required"
    if not PHONE_PATTERN.match(value):
        return False, "Numéro de téléphone invalide / Invalid phone number"
    if len(re.sub(r"\D", "", value)) < MIN_PHONE_DIGITS:
        return False, "Le téléphone doit contenir au moins 10 chiffres / Phone number must have at least 10 digits"
    return True, ""


def validate_country(country: str) -> ValidationResult:
    value = _text(country)
    if not value:
        return False, "Le pays est requis / Country is required"
    if not COUNTRY_PATTERN.match(value):
        return False, "Le pays ne peut contenir que des lettres / Country may only contain letters"
    return True, ""


def validate_interests(interests: List[str], catalogue: InterestCatalogue) -> ValidationResult:
    """At least one tag, each from the active catalogue or the "other" sentinel."""
    if not isinstance(interests, list) or not interests:
        return False, "Sélectionnez au moins un intérêt / Select at least one interest"
    unknown = [tag for tag in interests if not isinstance(tag, str) or not catalogue.accepts(tag)]
    if unknown:
        return False, f"Intérêt inconnu / Unknown interest: {', '.join(map(str, unknown))}"
    return True, ""


def validate_other_interest(other_interest: str, interests: List[str]) -> ValidationResult:
    """
    Validate the free-text interest.

    Only checked when "other" is among the selected interests; ignored
    otherwise.
    """
    if not isinstance(interests, list) or OTHER_INTEREST not in interests:
        return True, ""
    value = _text(other_interest)
    if not value:
        return False, "Précisez votre autre intérêt / Please specify your other interest"
    if not ORGANISATION_PATTERN.match(value):
        return False, "Caractères non autorisés / Other interest contains invalid characters"
    return True, ""


_FIELD_RULES: Dict[str, Callable[[Dict[str, Any], InterestCatalogue], ValidationResult]] = {
    "fullName": lambda draft, _: validate_full_name(draft.get("fullName")),
    "email": lambda draft, _: validate_email(draft.get("email")),
    "company": lambda draft, _: validate_company(draft.get("company")),
    "position": lambda draft, _: validate_position(draft.get("position")),
    "phone": lambda draft, _: validate_phone(draft.get("phone")),
    "country": lambda draft, _: validate_country(draft.get("country")),
    "interests": lambda draft, catalogue: validate_interests(draft.get("interests"), catalogue),
    "otherInterest": lambda draft, _: validate_other_interest(
        draft.get("otherInterest"), draft.get("interests")
    ),
}


def validate_field(name: str, draft: Dict[str, Any], catalogue: InterestCatalogue) -> ValidationResult:
    """
    Validate one named field in the context of the whole draft.

    Raises:
        KeyError: If the field has no rule
    """
    return _FIELD_RULES[name](draft, catalogue)


def validate_registration(draft: Dict[str, Any], catalogue: InterestCatalogue) -> Dict[str, str]:
    """
    Validate every field of a draft.

    Returns:
        Mapping of field name to error message; empty when the draft is valid.
        All failing fields are reported, not just the first.
    """
    errors = {}
    for name in _FIELD_RULES:
        is_valid, message = validate_field(name, draft, catalogue)
        if not is_valid:
            errors[name] = message
    return errors


def normalize_email(email: str) -> str:
    """
    Normalize email for storage and duplicate comparison.

    Example: " Jane@X.com " → "jane@x.com"
    """
    return email.strip().lower()


def validate_password(password: str, confirm_password: str) -> ValidationResult:
    """Validate a new account password and its confirmation."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False, "Le mot de passe doit contenir au moins 6 caractères / Password must be at least 6 characters"
    if password != confirm_password:
        return False, "Les mots de passe ne correspondent pas / Passwords do not match"
    return True, ""
