"""Phone number helpers built on phonenumbers."""
import logging
from typing import Optional

import phonenumbers
from phonenumbers import geocoder

from src.utils.config import get_phone_region

logger = logging.getLogger(__name__)


def _parse(raw: str, region: Optional[str] = None) -> Optional[phonenumbers.PhoneNumber]:
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return phonenumbers.parse(value, region or get_phone_region())
    except phonenumbers.NumberParseException:
        return None


def country_from_phone(raw: str, language: str = "fr") -> Optional[str]:
    """
    Country name for an internationally formatted number.

    Only numbers starting with "+" are considered, so a national number never
    guesses a country from the default region.

    Returns:
        Country name in the given language, or None when it can't be derived
    """
    value = (raw or "").strip()
    if not value.startswith("+"):
        return None

    phone = _parse(value)
    if phone is None or not phonenumbers.is_possible_number(phone):
        return None

    name = geocoder.country_name_for_number(phone, language)
    if not name:
        logger.debug(f"No country known for number prefix +{phone.country_code}")
        return None
    return name
