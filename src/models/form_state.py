"""Per-session state of the public registration form."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from src.models.interest import InterestCatalogue, OTHER_INTEREST
from src.utils.validation import validate_field

FORM_FIELDS = (
    "fullName",
    "email",
    "company",
    "position",
    "phone",
    "country",
    "interests",
    "otherInterest",
)


def empty_draft() -> Dict[str, Any]:
    """Initial shape of the form: empty strings and no interests."""
    draft = {name: "" for name in FORM_FIELDS}
    draft["interests"] = []
    return draft


@dataclass
class RegistrationForm:
    """
    Draft values, touched fields and current errors of one form session.

    A field is only validated after it has been touched; from then on it is
    re-validated on every change.
    """

    draft: Dict[str, Any] = field(default_factory=empty_draft)
    touched: Set[str] = field(default_factory=set)
    errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False

    def _revalidate(self, name: str, catalogue: InterestCatalogue) -> None:
        is_valid, message = validate_field(name, self.draft, catalogue)
        if is_valid:
            self.errors.pop(name, None)
        else:
            self.errors[name] = message

    def set_field(self, name: str, value: Any, catalogue: InterestCatalogue) -> Optional[str]:
        """
        Update one draft value.

        Returns:
            The field's current error message, or None
        """
        if name not in FORM_FIELDS:
            raise KeyError(f"Unknown form field: {name}")

        self.draft[name] = list(value) if name == "interests" else value

        if name in self.touched:
            self._revalidate(name, catalogue)

        if name == "interests":
            # otherInterest depends on whether "other" is still selected
            if OTHER_INTEREST not in self.draft["interests"]:
                self.draft["otherInterest"] = ""
                self.errors.pop("otherInterest", None)
            elif "otherInterest" in self.touched:
                self._revalidate("otherInterest", catalogue)

        return self.errors.get(name)

    def touch(self, name: str, catalogue: InterestCatalogue) -> Optional[str]:
        """Mark a field as visited (blur) and validate it."""
        self.touched.add(name)
        self._revalidate(name, catalogue)
        return self.errors.get(name)

    def show_errors(self, errors: Dict[str, str]) -> None:
        """Replace errors after a whole-form check and mark every field touched."""
        self.touched.update(FORM_FIELDS)
        self.errors = dict(errors)

    def reset(self) -> None:
        """Back to the empty initial shape with no touch or error state."""
        self.draft = empty_draft()
        self.touched.clear()
        self.errors.clear()
        self.submitting = False
