"""Interest catalogue and selection models."""
from dataclasses import dataclass, field
from typing import List, Optional

OTHER_INTEREST = "other"


@dataclass(frozen=True)
class InterestOption:
    """One selectable interest tag."""

    value: str
    label: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Interest value cannot be empty")
        if not self.label or not self.label.strip():
            raise ValueError("Interest label cannot be empty")
        if self.value.strip().lower() == OTHER_INTEREST:
            raise ValueError(f"'{OTHER_INTEREST}' is reserved and cannot be a catalogue entry")


@dataclass
class InterestCatalogue:
    """Interest tags offered by one revision of the registration form."""

    revision: str
    options: List[InterestOption] = field(default_factory=list)

    def label_for(self, tag: str) -> Optional[str]:
        """
        Stored label for a selected tag.

        Args:
            tag: Option value or label, compared case-insensitively

        Returns:
            The option's label, or None if the tag isn't in this catalogue
        """
        needle = tag.strip().lower()
        for option in self.options:
            if needle in (option.value.lower(), option.label.lower()):
                return option.label
        return None

    def accepts(self, tag: str) -> bool:
        """True for catalogue tags and the "other" sentinel."""
        return tag == OTHER_INTEREST or self.label_for(tag) is not None

    def labels(self) -> List[str]:
        return [option.label for option in self.options]


@dataclass
class InterestSelection:
    """
    Interests chosen on the form.

    The free-text answer only exists when the "other" sentinel is selected.
    """

    tags: List[str] = field(default_factory=list)
    other: Optional[str] = None

    @classmethod
    def from_form(cls, interests: List[str], other_interest: str = "") -> "InterestSelection":
        tags = [tag for tag in interests if tag != OTHER_INTEREST]
        if OTHER_INTEREST in interests:
            return cls(tags=tags, other=other_interest or "")
        return cls(tags=tags)

    @property
    def has_other(self) -> bool:
        return self.other is not None

    def is_empty(self) -> bool:
        return not self.tags and not self.has_other
