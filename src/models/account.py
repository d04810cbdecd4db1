"""Account, identity and per-session context models."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Authenticated user as seen by the rest of the application."""

    uid: str
    email: str
    display_name: Optional[str] = None


@dataclass
class Account:
    """Stored credentials of one identity."""

    uid: str
    email: str
    password_hash: str
    created_at: str
    display_name: Optional[str] = None

    def __post_init__(self):
        """Validate account data after initialization."""
        if not self.email or "@" not in self.email:
            raise ValueError("Account email must be a valid address")

        if not self.password_hash:
            raise ValueError("Password hash cannot be empty")

    def to_identity(self) -> Identity:
        return Identity(uid=self.uid, email=self.email, display_name=self.display_name)


@dataclass
class SessionContext:
    """
    Identity state of one browser session.

    is_admin caches the authorization lookup for the signed-in identity and
    is cleared whenever the identity changes.
    """

    identity: Optional[Identity] = None
    is_admin: Optional[bool] = None
    display_name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def sign_in(self, identity: Identity) -> None:
        self.identity = identity
        self.is_admin = None
        self.display_name = identity.display_name

    def clear(self) -> None:
        self.identity = None
        self.is_admin = None
        self.display_name = None
