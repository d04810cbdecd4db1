"""Custom exception classes."""
from typing import Dict, Optional


class ValidationError(Exception):
    """Raised when a registration fails field validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class DuplicateEmailError(Exception):
    """Raised when a registration already exists for the email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Registration already exists for {email}")


class AuthError(Exception):
    """Raised when an identity operation is refused."""
    pass


class InvalidCredentialsError(AuthError):
    """Raised when login credentials invalid."""
    pass


class EmailInUseError(AuthError):
    """Raised when an account already exists for the email."""
    pass


class TransientIOError(Exception):
    """Raised when the document store or identity backend is unavailable."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class LoadError(Exception):
    """Raised when the registration listing cannot be fetched."""
    pass
