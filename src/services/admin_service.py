"""Authorization lookups for the admin dashboard."""
import logging
from typing import Optional

from src.models.account import Identity
from src.services.document_store import ADMINS, USERS, JsonDocumentStore, get_document_store
from src.services.identity_service import get_session_context
from src.utils.date_utils import now_iso
from src.utils.exceptions import TransientIOError
from src.utils.validation import normalize_email

logger = logging.getLogger(__name__)


def is_admin(email: str, store: Optional[JsonDocumentStore] = None) -> bool:
    """
    Check admin privilege.

    Args:
        email: Identity email

    Returns:
        True if a document exists at key=email in the admins collection.
        Store failures are logged and count as "not admin".
    """
    if not email:
        return False

    store = store or get_document_store()
    try:
        return store.get_by_id(ADMINS, normalize_email(email)) is not None
    except TransientIOError as e:
        logger.error(f"Error checking admin status: {e}")
        return False


def get_display_name(email: str, store: Optional[JsonDocumentStore] = None) -> str:
    """Full name from the user profile, falling back to the email."""
    store = store or get_document_store()
    try:
        profiles = store.query_where(USERS, "email", normalize_email(email))
    except TransientIOError as e:
        logger.error(f"Error fetching user name: {e}")
        return email

    for profile in profiles:
        if profile.get("fullName"):
            return profile["fullName"]
    return email


def can_access_dashboard(identity: Optional[Identity], store: Optional[JsonDocumentStore] = None) -> bool:
    """
    Route guard for the dashboard.

    The lookup result is cached in the session context until the identity
    changes.
    """
    if identity is None:
        return False

    context = get_session_context()
    if context.identity == identity and context.is_admin is not None:
        return context.is_admin

    allowed = is_admin(identity.email, store)
    if context.identity == identity:
        context.is_admin = allowed
    return allowed


def grant_admin(email: str, store: Optional[JsonDocumentStore] = None) -> None:
    """Give an email access to the dashboard."""
    store = store or get_document_store()
    key = normalize_email(email)
    store.set(ADMINS, key, {"email": key, "grantedAt": now_iso()})
    logger.info(f"Granted admin access to {key}")


def revoke_admin(email: str, store: Optional[JsonDocumentStore] = None) -> bool:
    """Remove dashboard access; returns False if the email wasn't an admin."""
    store = store or get_document_store()
    removed = store.delete(ADMINS, normalize_email(email))
    if removed:
        logger.info(f"Revoked admin access from {normalize_email(email)}")
    return removed
