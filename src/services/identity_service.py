"""Identity provider: accounts, sign-in state and password hashing."""
import logging
import uuid
from typing import Optional, Tuple

import bcrypt
import streamlit as st

from src.models.account import Account, Identity, SessionContext
from src.services.document_store import ACCOUNTS, JsonDocumentStore, get_document_store
from src.utils.config import get_bcrypt_rounds
from src.utils.date_utils import now_iso
from src.utils.exceptions import EmailInUseError, InvalidCredentialsError, TransientIOError
from src.utils.validation import normalize_email

logger = logging.getLogger(__name__)

SESSION_CONTEXT_KEY = "session_context"


def get_session_context() -> SessionContext:
    """
    Identity state of the current Streamlit session.

    Created on first access and kept in st.session_state for the lifetime
    of the browser session.
    """
    context = st.session_state.get(SESSION_CONTEXT_KEY)
    if not isinstance(context, SessionContext):
        context = SessionContext()
        st.session_state[SESSION_CONTEXT_KEY] = context
    return context


def hash_password(password: str) -> str:
    """Hash password with bcrypt (BCRYPT_ROUNDS setting)."""
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=get_bcrypt_rounds()))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is malformed")
        return False


def _load_account(email: str, store: JsonDocumentStore) -> Optional[Account]:
    document = store.get_by_id(ACCOUNTS, email)
    if document is None:
        return None
    return Account(
        uid=document["uid"],
        email=email,
        password_hash=document["passwordHash"],
        created_at=document.get("createdAt", ""),
        display_name=document.get("displayName"),
    )


def register(
    email: str,
    password: str,
    display_name: Optional[str] = None,
    store: Optional[JsonDocumentStore] = None
) -> Identity:
    """
    Create an account.

    Args:
        email: Account email (stored lower-cased)
        password: Plain password, hashed before storage
        display_name: Optional profile name

    Returns:
        Identity of the new account

    Raises:
        EmailInUseError: If an account already uses the email
        TransientIOError: If the store is unavailable
    """
    store = store or get_document_store()
    key = normalize_email(email)

    if store.get_by_id(ACCOUNTS, key) is not None:
        raise EmailInUseError(f"Account already exists for {key}")

    account = Account(
        uid=uuid.uuid4().hex,
        email=key,
        password_hash=hash_password(password),
        created_at=now_iso(),
        display_name=display_name.strip() if display_name else None,
    )
    store.set(ACCOUNTS, key, {
        "uid": account.uid,
        "passwordHash": account.password_hash,
        "createdAt": account.created_at,
        "displayName": account.display_name,
    })

    logger.info(f"Created account {account.uid}")
    return account.to_identity()


def login(email: str, password: str, store: Optional[JsonDocumentStore] = None) -> Identity:
    """
    Check credentials.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        TransientIOError: If the store is unavailable
    """
    store = store or get_document_store()
    account = _load_account(normalize_email(email), store)

    if account is None or not verify_password(password, account.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    return account.to_identity()


def logout() -> None:
    get_session_context().clear()


def current_user() -> Optional[Identity]:
    return get_session_context().identity


def sign_in(email: str, password: str, store: Optional[JsonDocumentStore] = None) -> Tuple[bool, str]:
    """
    Log in and remember the identity for this session.

    Returns:
        Tuple of (success: bool, message: str)
    """
    try:
        identity = login(email, password, store)
    except InvalidCredentialsError:
        return False, "Email ou mot de passe incorrect / Invalid email or password"
    except TransientIOError as e:
        logger.error(f"Sign-in failed: {e}")
        return False, "Service indisponible, réessayez plus tard / Service unavailable, please try again"

    get_session_context().sign_in(identity)
    return True, "Connexion réussie! / Signed in successfully!"


def sign_out() -> Tuple[bool, str]:
    logout()
    return True, "Déconnexion réussie! / Signed out successfully!"
