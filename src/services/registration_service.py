"""Registration intake: validation, duplicate check and persistence."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from src.models.account import Identity
from src.models.form_state import RegistrationForm, empty_draft
from src.models.interest import InterestCatalogue, InterestSelection, OTHER_INTEREST
from src.models.registration import Registration
from src.services.catalogue_service import get_active_catalogue
from src.services.document_store import (
    ACCOUNTS,
    REGISTRATIONS,
    USERS,
    JsonDocumentStore,
    get_document_store,
)
from src.services.identity_service import get_session_context, register
from src.utils.config import requires_account
from src.utils.date_utils import now_iso
from src.utils.exceptions import (
    DuplicateEmailError,
    EmailInUseError,
    TransientIOError,
    ValidationError,
)
from src.utils.validation import (
    normalize_email,
    validate_email,
    validate_full_name,
    validate_password,
    validate_registration,
)

logger = logging.getLogger(__name__)

SUCCESS = "success"
INVALID = "invalid"
DUPLICATE = "duplicate"
UNAUTHENTICATED = "unauthenticated"
FAILED = "failed"

MSG_SUCCESS = "Inscription réussie! / Registration successful!"
MSG_INVALID = "Veuillez corriger les erreurs du formulaire / Please correct the errors in the form"
MSG_DUPLICATE = "Cet email est déjà inscrit à l'événement / This email is already registered for the event"
MSG_UNAUTHENTICATED = "Connectez-vous pour vous inscrire / Please sign in to register"
MSG_FAILED = "Erreur lors de l'inscription, veuillez réessayer / Registration failed, please try again"
MSG_BUSY = "Inscription déjà en cours / Registration already in progress"


@dataclass
class SubmissionOutcome:
    """Result of one submission attempt."""

    kind: str
    message: str
    errors: Dict[str, str] = field(default_factory=dict)
    document_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.kind == SUCCESS


def email_exists(email: str, store: Optional[JsonDocumentStore] = None) -> bool:
    """
    Check whether a registration already uses this email.

    This is a best-effort pre-check: the store has no unique constraint, so
    two concurrent submissions with the same email can both pass it.

    Raises:
        TransientIOError: If the store is unavailable
    """
    store = store or get_document_store()
    return len(store.query_where(REGISTRATIONS, "email", normalize_email(email))) > 0


def _stored_interests(interests: List[str], catalogue: InterestCatalogue) -> List[str]:
    """Map selected tags to catalogue labels, keeping the "other" sentinel."""
    stored = []
    for tag in interests:
        value = OTHER_INTEREST if tag == OTHER_INTEREST else catalogue.label_for(tag)
        if value and value not in stored:
            stored.append(value)
    return stored


def build_registration(
    draft: Dict[str, Any],
    catalogue: InterestCatalogue,
    identity: Optional[Identity] = None,
    team_member: Optional[str] = None
) -> Registration:
    """
    Normalize a validated draft into a new Registration.

    Text fields are trimmed, the email lower-cased and the creation
    timestamp set. otherInterest is only kept when "other" was selected.
    """
    selection = InterestSelection.from_form(draft.get("interests", []), draft.get("otherInterest", ""))

    return Registration(
        full_name=draft["fullName"].strip(),
        email=normalize_email(draft["email"]),
        company=draft["company"].strip(),
        position=(draft.get("position") or "").strip(),
        phone=draft["phone"].strip(),
        country=draft["country"].strip(),
        interests=_stored_interests(draft["interests"], catalogue),
        other_interest=selection.other.strip() if selection.has_other else None,
        timestamp=now_iso(),
        creator_email=identity.email if identity else None,
        user_id=identity.uid if identity else None,
        team_member=team_member.strip() if team_member and team_member.strip() else None,
    )


def create_registration(
    draft: Dict[str, Any],
    catalogue: InterestCatalogue,
    store: JsonDocumentStore,
    identity: Optional[Identity] = None,
    team_member: Optional[str] = None
) -> str:
    """
    Validate, duplicate-check and persist one draft.

    Returns:
        The new document id

    Raises:
        ValidationError: If any field fails its rule; nothing is written
        DuplicateEmailError: If a registration already uses the email
        TransientIOError: If the store is unavailable
    """
    errors = validate_registration(draft, catalogue)
    if errors:
        raise ValidationError(errors)

    email = normalize_email(draft["email"])
    if email_exists(email, store):
        raise DuplicateEmailError(email)

    registration = build_registration(draft, catalogue, identity, team_member)
    return store.insert(REGISTRATIONS, registration.to_document())


def submit_registration(
    form: RegistrationForm,
    identity: Optional[Identity] = None,
    store: Optional[JsonDocumentStore] = None,
    catalogue: Optional[InterestCatalogue] = None,
    team_member: Optional[str] = None,
    account_required: Optional[bool] = None
) -> SubmissionOutcome:
    """
    Submit the form's draft and record the result on the form.

    Args:
        form: Form state; its draft is submitted and it is reset on success
        identity: Signed-in submitter, if any
        store: Document store (default: configured store)
        catalogue: Interest catalogue (default: active catalogue)
        team_member: Staff member entering the registration on someone's behalf
        account_required: Override of the REGISTRATION_REQUIRE_ACCOUNT setting

    Returns:
        SubmissionOutcome; failures never raise

    Behavior:
        - Every failing field is reported at once and nothing is written
        - The duplicate check completes before the write is issued
        - Store failures produce a generic failure; there is no retry
    """
    if form.submitting:
        return SubmissionOutcome(FAILED, MSG_BUSY)

    if account_required is None:
        account_required = requires_account()
    if account_required and identity is None:
        return SubmissionOutcome(UNAUTHENTICATED, MSG_UNAUTHENTICATED)

    form.submitting = True
    try:
        document_id = create_registration(
            form.draft,
            catalogue or get_active_catalogue(),
            store or get_document_store(),
            identity,
            team_member,
        )
    except ValidationError as e:
        form.show_errors(e.errors)
        return SubmissionOutcome(INVALID, MSG_INVALID, errors=e.errors)
    except DuplicateEmailError:
        form.errors["email"] = MSG_DUPLICATE
        return SubmissionOutcome(DUPLICATE, MSG_DUPLICATE, errors={"email": MSG_DUPLICATE})
    except TransientIOError as e:
        logger.error(f"Store unavailable during registration: {e}")
        return SubmissionOutcome(FAILED, MSG_FAILED)
    except Exception as e:
        logger.exception(f"Unexpected error during registration: {e}")
        return SubmissionOutcome(FAILED, MSG_FAILED)
    finally:
        form.submitting = False

    logger.info(f"Stored registration {document_id}")
    form.reset()
    return SubmissionOutcome(SUCCESS, MSG_SUCCESS, document_id=document_id)


def submit_draft(draft: Dict[str, Any], **kwargs: Any) -> SubmissionOutcome:
    """Submit a plain draft dict without keeping form state."""
    form = RegistrationForm(draft={**empty_draft(), **draft})
    return submit_registration(form, **kwargs)


def _rollback_sign_up(store: JsonDocumentStore, email: str, identity: Optional[Identity]) -> None:
    """Remove the account and profile of a sign-up that failed part way."""
    if identity is None:
        return
    try:
        store.delete(USERS, identity.uid)
        store.delete(ACCOUNTS, email)
    except TransientIOError as e:
        logger.error(f"Could not roll back account {identity.uid}: {e}")
        return
    logger.info(f"Rolled back account {identity.uid} after failed sign-up")


def sign_up(
    full_name: str,
    email: str,
    password: str,
    confirm_password: str,
    store: Optional[JsonDocumentStore] = None
) -> Tuple[bool, str]:
    """
    Create an account and its pending event registration.

    Returns:
        Tuple of (success: bool, message: str)

    Behavior:
        - Rejects emails that already have a registration
        - Creates the account, a users profile and a "pending" registration
        - Signs the new identity in for this session
        - A failure after the account was created removes it again, so the
          sign-up can be retried
    """
    for is_valid, message in (
        validate_full_name(full_name),
        validate_email(email),
        validate_password(password, confirm_password),
    ):
        if not is_valid:
            return False, message

    store = store or get_document_store()
    normalized = normalize_email(email)
    identity = None

    try:
        if email_exists(normalized, store):
            return False, MSG_DUPLICATE

        identity = register(normalized, password, full_name, store)
        now = now_iso()
        store.set(USERS, identity.uid, {
            "fullName": full_name.strip(),
            "email": normalized,
            "createdAt": now,
            "updatedAt": now,
        })

        pending = Registration(
            full_name=full_name.strip(),
            email=normalized,
            timestamp=now,
            creator_email=normalized,
            user_id=identity.uid,
            status="pending",
        )
        store.insert(REGISTRATIONS, pending.to_document())

    except EmailInUseError:
        return False, "Cet email est déjà utilisé pour un compte / This email is already used by an account"
    except TransientIOError as e:
        logger.error(f"Store unavailable during sign-up: {e}")
        _rollback_sign_up(store, normalized, identity)
        return False, MSG_FAILED
    except Exception as e:
        logger.exception(f"Unexpected error during sign-up: {e}")
        _rollback_sign_up(store, normalized, identity)
        return False, MSG_FAILED

    get_session_context().sign_in(identity)
    logger.info(f"Account {identity.uid} signed up with a pending registration")
    return True, MSG_SUCCESS
