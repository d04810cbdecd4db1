"""Public registration form."""
import logging
from typing import List

import streamlit as st

from src.models.form_state import RegistrationForm
from src.models.interest import InterestCatalogue, OTHER_INTEREST
from src.services.admin_service import can_access_dashboard
from src.services.catalogue_service import get_active_catalogue
from src.services.identity_service import current_user, get_session_context
from src.services.registration_service import UNAUTHENTICATED, submit_registration
from src.ui.html_utils import BRAND_GREEN, html_block
from src.utils.config import get_event_name, requires_account
from src.utils.phone_utils import country_from_phone

logger = logging.getLogger(__name__)

FORM_STATE_KEY = "registration_form"
FEEDBACK_KEY = "registration_feedback"
TEAM_MEMBER_KEY = "reg_team_member"

TEXT_FIELDS = [
    ("fullName", "Nom complet / Full name *", "Entrez votre nom complet"),
    ("email", "Email *", "Entrez votre email"),
    ("company", "Entreprise / Company *", "Entrez le nom de votre entreprise"),
    ("position", "Poste / Position", "Entrez votre poste"),
    ("phone", "Téléphone / Phone *", "+212 6 12 34 56 78"),
    ("country", "Pays / Country *", "Entrez votre pays"),
]


def _widget_key(name: str) -> str:
    return f"reg_{name}"


def _interest_key(value: str) -> str:
    return f"reg_interest_{value}"


def _get_form() -> RegistrationForm:
    form = st.session_state.get(FORM_STATE_KEY)
    if not isinstance(form, RegistrationForm):
        form = RegistrationForm()
        st.session_state[FORM_STATE_KEY] = form
    return form


def _clear_widgets(catalogue: InterestCatalogue) -> None:
    """Drop widget values so the next run renders the empty form."""
    for name, _, _ in TEXT_FIELDS:
        st.session_state.pop(_widget_key(name), None)
    for option in catalogue.options:
        st.session_state.pop(_interest_key(option.value), None)
    st.session_state.pop(_interest_key(OTHER_INTEREST), None)
    st.session_state.pop(_widget_key("otherInterest"), None)


def _on_text_change(name: str) -> None:
    catalogue = get_active_catalogue()
    form = _get_form()
    value = st.session_state.get(_widget_key(name), "")
    form.set_field(name, value, catalogue)
    form.touch(name, catalogue)

    if name == "phone" and not form.draft.get("country", "").strip():
        derived = country_from_phone(value)
        if derived:
            form.set_field("country", derived, catalogue)
            st.session_state[_widget_key("country")] = derived


def _selected_interests(catalogue: InterestCatalogue) -> List[str]:
    selected = [
        option.value
        for option in catalogue.options
        if st.session_state.get(_interest_key(option.value))
    ]
    if st.session_state.get(_interest_key(OTHER_INTEREST)):
        selected.append(OTHER_INTEREST)
    return selected


def _on_interest_change() -> None:
    catalogue = get_active_catalogue()
    form = _get_form()
    form.set_field("interests", _selected_interests(catalogue), catalogue)
    form.touch("interests", catalogue)
    if OTHER_INTEREST not in form.draft["interests"]:
        st.session_state.pop(_widget_key("otherInterest"), None)


def _on_submit() -> None:
    catalogue = get_active_catalogue()
    form = _get_form()
    identity = current_user()
    team_member = st.session_state.get(TEAM_MEMBER_KEY)

    outcome = submit_registration(form, identity=identity, catalogue=catalogue, team_member=team_member)

    if outcome.success:
        _clear_widgets(catalogue)
        st.session_state[FEEDBACK_KEY] = ("success", outcome.message)
    elif outcome.kind == UNAUTHENTICATED:
        st.session_state[FEEDBACK_KEY] = ("warning", outcome.message)
    else:
        st.session_state[FEEDBACK_KEY] = ("error", outcome.message)


def _render_feedback() -> None:
    feedback = st.session_state.pop(FEEDBACK_KEY, None)
    if not feedback:
        return
    level, message = feedback
    if level == "success":
        st.success(f"✅ {message}")
    elif level == "warning":
        st.warning(message)
    else:
        st.error(f"❌ {message}")


def _field_error(form: RegistrationForm, name: str) -> None:
    message = form.errors.get(name)
    if message:
        st.caption(f":red[{message}]")


def _render_event_header() -> None:
    st.markdown(
        html_block(
            f"""
            <div class="event-header">
                <h1 style="color: {BRAND_GREEN}; margin-bottom: 4px;">{get_event_name()}</h1>
                <div class="event-subtitle">Formulaire d'inscription · Registration form</div>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )


def render_registration_form() -> None:
    """Render the public registration page."""
    _render_event_header()
    _render_feedback()

    if requires_account() and current_user() is None:
        st.info("Connectez-vous pour vous inscrire / Please sign in to register")
        if st.button("🔐 Connexion / Sign in", key="reg_goto_auth"):
            st.session_state.current_page = "auth"
            st.rerun()
        return

    catalogue = get_active_catalogue()
    form = _get_form()

    left, right = st.columns(2, gap="medium")
    for index, (name, label, placeholder) in enumerate(TEXT_FIELDS):
        with left if index % 2 == 0 else right:
            st.text_input(
                label,
                key=_widget_key(name),
                placeholder=placeholder,
                on_change=_on_text_change,
                args=(name,),
            )
            _field_error(form, name)

    st.markdown("**Solutions d'intérêt / Solutions of interest** \\*")
    option_cols = st.columns(2, gap="small")
    for index, option in enumerate(catalogue.options):
        with option_cols[index % 2]:
            st.checkbox(
                option.label,
                key=_interest_key(option.value),
                on_change=_on_interest_change,
            )
    st.checkbox(
        "Autre / Other",
        key=_interest_key(OTHER_INTEREST),
        on_change=_on_interest_change,
    )
    _field_error(form, "interests")

    if OTHER_INTEREST in form.draft["interests"]:
        st.text_input(
            "Précisez / Please specify *",
            key=_widget_key("otherInterest"),
            on_change=_on_text_change,
            args=("otherInterest",),
        )
        _field_error(form, "otherInterest")

    identity = get_session_context().identity
    if identity is not None and can_access_dashboard(identity):
        st.text_input(
            "Inscrit par (membre de l'équipe) / Registered by (team member)",
            key=TEAM_MEMBER_KEY,
            value=get_session_context().display_name or identity.email,
        )

    st.button(
        "Valider l'inscription / Complete registration",
        type="primary",
        width="stretch",
        disabled=form.submitting,
        on_click=_on_submit,
        key="reg_submit",
    )
