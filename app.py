"""
Application d'inscription à l'événement
Event Registration Application
"""
import logging
import streamlit as st

from src.services.admin_service import can_access_dashboard
from src.services.identity_service import get_session_context, sign_out
from src.ui.admin_dashboard import LISTING_KEY, render_admin_dashboard
from src.ui.auth_page import render_auth_page
from src.ui.registration_form import FEEDBACK_KEY, render_registration_form
from src.utils.config import get_event_name, load_env

logger = logging.getLogger(__name__)

load_env()

st.set_page_config(
    page_title=f"{get_event_name()} · Inscription",
    page_icon="🌱",
    layout="wide",
    initial_sidebar_state="collapsed"
)

PAGES = {
    "register": render_registration_form,
    "auth": render_auth_page,
    "admin": render_admin_dashboard,
}


def initialize_session_state():
    """Initialize session state defaults."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "register"

    # Identity context lives in one container per browser session
    get_session_context()

    # Handle ?page=admin style links
    if "url_params_processed" not in st.session_state:
        page = st.query_params.get("page")
        if page in PAGES:
            st.session_state.current_page = page
        st.session_state.url_params_processed = True


def apply_custom_css():
    """Apply brand styles."""
    st.markdown("""
        <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button {
            border-radius: 10px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"] {
            background: #bcd630;
            border: none;
            color: #1f2937;
        }

        .event-subtitle {
            color: #4d4d4d;
            font-size: 15px;
            margin-bottom: 16px;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """Render the navigation bar."""
    context = get_session_context()
    nav_col1, nav_col2, nav_col3, _ = st.columns([1, 1, 1, 2], gap="small")

    with nav_col1:
        if st.button("📝 Inscription", width="stretch", key="nav_register"):
            st.session_state.current_page = "register"

    with nav_col2:
        if context.is_authenticated and can_access_dashboard(context.identity):
            if st.button("📊 Tableau de bord", width="stretch", key="nav_admin"):
                st.session_state.current_page = "admin"

    with nav_col3:
        if context.is_authenticated:
            if st.button("🚪 Déconnexion", width="stretch", key="nav_logout"):
                _, message = sign_out()
                st.session_state.pop(LISTING_KEY, None)
                st.session_state[FEEDBACK_KEY] = ("success", message)
                st.session_state.current_page = "register"
                st.rerun()
        else:
            if st.button("🔐 Connexion", width="stretch", key="nav_auth"):
                st.session_state.current_page = "auth"


def render_current_page():
    """Render the page selected in session state."""
    try:
        render_page = PAGES.get(st.session_state.current_page)
        if render_page is None:
            st.error(f"Page inconnue / Unknown page: {st.session_state.current_page}")
            if st.button("Retour / Back"):
                st.session_state.current_page = "register"
                st.rerun()
            return

        render_page()

    except Exception as e:
        logger.exception("Unhandled exception while rendering page")
        st.error("Une erreur est survenue, réessayez plus tard / Something went wrong, please try again")

        with st.expander("🔍 Détails / Details"):
            st.code(str(e))

        if st.button("Retour / Back"):
            st.session_state.current_page = "register"
            st.rerun()


def main():
    """Application entry point."""
    try:
        initialize_session_state()
        apply_custom_css()
        render_navigation()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("L'application a rencontré une erreur, rechargez la page / The application failed, please reload")
        st.code(str(e))

        if st.button("🔄 Recharger / Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
