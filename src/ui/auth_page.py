"""Sign-in and account creation page."""
import logging

import streamlit as st

from src.services.admin_service import get_display_name
from src.services.identity_service import get_session_context, sign_in
from src.services.registration_service import sign_up
from src.ui.html_utils import html_block
from src.ui.registration_form import FEEDBACK_KEY

logger = logging.getLogger(__name__)

SHOW_REGISTER_KEY = "auth_show_register"


def _inject_auth_styles():
    """Inject sign-in card styles."""
    st.markdown(
        html_block(
            """
            <style>
            form[data-testid="stForm"] {
                max-width: 440px;
                margin: 40px auto;
                border-radius: 20px;
                padding: 32px 36px;
                border: 1px solid rgba(77, 77, 77, 0.18);
            }
            .auth-title {
                color: #4d4d4d;
                font-size: 28px;
                font-weight: 700;
                text-align: center;
                margin-bottom: 8px;
            }
            </style>
            """
        ),
        unsafe_allow_html=True,
    )


def _after_sign_in() -> None:
    context = get_session_context()
    if context.identity is not None and not context.display_name:
        context.display_name = get_display_name(context.identity.email)
    st.session_state.current_page = "register"


def render_login_form():
    """Render the sign-in form."""
    with st.form("login_form", clear_on_submit=False):
        st.markdown("<div class='auth-title'>🔐 Connexion / Sign in</div>", unsafe_allow_html=True)

        email = st.text_input("Email", placeholder="Entrez votre email", key="login_email")
        password = st.text_input("Mot de passe / Password", type="password",
                                 placeholder="Entrez votre mot de passe", key="login_password")

        submit = st.form_submit_button("Se connecter / Sign in", width="stretch", type="primary")

        if submit:
            if not email or not password:
                st.error("❌ Email et mot de passe requis / Email and password are required")
            else:
                success, message = sign_in(email, password)
                if success:
                    _after_sign_in()
                    st.session_state[FEEDBACK_KEY] = ("success", message)
                    st.rerun()
                else:
                    st.error(f"❌ {message}")

    if st.button("Créer un compte / Create an account", key="auth_to_register"):
        st.session_state[SHOW_REGISTER_KEY] = True
        st.rerun()


def render_register_form():
    """Render the account creation form."""
    with st.form("register_form", clear_on_submit=False):
        st.markdown("<div class='auth-title'>📝 Créer un compte / Create an account</div>", unsafe_allow_html=True)

        full_name = st.text_input("Nom complet / Full name", key="signup_full_name")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Mot de passe / Password", type="password", key="signup_password")
        confirm = st.text_input("Confirmer le mot de passe / Confirm password", type="password",
                                key="signup_confirm")

        submit = st.form_submit_button("S'inscrire / Sign up", width="stretch", type="primary")

        if submit:
            success, message = sign_up(full_name, email, password, confirm)
            if success:
                st.session_state[SHOW_REGISTER_KEY] = False
                _after_sign_in()
                st.session_state[FEEDBACK_KEY] = ("success", message)
                st.rerun()
            else:
                st.error(f"❌ {message}")

    if st.button("J'ai déjà un compte / I already have an account", key="auth_to_login"):
        st.session_state[SHOW_REGISTER_KEY] = False
        st.rerun()


def render_auth_page():
    """Render sign-in or sign-up depending on the toggle."""
    _inject_auth_styles()

    if get_session_context().is_authenticated:
        st.session_state.current_page = "register"
        st.rerun()

    if st.session_state.get(SHOW_REGISTER_KEY, False):
        render_register_form()
    else:
        render_login_form()
