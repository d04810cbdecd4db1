"""Admin dashboard: registration list with search, sort, pagination and export."""
import logging
import traceback
from html import escape
from typing import Optional

import streamlit as st

from src.models.registration import Registration
from src.services.admin_service import can_access_dashboard, get_display_name
from src.services.export_service import CSV_FILENAME, PDF_FILENAME, render_csv, render_pdf
from src.services.identity_service import get_session_context, sign_out
from src.services.listing_service import ASCENDING, RegistrationListing
from src.ui.html_utils import badge_list, html_block
from src.ui.registration_form import FEEDBACK_KEY
from src.utils.date_utils import format_display_time

logger = logging.getLogger(__name__)

LISTING_KEY = "admin_listing"
PAGE_KEY = "admin_page"
SEARCH_KEY = "admin_search"
ADMIN_FEEDBACK_KEY = "admin_feedback"
EXPORTS_KEY = "admin_exports"

COLUMNS = [
    ("full_name", "Nom Complet"),
    ("email", "Email"),
    ("company", "Entreprise"),
    ("country", "Pays"),
    (None, "Solutions d'intérêt"),
    ("timestamp", "Date d'inscription"),
    (None, "Inscrit par"),
]
COLUMN_WIDTHS = [1.4, 1.8, 1.2, 1, 1.8, 1.3, 1.2]


def _show_dashboard_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Admin dashboard error during %s", context)

    st.error(f"❌ {context} : échec / failed")
    with st.expander("🔍 Détails / Details"):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def _sort_indicator(listing: RegistrationListing, key: Optional[str]) -> str:
    """Arrow shown next to the active sort column."""
    if key is None or listing.sort_key != key:
        return ""
    return " ↑" if listing.sort_direction == ASCENDING else " ↓"


def _render_interest_badges(registration: Registration) -> str:
    html = badge_list(registration.interests)
    if registration.other_interest:
        html += badge_list([registration.other_interest], muted=True)
    return html


def _get_listing(refresh: bool = False) -> RegistrationListing:
    listing = st.session_state.get(LISTING_KEY)
    if refresh or not isinstance(listing, RegistrationListing):
        listing = RegistrationListing.fetch()
        st.session_state[LISTING_KEY] = listing
        st.session_state[PAGE_KEY] = 1
        st.session_state.pop(EXPORTS_KEY, None)
        if listing.load_failed:
            st.session_state[ADMIN_FEEDBACK_KEY] = (
                "error", "Erreur lors de la récupération des enregistrements / Could not load registrations"
            )
    return listing


def _on_search_change() -> None:
    st.session_state[PAGE_KEY] = 1


def _on_sort(key: str) -> None:
    listing = _get_listing()
    listing.toggle_sort(key)


def _set_page(page: int) -> None:
    st.session_state[PAGE_KEY] = page


def _inject_dashboard_styles():
    st.markdown(
        html_block(
            """
            <style>
            .admin-header {
                background: linear-gradient(135deg, #bcd630 0%, #4d4d4d 100%);
                padding: 20px 28px;
                border-radius: 16px;
                margin-bottom: 20px;
            }
            .admin-title {
                color: #ffffff;
                font-size: 26px;
                font-weight: 700;
                margin: 0;
            }
            .admin-subtitle {
                color: rgba(255, 255, 255, 0.85);
                font-size: 14px;
                margin-top: 4px;
            }
            .interest-badge {
                display: inline-block;
                padding: 2px 8px;
                margin: 2px;
                border-radius: 999px;
                font-size: 12px;
            }
            </style>
            """
        ),
        unsafe_allow_html=True,
    )


def _render_header(display_name: str) -> None:
    st.markdown(
        html_block(
            f"""
            <div class="admin-header">
                <h1 class="admin-title">📊 Liste des inscriptions</h1>
                <div class="admin-subtitle">Bienvenue / Welcome, {escape(display_name)}</div>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )


def _render_feedback() -> None:
    feedback = st.session_state.pop(ADMIN_FEEDBACK_KEY, None)
    if not feedback:
        return
    level, message = feedback
    if level == "success":
        st.success(message)
    elif level == "error":
        st.error(message)
    else:
        st.info(message)


def _render_table(listing: RegistrationListing, page: int, query: str) -> None:
    header_cols = st.columns(COLUMN_WIDTHS, gap="small")
    for col, (key, label) in zip(header_cols, COLUMNS):
        with col:
            if key is None:
                st.markdown(f"**{label}**")
            else:
                st.button(
                    f"{label}{_sort_indicator(listing, key)}",
                    key=f"sort_{key}",
                    on_click=_on_sort,
                    args=(key,),
                )

    rows = listing.paginate(page, query)
    if not rows:
        if listing.load_failed:
            st.error("Impossible de charger les inscriptions / Registrations could not be loaded")
        else:
            st.info("Aucun résultat trouvé / No results found")
        return

    for registration in rows:
        cols = st.columns(COLUMN_WIDTHS, gap="small")
        cols[0].markdown(f"**{registration.full_name}**")
        cols[1].text(registration.email)
        cols[2].text(registration.company)
        cols[3].text(registration.country)
        cols[4].markdown(_render_interest_badges(registration), unsafe_allow_html=True)
        cols[5].text(format_display_time(registration.timestamp))
        cols[6].text(registration.submitter_label)


def _render_pagination(listing: RegistrationListing, page: int, query: str) -> None:
    total_pages = listing.page_count(query)
    if total_pages == 0:
        return

    first, last, total = listing.page_bounds(page, query)
    st.caption(f"Affichage de {first} à {last} sur {total} résultats / Showing {first} to {last} of {total}")

    nav_cols = st.columns([1] + [0.4] * total_pages + [1], gap="small")
    with nav_cols[0]:
        st.button("Précédent", key="page_prev", disabled=page <= 1,
                  on_click=_set_page, args=(page - 1,))
    for number in range(1, total_pages + 1):
        with nav_cols[number]:
            st.button(
                str(number),
                key=f"page_{number}",
                type="primary" if number == page else "secondary",
                on_click=_set_page,
                args=(number,),
            )
    with nav_cols[-1]:
        st.button("Suivant", key="page_next", disabled=page >= total_pages,
                  on_click=_set_page, args=(page + 1,))


_EXPORT_RENDERERS = {
    "pdf": render_pdf,
    "csv": render_csv,
}


def _export_data(listing: RegistrationListing, kind: str) -> bytes:
    """Export bytes for the fetched listing, rendered once per fetch."""
    exports = st.session_state.setdefault(EXPORTS_KEY, {})
    if kind not in exports:
        exports[kind] = _EXPORT_RENDERERS[kind](listing.records)
    return exports[kind]


def _render_exports(listing: RegistrationListing) -> None:
    pdf_col, csv_col = st.columns(2, gap="small")
    with pdf_col:
        try:
            st.download_button(
                "📄 PDF",
                data=_export_data(listing, "pdf"),
                file_name=PDF_FILENAME,
                mime="application/pdf",
                width="stretch",
                disabled=not listing.records,
            )
        except Exception as error:
            _show_dashboard_exception(error, "Export PDF")
    with csv_col:
        try:
            st.download_button(
                "📊 CSV",
                data=_export_data(listing, "csv"),
                file_name=CSV_FILENAME,
                mime="text/csv",
                width="stretch",
                disabled=not listing.records,
            )
        except Exception as error:
            _show_dashboard_exception(error, "Export CSV")


def render_admin_dashboard():
    """Render the guarded registration dashboard."""
    context = get_session_context()

    if not can_access_dashboard(context.identity):
        st.warning("Accès réservé aux administrateurs / Administrators only")
        if st.button("🔐 Connexion / Sign in", key="admin_goto_auth"):
            st.session_state.current_page = "auth"
            st.rerun()
        return

    _inject_dashboard_styles()

    if not context.display_name:
        context.display_name = get_display_name(context.identity.email)
    _render_header(context.display_name)

    action_col1, action_col2, action_col3 = st.columns([3, 1, 1], gap="small")
    with action_col2:
        refresh = st.button("🔄 Actualiser", width="stretch")
    with action_col3:
        if st.button("🚪 Se déconnecter", width="stretch"):
            _, message = sign_out()
            st.session_state.pop(LISTING_KEY, None)
            st.session_state.current_page = "register"
            st.session_state[FEEDBACK_KEY] = ("success", message)
            st.rerun()

    listing = _get_listing(refresh=refresh)
    _render_feedback()

    with action_col1:
        _render_exports(listing)

    query = st.text_input(
        "Rechercher",
        key=SEARCH_KEY,
        placeholder="Rechercher par nom, email, entreprise ou pays...",
        on_change=_on_search_change,
        label_visibility="collapsed",
    )

    page = listing.clamp_page(st.session_state.get(PAGE_KEY, 1), query)
    st.session_state[PAGE_KEY] = page

    _render_table(listing, page, query)
    _render_pagination(listing, page, query)
