"""
TruInsights Streamlit UI - main entry point.

Run with: ``streamlit run truinsights/ui/app.py``

Without a valid session the navigation only offers the sign-in page; the
dashboard and recorder become reachable after signing in.
"""

import streamlit as st

from truinsights.ui.api_client import APIError, get_api_client

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="TruInsights",
    page_icon="\U0001f3cb\ufe0f",
    layout="centered",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": "http://localhost:8000",
    "access_token": None,
    "user_email": "",
    "submitting": False,
    "last_submission": None,
    "last_submitted_digest": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

client = get_api_client(st.session_state.api_base_url)

# ---------------------------------------------------------------------------
# Session gate
# ---------------------------------------------------------------------------
if st.session_state.access_token:
    try:
        _session = client.get_session(st.session_state.access_token)
    except APIError as exc:
        st.error(exc.message)
        st.stop()
    if _session is None:
        st.session_state.access_token = None
        st.session_state.user_email = ""
    else:
        st.session_state.user_email = _session.get("email", "")

signed_in = bool(st.session_state.access_token)

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f3cb\ufe0f TruInsights")
    st.caption("Post-class voice journal")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
    )
    _conn_ok, _conn_msg = client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    if signed_in:
        st.divider()
        st.markdown(f"Signed in as **{st.session_state.user_email}**")
        if st.button("Sign out", use_container_width=True):
            try:
                client.sign_out(st.session_state.access_token)
            except APIError as exc:
                st.warning(f"Sign-out failed on the server: {exc.message}")
            st.session_state.access_token = None
            st.session_state.user_email = ""
            st.rerun()

# ---------------------------------------------------------------------------
# Navigation (multipage)
# ---------------------------------------------------------------------------
login_page = st.Page("pages/login.py", title="Sign in", icon="\U0001f511")
dashboard_page = st.Page(
    "pages/01_dashboard.py",
    title="Dashboard",
    icon="\U0001f4ca",
    default=True,
)
new_journal_page = st.Page(
    "pages/02_new_journal.py",
    title="New Journal",
    icon="\U0001f3a4",
)

if signed_in:
    nav = st.navigation([dashboard_page, new_journal_page])
else:
    nav = st.navigation([login_page])
nav.run()
