"""Sign-in page, the only page reachable without a session."""

import streamlit as st

from truinsights.ui.api_client import APIError, get_api_client

st.header("Sign in")
st.caption("New here? Signing in with a new email creates your account.")

with st.form("sign_in"):
    email = st.text_input("Email")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Sign in", type="primary")

if submitted:
    if not email or not password:
        st.error("Email and password are required.")
    else:
        try:
            session = get_api_client(st.session_state.api_base_url).sign_in(email, password)
        except APIError as exc:
            st.error(exc.message)
        else:
            st.session_state.access_token = session["access_token"]
            st.session_state.user_email = session.get("email", email)
            st.rerun()
