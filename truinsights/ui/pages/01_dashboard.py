"""
Dashboard page - stats and recent journals.
"""

import streamlit as st

from truinsights.ui.api_client import APIError, get_api_client
from truinsights.ui.components.journal_card import render_journal_card

token = st.session_state.access_token
client = get_api_client(st.session_state.api_base_url)

name = st.session_state.user_email.split("@")[0]
st.header(f"Welcome back, {name}" if name else "Dashboard")

if st.button("Start Recording", type="primary"):
    st.switch_page("pages/02_new_journal.py")

try:
    stats = client.get_stats(token)
    journals = client.list_journals(token, limit=5)
except APIError as exc:
    st.error(exc.message)
    st.stop()

col1, col2, col3 = st.columns(3)
col1.metric("Total Journals", stats["total_journals"])
col2.metric("This Week", stats["this_week"])
average = stats.get("average_energy")
col3.metric("Avg Energy", f"{average:.1f}" if average is not None else "-")

st.subheader("Recent Journals")
if not journals:
    st.info("No journals yet. Start by recording your first post-class journal!")
for journal in journals:
    render_journal_card(journal, token)
