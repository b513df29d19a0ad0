"""
Journal card display components.
"""

from datetime import datetime

import streamlit as st

from truinsights.core.utils import format_duration, mood_label
from truinsights.ui.api_client import APIError, get_api_client


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%a, %b %d %Y %H:%M")
    except (TypeError, ValueError):
        return str(value)


def render_insights(insights: dict) -> None:
    """Render extracted insights: ratings, mood and the four lists."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Energy", f"{insights.get('energy_level', '-')}/10")
    col2.metric("Difficulty", f"{insights.get('difficulty_rating', '-')}/10")
    col3.metric("Mood", mood_label(str(insights.get("mood") or "")))

    for label, key in (
        ("Highlights", "highlights"),
        ("Challenges", "challenges"),
        ("Body feelings", "body_feelings"),
    ):
        items = insights.get(key) or []
        if items:
            st.markdown(f"**{label}**")
            st.markdown("\n".join(f"- {item}" for item in items))

    if insights.get("instructor_feedback"):
        st.markdown(f"**Instructor**: {insights['instructor_feedback']}")

    tags = insights.get("tags") or []
    if tags:
        st.markdown(" ".join(f"`{tag}`" for tag in tags))


def render_journal_card(journal: dict, token: str) -> None:
    """Render one journal with playback and a retry action when unprocessed.

    Args:
        journal: Journal dict from the API.
        token: Caller's access token for the audio and retry requests.
    """
    insights = journal.get("insights")
    journal_id = journal["id"]

    with st.container(border=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"**{_format_date(journal['created_at'])}**")
            st.caption(format_duration(journal.get("audio_duration_seconds", 0)))
        with col2:
            if insights:
                st.markdown(f"Energy: **{insights['energy_level']}/10**")

        if journal.get("transcript"):
            st.write(journal["transcript"])
        else:
            st.caption("No transcript yet.")

        if insights:
            with st.expander("Insights"):
                render_insights(insights)
        elif st.button("Retry insights", key=f"retry_{journal_id}"):
            client = get_api_client(st.session_state.api_base_url)
            try:
                with st.spinner("Processing..."):
                    result = client.process_journal(token, journal_id)
            except APIError as exc:
                st.error(exc.message)
            else:
                error = result.get("transcription_error") or result.get("extraction_error")
                if error:
                    st.warning(error)
                else:
                    st.rerun()

        if st.toggle("Play audio", key=f"play_{journal_id}"):
            audio = get_api_client(st.session_state.api_base_url).download_audio(token, journal_id)
            if audio:
                st.audio(audio)
            else:
                st.caption("Audio unavailable.")
