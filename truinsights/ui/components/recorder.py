"""
Recorder component - capture, review and submit a journal.

States: idle -> captured -> submitting -> submitted
"""

import hashlib
import io
import logging

import soundfile as sf
import streamlit as st

from truinsights.core.utils import format_duration
from truinsights.ui.api_client import APIError, get_api_client
from truinsights.ui.components.journal_card import render_insights

logger = logging.getLogger(__name__)


def audio_duration_seconds(audio_bytes: bytes) -> int:
    """Whole seconds of audio in a WAV payload (0 if unreadable)."""
    try:
        info = sf.info(io.BytesIO(audio_bytes))
    except RuntimeError as exc:
        logger.warning("Could not read recording duration: %s", exc)
        return 0
    return int(info.duration)


def _submit(audio_bytes: bytes, mime_type: str) -> None:
    """Send the recording once; identical audio already sent is ignored."""
    digest = hashlib.sha256(audio_bytes).hexdigest()
    if st.session_state.submitting or st.session_state.last_submitted_digest == digest:
        st.info("This recording has already been submitted.")
        return

    st.session_state.submitting = True
    client = get_api_client(st.session_state.api_base_url)
    try:
        with st.spinner("Saving and analysing your journal..."):
            result = client.submit_journal(
                st.session_state.access_token,
                audio_bytes,
                mime_type,
                audio_duration_seconds(audio_bytes),
            )
    except APIError as exc:
        st.error(f"Error saving journal: {exc.message}")
        return
    finally:
        st.session_state.submitting = False

    st.session_state.last_submitted_digest = digest
    st.session_state.last_submission = result


def _render_result(result: dict) -> None:
    journal = result["journal"]
    st.success("Journal saved successfully!")

    if result.get("transcription_error"):
        st.warning(f"Transcription failed: {result['transcription_error']}")
    elif journal.get("transcript"):
        st.subheader("Transcript")
        st.write(journal["transcript"])

    if result.get("extraction_error"):
        st.warning(
            f"Insight extraction failed: {result['extraction_error']}. "
            "Use **Retry insights** on the dashboard."
        )
    elif journal.get("insights"):
        st.subheader("Insights")
        render_insights(journal["insights"])


def render_recorder() -> None:
    """Render the recording UI based on current session state."""
    if st.session_state.last_submission is not None:
        _render_result(st.session_state.last_submission)
        if st.button("Record another"):
            st.session_state.last_submission = None
            st.session_state.pop("journal_audio", None)
            st.rerun()
        return

    audio = st.audio_input("Record your post-class thoughts", key="journal_audio")
    if audio is None:
        st.caption("Tap the microphone to start, tap again to stop.")
        return

    audio_bytes = audio.getvalue()
    st.caption(f"Duration: {format_duration(audio_duration_seconds(audio_bytes))}")
    st.audio(audio_bytes)

    col1, col2 = st.columns(2)
    with col1:
        if st.button(
            "Submit",
            type="primary",
            disabled=st.session_state.submitting,
            use_container_width=True,
        ):
            _submit(audio_bytes, audio.type or "audio/wav")
            if st.session_state.last_submission is not None:
                st.rerun()
    with col2:
        if st.button("Discard", use_container_width=True):
            st.session_state.pop("journal_audio", None)
            st.rerun()
