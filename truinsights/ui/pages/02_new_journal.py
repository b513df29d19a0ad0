"""
New journal page - record, review and submit.

Uses ``st.audio_input()`` for capture.
"""

import streamlit as st

from truinsights.ui.components.recorder import render_recorder

st.header("New Journal")
render_recorder()
