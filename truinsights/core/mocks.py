"""
Fixed payloads served by the mock endpoints and mock providers.

They double as the golden fixture for exercising the whole pipeline
without network access.
"""

from truinsights.core.models import ExtractedInsights

MOCK_TRANSCRIPT = (
    "This is a mock transcription. Hot pilates class was amazing today! "
    "Energy level was really high, about 8 out of 10. Core work was "
    "challenging but felt great. Hip flexors were a bit tight but managed "
    "to push through."
)

MOCK_INSIGHTS = ExtractedInsights(
    energy_level=8,
    difficulty_rating=7,
    mood="energized",
    highlights=["Great core work", "Felt strong", "Good energy"],
    challenges=["Hip flexors tight", "Balance poses were tough"],
    body_feelings=["Core engaged", "Hip flexors tight", "Upper body strong"],
    instructor_feedback="Amazing coaching and energy",
    tags=["core-focused", "flexibility-challenge", "high-energy"],
)
