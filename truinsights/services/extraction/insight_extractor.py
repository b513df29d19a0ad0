"""
Post-class insight extraction.

Takes a journal transcript and produces :class:`ExtractedInsights` using the
configured LLM provider. The reply must be a JSON object; markdown fences
are stripped before parsing because models do not always comply.
"""

import json
import logging

from pydantic import ValidationError

from truinsights.core.exceptions import ExtractionFailed
from truinsights.core.models import ExtractedInsights
from truinsights.core.utils import strip_code_fences
from truinsights.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are analyzing a voice journal entry from a fitness class.
Extract the following structured information from the transcript.

Transcript: {transcript}

Please extract and return a JSON object with:
{{
  "energy_level": <1-10, how energetic they felt>,
  "difficulty_rating": <1-10, how difficult the class was>,
  "mood": "<one word: energized/tired/accomplished/frustrated/motivated/relaxed>",
  "highlights": ["<positive aspects they mentioned>"],
  "challenges": ["<difficulties or struggles they mentioned>"],
  "body_feelings": ["<how their body felt, specific muscle groups or sensations>"],
  "instructor_feedback": "<any comments about the instructor, or empty string>",
  "tags": ["<relevant tags like 'core-focused', 'cardio-heavy', 'flexibility', 'strength', 'recovery', etc>"]
}}

If the transcript is very short or unclear, make reasonable inferences but be conservative with ratings.
Return ONLY valid JSON, no markdown formatting or other text."""


def build_prompt(transcript: str) -> str:
    """Interpolate the transcript into the fixed extraction instruction."""
    return EXTRACTION_PROMPT.format(transcript=transcript)


def parse_insights(raw_response: str) -> ExtractedInsights:
    """Parse an LLM reply into insights.

    Args:
        raw_response: Model output, optionally wrapped in a ```json fence.

    Raises:
        ExtractionFailed: The reply is not a JSON object or misses a required field.
    """
    cleaned = strip_code_fences(raw_response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ExtractionFailed(f"Invalid JSON from LLM: {cleaned[:200]}") from exc

    if not isinstance(data, dict):
        raise ExtractionFailed(f"Expected a JSON object from LLM, got {type(data).__name__}")

    try:
        return ExtractedInsights.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ExtractionFailed(f"LLM reply is missing or has invalid fields: {fields}") from exc


class InsightExtractor:
    """Turns transcripts into structured insights using an LLM provider."""

    def __init__(self, llm: BaseLLM, temperature: float = 0.3) -> None:
        """Initialize with the configured LLM provider.

        Args:
            llm: An LLM provider implementing ``BaseLLM``.
            temperature: Sampling temperature used for extraction calls.
        """
        self._llm = llm
        self._temperature = temperature

    async def extract(self, transcript: str) -> ExtractedInsights:
        """Extract insights from a transcript with a single LLM call.

        Raises:
            ExtractionFailed: Blank transcript, LLM failure, or unparseable reply.
        """
        if not transcript or not transcript.strip():
            raise ExtractionFailed("No transcript provided")

        logger.info(
            "Extracting insights from %s-char transcript with %s",
            len(transcript),
            self._llm.model_name or type(self._llm).__name__,
        )
        raw_response = await self._llm.generate(
            build_prompt(transcript.strip()),
            temperature=self._temperature,
        )
        insights = parse_insights(raw_response)
        logger.debug("Extracted insights: %s", insights.model_dump())
        return insights

    async def aclose(self) -> None:
        await self._llm.aclose()
