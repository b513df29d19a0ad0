"""Unit tests for InsightExtractor and its reply parsing."""

import json

import pytest

from truinsights.core.exceptions import ExtractionFailed
from truinsights.core.mocks import MOCK_INSIGHTS, MOCK_TRANSCRIPT
from truinsights.core.models import Mood
from truinsights.services.extraction import InsightExtractor, build_prompt, parse_insights
from truinsights.services.llm.mock import MockLLM

BARE = json.dumps(
    {
        "energy_level": 6,
        "difficulty_rating": 9,
        "mood": "tired",
        "highlights": ["Finished the flow"],
        "challenges": ["Plank holds"],
        "body_feelings": ["Shaky arms"],
        "instructor_feedback": "",
        "tags": ["strength"],
    }
)


class TestBuildPrompt:
    def test_contains_transcript_and_schema(self):
        prompt = build_prompt("Legs are jelly {not a placeholder}")
        assert "Transcript: Legs are jelly {not a placeholder}" in prompt
        assert '"energy_level": <1-10' in prompt
        assert prompt.endswith("Return ONLY valid JSON, no markdown formatting or other text.")


class TestParseInsights:
    def test_fenced_reply_parses_like_bare(self):
        fenced = f"```json\n{BARE}\n```"
        assert parse_insights(fenced) == parse_insights(BARE)

    def test_plain_fence_without_language(self):
        assert parse_insights(f"```\n{BARE}\n```").mood == "tired"

    def test_optional_fields_default(self):
        insights = parse_insights('{"energy_level": 5, "difficulty_rating": 5, "mood": "relaxed"}')
        assert insights.highlights == []
        assert insights.instructor_feedback == ""

    def test_null_optional_fields_take_defaults(self):
        insights = parse_insights(
            '{"energy_level": 8, "difficulty_rating": 7, "mood": "energized", '
            '"instructor_feedback": null, "highlights": null, "tags": null}'
        )
        assert insights.instructor_feedback == ""
        assert insights.highlights == []
        assert insights.tags == []

    def test_numeric_list_items_become_text(self):
        insights = parse_insights(
            '{"energy_level": 8, "difficulty_rating": 7, "mood": "energized", "tags": ["core", 5]}'
        )
        assert insights.tags == ["core", "5"]

    def test_null_required_field_still_fails(self):
        with pytest.raises(ExtractionFailed, match="mood"):
            parse_insights('{"energy_level": 5, "difficulty_rating": 5, "mood": null}')

    def test_missing_required_field(self):
        with pytest.raises(ExtractionFailed, match="mood"):
            parse_insights('{"energy_level": 5, "difficulty_rating": 5}')

    def test_non_object(self):
        with pytest.raises(ExtractionFailed, match="JSON object"):
            parse_insights("[1, 2, 3]")

    def test_invalid_json(self):
        with pytest.raises(ExtractionFailed, match="Invalid JSON"):
            parse_insights("Sure! Here are the insights: energy 8")

    def test_out_of_range_values_are_kept(self):
        insights = parse_insights('{"energy_level": 14, "difficulty_rating": 0, "mood": "meh"}')
        assert insights.energy_level == 14
        assert insights.mood == "meh"


class TestInsightExtractor:
    async def test_sends_prompt_and_parses(self, mock_llm):
        extractor = InsightExtractor(mock_llm)
        insights = await extractor.extract("  Great class.  ")

        assert insights == MOCK_INSIGHTS
        prompt = mock_llm.generate.call_args.args[0]
        assert "Transcript: Great class." in prompt

    async def test_blank_transcript_skips_llm(self, mock_llm):
        with pytest.raises(ExtractionFailed, match="No transcript"):
            await InsightExtractor(mock_llm).extract("   ")
        mock_llm.generate.assert_not_called()

    async def test_provider_failure_propagates(self, mock_llm):
        mock_llm.generate.side_effect = ExtractionFailed("Could not reach Claude")
        with pytest.raises(ExtractionFailed, match="Could not reach Claude"):
            await InsightExtractor(mock_llm).extract("text")

    async def test_passes_temperature(self, mock_llm):
        await InsightExtractor(mock_llm, temperature=0.1).extract("text")
        assert mock_llm.generate.call_args.kwargs == {"temperature": 0.1}

    async def test_mock_provider_ratings_and_mood(self):
        insights = await InsightExtractor(MockLLM()).extract(MOCK_TRANSCRIPT)

        assert 1 <= insights.energy_level <= 10
        assert 1 <= insights.difficulty_rating <= 10
        assert insights.mood in {m.value for m in Mood}
        assert insights.tags == ["core-focused", "flexibility-challenge", "high-energy"]
