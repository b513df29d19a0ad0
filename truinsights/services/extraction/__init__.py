"""
Extraction module - Transcript to structured insights.
"""

from .insight_extractor import InsightExtractor, build_prompt, parse_insights

__all__ = ["InsightExtractor", "build_prompt", "parse_insights"]
