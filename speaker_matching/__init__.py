"""
Speaker Matching System

This package provides two deterministic scoring components:
1. Speaker similarity (weighted multi-factor ranking for related speakers)
2. Keyword matching (article keywords scored against speakers and workshops)

Usage:
    from speaker_matching import find_similar_speakers, match_content_to_speakers

    related = find_similar_speakers(speaker, all_speakers, limit=3)
    result = await match_content_to_speakers(article, all_speakers, load_workshops)
"""

from .config import WEIGHTS
from .keyword_extractor import extract_keywords
from .keyword_matcher import match_content_to_speakers, quick_match
from .schema import MatchOptions, Speaker, WorkshopWithSpeaker
from .similarity_engine import (
    calculate_similarity,
    find_similar_speakers,
    get_similarity_explanation,
)

__all__ = [
    "WEIGHTS",
    "Speaker",
    "WorkshopWithSpeaker",
    "MatchOptions",
    "calculate_similarity",
    "find_similar_speakers",
    "get_similarity_explanation",
    "extract_keywords",
    "match_content_to_speakers",
    "quick_match",
]
__version__ = "1.0.0"
