"""
Suggested mentions for blog content.

Order is fixed: speakers with workshops first (highest business value),
then workshops, then speakers without workshops.
"""

from typing import List, Sequence

from .config import LINK_PATHS, SUGGESTION_LIMITS
from .schema import KeywordMatch, SpeakerMatch, WorkshopMatch


def top_keywords(matches: Sequence[KeywordMatch], limit: int) -> List[str]:
    """Keywords with the highest relevance, best first."""
    ranked = sorted(matches, key=lambda m: -m.relevance_score)
    return [m.keyword for m in ranked[:limit]]


def speaker_link(slug: str) -> str:
    return LINK_PATHS["speaker"].format(slug=slug)


def workshop_link(slug: str) -> str:
    return LINK_PATHS["workshop"].format(slug=slug)


def generate_suggestions(
    speaker_matches: Sequence[SpeakerMatch],
    workshop_matches: Sequence[WorkshopMatch]
) -> List[str]:
    """
    Build human-readable mention suggestions.

    Args:
        speaker_matches: Filtered speaker matches, best first
        workshop_matches: Filtered workshop matches, best first

    Returns:
        Suggestion strings, each citing the entity, its top keywords and a link
    """
    suggestions = []

    with_workshops = [m for m in speaker_matches if m.has_workshops]
    for match in with_workshops[:SUGGESTION_LIMITS["speakers_with_workshops"]]:
        keywords = ", ".join(top_keywords(match.matched_keywords, SUGGESTION_LIMITS["keywords"]))
        plural = "s" if match.workshop_count > 1 else ""
        suggestions.append(
            f"Consider mentioning {match.speaker.name} (has {match.workshop_count} workshop{plural}) - "
            f"matches: {keywords}. Link: {speaker_link(match.speaker.slug)}"
        )

    for match in list(workshop_matches)[:SUGGESTION_LIMITS["workshops"]]:
        keywords = ", ".join(top_keywords(match.matched_keywords, SUGGESTION_LIMITS["keywords"]))
        by_line = f" by {match.speaker_name}" if match.speaker_name else ""
        suggestions.append(
            f'Link to workshop: "{match.workshop.title}"{by_line} - '
            f"matches: {keywords}. Link: {workshop_link(match.workshop.slug)}"
        )

    without_workshops = [m for m in speaker_matches if not m.has_workshops]
    for match in without_workshops[:SUGGESTION_LIMITS["speakers_without_workshops"]]:
        keywords = ", ".join(top_keywords(match.matched_keywords, SUGGESTION_LIMITS["keywords_secondary"]))
        suggestions.append(
            f"Also consider: {match.speaker.name} - matches: {keywords}. "
            f"Link: {speaker_link(match.speaker.slug)}"
        )

    return suggestions
