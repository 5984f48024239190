"""
Keyword Matcher

Matches article content against speakers and their workshops to suggest
relevant internal links and mentions.

Orchestrates the matching process:
1. Extract keywords from the article
2. Load the active workshop pool (failures degrade to no workshops)
3. Score speakers and workshops with weighted field matching
4. Filter, cap and turn the best matches into suggestions
"""

import logging
import re
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from .config import (
    SPEAKER_FIELD_WEIGHTS, WORKSHOP_FIELD_WEIGHTS, KEYWORD_BASE_SCORES,
    PARTIAL_MATCH_MULTIPLIER, WORKSHOP_BOOST, QUICK_MATCH_LIMITS
)
from .fields import as_search_text
from .keyword_extractor import extract_keywords, is_high_value
from .schema import (
    KeywordMatch, MatchOptions, MatchResult, QuickMatchResult, QuickSpeaker,
    QuickWorkshop, Speaker, SpeakerMatch, WorkshopMatch, WorkshopWithSpeaker
)
from .suggestions import generate_suggestions

logger = logging.getLogger(__name__)

WorkshopLoader = Callable[[], Awaitable[List[WorkshopWithSpeaker]]]


def _whole_word(keyword: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", text) is not None


def calculate_field_score(
    keywords: Sequence[str],
    field_value: Any,
    field_name: str,
    field_weight: float = 1
) -> List[KeywordMatch]:
    """
    Score keywords against a single text field.

    Formula per matching keyword:
    - base = 3 for high-value keywords, else 1
    - whole-word match: base * field_weight
    - substring-only match: base * field_weight * 0.5

    Args:
        keywords: Extracted keywords
        field_value: String or list of strings (joined with spaces)
        field_name: Recorded in KeywordMatch.matched_in
        field_weight: Importance of this field

    Returns:
        One KeywordMatch per matching keyword
    """
    text = as_search_text(field_value)
    if not text:
        return []

    matches: Dict[str, KeywordMatch] = {}
    for keyword in keywords:
        if not keyword or keyword not in text:
            continue

        base = KEYWORD_BASE_SCORES["high_value"] if is_high_value(keyword) else KEYWORD_BASE_SCORES["regular"]
        score = base * field_weight
        if not _whole_word(keyword, text):
            score *= PARTIAL_MATCH_MULTIPLIER

        existing = matches.get(keyword)
        if existing:
            existing.matched_in.append(field_name)
            existing.relevance_score += score
        else:
            matches[keyword] = KeywordMatch(
                keyword=keyword,
                matched_in=[field_name],
                relevance_score=score,
            )

    return list(matches.values())


def consolidate_matches(matches: Iterable[KeywordMatch]) -> List[KeywordMatch]:
    """Merge matches per keyword: union of fields, summed scores."""
    consolidated: Dict[str, KeywordMatch] = {}
    for match in matches:
        existing = consolidated.get(match.keyword)
        if existing:
            for field_name in match.matched_in:
                if field_name not in existing.matched_in:
                    existing.matched_in.append(field_name)
            existing.relevance_score += match.relevance_score
        else:
            consolidated[match.keyword] = KeywordMatch(
                keyword=match.keyword,
                matched_in=list(dict.fromkeys(match.matched_in)),
                relevance_score=match.relevance_score,
            )
    return list(consolidated.values())


def _score_record(record: Any, keywords: Sequence[str], field_weights: Dict[str, float]) -> List[KeywordMatch]:
    all_matches: List[KeywordMatch] = []
    for field_name, weight in field_weights.items():
        all_matches.extend(
            calculate_field_score(keywords, getattr(record, field_name, None), field_name, weight)
        )
    return consolidate_matches(all_matches)


def _same_name(first: Optional[str], second: Optional[str]) -> bool:
    if not first or not second:
        return False
    return first.strip().lower() == second.strip().lower()


def count_speaker_workshops(speaker: Speaker, workshops: Sequence[WorkshopWithSpeaker]) -> int:
    """
    Number of workshops run by a speaker.

    Joined on case-insensitive speaker name, not speaker_id. Differently
    spelled names silently fail to join, which is a known data-quality risk.
    """
    return sum(1 for workshop in workshops if _same_name(workshop.speaker_name, speaker.name))


def match_speakers(
    keywords: Sequence[str],
    speakers: Sequence[Speaker],
    workshops: Sequence[WorkshopWithSpeaker]
) -> List[SpeakerMatch]:
    """
    Score every speaker against the keywords.

    Speakers with at least one workshop get a WORKSHOP_BOOST multiplier.

    Returns:
        Speakers with a positive score, highest first
    """
    speaker_matches = []

    for speaker in speakers:
        matched_keywords = _score_record(speaker, keywords, SPEAKER_FIELD_WEIGHTS)
        total_score = sum(m.relevance_score for m in matched_keywords)
        if total_score <= 0:
            continue

        workshop_count = count_speaker_workshops(speaker, workshops)
        boost = WORKSHOP_BOOST if workshop_count > 0 else 1

        speaker_matches.append(SpeakerMatch(
            speaker=speaker,
            score=total_score * boost,
            matched_keywords=matched_keywords,
            has_workshops=workshop_count > 0,
            workshop_count=workshop_count,
        ))

    speaker_matches.sort(key=lambda m: (-m.score, m.speaker.name.lower()))
    logger.debug(f"{len(speaker_matches)}/{len(speakers)} speakers matched")
    return speaker_matches


def match_workshops(
    keywords: Sequence[str],
    workshops: Sequence[WorkshopWithSpeaker]
) -> List[WorkshopMatch]:
    """
    Score every workshop against the keywords.

    Returns:
        Workshops with a positive score, highest first
    """
    workshop_matches = []

    for workshop in workshops:
        matched_keywords = _score_record(workshop, keywords, WORKSHOP_FIELD_WEIGHTS)
        total_score = sum(m.relevance_score for m in matched_keywords)
        if total_score <= 0:
            continue

        workshop_matches.append(WorkshopMatch(
            workshop=workshop,
            score=total_score,
            matched_keywords=matched_keywords,
            speaker_name=workshop.speaker_name,
        ))

    workshop_matches.sort(key=lambda m: (-m.score, m.workshop.title.lower()))
    logger.debug(f"{len(workshop_matches)}/{len(workshops)} workshops matched")
    return workshop_matches


async def _load_workshops(workshop_loader: Optional[WorkshopLoader]) -> List[WorkshopWithSpeaker]:
    if workshop_loader is None:
        return []
    try:
        return list(await workshop_loader())
    except Exception as e:
        logger.error(f"Error fetching workshops for keyword matching: {e}", exc_info=True)
        return []


async def match_content_to_speakers(
    content: str,
    speakers: Sequence[Speaker],
    workshop_loader: Optional[WorkshopLoader] = None,
    options: Optional[MatchOptions] = None
) -> MatchResult:
    """
    Match article content to speakers and workshops.

    This is the main entry point for content matching.

    Args:
        content: Article text
        speakers: Full speaker directory
        workshop_loader: Awaitable returning the active workshops; a failure
            is logged and treated as an empty pool
        options: Result caps and minimum score

    Returns:
        MatchResult with speakers, workshops and suggested mentions

    Example:
        >>> result = await match_content_to_speakers(text, speakers, catalog.get_active_workshops)
        >>> for line in result.suggested_mentions:
        >>>     print(line)
    """
    options = options or MatchOptions()

    keywords = extract_keywords(content)
    if not keywords:
        logger.info("No keywords extracted, skipping content matching")
        return MatchResult()

    logger.info(f"Extracted {len(keywords)} keywords from {len(content)} chars of content")

    workshops = await _load_workshops(workshop_loader)

    speaker_matches = match_speakers(keywords, speakers, workshops)
    filtered_speakers = [m for m in speaker_matches if m.score >= options.min_score][:max(options.max_speakers, 0)]

    workshop_matches = match_workshops(keywords, workshops)
    filtered_workshops = [m for m in workshop_matches if m.score >= options.min_score][:max(options.max_workshops, 0)]

    suggestions = generate_suggestions(filtered_speakers, filtered_workshops)

    logger.info(
        f"Content matching kept {len(filtered_speakers)} speakers, "
        f"{len(filtered_workshops)} workshops, {len(suggestions)} suggestions"
    )

    return MatchResult(
        speakers=filtered_speakers,
        workshops=filtered_workshops,
        suggested_mentions=suggestions,
    )


async def quick_match(
    content: str,
    speakers: Sequence[Speaker],
    workshop_loader: Optional[WorkshopLoader] = None
) -> QuickMatchResult:
    """Simplified matching for API use, with tighter limits."""
    result = await match_content_to_speakers(
        content,
        speakers,
        workshop_loader,
        MatchOptions(**QUICK_MATCH_LIMITS),
    )

    return QuickMatchResult(
        top_speakers=[
            QuickSpeaker(
                name=m.speaker.name,
                slug=m.speaker.slug,
                score=round(m.score, 1),
                has_workshops=m.has_workshops,
            )
            for m in result.speakers
        ],
        top_workshops=[
            QuickWorkshop(
                title=m.workshop.title,
                slug=m.workshop.slug,
                score=round(m.score, 1),
                speaker_name=m.speaker_name,
            )
            for m in result.workshops
        ],
        suggestions=result.suggested_mentions,
    )
