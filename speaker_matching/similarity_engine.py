"""
Speaker Similarity Engine

Ranks speakers by weighted multi-factor similarity for "related speakers"
recommendations. All functions are deterministic and total: missing data
degrades a factor to 0 instead of raising.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from .config import (
    WEIGHTS, LOCATION_SCORES, US_STATES, US_COUNTRY_MARKERS, SIMILAR_SPEAKERS_LIMIT
)
from .fields import as_string_list
from .schema import FactorBreakdown, SimilarityExplanation, Speaker

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+")


def _normalized_set(values: Iterable[str]) -> set:
    return {v.lower().strip() for v in as_string_list(values) if v.strip()}


def jaccard_similarity(first: Sequence[str], second: Sequence[str]) -> float:
    """
    Jaccard similarity (0-1) between two string collections.

    Formula:
    - |A & B| / |A | B| over lower-cased, trimmed values
    - 0 when either side is empty (no evidence of similarity)
    """
    set1 = _normalized_set(first)
    set2 = _normalized_set(second)

    if not set1 or not set2:
        return 0.0

    intersection = set1 & set2
    union = set1 | set2
    return len(intersection) / len(union)


def parse_fee(fee: Optional[str]) -> float:
    """
    Representative numeric value of a free-text fee.

    "$25k to $50k" -> 37.5 (midpoint of the first two numbers),
    "$20k" -> 20, "Please Inquire" -> 0.
    """
    if not fee:
        return 0.0

    numbers = [int(n) for n in _NUMBER_RE.findall(fee)]
    if not numbers:
        return 0.0

    if len(numbers) >= 2:
        return (numbers[0] + numbers[1]) / 2

    return float(numbers[0])


def fee_similarity(fee1: Optional[str], fee2: Optional[str]) -> float:
    """
    Fee similarity (0-1) based on relative distance.

    Formula:
    - percent_diff = |v1 - v2| / ((v1 + v2) / 2)
    - score = max(0, 1 - percent_diff)
    """
    value1 = parse_fee(fee1)
    value2 = parse_fee(fee2)

    if value1 == 0 or value2 == 0:
        return 0.0

    average = (value1 + value2) / 2
    percent_diff = abs(value1 - value2) / average
    return max(0.0, 1 - percent_diff)


def _location_parts(location: str) -> set:
    return {p.strip() for p in location.split(",") if p.strip()}


def _in_us(location: str) -> bool:
    return any(state in location for state in US_STATES)


def _mentions_us(location: str) -> bool:
    return any(marker in location for marker in US_COUNTRY_MARKERS)


def location_similarity(loc1: Optional[str], loc2: Optional[str]) -> float:
    """
    Tiered location similarity (0-1).

    - exact match (case and whitespace insensitive): 1.0
    - shared comma-separated parts: 0.5 + 0.5 * shared / max(parts)
    - both in a known US state, or both naming the US: 0.3
    - otherwise: 0
    """
    if not loc1 or not loc2:
        return 0.0

    l1 = loc1.lower().strip()
    l2 = loc2.lower().strip()
    if not l1 or not l2:
        return 0.0

    if l1 == l2:
        return LOCATION_SCORES["exact_match"]

    parts1 = _location_parts(l1)
    parts2 = _location_parts(l2)
    shared = parts1 & parts2

    if shared:
        span = len(shared) / max(len(parts1), len(parts2))
        return LOCATION_SCORES["shared_base"] + LOCATION_SCORES["shared_span"] * span

    if _in_us(l1) and _in_us(l2):
        return LOCATION_SCORES["same_country"]
    if _mentions_us(l1) and _mentions_us(l2):
        return LOCATION_SCORES["same_country"]

    return 0.0


def factor_scores(subject: Speaker, candidate: Speaker) -> Dict[str, float]:
    """Per-factor similarity scores, keyed like WEIGHTS."""
    if subject.slug == candidate.slug:
        return {factor: 0.0 for factor in WEIGHTS}

    scores = {
        "industries": jaccard_similarity(subject.industries, candidate.industries),
        "expertise": jaccard_similarity(subject.expertise, candidate.expertise),
        "topics": jaccard_similarity(subject.topics, candidate.topics),
        "fee_range": fee_similarity(subject.fee, candidate.fee),
        "location": location_similarity(subject.location, candidate.location),
    }
    logger.debug(f"Factor scores {subject.slug} ~ {candidate.slug}: {scores}")
    return scores


def calculate_similarity(subject: Speaker, candidate: Speaker) -> float:
    """
    Weighted similarity score (0-1) between two speakers.

    A speaker compared against itself always scores 0.
    """
    scores = factor_scores(subject, candidate)
    return sum(scores[factor] * weight for factor, weight in WEIGHTS.items())


def find_similar_speakers(
    subject: Speaker,
    pool: Sequence[Speaker],
    limit: int = SIMILAR_SPEAKERS_LIMIT
) -> List[Speaker]:
    """
    Find the speakers most similar to the subject.

    Unlisted speakers and the subject itself are skipped, as is anyone
    scoring 0. Ties are broken by name so the order is reproducible.

    Args:
        subject: Speaker to find neighbours for
        pool: Candidate speakers (usually the whole directory)
        limit: Maximum number of speakers to return

    Returns:
        Up to `limit` speakers, most similar first
    """
    if limit <= 0:
        return []

    scored = []
    for candidate in pool:
        if candidate.slug == subject.slug or not candidate.listed:
            continue
        score = calculate_similarity(subject, candidate)
        if score > 0:
            scored.append((score, candidate))

    scored.sort(key=lambda item: (-item[0], item[1].name.lower(), item[1].slug))
    logger.debug(f"{len(scored)} similar speakers found for {subject.slug}")

    return [candidate for _, candidate in scored[:limit]]


def get_similarity_explanation(subject: Speaker, candidate: Speaker) -> SimilarityExplanation:
    """
    Full per-factor breakdown of a similarity score, for debugging and tuning.

    Returns:
        SimilarityExplanation with score, weight and contribution per factor
    """
    scores = factor_scores(subject, candidate)

    breakdown = {
        factor: FactorBreakdown(
            score=scores[factor],
            weight=weight,
            contribution=scores[factor] * weight,
        )
        for factor, weight in WEIGHTS.items()
    }
    total = sum(item.contribution for item in breakdown.values())

    return SimilarityExplanation(total_score=total, breakdown=breakdown)
