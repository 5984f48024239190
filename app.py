from __future__ import annotations

import logging
import os
import time
from collections import deque
from typing import Deque, Dict, Any, List

from fastapi import FastAPI, HTTPException, Request, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from pathlib import Path

from models import (
    Settings,
    get_settings,
    KeywordMatchRequest,
    KeywordMatchOut,
    SpeakerMatchOut,
    WorkshopMatchOut,
    FullKeywordMatchResponse,
    QuickKeywordMatchResponse,
    SimilarSpeakerOut,
    SimilarSpeakersResponse,
)
from catalog_service import CatalogService, CatalogError, get_catalog_service
from speaker_matching import (
    MatchOptions,
    calculate_similarity,
    extract_keywords,
    find_similar_speakers,
    get_similarity_explanation,
    match_content_to_speakers,
    quick_match,
)
from speaker_matching.config import MATCH_DEFAULTS, SIMILAR_SPEAKERS_LIMIT
from speaker_matching.schema import KeywordMatch
from speaker_matching.suggestions import speaker_link, workshop_link


# Load environment from root .env if present
load_dotenv()
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"
KEYWORD_MATCH_PATH = "/api/admin/tools/keyword-match"
QUICK_KEYWORD_PREVIEW = 20
MATCHED_KEYWORDS_SHOWN = 5

app = FastAPI(title="Speaker Matching API", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# In-memory stores
LAST_REQUESTS_BY_IP: Dict[str, Deque[float]] = {}
RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_SWEEP_THRESHOLD = 1024


def prune_idle_buckets(now: float, window: float = RATE_LIMIT_WINDOW_SECONDS) -> None:
    """Forget clients whose newest request is older than the window."""
    for ip in [ip for ip, bucket in LAST_REQUESTS_BY_IP.items() if not bucket or now - bucket[-1] > window]:
        del LAST_REQUESTS_BY_IP[ip]


async def rate_limit(request: Request, settings: Settings = Depends(get_settings)):
    ip = request.client.host if request.client else "unknown"
    window = RATE_LIMIT_WINDOW_SECONDS
    max_req = settings.rate_limit_requests_per_minute
    now = time.time()
    if len(LAST_REQUESTS_BY_IP) > RATE_LIMIT_SWEEP_THRESHOLD:
        prune_idle_buckets(now, window)
    bucket = LAST_REQUESTS_BY_IP.setdefault(ip, deque())
    # prune
    while bucket and now - bucket[0] > window:
        bucket.popleft()
    if len(bucket) >= max_req:
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
    bucket.append(now)


def _rounded(score: float) -> float:
    return round(score, 1)


def _top_matched_keywords(matches: List[KeywordMatch]) -> List[KeywordMatchOut]:
    ranked = sorted(matches, key=lambda m: -m.relevance_score)[:MATCHED_KEYWORDS_SHOWN]
    return [
        KeywordMatchOut(keyword=m.keyword, matched_in=m.matched_in, score=_rounded(m.relevance_score))
        for m in ranked
    ]


async def _load_speaker(catalog: CatalogService, slug: str):
    try:
        speaker = await catalog.get_speaker_by_slug(slug)
    except CatalogError as e:
        logger.error(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail="Speaker catalog unavailable")
    if speaker is None:
        raise HTTPException(status_code=404, detail=f"Speaker not found: {slug}")
    return speaker


@app.get("/")
async def root():
    return {"status": "ok", "version": APP_VERSION}


@app.get("/api/speakers/{slug}/similar", response_model=SimilarSpeakersResponse)
async def get_similar_speakers(
    slug: str,
    limit: int = Query(default=SIMILAR_SPEAKERS_LIMIT, ge=1, le=50),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Related speakers for a profile page, most similar first."""
    speaker = await _load_speaker(catalog, slug)
    all_speakers = await catalog.get_all_speakers()

    similar = find_similar_speakers(speaker, all_speakers, limit)
    logger.info(f"Found {len(similar)} similar speakers for {slug}")

    return SimilarSpeakersResponse(
        slug=slug,
        similar=[
            SimilarSpeakerOut(
                name=s.name,
                slug=s.slug,
                title=s.title,
                score=round(calculate_similarity(speaker, s), 4),
            )
            for s in similar
        ],
    )


@app.get("/api/speakers/{slug}/similarity/{other_slug}")
async def get_similarity_breakdown(
    slug: str,
    other_slug: str,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Per-factor similarity breakdown between two speakers."""
    speaker = await _load_speaker(catalog, slug)
    other = await _load_speaker(catalog, other_slug)

    explanation = get_similarity_explanation(speaker, other)
    return {"slug": slug, "other_slug": other_slug, **explanation.model_dump()}


@app.post(KEYWORD_MATCH_PATH, dependencies=[Depends(rate_limit)])
async def keyword_match(
    request: KeywordMatchRequest,
    settings: Settings = Depends(get_settings),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Match article content to relevant speakers and workshops.

    Quick mode returns simplified results; full mode returns matched
    keywords per speaker/workshop.
    """
    content = request.content
    if not content or not content.strip():
        raise HTTPException(status_code=400, detail="Content is required and must be a string")

    if len(content) < settings.min_content_length:
        raise HTTPException(
            status_code=400,
            detail=f"Content must be at least {settings.min_content_length} characters for meaningful analysis",
        )

    try:
        extracted_keywords = extract_keywords(content)
        speakers = await catalog.get_all_speakers()

        if request.mode == "quick":
            result = await quick_match(content, speakers, catalog.get_active_workshops)
            return QuickKeywordMatchResponse(
                extracted_keywords=extracted_keywords[:QUICK_KEYWORD_PREVIEW],
                top_speakers=[s.model_dump() for s in result.top_speakers],
                top_workshops=[w.model_dump() for w in result.top_workshops],
                suggestions=result.suggestions,
            )

        options = MatchOptions(
            max_speakers=request.max_speakers or MATCH_DEFAULTS["max_speakers"],
            max_workshops=request.max_workshops or MATCH_DEFAULTS["max_workshops"],
            min_score=request.min_score if request.min_score is not None else MATCH_DEFAULTS["min_score"],
        )
        result = await match_content_to_speakers(content, speakers, catalog.get_active_workshops, options)

        return FullKeywordMatchResponse(
            extracted_keywords=extracted_keywords,
            speakers=[
                SpeakerMatchOut(
                    name=m.speaker.name,
                    slug=m.speaker.slug,
                    title=m.speaker.title,
                    score=_rounded(m.score),
                    has_workshops=m.has_workshops,
                    workshop_count=m.workshop_count,
                    matched_keywords=_top_matched_keywords(m.matched_keywords),
                    speaker_url=speaker_link(m.speaker.slug),
                )
                for m in result.speakers
            ],
            workshops=[
                WorkshopMatchOut(
                    title=m.workshop.title,
                    slug=m.workshop.slug,
                    speaker_name=m.speaker_name,
                    short_description=m.workshop.short_description,
                    score=_rounded(m.score),
                    matched_keywords=_top_matched_keywords(m.matched_keywords),
                    workshop_url=workshop_link(m.workshop.slug),
                )
                for m in result.workshops
            ],
            suggestions=result.suggested_mentions,
        )

    except CatalogError as e:
        logger.error(f"Catalog unavailable during keyword matching: {e}")
        raise HTTPException(status_code=503, detail="Speaker catalog unavailable")
    except Exception as e:
        logger.error(f"Keyword match error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to process keyword matching: {str(e)}")


@app.get(KEYWORD_MATCH_PATH)
async def keyword_match_docs() -> Dict[str, Any]:
    """API documentation for the keyword-match endpoint."""
    return {
        "endpoint": KEYWORD_MATCH_PATH,
        "method": "POST",
        "description": "Match article content to relevant speakers and workshops for SEO optimization",
        "body": {
            "content": {
                "type": "string",
                "required": True,
                "description": "The article/blog post content to analyze",
            },
            "mode": {
                "type": "string",
                "enum": ["quick", "full"],
                "default": "quick",
                "description": "Quick mode returns simplified results, full mode returns detailed analysis",
            },
            "max_speakers": {
                "type": "number",
                "default": MATCH_DEFAULTS["max_speakers"],
                "description": "Maximum number of speakers to return (full mode only)",
            },
            "max_workshops": {
                "type": "number",
                "default": MATCH_DEFAULTS["max_workshops"],
                "description": "Maximum number of workshops to return (full mode only)",
            },
            "min_score": {
                "type": "number",
                "default": MATCH_DEFAULTS["min_score"],
                "description": "Minimum relevance score threshold (full mode only)",
            },
        },
        "response": {
            "success": "boolean",
            "mode": "string",
            "extracted_keywords": "string[] - Keywords extracted from content",
            "top_speakers": "Array of matched speakers with relevance scores",
            "top_workshops": "Array of matched workshops with relevance scores",
            "suggestions": "string[] - Formatted suggestions for blog content",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
