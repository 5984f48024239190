from __future__ import annotations

import os
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, validator, ConfigDict


class Settings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    catalog_dir: str = "data"
    catalog_cache_ttl_seconds: int = 300
    rate_limit_requests_per_minute: int = 60
    min_content_length: int = 50
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings(
        catalog_dir=os.getenv("CATALOG_DIR", "data"),
        catalog_cache_ttl_seconds=int(os.getenv("CATALOG_CACHE_TTL_SECONDS", "300")),
        rate_limit_requests_per_minute=int(os.getenv("RATE_LIMIT_RPM", "60")),
        min_content_length=int(os.getenv("MIN_CONTENT_LENGTH", "50")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


class KeywordMatchRequest(BaseModel):
    content: Optional[str] = Field(
        default=None,
        description="The article/blog post content to analyze",
    )
    mode: str = Field(
        default="quick",
        description="'quick' for simplified results, 'full' for detailed analysis",
    )
    max_speakers: Optional[int] = Field(default=None, ge=1)
    max_workshops: Optional[int] = Field(default=None, ge=1)
    min_score: Optional[float] = Field(default=None, ge=0)

    @validator("mode")
    def validate_mode(cls, v: str) -> str:
        v = (v or "quick").lower()
        if v not in ("quick", "full"):
            raise ValueError("mode must be 'quick' or 'full'")
        return v


class KeywordMatchOut(BaseModel):
    keyword: str
    matched_in: List[str]
    score: float


class SpeakerMatchOut(BaseModel):
    name: str
    slug: str
    title: str = ""
    score: float
    has_workshops: bool
    workshop_count: int
    matched_keywords: List[KeywordMatchOut] = Field(default_factory=list)
    speaker_url: str


class WorkshopMatchOut(BaseModel):
    title: str
    slug: str
    speaker_name: Optional[str] = None
    short_description: str = ""
    score: float
    matched_keywords: List[KeywordMatchOut] = Field(default_factory=list)
    workshop_url: str


class FullKeywordMatchResponse(BaseModel):
    success: bool = True
    mode: str = "full"
    extracted_keywords: List[str] = Field(default_factory=list)
    speakers: List[SpeakerMatchOut] = Field(default_factory=list)
    workshops: List[WorkshopMatchOut] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class QuickKeywordMatchResponse(BaseModel):
    success: bool = True
    mode: str = "quick"
    extracted_keywords: List[str] = Field(default_factory=list)
    top_speakers: List[Dict[str, Any]] = Field(default_factory=list)
    top_workshops: List[Dict[str, Any]] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class SimilarSpeakerOut(BaseModel):
    name: str
    slug: str
    title: str = ""
    score: float


class SimilarSpeakersResponse(BaseModel):
    slug: str
    similar: List[SimilarSpeakerOut] = Field(default_factory=list)
