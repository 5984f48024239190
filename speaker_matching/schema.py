from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, validator

from .config import MATCH_DEFAULTS
from .fields import as_string_list


def _as_text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, str):
        return v
    return " ".join(as_string_list(v))


class Speaker(BaseModel):
    """Speaker record as materialized by the storage layer."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    slug: str
    name: str
    title: str = ""
    bio: str = ""
    programs: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    expertise: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    fee: Optional[str] = None
    location: Optional[str] = None
    listed: bool = True

    @validator("programs", "industries", "expertise", "topics", "tags", pre=True)
    def coerce_list(cls, v):
        return as_string_list(v)

    @validator("title", "bio", pre=True)
    def coerce_text(cls, v):
        return _as_text(v)

    @validator("fee", "location", pre=True)
    def coerce_optional_text(cls, v):
        if v is None:
            return None
        return _as_text(v)

    @validator("listed", pre=True)
    def coerce_listed(cls, v):
        # Only an explicit False hides a speaker
        return v is not False


class WorkshopWithSpeaker(BaseModel):
    """Active workshop joined (loosely) with its speaker."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    slug: str
    title: str = ""
    description: str = ""
    short_description: str = ""
    topics: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    target_audience: str = ""
    learning_objectives: List[str] = Field(default_factory=list)
    key_takeaways: List[str] = Field(default_factory=list)
    speaker_id: Optional[int] = None
    speaker_name: Optional[str] = None
    speaker_slug: Optional[str] = None
    active: bool = True

    @validator("topics", "keywords", "learning_objectives", "key_takeaways", pre=True)
    def coerce_list(cls, v):
        return as_string_list(v)

    @validator("title", "description", "short_description", "target_audience", pre=True)
    def coerce_text(cls, v):
        return _as_text(v)


class KeywordMatch(BaseModel):
    keyword: str
    matched_in: List[str] = Field(default_factory=list)
    relevance_score: float = 0.0


class SpeakerMatch(BaseModel):
    speaker: Speaker
    score: float
    matched_keywords: List[KeywordMatch] = Field(default_factory=list)
    has_workshops: bool = False
    workshop_count: int = 0


class WorkshopMatch(BaseModel):
    workshop: WorkshopWithSpeaker
    score: float
    matched_keywords: List[KeywordMatch] = Field(default_factory=list)
    speaker_name: Optional[str] = None


class MatchOptions(BaseModel):
    max_speakers: int = MATCH_DEFAULTS["max_speakers"]
    max_workshops: int = MATCH_DEFAULTS["max_workshops"]
    min_score: float = MATCH_DEFAULTS["min_score"]


class MatchResult(BaseModel):
    speakers: List[SpeakerMatch] = Field(default_factory=list)
    workshops: List[WorkshopMatch] = Field(default_factory=list)
    suggested_mentions: List[str] = Field(default_factory=list)


class QuickSpeaker(BaseModel):
    name: str
    slug: str
    score: float
    has_workshops: bool


class QuickWorkshop(BaseModel):
    title: str
    slug: str
    score: float
    speaker_name: Optional[str] = None


class QuickMatchResult(BaseModel):
    top_speakers: List[QuickSpeaker] = Field(default_factory=list)
    top_workshops: List[QuickWorkshop] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class FactorBreakdown(BaseModel):
    score: float
    weight: float
    contribution: float


class SimilarityExplanation(BaseModel):
    total_score: float
    breakdown: Dict[str, FactorBreakdown]
