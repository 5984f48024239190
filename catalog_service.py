"""
Catalog service for loading speakers and workshops.

Reads the directory export (speakers.json / workshops.json) and keeps a
process-wide TTL cache. The scoring package never caches; fresh lists are
handed to it on every call.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import time
from pathlib import Path
from typing import List, Dict, Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from models import get_settings
from speaker_matching.schema import Speaker, WorkshopWithSpeaker

load_dotenv()

logger = logging.getLogger(__name__)

SPEAKERS_FILE = "speakers.json"
WORKSHOPS_FILE = "workshops.json"
DEFAULT_CACHE_TTL_SECONDS = 5 * 60


class CatalogError(RuntimeError):
    """Raised when the catalog cannot be read or decoded."""


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def speaker_from_record(record: Dict[str, Any]) -> Speaker:
    """
    Build a Speaker from a database-shaped row.

    Column names from the speakers table are mapped onto the Speaker
    fields; rows already in Speaker shape pass through unchanged.
    """
    name = record.get("name") or ""
    slug = record.get("slug") or (slugify(name) if name else f"speaker-{record.get('id')}")

    return Speaker(
        id=record.get("id"),
        slug=slug,
        name=name,
        title=record.get("title") or record.get("one_liner") or "",
        bio=record.get("bio") or record.get("short_bio") or "",
        programs=record.get("programs"),
        industries=record.get("industries"),
        expertise=record.get("expertise") or record.get("topics"),
        topics=record.get("topics"),
        tags=record.get("tags"),
        fee=record.get("fee") or record.get("speaking_fee_range"),
        location=record.get("location"),
        listed=record.get("listed"),
    )


def workshop_from_record(record: Dict[str, Any], speakers_by_id: Dict[int, Speaker]) -> WorkshopWithSpeaker:
    """Build a WorkshopWithSpeaker, filling speaker columns from a left join on speaker_id."""
    data = dict(record)
    speaker = speakers_by_id.get(data.get("speaker_id")) if data.get("speaker_id") is not None else None
    if speaker is not None:
        data.setdefault("speaker_name", speaker.name)
        data.setdefault("speaker_slug", speaker.slug)
    if data.get("active") is None:
        data["active"] = True
    return WorkshopWithSpeaker(**data)


class _CacheEntry:
    def __init__(self, value: Any, loaded_at: float):
        self.value = value
        self.loaded_at = loaded_at


class CatalogService:
    """Service for reading the speaker/workshop catalog from disk."""

    def __init__(self, catalog_dir: Optional[str] = None, cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS):
        self.catalog_dir = Path(catalog_dir or os.getenv("CATALOG_DIR", "data"))
        self.cache_ttl_seconds = cache_ttl_seconds
        self._cache: Dict[str, _CacheEntry] = {}
        logger.info(f"Catalog service reading from {self.catalog_dir} (ttl={cache_ttl_seconds}s)")

    def invalidate(self) -> None:
        """Drop every cached list."""
        self._cache.clear()

    def _cached(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if time.monotonic() - entry.loaded_at >= self.cache_ttl_seconds:
            del self._cache[key]
            return None
        return entry.value

    def _store(self, key: str, value: Any) -> Any:
        self._cache[key] = _CacheEntry(value, time.monotonic())
        return value

    def _read_records(self, filename: str) -> List[Dict[str, Any]]:
        path = self.catalog_dir / filename
        if not path.exists():
            logger.warning(f"Catalog file not found: {path}")
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Failed to read {path}: {str(e)}")

        if isinstance(data, dict):
            # {"speakers": [...]} style exports
            data = next((v for v in data.values() if isinstance(v, list)), [])
        if not isinstance(data, list):
            raise CatalogError(f"Expected a list of records in {path}")
        return [r for r in data if isinstance(r, dict)]

    def _load_speakers(self) -> List[Speaker]:
        speakers = []
        for record in self._read_records(SPEAKERS_FILE):
            try:
                speakers.append(speaker_from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid speaker record {record.get('slug') or record.get('name')}: {e}")
        logger.info(f"Loaded {len(speakers)} speakers from catalog")
        return speakers

    async def get_all_speakers(self) -> List[Speaker]:
        cached = self._cached("speakers")
        if cached is not None:
            return list(cached)
        speakers = await asyncio.to_thread(self._load_speakers)
        return list(self._store("speakers", speakers))

    async def get_speaker_by_slug(self, slug: str) -> Optional[Speaker]:
        for speaker in await self.get_all_speakers():
            if speaker.slug == slug:
                return speaker
        return None

    async def get_active_workshops(self) -> List[WorkshopWithSpeaker]:
        """Active workshops with speaker name/slug joined in."""
        cached = self._cached("workshops")
        if cached is not None:
            return list(cached)

        speakers_by_id = {s.id: s for s in await self.get_all_speakers() if s.id is not None}
        records = await asyncio.to_thread(self._read_records, WORKSHOPS_FILE)

        workshops = []
        for record in records:
            try:
                workshop = workshop_from_record(record, speakers_by_id)
            except ValidationError as e:
                logger.warning(f"Skipping invalid workshop record {record.get('slug')}: {e}")
                continue
            if workshop.active:
                workshops.append(workshop)

        logger.info(f"Loaded {len(workshops)} active workshops from catalog")
        return list(self._store("workshops", workshops))


# Singleton instance
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get or create the catalog service instance."""
    global _catalog_service
    if _catalog_service is None:
        settings = get_settings()
        _catalog_service = CatalogService(
            catalog_dir=settings.catalog_dir,
            cache_ttl_seconds=settings.catalog_cache_ttl_seconds,
        )
    return _catalog_service


def reset_catalog_service() -> None:
    """Drop the singleton so the next call re-reads settings."""
    global _catalog_service
    _catalog_service = None
