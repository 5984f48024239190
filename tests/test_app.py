"""
Tests for the HTTP layer.
"""

import os
import time
import unittest
from collections import deque
from unittest.mock import patch

from fastapi.testclient import TestClient

from app import app, LAST_REQUESTS_BY_IP, prune_idle_buckets
from catalog_service import CatalogError, get_catalog_service
from speaker_matching import Speaker, WorkshopWithSpeaker


ARTICLE = (
    "Generative AI is changing leadership. Leadership teams need an automation "
    "strategy and generative AI governance. Automation matters."
)


class FakeCatalog:
    """In-memory stand-in for CatalogService."""

    def __init__(self, speakers, workshops, fail_workshops=False):
        self.speakers = speakers
        self.workshops = workshops
        self.fail_workshops = fail_workshops

    async def get_all_speakers(self):
        return list(self.speakers)

    async def get_speaker_by_slug(self, slug):
        return next((s for s in self.speakers if s.slug == slug), None)

    async def get_active_workshops(self):
        if self.fail_workshops:
            raise CatalogError("workshops table unavailable")
        return list(self.workshops)


class BrokenCatalog(FakeCatalog):

    async def get_all_speakers(self):
        raise CatalogError("speakers table unavailable")


SPEAKERS = [
    Speaker(
        slug="ada-lovelace",
        name="Ada Lovelace",
        title="AI Ethicist",
        topics=["Generative AI", "Leadership"],
        expertise=["AI Governance"],
        industries=["Technology"],
        bio="Ada helps teams adopt automation.",
        fee="$20k",
        location="London, United Kingdom",
    ),
    Speaker(
        slug="grace-hopper",
        name="Grace Hopper",
        topics=["Leadership"],
        industries=["Technology"],
        fee="$22k",
        location="Manchester, United Kingdom",
    ),
    Speaker(slug="hidden", name="Hidden", industries=["Technology"], listed=False),
]

WORKSHOPS = [
    WorkshopWithSpeaker(
        slug="ai-governance-101",
        title="AI Governance Bootcamp",
        short_description="Hands-on automation",
        topics=["AI Governance"],
        speaker_name="Ada Lovelace",
    ),
]


class TestApi(unittest.TestCase):

    def setUp(self):
        LAST_REQUESTS_BY_IP.clear()
        self.catalog = FakeCatalog(SPEAKERS, WORKSHOPS)
        app.dependency_overrides[get_catalog_service] = lambda: self.catalog
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_similar_speakers(self):
        response = self.client.get("/api/speakers/ada-lovelace/similar")
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual([s["slug"] for s in body["similar"]], ["grace-hopper"])
        self.assertGreater(body["similar"][0]["score"], 0)

    def test_similar_speakers_unknown_slug(self):
        response = self.client.get("/api/speakers/nobody/similar")
        self.assertEqual(response.status_code, 404)

    def test_similarity_breakdown(self):
        response = self.client.get("/api/speakers/ada-lovelace/similarity/grace-hopper")
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(
            set(body["breakdown"]),
            {"industries", "expertise", "topics", "fee_range", "location"},
        )
        self.assertAlmostEqual(body["breakdown"]["industries"]["score"], 1.0)

    def test_keyword_match_requires_content(self):
        response = self.client.post("/api/admin/tools/keyword-match", json={"content": "  "})
        self.assertEqual(response.status_code, 400)

    def test_keyword_match_rejects_short_content(self):
        response = self.client.post("/api/admin/tools/keyword-match", json={"content": "Generative AI"})
        self.assertEqual(response.status_code, 400)

    def test_keyword_match_rejects_unknown_mode(self):
        response = self.client.post(
            "/api/admin/tools/keyword-match", json={"content": ARTICLE, "mode": "deep"}
        )
        self.assertEqual(response.status_code, 422)

    def test_keyword_match_quick(self):
        response = self.client.post("/api/admin/tools/keyword-match", json={"content": ARTICLE})
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(body["mode"], "quick")
        self.assertIn("generative ai", body["extracted_keywords"])
        self.assertEqual(body["top_speakers"][0]["slug"], "ada-lovelace")
        self.assertTrue(body["top_speakers"][0]["has_workshops"])
        self.assertEqual(body["top_workshops"][0]["slug"], "ai-governance-101")
        self.assertTrue(body["suggestions"])

    def test_keyword_match_full(self):
        response = self.client.post(
            "/api/admin/tools/keyword-match",
            json={"content": ARTICLE, "mode": "full", "max_speakers": 1},
        )
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(body["mode"], "full")
        self.assertEqual(len(body["speakers"]), 1)

        speaker = body["speakers"][0]
        self.assertEqual(speaker["speaker_url"], "/speakers/ada-lovelace")
        self.assertEqual(speaker["workshop_count"], 1)
        self.assertLessEqual(len(speaker["matched_keywords"]), 5)
        self.assertEqual(speaker["matched_keywords"][0]["keyword"], "generative ai")
        self.assertEqual(body["workshops"][0]["workshop_url"], "/ai-workshops/ai-governance-101")

    def test_keyword_match_survives_workshop_failure(self):
        self.catalog.fail_workshops = True
        response = self.client.post(
            "/api/admin/tools/keyword-match", json={"content": ARTICLE, "mode": "full"}
        )
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(body["workshops"], [])
        self.assertEqual(body["speakers"][0]["slug"], "ada-lovelace")
        self.assertFalse(body["speakers"][0]["has_workshops"])

    def test_keyword_match_catalog_unavailable(self):
        app.dependency_overrides[get_catalog_service] = lambda: BrokenCatalog([], [])
        response = self.client.post("/api/admin/tools/keyword-match", json={"content": ARTICLE})
        self.assertEqual(response.status_code, 503)

    def test_keyword_match_docs(self):
        response = self.client.get("/api/admin/tools/keyword-match")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["method"], "POST")


class TestRateLimit(unittest.TestCase):

    def setUp(self):
        LAST_REQUESTS_BY_IP.clear()
        app.dependency_overrides[get_catalog_service] = lambda: FakeCatalog(SPEAKERS, WORKSHOPS)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        LAST_REQUESTS_BY_IP.clear()

    def test_requests_over_limit_rejected(self):
        with patch.dict(os.environ, {"RATE_LIMIT_RPM": "2"}):
            statuses = [
                self.client.post("/api/admin/tools/keyword-match", json={"content": ARTICLE}).status_code
                for _ in range(3)
            ]
        self.assertEqual(statuses, [200, 200, 429])

    def test_expired_requests_leave_the_window(self):
        stale = time.time() - 120
        LAST_REQUESTS_BY_IP["testclient"] = deque([stale, stale])
        with patch.dict(os.environ, {"RATE_LIMIT_RPM": "2"}):
            response = self.client.post("/api/admin/tools/keyword-match", json={"content": ARTICLE})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(LAST_REQUESTS_BY_IP["testclient"]), 1)

    def test_idle_clients_are_forgotten(self):
        now = time.time()
        LAST_REQUESTS_BY_IP["10.0.0.1"] = deque([now - 120])
        LAST_REQUESTS_BY_IP["10.0.0.2"] = deque()
        LAST_REQUESTS_BY_IP["10.0.0.3"] = deque([now - 120, now - 5])

        prune_idle_buckets(now)

        self.assertEqual(list(LAST_REQUESTS_BY_IP), ["10.0.0.3"])


if __name__ == "__main__":
    unittest.main()
