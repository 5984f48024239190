"""
Unit tests for article keyword extraction.
"""

import unittest
from speaker_matching import extract_keywords
from speaker_matching.config import MAX_SINGLE_KEYWORDS
from speaker_matching.keyword_extractor import normalize_text, tokenize, extract_phrases


SAMPLE_ARTICLE = (
    "Our keynote on generative AI and machine learning transformed "
    "how enterprises adopt automation"
)


class TestNormalization(unittest.TestCase):

    def test_normalize_strips_punctuation_keeps_hyphens(self):
        self.assertEqual(
            normalize_text("  Fine-Tuning, RAG & ChatGPT!\n\nNow.  "),
            "fine-tuning rag chatgpt now",
        )

    def test_non_ascii_letters_split_words(self):
        self.assertEqual(normalize_text("Café naïve"), "caf na ve")

    def test_tokenize_drops_short_stop_and_numeric_tokens(self):
        tokens = tokenize("AI is the future of 2025 work for our teams")
        self.assertEqual(tokens, ["future", "work", "teams"])

    def test_phrases_found_in_windows(self):
        words = "we build large language model tools with generative ai".split()
        self.assertEqual(extract_phrases(words), ["large language model", "generative ai"])


class TestExtractKeywords(unittest.TestCase):

    def test_empty_input(self):
        self.assertEqual(extract_keywords(""), [])
        self.assertEqual(extract_keywords("   \n\t "), [])
        self.assertEqual(extract_keywords(None), [])

    def test_sample_article(self):
        keywords = extract_keywords(SAMPLE_ARTICLE)
        for expected in ("generative ai", "machine learning", "automation"):
            self.assertIn(expected, keywords)

    def test_single_mention_of_high_value_phrase_kept(self):
        keywords = extract_keywords("A short note about generative AI in marketing")
        self.assertIn("generative ai", keywords)

    def test_single_mention_of_regular_word_dropped(self):
        keywords = extract_keywords(SAMPLE_ARTICLE)
        self.assertNotIn("keynote", keywords)
        self.assertNotIn("transformed", keywords)

    def test_repeated_regular_word_kept(self):
        keywords = extract_keywords("Leadership matters. Leadership teams grow.")
        self.assertIn("leadership", keywords)
        self.assertNotIn("teams", keywords)

    def test_numbers_never_keywords(self):
        self.assertNotIn("2024", extract_keywords("2024 was big, 2024 was fast"))

    def test_phrases_first_then_singles_by_frequency(self):
        text = "startup startup startup fintech culture culture generative ai"
        self.assertEqual(
            extract_keywords(text),
            ["generative ai", "startup", "culture", "fintech"],
        )

    def test_no_duplicates(self):
        keywords = extract_keywords("generative ai generative ai automation automation")
        self.assertEqual(len(keywords), len(set(keywords)))

    def test_single_keywords_capped(self):
        text = " ".join(f"topic{i} topic{i}" for i in range(MAX_SINGLE_KEYWORDS + 10))
        self.assertEqual(len(extract_keywords(text)), MAX_SINGLE_KEYWORDS)

    def test_deterministic(self):
        self.assertEqual(extract_keywords(SAMPLE_ARTICLE), extract_keywords(SAMPLE_ARTICLE))


if __name__ == "__main__":
    unittest.main()
