"""
Configuration for the speaker similarity and keyword matching system.
Adjust weights and heuristic tables here.
"""

# Similarity factor weights (must sum to 1.0)
WEIGHTS = {
    "industries": 0.35,
    "expertise": 0.30,
    "topics": 0.15,
    "fee_range": 0.12,
    "location": 0.08,
}

# Location scoring
LOCATION_SCORES = {
    "exact_match": 1.0,
    "shared_base": 0.5,
    "shared_span": 0.5,
    "same_country": 0.3,
}

US_STATES = frozenset([
    "california", "new york", "texas", "florida", "washington",
])

US_COUNTRY_MARKERS = ("usa", "united states")

# Default number of related speakers shown on a profile page
SIMILAR_SPEAKERS_LIMIT = 3

# Keyword extraction
MIN_TOKEN_LENGTH = 3
MIN_KEYWORD_FREQUENCY = 2
MAX_SINGLE_KEYWORDS = 50
PHRASE_SIZES = (2, 3)

STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "this", "that", "these", "those", "it", "its", "they", "them", "their",
    "we", "us", "our", "you", "your", "he", "she", "him", "her", "his",
    "who", "what", "where", "when", "why", "how", "which", "whom",
    "i", "me", "my", "myself", "yourself", "himself", "herself", "itself",
    "about", "above", "after", "again", "against", "all", "also", "am",
    "any", "because", "before", "being", "below", "between", "both",
    "during", "each", "few", "further", "here", "into", "just", "more",
    "most", "no", "nor", "not", "now", "only", "other", "out", "over",
    "own", "same", "so", "some", "such", "than", "then", "there", "through",
    "too", "under", "until", "up", "very", "while", "yet",
])

# AI / tech / business vocabulary that earns a scoring bonus
HIGH_VALUE_KEYWORDS = frozenset([
    "ai", "artificial intelligence", "machine learning", "ml", "deep learning",
    "neural network", "nlp", "natural language processing", "chatgpt", "gpt",
    "claude", "gemini", "llm", "large language model", "generative ai",
    "automation", "robotics", "computer vision", "data science", "analytics",
    "transformers", "prompt engineering", "rag", "fine-tuning", "embeddings",
    "siri", "alexa", "voice assistant", "conversational ai", "chatbot",
    "enterprise ai", "ai strategy", "ai implementation", "ai adoption",
    "ai ethics", "responsible ai", "ai governance", "ai safety",
    "productivity", "workflow", "efficiency", "roi", "digital transformation",
    "innovation", "entrepreneurship", "startup", "venture capital",
    "healthcare ai", "fintech", "edtech", "agritech",
])

# Field scoring
KEYWORD_BASE_SCORES = {
    "high_value": 3,
    "regular": 1,
}
PARTIAL_MATCH_MULTIPLIER = 0.5

SPEAKER_FIELD_WEIGHTS = {
    "topics": 3,
    "expertise": 3,
    "programs": 2,
    "industries": 1.5,
    "bio": 1,
    "title": 2,
    "tags": 2,
}

WORKSHOP_FIELD_WEIGHTS = {
    "topics": 3,
    "keywords": 3,
    "title": 2.5,
    "description": 1,
    "short_description": 1.5,
    "target_audience": 2,
    "learning_objectives": 2,
    "key_takeaways": 2,
}

# Speakers with bookable workshops are more actionable to recommend
WORKSHOP_BOOST = 1.5

# Content matching limits
MATCH_DEFAULTS = {
    "max_speakers": 10,
    "max_workshops": 5,
    "min_score": 2,
}

QUICK_MATCH_LIMITS = {
    "max_speakers": 5,
    "max_workshops": 3,
    "min_score": 3,
}

# Suggestion generation
SUGGESTION_LIMITS = {
    "speakers_with_workshops": 3,
    "workshops": 2,
    "speakers_without_workshops": 2,
    "keywords": 3,
    "keywords_secondary": 2,
}

LINK_PATHS = {
    "speaker": "/speakers/{slug}",
    "workshop": "/ai-workshops/{slug}",
}
