"""Configuration settings for the vocabtutor practice engine."""

import os
from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
PROMPTS_DIR = PROJECT_ROOT / "prompts"
LOGS_DIR = PROJECT_ROOT / "logs"

# Vocabulary storage (single JSON array of records)
STORAGE_FILE = Path(os.environ.get("STORAGE_FILE", DATA_DIR / "translations_storage.json"))

# Fill-in-the-blank sentences for practice (read-only JSON array)
PRACTICE_SENTENCES_FILE = Path(
    os.environ.get("PRACTICE_SENTENCES_FILE", DATA_DIR / "practice_sentences.json")
)

# Prompt templates
GERMAN_WORD_PROMPT = PROMPTS_DIR / "german_word.txt"
RUSSIAN_WORD_PROMPT = PROMPTS_DIR / "russian_word.txt"
GERMAN_SENTENCE_PROMPT = PROMPTS_DIR / "german_sentence.txt"
RUSSIAN_SENTENCE_PROMPT = PROMPTS_DIR / "russian_sentence.txt"
EXPLANATION_PROMPT = PROMPTS_DIR / "explanation.txt"
GRAMMAR_CHECK_PROMPT = PROMPTS_DIR / "grammar_check.txt"
FREEFORM_PROMPT = PROMPTS_DIR / "freeform.txt"
SIMPLIFY_PROMPT = PROMPTS_DIR / "simplify.txt"
CONTEXT_PROMPT = PROMPTS_DIR / "context.txt"
STORY_PROMPT = PROMPTS_DIR / "story.txt"

# Tutor API settings
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
TUTOR_MODEL = os.environ.get("TUTOR_MODEL", "claude-3-5-sonnet-20241022")
TUTOR_MAX_TOKENS = 4000
TUTOR_TIMEOUT = 60  # seconds
TUTOR_MAX_RETRIES = 3

# Practice settings
SIMILARITY_THRESHOLD = 0.85
STATS_INTERVAL = 10  # append a running summary every N answers
NEW_ITEM_WEIGHT = 2.0  # sampling weight for never-practiced records

# German grammatical-gender articles (nominative)
ARTICLES = ("der", "die", "das")

# Personal-pronoun markers that open a conjugation block in tutor output
CONJUGATION_MARKERS = ("ich ", "du ", "er/", "wir ", "ihr ", "sie/Sie")

# Batch lookup
BATCH_DELAY = 0.5  # seconds between tutor requests

# Story generation
STORY_WORD_COUNT = 100  # words drawn from the store for one story
