"""Classify free-text user input into a request type."""

import re
from enum import Enum

import config

_CYRILLIC = re.compile(r"[\u0400-\u04FF\u0500-\u052F]")


class InputType(str, Enum):
    RUSSIAN_WORD = "russian_word"
    RUSSIAN_SENTENCE = "russian_sentence"
    GERMAN_WORD = "german_word"
    GERMAN_SENTENCE = "german_sentence"
    EXPLANATION = "explanation"
    GRAMMAR_CHECK = "grammar_check"
    FREEFORM = "freeform"
    SIMPLIFY = "simplify"

    @property
    def is_word(self) -> bool:
        return self in (InputType.RUSSIAN_WORD, InputType.GERMAN_WORD)

    @property
    def is_sentence(self) -> bool:
        return self in (InputType.RUSSIAN_SENTENCE, InputType.GERMAN_SENTENCE)


# Order matters: "??:" must be checked before "?:"
PREFIXES = (
    ("??:", InputType.FREEFORM),
    ("?:", InputType.EXPLANATION),
    ("!:", InputType.GRAMMAR_CHECK),
    ("-:", InputType.SIMPLIFY),
)


def has_cyrillic(text: str) -> bool:
    return _CYRILLIC.search(text) is not None


def analyze_input(text: str) -> InputType:
    """
    Decide what kind of request a message is.

    Args:
        text: Raw user message

    Returns:
        The detected InputType
    """
    for prefix, input_type in PREFIXES:
        if text.startswith(prefix):
            return input_type

    if has_cyrillic(text):
        return InputType.RUSSIAN_WORD if " " not in text else InputType.RUSSIAN_SENTENCE

    words = text.split()
    is_german_noun = len(words) == 2 and words[0] in config.ARTICLES
    if " " not in text or is_german_noun:
        return InputType.GERMAN_WORD
    return InputType.GERMAN_SENTENCE


def strip_prefix(text: str) -> str:
    """Remove a special request prefix, if any, and surrounding whitespace."""
    for prefix, _ in PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):].strip()
    return text.strip()
