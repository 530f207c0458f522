"""Short German stories built from the learner's own vocabulary."""

import random
import re

import httpx

import config
from vocabtutor.logger import get_logger
from vocabtutor.models import VocabularyRecord
from vocabtutor.store import VocabularyStore
from vocabtutor.tutor_client import ask_tutor, load_prompt_template

_EDGE_NON_LETTERS = re.compile(r"^[\W\d_]+|[\W\d_]+$")


class StoryUnavailableError(Exception):
    """Raised when the store holds no words to build a story from."""

    pass


def collect_german_words(records: list[VocabularyRecord]) -> list[str]:
    """
    Gather the German word pool for a story.

    Takes each headword (the last token of a multi-word headword) plus every
    capitalized word of the German example sentences.

    Returns:
        Sorted, de-duplicated words
    """
    words = set()
    for record in records:
        tokens = record.original.split()
        if tokens:
            words.add(tokens[-1])

        for example in record.examples:
            for token in example.german.split():
                if token[0].isupper():
                    word = _EDGE_NON_LETTERS.sub("", token)
                    if word:
                        words.add(word)

    return sorted(words)


def select_random_words(
    words: list[str], count: int, rng: random.Random | None = None
) -> list[str]:
    """Pick up to count distinct words at random."""
    rng = rng or random.Random()
    return rng.sample(words, min(count, len(words)))


def build_story_prompt(words: list[str]) -> str:
    template = load_prompt_template(config.STORY_PROMPT)
    return template.format(words=", ".join(words))


async def generate_story(
    store: VocabularyStore,
    client: httpx.AsyncClient,
    count: int = config.STORY_WORD_COUNT,
    rng: random.Random | None = None,
) -> str:
    """
    Ask the tutor for a short story using stored vocabulary.

    Args:
        store: Vocabulary store to draw words from
        client: Async HTTP client for the tutor
        count: Maximum number of words to include
        rng: Random source for word selection

    Returns:
        The story text

    Raises:
        StoryUnavailableError: If the store has no words
    """
    logger = get_logger()
    words = collect_german_words(store.read_all())
    if not words:
        raise StoryUnavailableError("No words stored yet. Look up some words first.")

    selected = select_random_words(words, count, rng)
    logger.info(f"Generating story with {len(selected)} of {len(words)} words")

    story = await ask_tutor(build_story_prompt(selected), client)
    return story.strip()
