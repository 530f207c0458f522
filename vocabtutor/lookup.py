"""Tutor lookups: classify a query, consult the store, ask the tutor, save words."""

import asyncio
from pathlib import Path

import httpx
from tqdm import tqdm

import config
from vocabtutor.formatting import format_record
from vocabtutor.input_classifier import analyze_input
from vocabtutor.logger import get_logger
from vocabtutor.parser import parse_tutor_response
from vocabtutor.store import ValidationError, VocabularyStore
from vocabtutor.tutor_client import TutorError, ask_tutor, build_prompt


def load_word_list(path: Path) -> list[str]:
    """Load words from a text file (one word per line)."""
    words = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word = line.strip()
            if word:  # Skip empty lines
                words.append(word)
    return words


async def handle_query(
    text: str,
    store: VocabularyStore,
    client: httpx.AsyncClient,
    context: str | None = None,
) -> str:
    """
    Answer a free-text query.

    Single words are served from the store when already known; otherwise the
    tutor is asked and the parsed record is saved.

    Args:
        text: Raw user message
        store: Vocabulary store
        client: Async HTTP client for the tutor
        context: Headword of a message being replied to, if any

    Returns:
        Display text for the user
    """
    logger = get_logger()
    text = text.strip()
    input_type = analyze_input(text)

    if input_type.is_word:
        existing = store.find(text)
        if existing is not None:
            logger.info(f"Store hit for '{text}'")
            return format_record(existing)

    logger.info(f"Asking tutor ({input_type.value}): {text}")
    reply = await ask_tutor(build_prompt(text, context), client)

    if input_type.is_word:
        record = parse_tutor_response(text, reply)
        try:
            store.upsert(record)
        except ValidationError as e:
            logger.error(f"Failed to add translation for '{text}': {e}")
        return format_record(record)

    if input_type.is_sentence:
        return f"{text} ➜ {reply.strip()}"

    return reply.strip()


async def lookup_words_async(
    words: list[str],
    store: VocabularyStore,
    delay: float = config.BATCH_DELAY,
    client: httpx.AsyncClient | None = None,
) -> tuple[int, list[str]]:
    """
    Look up and store a list of words, skipping those already stored.

    Args:
        words: Words to look up
        store: Vocabulary store
        delay: Pause between tutor requests
        client: Async HTTP client (a new one is opened if None)

    Returns:
        Tuple of (number of new records stored, list of failed words)
    """
    logger = get_logger()
    pending = [w for w in words if store.find(w) is None]
    if not pending:
        logger.info("  No words to look up (all already stored)")
        return 0, []

    logger.info(f"  Looking up {len(pending)} words...")

    async def lookup_all(http: httpx.AsyncClient) -> tuple[int, list[str]]:
        stored = 0
        failed: list[str] = []
        for word in tqdm(pending, desc="  Looking up"):
            try:
                reply = await ask_tutor(build_prompt(word), http)
                store.upsert(parse_tutor_response(word, reply))
                stored += 1
            except (TutorError, httpx.HTTPError, ValidationError) as e:
                logger.error(f"  Failed: {word} - {e}")
                failed.append(word)
            await asyncio.sleep(delay)
        return stored, failed

    if client is not None:
        return await lookup_all(client)
    async with httpx.AsyncClient() as own_client:
        return await lookup_all(own_client)


def run_batch_lookup(path: Path, store: VocabularyStore) -> tuple[int, list[str]]:
    """Run a batch lookup for every word in a word-list file."""
    logger = get_logger()
    words = load_word_list(path)
    logger.info(f"Batch lookup: loaded {len(words)} words from {path}")

    stored, failed = asyncio.run(lookup_words_async(words, store))

    logger.info(f"  Stored: {stored}")
    logger.info(f"  Failed: {len(failed)}")
    if failed:
        logger.warning(f"  Failed words: {', '.join(failed[:10])}")
    return stored, failed
