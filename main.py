#!/usr/bin/env python3
"""vocabtutor - German/Russian vocabulary lookup and practice from the terminal."""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

import config
from vocabtutor.formatting import format_word_stats
from vocabtutor.logger import setup_logger
from vocabtutor.lookup import handle_query, run_batch_lookup
from vocabtutor.practice import PracticeManager, PracticeUnavailableError
from vocabtutor.store import (
    ValidationError,
    VocabularyStore,
    VocabularyStoreError,
    load_practice_sentences,
)
from vocabtutor.story import StoryUnavailableError, generate_story
from vocabtutor.tutor_client import TutorError

CLI_CHAT_ID = "cli"
STOP_COMMAND = "/stop"


async def lookup(text: str, store: VocabularyStore, context: str | None) -> str:
    async with httpx.AsyncClient() as client:
        return await handle_query(text, store, client, context=context)


async def story(store: VocabularyStore) -> str:
    async with httpx.AsyncClient() as client:
        return await generate_story(store, client)


async def practice_loop(store: VocabularyStore, sentences_path: Path) -> None:
    """Interactive practice until /stop or end of input."""
    manager = PracticeManager(store, sentences=load_practice_sentences(sentences_path))
    try:
        print(await manager.start(CLI_CHAT_ID))
    except PracticeUnavailableError as e:
        print(e)
        return

    print(f"(type {STOP_COMMAND} to finish)")
    while True:
        try:
            answer = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        if answer.strip() == STOP_COMMAND:
            break
        if not answer.strip():
            continue
        print(await manager.submit(CLI_CHAT_ID, answer))

    print(await manager.stop(CLI_CHAT_ID))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="German/Russian vocabulary tutor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Look up a word (stored for practice) or translate a sentence
  python main.py lookup Wald
  python main.py lookup "Я люблю гулять"

  # Special requests
  python main.py lookup "?: Der Mann isst einen Apfel"
  python main.py lookup "!: Ich habe gestern nach Berlin gefahren"

  # Practice stored words (and sentences, if a sentences file exists)
  python main.py practice

  # A short story using your vocabulary
  python main.py story
        """,
    )
    parser.add_argument(
        "--storage",
        type=Path,
        default=config.STORAGE_FILE,
        help=f"Vocabulary file (default: {config.STORAGE_FILE})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lookup", help="Translate or explain text")
    p.add_argument("text")
    p.add_argument("--context", help="Headword of the answer you are following up on")

    p = sub.add_parser("batch", help="Look up every word in a file (one per line)")
    p.add_argument("path", type=Path)

    p = sub.add_parser("practice", help="Start practice mode")
    p.add_argument(
        "--sentences",
        type=Path,
        default=config.PRACTICE_SENTENCES_FILE,
        help=f"Fill-in-the-blank sentences (default: {config.PRACTICE_SENTENCES_FILE})",
    )

    sub.add_parser("story", help="Generate a short German story from stored words")

    p = sub.add_parser("stats", help="Show practice statistics for a word")
    p.add_argument("word")

    p = sub.add_parser("delete", help="Delete a word")
    p.add_argument("word")

    sub.add_parser("clear", help="Clear the vocabulary database")

    p = sub.add_parser("export", help="Export the vocabulary database as JSON")
    p.add_argument("path", type=Path)

    p = sub.add_parser("import", help="Replace the vocabulary database from a JSON file")
    p.add_argument("path", type=Path)

    return parser


def run(args: argparse.Namespace, store: VocabularyStore) -> None:
    if args.command == "lookup":
        print(asyncio.run(lookup(args.text, store, args.context)))

    elif args.command == "batch":
        stored, failed = run_batch_lookup(args.path, store)
        print(f"Stored {stored} new words, {len(failed)} failed.")

    elif args.command == "practice":
        asyncio.run(practice_loop(store, args.sentences))

    elif args.command == "story":
        try:
            print(asyncio.run(story(store)))
        except StoryUnavailableError as e:
            print(e)

    elif args.command == "stats":
        stats = store.word_stats(args.word)
        if stats is None:
            print("Word not found in database.")
        else:
            print(format_word_stats(args.word, stats))

    elif args.command == "delete":
        if store.delete(args.word):
            print("✅ Word deleted successfully.")
        else:
            print("❌ Word not found.")

    elif args.command == "clear":
        store.clear()
        print("Translations database has been cleared.")

    elif args.command == "export":
        args.path.write_text(store.export(), encoding="utf-8")
        print(f"Exported {len(store.read_all())} entries to {args.path}")

    elif args.command == "import":
        count = store.import_records(args.path.read_text(encoding="utf-8"))
        print(f"✅ Successfully imported {count} translations")


def main():
    args = build_parser().parse_args()
    logger = setup_logger()
    store = VocabularyStore(args.storage)

    try:
        run(args, store)
    except ValidationError as e:
        logger.error(f"Rejected: {e}")
        sys.exit(1)
    except VocabularyStoreError as e:
        logger.error(f"Storage error: {e}")
        sys.exit(1)
    except (TutorError, httpx.HTTPError) as e:
        logger.error(f"Tutor request failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
