"""Per-chat practice sessions: sample, ask, grade, record, advance."""

import asyncio
import random
from typing import Hashable, Optional

import config
from vocabtutor import sampler
from vocabtutor.formatting import (
    format_feedback,
    format_question,
    format_sentence_question,
    format_summary,
)
from vocabtutor.logger import get_logger
from vocabtutor.matcher import AnswerMatcher
from vocabtutor.models import PracticeSentence, PracticeSession, PracticeType
from vocabtutor.store import VocabularyStore


class PracticeUnavailableError(Exception):
    """Raised when practice is requested but there is nothing to practice."""

    pass


class SessionTable:
    """Keyed table of live practice sessions.

    Callers must hold ``lock`` across any get-mutate-insert sequence.
    """

    def __init__(self):
        self.lock = asyncio.Lock()
        self._sessions: dict[Hashable, PracticeSession] = {}

    def get(self, chat_id: Hashable) -> Optional[PracticeSession]:
        return self._sessions.get(chat_id)

    def insert(self, chat_id: Hashable, session: PracticeSession) -> None:
        self._sessions[chat_id] = session

    def remove(self, chat_id: Hashable) -> Optional[PracticeSession]:
        return self._sessions.pop(chat_id, None)

    def __contains__(self, chat_id: Hashable) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


class PracticeManager:
    """Runs practice sessions for many chats against one vocabulary store.

    Store reads and writes run in a worker thread, since the store blocks on
    its file lock while another process holds it.
    """

    def __init__(
        self,
        store: VocabularyStore,
        matcher: AnswerMatcher | None = None,
        rng: random.Random | None = None,
        sessions: SessionTable | None = None,
        sentences: list[PracticeSentence] | None = None,
    ):
        self.store = store
        self.matcher = matcher or AnswerMatcher()
        self.rng = rng or random.Random()
        self.sessions = sessions or SessionTable()
        self.sentences = sentences or []
        self.logger = get_logger()

    def _draw(self) -> Optional[dict]:
        """
        Pick the next practice item.

        With sentences available, a coin flip chooses between a word and a
        sentence (sentences only when the store is empty).

        Returns:
            Session fields for the new item, or None if there is nothing to practice
        """
        records = self.store.read_all()
        if self.sentences and (not records or self.rng.random() < 0.5):
            return {
                "practice_type": PracticeType.SENTENCE,
                "current_item": None,
                "current_sentence": self.rng.choice(self.sentences),
                "expecting_reverse": False,
            }

        item = sampler.sample(records, self.rng)
        if item is None:
            return None
        return {
            "practice_type": PracticeType.WORD,
            "current_item": item,
            "current_sentence": None,
            "expecting_reverse": self.rng.random() < 0.5,
        }

    @staticmethod
    def _question(session: PracticeSession) -> str:
        if session.practice_type is PracticeType.SENTENCE:
            return format_sentence_question(session.current_sentence)
        return format_question(session.current_item, session.expecting_reverse)

    def is_active(self, chat_id: Hashable) -> bool:
        return chat_id in self.sessions

    async def start(self, chat_id: Hashable) -> str:
        """
        Start (or restart) practice for a chat.

        Args:
            chat_id: Chat or user identity

        Returns:
            The first question prompt

        Raises:
            PracticeUnavailableError: If there are no words or sentences to practice
            StorageError: If the store cannot be read
        """
        async with self.sessions.lock:
            drawn = await asyncio.to_thread(self._draw)
            if drawn is None:
                raise PracticeUnavailableError("No words available for practice yet.")
            session = PracticeSession(**drawn)
            self.sessions.insert(chat_id, session)

        self.logger.info(f"Practice started for {chat_id} ({session.practice_type.value})")
        return self._question(session)

    async def submit(self, chat_id: Hashable, answer: str) -> Optional[str]:
        """
        Grade an answer and advance the session on a correct one.

        Args:
            chat_id: Chat or user identity
            answer: Raw answer text

        Returns:
            Feedback (plus the next question on success), or None if the
            chat has no active session
        """
        async with self.sessions.lock:
            current = self.sessions.get(chat_id)
            if current is None:
                return None

            # Work on a copy so a storage failure leaves the table untouched
            session = current.model_copy(deep=True)
            if session.practice_type is PracticeType.SENTENCE:
                label = session.current_sentence.missing_word
                check = self.matcher.check_sentence(answer, session.current_sentence)
            else:
                item = session.current_item
                label = item.original
                check = self.matcher.check(answer.strip(), item, session.expecting_reverse)

            session.items_attempted += 1
            if check.is_correct:
                session.correct_count += 1
            else:
                session.wrong_count += 1

            if session.practice_type is PracticeType.WORD:
                key = item.translation if session.expecting_reverse else item.original
                await asyncio.to_thread(self.store.update_stats, key, check.is_correct)

            parts = [format_feedback(check)]
            if session.items_attempted % config.STATS_INTERVAL == 0:
                parts.append(format_summary(session))

            if check.is_correct:
                drawn = await asyncio.to_thread(self._draw)
                if drawn is not None:
                    session = session.model_copy(update=drawn)
                    parts.append(self._question(session))

            self.sessions.insert(chat_id, session)

        self.logger.info(f"Answer from {chat_id} for '{label}': {check.result.value}")
        return "\n\n".join(parts)

    async def stop(self, chat_id: Hashable) -> str:
        """End practice for a chat and return the final summary."""
        async with self.sessions.lock:
            session = self.sessions.remove(chat_id)

        self.logger.info(f"Practice stopped for {chat_id}")
        if session is None or not session.items_attempted:
            return "Practice stopped."
        return f"Practice stopped.\n\n{format_summary(session)}"
