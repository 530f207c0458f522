"""Grade free-text practice answers with exact, fuzzy and article-aware matching."""

from typing import Callable, Iterable

from rapidfuzz.distance import JaroWinkler

import config
from vocabtutor.models import AnswerCheck, AnswerResult, PracticeSentence, VocabularyRecord

SimilarityFn = Callable[[str, str], float]

MISSING_ARTICLE_FEEDBACK = "Don't forget the article!"


def normalize(text: str) -> str:
    """Lowercase and keep only letters and whitespace."""
    kept = "".join(c for c in text.lower() if c.isalpha() or c.isspace())
    return kept.strip()


def jaro_winkler(a: str, b: str) -> float:
    return JaroWinkler.similarity(a, b)


class AnswerMatcher:
    """Checks answers against a vocabulary record.

    A similarity strictly above the threshold counts as a near miss (or, for
    a noun with the right article, as correct). The default metric is
    Jaro-Winkler, which weights shared prefixes so typos in German case
    endings score higher than wrong stems.
    """

    def __init__(
        self,
        similarity: SimilarityFn = jaro_winkler,
        threshold: float = config.SIMILARITY_THRESHOLD,
    ):
        self.similarity = similarity
        self.threshold = threshold

    def check(
        self, answer: str, record: VocabularyRecord, expecting_reverse: bool
    ) -> AnswerCheck:
        """
        Grade an answer.

        Args:
            answer: Raw user text
            record: The record being practiced
            expecting_reverse: True if the answer should be the translation

        Returns:
            AnswerCheck with the graded result
        """
        normalized = normalize(answer)
        if expecting_reverse:
            return self._check_translation(normalized, record)
        if record.is_noun:
            return self._check_noun(normalized, record)
        return self._check_original(normalized, record)

    def _best_similarity(self, answer: str, variants: Iterable[str]) -> float:
        return max((self.similarity(answer, v) for v in variants), default=0.0)

    def _grade_against(
        self, answer: str, variants: list[str], expected: str
    ) -> AnswerCheck:
        # Digits, dashes and stray punctuation normalize to ""
        variants = [v for v in variants if v]
        if not answer:
            return AnswerCheck(result=AnswerResult.WRONG, expected=expected, similarity=0.0)
        if answer in variants:
            return AnswerCheck(result=AnswerResult.CORRECT)

        best = self._best_similarity(answer, variants)
        if best > self.threshold:
            return AnswerCheck(
                result=AnswerResult.ALMOST_CORRECT, expected=expected, similarity=best
            )
        return AnswerCheck(result=AnswerResult.WRONG, expected=expected, similarity=best)

    def _check_translation(self, answer: str, record: VocabularyRecord) -> AnswerCheck:
        variants = [normalize(record.translation)]
        variants.extend(normalize(part) for part in record.translation.split(","))
        variants.extend(normalize(ex.russian) for ex in record.examples)
        return self._grade_against(answer, variants, record.translation)

    def _check_noun(self, answer: str, record: VocabularyRecord) -> AnswerCheck:
        article = record.article
        noun = normalize(record.original)
        expected = f"{article} {noun}"

        tokens = answer.split()
        if len(tokens) < 2:
            return AnswerCheck(
                result=AnswerResult.WRONG,
                expected=expected,
                feedback=MISSING_ARTICLE_FEEDBACK,
            )

        if tokens[0].lower() != article:
            return AnswerCheck(result=AnswerResult.WRONG_ARTICLE, expected=expected)

        score = self.similarity(" ".join(tokens[1:]), noun)
        if score > self.threshold:
            return AnswerCheck(result=AnswerResult.CORRECT, similarity=score)
        return AnswerCheck(
            result=AnswerResult.ALMOST_CORRECT, expected=expected, similarity=score
        )

    def _check_original(self, answer: str, record: VocabularyRecord) -> AnswerCheck:
        variants = [normalize(record.original)]
        for conjugation in record.conjugations or []:
            tokens = conjugation.split()
            if tokens:
                variants.append(normalize(tokens[-1]))
        for ex in record.examples:
            variants.extend(normalize(token) for token in ex.german.split())
        return self._grade_against(answer, variants, record.original)

    def check_sentence(self, answer: str, sentence: PracticeSentence) -> AnswerCheck:
        """Fill-in-the-blank answers must match the missing word exactly, ignoring case."""
        if answer.strip().lower() == sentence.missing_word.strip().lower():
            return AnswerCheck(result=AnswerResult.CORRECT)
        return AnswerCheck(result=AnswerResult.WRONG, expected=sentence.missing_word)
