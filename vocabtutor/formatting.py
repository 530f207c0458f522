"""Display text for records, practice questions and feedback."""

from vocabtutor.input_classifier import has_cyrillic
from vocabtutor.models import (
    AnswerCheck,
    AnswerResult,
    PracticeSentence,
    PracticeSession,
    VocabularyRecord,
)


def format_record(record: VocabularyRecord) -> str:
    """Render a stored record as a lookup card."""
    lines = []
    headword = record.original
    article = record.article
    if article and not has_cyrillic(headword) and not headword.lower().startswith(f"{article} "):
        headword = f"{article} {headword}"
    lines.append(f"➡️ {headword}")
    lines.append(f"⬅️ {record.translation}")

    if record.grammar_forms:
        lines.append("")
        lines.append("🔤 Grammar:")
        lines.extend(f"• {form}" for form in record.grammar_forms)

    if record.conjugations:
        lines.append("")
        lines.append("📖 Conjugation:")
        lines.extend(f"• {conj}" for conj in record.conjugations)

    if record.examples:
        lines.append("")
        lines.append("📚 Examples:")
        lines.extend(
            f"{i}. {ex.german} — {ex.russian}" for i, ex in enumerate(record.examples, start=1)
        )

    return "\n".join(lines)


def format_tutor_text(record: VocabularyRecord) -> str:
    """
    Render a record in the layout the tutor uses for a German query.

    Parsing the result with parse_tutor_response gives back the same
    original, translation and examples.
    """
    lines = [record.original, record.translation]
    lines.extend(record.grammar_forms)
    lines.extend(record.conjugations or [])
    lines.extend(
        f"{i}. {ex.german} - {ex.russian}" for i, ex in enumerate(record.examples, start=1)
    )
    return "\n".join(lines)


def format_question(record: VocabularyRecord, expecting_reverse: bool) -> str:
    """Question prompt for a practice item."""
    if expecting_reverse:
        prompt = record.original
        if record.is_noun:
            prompt = f"{record.article} {record.original}"
        return f"Translate into Russian:\n👅 {prompt}"

    if record.is_noun:
        return f"Translate into German (don't forget the article!):\n👅 {record.translation}"
    return f"Translate into German:\n👅 {record.translation}"


def format_sentence_question(sentence: PracticeSentence) -> str:
    return (
        "Fill in the blank with the right word:\n\n"
        f"{sentence.german_sentence}\n\n"
        f"Translation: {sentence.russian_translation}"
    )


def format_feedback(check: AnswerCheck) -> str:
    if check.result is AnswerResult.CORRECT:
        message = "✅ Correct!"
    elif check.result is AnswerResult.ALMOST_CORRECT:
        message = (
            f"⚠️ Almost correct! Expected: {check.expected}\n"
            f"Similarity: {check.similarity * 100:.0f}%"
        )
    elif check.result is AnswerResult.WRONG_ARTICLE:
        message = f"❌ Wrong article! Correct answer: {check.expected}"
    else:
        message = f"❌ Wrong! Correct answer: {check.expected}"

    if check.feedback:
        message += f"\n{check.feedback}"
    return message


def format_summary(session: PracticeSession) -> str:
    return (
        "📊 Practice statistics:\n"
        f"Words practiced: {session.items_attempted}\n"
        f"Correct: {session.correct_count}\n"
        f"Wrong: {session.wrong_count}\n"
        f"Accuracy: {session.accuracy:.1f}%"
    )


def format_word_stats(word: str, stats: dict) -> str:
    return (
        f"📊 Statistics for '{word}'\n\n"
        f"Total attempts: {stats['total']}\n"
        f"Correct: {stats['correct']}\n"
        f"Wrong: {stats['wrong']}\n"
        f"Accuracy: {stats['accuracy']:.1f}%"
    )
