from vocabtutor.formatting import (
    format_feedback,
    format_question,
    format_record,
    format_summary,
    format_word_stats,
)
from vocabtutor.models import AnswerCheck, AnswerResult, PracticeSession, VocabularyRecord


def test_record_card_for_noun(tisch):
    card = format_record(tisch)

    lines = card.splitlines()
    assert lines[0] == "➡️ der Tisch"
    assert lines[1] == "⬅️ стол"
    assert "• der" in lines
    assert "1. Der Tisch ist groß — Стол большой" in lines


def test_record_card_for_verb(gehen):
    card = format_record(gehen)

    assert card.startswith("➡️ gehen\n⬅️ идти, ходить")
    assert "• sie/Sie gehen" in card
    assert "📖" in card


def test_record_card_keeps_existing_article():
    record = VocabularyRecord(original="die Katze", translation="кошка", grammar_forms=["die"])
    assert format_record(record).splitlines()[0] == "➡️ die Katze"


def test_questions(tisch, gehen):
    assert format_question(tisch, expecting_reverse=True).endswith("der Tisch")
    assert "article" in format_question(tisch, expecting_reverse=False)
    assert format_question(gehen, expecting_reverse=False).endswith("идти, ходить")
    assert "article" not in format_question(gehen, expecting_reverse=False)


def test_feedback():
    assert format_feedback(AnswerCheck(result=AnswerResult.CORRECT)) == "✅ Correct!"

    almost = AnswerCheck(result=AnswerResult.ALMOST_CORRECT, expected="стол", similarity=0.912)
    assert format_feedback(almost) == "⚠️ Almost correct! Expected: стол\nSimilarity: 91%"

    wrong = AnswerCheck(result=AnswerResult.WRONG, expected="der tisch", feedback="Don't forget the article!")
    assert format_feedback(wrong) == "❌ Wrong! Correct answer: der tisch\nDon't forget the article!"

    article = AnswerCheck(result=AnswerResult.WRONG_ARTICLE, expected="der tisch")
    assert "Wrong article" in format_feedback(article)


def test_summary(tisch):
    session = PracticeSession(
        current_item=tisch, expecting_reverse=False, items_attempted=3, correct_count=2, wrong_count=1
    )
    summary = format_summary(session)

    assert "Words practiced: 3" in summary
    assert "Accuracy: 66.7%" in summary


def test_word_stats():
    text = format_word_stats("Tisch", {"total": 4, "correct": 3, "wrong": 1, "accuracy": 75.0})
    assert "Statistics for 'Tisch'" in text
    assert "Accuracy: 75.0%" in text
