from datetime import datetime, timezone
import random

from livequiz.constants.about import EXAMPLE_DOCUMENT
from livequiz.core.document_parser import parse_quiz_document, split_header, split_question_blocks
from livequiz.core.models import QuizOption

CAPITALS_DOC = """# Capitals of Europe
Warm-up round (default timer: 10s) (negative: -0.5) (all-visible)

1) What is the capital of France?
A) Berlin
B) Paris
C) Rome
[Answer: B] (time: 15s) (+2 / -1)
[Explanation: Paris has been the capital since 987.]

2. Which cities lie on the Danube?
A. Vienna
B. Madrid
C. Budapest
[Answer: a, c]
"""


def test_single_line_question():
    result = parse_quiz_document("1) Q? A) x B) y [Answer: B]")

    assert result.errors == []
    assert result.warnings == []
    assert result.answer_key_missing is False
    assert len(result.quiz.questions) == 1
    question = result.quiz.questions[0]
    assert question.qid == "q1"
    assert question.stem == "Q?"
    assert question.options == [QuizOption("A", "x"), QuizOption("B", "y")]
    assert question.correct == ["B"]
    assert question.timer_seconds == 8
    assert question.points_if_correct == 1
    assert question.points_if_wrong == 0
    assert question.explanation is None
    assert question.media == []
    assert result.quiz.status == "ready"


def test_single_option_is_an_error():
    result = parse_quiz_document("1) Q? A) x")

    assert result.quiz.questions == []
    assert "Question 1: Must have at least 2 options" in result.errors
    assert "No valid questions found in the document" in result.errors


def test_document_without_numbered_blocks():
    result = parse_quiz_document("Just some text\nno numbers here")

    assert result.errors == ["No valid questions found in the document"]
    assert result.quiz.title == "Just some text"
    assert result.quiz.description == "no numbers here"


def test_empty_document():
    result = parse_quiz_document("")

    assert result.errors == ["No valid questions found in the document"]
    assert result.quiz.title == "Untitled Quiz"
    assert result.quiz.description == ""


def test_missing_answer_key_marks_draft():
    result = parse_quiz_document("1) Q? A) x B) y")

    assert result.answer_key_missing is True
    assert result.quiz.answer_key_missing is True
    assert result.quiz.status == "draft"
    assert result.quiz.questions[0].correct == []
    assert result.warnings == ["Question 1: Answer key missing, please specify correct answer"]
    assert result.quiz.metadata.notes == result.warnings[0]
    assert result.errors == []


def test_timer_is_raised_to_minimum():
    result = parse_quiz_document("1) Q? A) x B) y [Answer: A] (time: 2s)")

    question = result.quiz.questions[0]
    assert question.timer_seconds == 3
    assert question.options[1].text == "y"
    assert "Question 1: Timer increased to minimum 3 seconds" in result.warnings


def test_full_document():
    result = parse_quiz_document(CAPITALS_DOC, "Ms. Ito")
    quiz = result.quiz

    assert result.errors == []
    assert quiz.title == "Capitals of Europe"
    assert quiz.description.startswith("Warm-up round")
    assert quiz.settings.default_timer_seconds == 10
    assert quiz.settings.negative_marking_default == -0.5
    assert quiz.settings.display_all_questions_at_once is True
    assert quiz.metadata.created_by == "Ms. Ito"

    first, second = quiz.questions
    assert first.stem == "What is the capital of France?"
    assert [option.text for option in first.options] == ["Berlin", "Paris", "Rome"]
    assert first.correct == ["B"]
    assert first.timer_seconds == 15
    assert first.points_if_correct == 2
    assert first.points_if_wrong == -1
    assert first.explanation == "Paris has been the capital since 987."

    assert second.qid == "q2"
    assert [option.oid for option in second.options] == ["A", "B", "C"]
    assert second.correct == ["A", "C"]
    assert second.timer_seconds == 10
    assert second.points_if_correct == 1
    assert second.points_if_wrong == -0.5
    assert second.explanation is None


def test_check_mark_answers():
    doc = "1) Pick one\nA) x\nB) y ✓\n\n2) Pick another\nA) x\nB) y\nA ✓"
    result = parse_quiz_document(doc)

    first, second = result.quiz.questions
    assert first.correct == ["B"]
    assert first.options[1].text == "y"
    assert second.correct == ["A"]
    assert second.options[1].text == "y"
    assert result.answer_key_missing is False


def test_unknown_answer_letter_is_kept_with_warning():
    result = parse_quiz_document("1) Q? A) x B) y [Answer: Z]")

    assert result.quiz.questions[0].correct == ["Z"]
    assert result.answer_key_missing is False
    assert "Question 1: Answer key refers to unknown option(s) Z" in result.warnings


def test_duplicate_question_numbers_are_kept():
    result = parse_quiz_document("1) Q? A) x B) y [Answer: A]\n1) R? A) x B) y [Answer: B]")

    assert [question.qid for question in result.quiz.questions] == ["q1", "q1"]
    assert "Question 1: Duplicate question number" in result.warnings


def test_abbreviations_do_not_open_options():
    result = parse_quiz_document("1) Who wrote about the U.S. economy? A) Smith B) Keynes [Answer: B]")

    question = result.quiz.questions[0]
    assert question.stem == "Who wrote about the U.S. economy?"
    assert [option.oid for option in question.options] == ["A", "B"]


def test_letters_inside_explanation_are_not_options():
    result = parse_quiz_document(
        "1) Q? A) x B) y [Answer: A] [Explanation: B. is wrong because C) says so]"
    )

    question = result.quiz.questions[0]
    assert [option.oid for option in question.options] == ["A", "B"]
    assert question.explanation == "B. is wrong because C) says so"


def test_stem_drops_recognized_annotations():
    result = parse_quiz_document("1) What is 2+2? (time: 5s) (+2 / -1)\nA) 3\nB) 4\n[Answer: B]")

    question = result.quiz.questions[0]
    assert question.stem == "What is 2+2?"
    assert question.timer_seconds == 5
    assert question.points_if_correct == 2
    assert question.points_if_wrong == -1


def test_stem_keeps_other_bracketed_text():
    result = parse_quiz_document("1) What does [x] mean in (+3) notation? A) a B) b [Answer: A]")

    assert result.quiz.questions[0].stem == "What does [x] mean in (+3) notation?"


def test_text_before_first_question_is_ignored():
    result = parse_quiz_document("Quiz\nIntro text\nMore intro\n1) Q? A) x B) y [Answer: A]")

    assert result.errors == []
    assert result.quiz.description == "Intro text"
    assert len(result.quiz.questions) == 1


def test_empty_blocks_are_skipped():
    result = parse_quiz_document("1)\n2) Q? A) x B) y [Answer: A]")

    assert result.errors == []
    assert [question.qid for question in result.quiz.questions] == ["q2"]


def test_empty_option_text_warns():
    result = parse_quiz_document("1) Q? A) B) y [Answer: B]")

    assert result.quiz.questions[0].options[0] == QuizOption("A", "")
    assert "Question 1: Option A has no text" in result.warnings


def test_default_timer_is_raised_to_minimum():
    result = parse_quiz_document("(default timer: 1s)\n1) Q? A) x B) y [Answer: A]")

    assert result.quiz.settings.default_timer_seconds == 3
    assert result.quiz.questions[0].timer_seconds == 3
    assert "Default timer increased to minimum 3 seconds" in result.warnings


def test_invariants_hold_for_messy_documents():
    documents = [
        "1) Q? A) x B) y (time: 0s)",
        "(default timer: 0s)\n1) Q? A) x B) y C) z",
        "Title\n\n3) Q? A. x B. y\n4) broken\n5) R? A) 1 B) 2 (time: 1s)",
        "1) A) B) C)",
    ]
    for document in documents:
        result = parse_quiz_document(document)
        for question in result.quiz.questions:
            assert len(question.options) >= 2
            assert question.timer_seconds >= 3


def test_join_and_metadata():
    now = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
    result = parse_quiz_document(
        "1) Q? A) x B) y [Answer: B]",
        "Teacher",
        base_url="http://testserver/",
        rng=random.Random(7),
        now=now,
    )
    quiz = result.quiz

    assert quiz.quiz_id.startswith("untitled-quiz-20261017-")
    assert len(quiz.join.token) == 8
    assert quiz.join.token_length == 8
    assert quiz.join.qr_payload == f"{quiz.quiz_id}|{quiz.join.token}"
    assert quiz.join.join_url_pattern == "http://testserver/j/{quizId}?t={token}"
    assert quiz.metadata.created_at == now
    assert quiz.metadata.language == "en"
    assert quiz.participants == []
    assert quiz.current_question_index == -1
    assert quiz.leaderboard.enabled is True
    assert quiz.leaderboard.top_n == 10


def test_seeded_parses_are_identical():
    now = datetime(2026, 10, 17, tzinfo=timezone.utc)
    first = parse_quiz_document(CAPITALS_DOC, rng=random.Random(1), now=now)
    second = parse_quiz_document(CAPITALS_DOC, rng=random.Random(1), now=now)

    assert first.quiz.quiz_id == second.quiz.quiz_id
    assert first.quiz.join.token == second.quiz.join.token
    assert first.quiz.questions == second.quiz.questions


def test_split_header_and_blocks():
    title, description, body = split_header("## Title\nDescription\n1) Q?")

    assert title == "Title"
    assert description == "Description"
    assert split_question_blocks(body) == [("1", "Q?")]


def test_bundled_example_document_parses_cleanly():
    result = parse_quiz_document(EXAMPLE_DOCUMENT)

    assert result.errors == []
    assert result.warnings == []
    assert result.quiz.title == "Capitals of Europe"
    assert [question.correct for question in result.quiz.questions] == [["B"], ["A", "C"]]


def test_check_mark_after_capital_letter_keeps_option_text():
    result = parse_quiz_document("1) Which vitamin? A) Vitamin C ✓ B) Vitamin D")

    question = result.quiz.questions[0]
    assert question.options == [QuizOption("A", "Vitamin C"), QuizOption("B", "Vitamin D")]
    assert question.correct == ["A"]


def test_checked_option_wins_over_standalone_check_line():
    result = parse_quiz_document("1) Pick\nA) x ✓\nB) y\nB ✓")

    question = result.quiz.questions[0]
    assert question.correct == ["A"]
    assert question.options == [QuizOption("A", "x"), QuizOption("B", "y")]


def test_several_checked_options():
    result = parse_quiz_document("2. Which cities lie on the Danube? A. Vienna ✓ B. Madrid C. Budapest ✓")

    question = result.quiz.questions[0]
    assert question.correct == ["A", "C"]
    assert [option.text for option in question.options] == ["Vienna", "Madrid", "Budapest"]
