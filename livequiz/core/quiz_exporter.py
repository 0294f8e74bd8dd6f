"""Utilities for writing questions back out in the pasted-document format.

The output is normalized (one option per line, annotations on their own
lines) and parses back into the same questions.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from livequiz.constants.quiz_constants import DEFAULT_TITLE
from livequiz.core.models import QuizDraft, QuizQuestion


def save_quiz_to_file(file_path: Path, draft: QuizDraft) -> None:
    """Persist the draft's questions to disk in the document format."""

    if not draft.questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = serialize_questions(draft.questions, draft.title, draft.description)
    file_path.write_text(document, encoding="utf-8")


def serialize_questions(
    questions: list[QuizQuestion],
    title: str = DEFAULT_TITLE,
    description: str = "",
) -> str:
    header = [f"# {title}"]
    if description:
        header.append(description)
    blocks = [_serialize_question(index, question) for index, question in enumerate(questions, start=1)]
    return "\n".join(header) + "\n\n" + "\n\n".join(blocks) + "\n"


def _format_number(value: float) -> str:
    """Fixed-point text, never exponent notation."""
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def _format_points(points_if_correct: float, points_if_wrong: float) -> str:
    sign = "+" if points_if_correct >= 0 else ""
    return f"({sign}{_format_number(points_if_correct)} / {_format_number(points_if_wrong)})"


def _question_number(index: int, question: QuizQuestion) -> str:
    number = question.qid[1:]
    return number if number.isdigit() else str(index)


def _serialize_question(index: int, question: QuizQuestion) -> str:
    lines = [f"{_question_number(index, question)}) {question.stem}"]
    lines.extend(f"{option.oid}) {option.text}" for option in question.options)

    annotations: list[str] = []
    if question.correct:
        annotations.append(f"[Answer: {', '.join(question.correct)}]")
    annotations.append(f"(time: {question.timer_seconds}s)")
    annotations.append(_format_points(question.points_if_correct, question.points_if_wrong))
    lines.append(" ".join(annotations))

    if question.explanation:
        lines.append(f"[Explanation: {question.explanation}]")

    return "\n".join(lines)
