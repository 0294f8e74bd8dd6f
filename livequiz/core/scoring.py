"""Scoring rules for a single answer."""

from __future__ import annotations

from collections.abc import Iterable

from livequiz.core.models import QuizQuestion


def is_answer_correct(question: QuizQuestion, selected: Iterable[str]) -> bool:
    chosen = set(selected)
    return bool(chosen) and chosen == set(question.correct)


def score_answer(question: QuizQuestion, selected: Iterable[str]) -> tuple[bool, float]:
    """Return ``(is_correct, points_earned)``.

    The whole selection has to match the answer key. An empty selection earns
    nothing either way, so students are not penalized for letting time run out.
    """
    chosen = list(selected)
    if not chosen:
        return False, 0.0
    correct = is_answer_correct(question, chosen)
    return correct, question.points_if_correct if correct else question.points_if_wrong
