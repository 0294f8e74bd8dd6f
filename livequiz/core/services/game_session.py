"""Service for running a quiz: delivery order, the active question and its answers."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
import random

from livequiz.core.models import QuizDraft, QuizQuestion, SubmittedAnswer
from livequiz.core.scoring import score_answer
from livequiz.core.shuffle import shuffle_items


class GameSession:
    """Manages the state of an active quiz game."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._active: bool = False
        self._questions: list[QuizQuestion] = []
        self._current_index: int = -1
        self._question_active: bool = False
        self._question_started_at: datetime | None = None
        self._answers: dict[str, SubmittedAnswer] = {}

    def start_session(self, draft: QuizDraft) -> None:
        """Fix the delivery order for this run, honoring the shuffle settings."""
        questions = list(draft.questions)
        if draft.settings.shuffle_questions:
            questions = shuffle_items(questions, self._rng)
        if draft.settings.shuffle_options:
            questions = [
                replace(question, options=shuffle_items(question.options, self._rng))
                for question in questions
            ]
        self._questions = questions
        self._current_index = -1
        self._active = True
        self.reset_question_state()

    def stop_session(self) -> None:
        self._active = False
        self.reset_question_state()

    def reset_question_state(self) -> None:
        self._question_active = False
        self._question_started_at = None
        self._answers = {}

    def get_questions(self) -> list[QuizQuestion]:
        return list(self._questions)

    def get_current_index(self) -> int:
        return self._current_index

    def get_current_question(self) -> QuizQuestion | None:
        if 0 <= self._current_index < len(self._questions):
            return self._questions[self._current_index]
        return None

    def start_next_question(self, now: datetime | None = None) -> QuizQuestion | None:
        """Advance to the next question; None once the quiz is exhausted."""
        if not self._active:
            raise RuntimeError("No quiz session is running.")
        self.reset_question_state()
        if self._current_index + 1 >= len(self._questions):
            self._current_index = len(self._questions)
            return None
        self._current_index += 1
        self._question_active = True
        self._question_started_at = now or datetime.now(timezone.utc)
        return self._questions[self._current_index]

    def stop_question(self) -> None:
        self._question_active = False

    def record_answer(
        self,
        display_name: str,
        selected: list[str],
        now: datetime | None = None,
    ) -> SubmittedAnswer:
        """Score and store one participant's answer to the active question."""
        question = self.get_current_question()
        if not self._question_active or question is None:
            raise RuntimeError("No question is currently accepting answers.")
        if display_name in self._answers:
            raise RuntimeError("Answer already submitted for this question.")

        submitted_at = now or datetime.now(timezone.utc)
        deadline = self._question_started_at + timedelta(seconds=question.timer_seconds)
        if submitted_at > deadline:
            raise RuntimeError("Time limit reached for this question.")

        chosen = list(dict.fromkeys(oid.strip().upper() for oid in selected))
        unknown = [oid for oid in chosen if oid not in question.option_ids()]
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

        is_correct, points = score_answer(question, chosen)
        answer = SubmittedAnswer(
            qid=question.qid,
            display_name=display_name,
            selected=chosen,
            is_correct=is_correct,
            points_earned=points,
            submitted_at=submitted_at,
        )
        self._answers[display_name] = answer
        return answer

    def get_option_counts(self) -> dict[str, int]:
        question = self.get_current_question()
        if question is None:
            return {}
        counts = {oid: 0 for oid in question.option_ids()}
        for answer in self._answers.values():
            for oid in answer.selected:
                counts[oid] += 1
        return counts
