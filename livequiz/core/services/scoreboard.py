"""Service for managing participant scores and the leaderboard."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime, timezone
import io

from livequiz.constants.quiz_constants import DEFAULT_LEADERBOARD_TOP_N
from livequiz.core.models import QuizParticipant

_RESULTS_HEADER = ["Position", "Display Name", "Score", "Correct Answers"]


@dataclass(slots=True)
class ScoreboardRow:
    """Immutable snapshot returned to consumers."""

    position: int
    display_name: str
    score: float
    correct_count: int


class Scoreboard:
    """Tracks score and correct count per participant."""

    def __init__(self) -> None:
        self._participants: dict[str, QuizParticipant] = {}

    def initialize_participants(self, participants: list[QuizParticipant]) -> None:
        self.clear()
        for participant in participants:
            self._participants[participant.display_name] = participant

    def record_answer(self, display_name: str, is_correct: bool, points: float) -> QuizParticipant:
        entry = self._participants.get(display_name)
        if entry is None:
            entry = QuizParticipant(
                participant_id=display_name,
                display_name=display_name,
                joined_at=datetime.now(timezone.utc),
            )
            self._participants[display_name] = entry

        entry.score += points
        if is_correct:
            entry.correct_count += 1
        return entry

    def get_top_scorers(self, limit: int = DEFAULT_LEADERBOARD_TOP_N) -> list[ScoreboardRow]:
        """Return the top N participants, highest score first."""
        # sorted() is stable, so ties keep join order
        ranked = sorted(self._participants.values(), key=lambda p: -p.score)
        return [
            ScoreboardRow(
                position=position,
                display_name=participant.display_name,
                score=participant.score,
                correct_count=participant.correct_count,
            )
            for position, participant in enumerate(ranked[:limit], start=1)
        ]

    def export_results_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(_RESULTS_HEADER)
        for row in self.get_top_scorers(len(self._participants)):
            writer.writerow([row.position, row.display_name, f"{row.score:g}", row.correct_count])
        return buffer.getvalue()

    def clear(self) -> None:
        self._participants.clear()
