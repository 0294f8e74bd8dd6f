"""Business logic for hosting a parsed quiz, shared between callers and the API."""

from __future__ import annotations

from datetime import datetime
import logging
from threading import Lock

from livequiz.constants.quiz_constants import DEFAULT_LEADERBOARD_TOP_N
from livequiz.core.models import ParseResult, QuizDraft, QuizParticipant, QuizQuestion, SubmittedAnswer
from livequiz.core.services.game_session import GameSession
from livequiz.core.services.lobby_manager import LobbyManager
from livequiz.core.services.scoreboard import Scoreboard, ScoreboardRow

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: Lobby, Scoreboard, and GameSession."""

    def __init__(self, session: GameSession | None = None) -> None:
        self._lock = Lock()
        self._draft: QuizDraft | None = None
        self._status: str | None = None

        # Services
        self._lobby = LobbyManager()
        self._scoreboard = Scoreboard()
        self._session = session or GameSession()

    # --- Draft ---

    def load_parse_result(self, result: ParseResult) -> QuizDraft:
        """Accept a parsed draft for hosting. Drafts with errors or a missing answer key are refused."""
        if not result.is_hostable:
            if result.errors:
                raise ValueError("Quiz draft has errors: " + "; ".join(result.errors))
            raise ValueError("Quiz draft is missing answers and must stay a draft.")
        with self._lock:
            self._draft = result.quiz
            self._status = result.quiz.status
            self._session.stop_session()
            self._lobby.close_lobby()
            self._scoreboard.clear()
            logger.info("Loaded quiz %s with %d question(s)", result.quiz.quiz_id, len(result.quiz.questions))
            return result.quiz

    def get_status(self) -> str | None:
        with self._lock:
            return self._status

    # --- Lobby Delegation ---

    def open_lobby(self) -> None:
        with self._lock:
            draft = self._require_draft()
            self._lobby.open_lobby(draft.settings)

    def join_lobby(self, display_name: str) -> QuizParticipant:
        with self._lock:
            return self._lobby.register_participant(display_name)

    def get_lobby_participants(self) -> list[QuizParticipant]:
        with self._lock:
            return self._lobby.get_participants()

    # --- Game Session Delegation ---

    def start_quiz(self) -> None:
        with self._lock:
            draft = self._require_draft()
            participants = self._lobby.finalize_participants()
            draft.participants = participants
            self._scoreboard.initialize_participants(participants)
            self._session.start_session(draft)
            draft.current_question_index = -1
            self._status = "live"
            logger.info("Quiz %s is live with %d participant(s)", draft.quiz_id, len(participants))

    def move_to_next_question(self, now: datetime | None = None) -> QuizQuestion | None:
        with self._lock:
            draft = self._require_draft()
            question = self._session.start_next_question(now)
            draft.current_question_index = self._session.get_current_index()
            if question is None:
                self._session.stop_session()
                self._status = "ended"
            return question

    def stop_current_question(self) -> None:
        with self._lock:
            self._session.stop_question()

    def get_current_question(self) -> QuizQuestion | None:
        with self._lock:
            return self._session.get_current_question()

    def submit_answer(
        self,
        display_name: str,
        selected: list[str],
        now: datetime | None = None,
    ) -> SubmittedAnswer:
        """Score an answer from a participant who joined before the quiz started."""
        with self._lock:
            draft = self._require_draft()
            key = display_name.strip().casefold()
            participant = next(
                (p for p in draft.participants if p.display_name.casefold() == key),
                None,
            )
            if participant is None:
                raise ValueError(f"'{display_name}' has not joined this quiz.")
            answer = self._session.record_answer(participant.display_name, selected, now)
            self._scoreboard.record_answer(
                participant.display_name, answer.is_correct, answer.points_earned
            )
            return answer

    def get_option_counts(self) -> dict[str, int]:
        with self._lock:
            return self._session.get_option_counts()

    def end_quiz(self) -> None:
        with self._lock:
            draft = self._require_draft()
            self._session.stop_session()
            logger.info("Quiz %s ended by the host", draft.quiz_id)
            self._status = "ended"

    # --- Scoreboard Delegation ---

    def get_top_scorers(self, limit: int | None = None) -> list[ScoreboardRow]:
        with self._lock:
            if limit is None:
                limit = self._draft.leaderboard.top_n if self._draft else DEFAULT_LEADERBOARD_TOP_N
            return self._scoreboard.get_top_scorers(limit)

    def export_results_csv(self) -> str:
        with self._lock:
            return self._scoreboard.export_results_csv()

    def _require_draft(self) -> QuizDraft:
        if self._draft is None:
            raise RuntimeError("No quiz has been loaded.")
        return self._draft
