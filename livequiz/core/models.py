"""Domain models for quiz drafts produced from pasted documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from livequiz.constants.quiz_constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_LEADERBOARD_TOP_N,
    DEFAULT_MAX_PARTICIPANTS,
    DEFAULT_NEGATIVE_MARKING,
    DEFAULT_POINTS_IF_CORRECT,
    DEFAULT_TIMER_SECONDS,
    TOKEN_LENGTH,
)


@dataclass(frozen=True, slots=True)
class QuizSettings:
    """Quiz-wide configuration. Built once per parse and never mutated."""

    default_timer_seconds: int = DEFAULT_TIMER_SECONDS
    negative_marking_default: float = DEFAULT_NEGATIVE_MARKING
    display_all_questions_at_once: bool = False
    shuffle_questions: bool = False
    shuffle_options: bool = False
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    creator_only_login: bool = True
    join_requires_login: bool = False
    guest_name_unique: bool = True
    mode: str = "live"


@dataclass(slots=True)
class QuizOption:
    """A lettered choice within a question."""

    oid: str
    text: str


@dataclass(slots=True)
class QuizMedia:
    """Attached media. Reserved; the parser never fills it."""

    type: str
    url: str
    caption: str | None = None


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question with one or more correct options."""

    qid: str
    raw_text: str
    stem: str
    options: list[QuizOption]
    correct: list[str] = field(default_factory=list)
    points_if_correct: float = DEFAULT_POINTS_IF_CORRECT
    points_if_wrong: float = DEFAULT_NEGATIVE_MARKING
    timer_seconds: int = DEFAULT_TIMER_SECONDS
    explanation: str | None = None
    media: list[QuizMedia] = field(default_factory=list)
    open_at: datetime | None = None
    close_at: datetime | None = None

    def option_ids(self) -> list[str]:
        return [option.oid for option in self.options]


@dataclass(slots=True)
class QuizJoin:
    """Join metadata handed to students (token, QR payload, URL pattern)."""

    token: str
    qr_payload: str
    join_url_pattern: str
    token_length: int = TOKEN_LENGTH


@dataclass(slots=True)
class LeaderboardSettings:
    enabled: bool = True
    display_names_anonymized: bool = False
    top_n: int = DEFAULT_LEADERBOARD_TOP_N


@dataclass(slots=True)
class QuizMetadata:
    created_by: str
    created_at: datetime
    language: str = DEFAULT_LANGUAGE
    notes: str = ""


@dataclass(slots=True)
class QuizParticipant:
    """A student taking part in a hosted quiz."""

    participant_id: str
    display_name: str
    joined_at: datetime
    score: float = 0.0
    correct_count: int = 0


@dataclass(slots=True)
class QuizDraft:
    """In-memory quiz produced by parsing, before it is persisted."""

    quiz_id: str
    title: str
    description: str
    settings: QuizSettings
    join: QuizJoin
    metadata: QuizMetadata
    questions: list[QuizQuestion] = field(default_factory=list)
    participants: list[QuizParticipant] = field(default_factory=list)
    leaderboard: LeaderboardSettings = field(default_factory=LeaderboardSettings)
    errors: list[str] = field(default_factory=list)
    answer_key_missing: bool = False
    current_question_index: int = -1

    @property
    def status(self) -> str:
        return "draft" if self.answer_key_missing else "ready"


@dataclass(slots=True)
class ParseResult:
    """Draft plus the diagnostics collected while parsing."""

    quiz: QuizDraft
    errors: list[str]
    warnings: list[str]
    answer_key_missing: bool

    @property
    def is_hostable(self) -> bool:
        return not self.errors and not self.answer_key_missing


@dataclass(slots=True)
class SubmittedAnswer:
    """Answer recorded for one participant on one question."""

    qid: str
    display_name: str
    selected: list[str]
    is_correct: bool
    points_earned: float
    submitted_at: datetime
