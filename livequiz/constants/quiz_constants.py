"""Quiz-related constants shared by the parser and the session services."""

DEFAULT_TITLE: str = "Untitled Quiz"
DEFAULT_AUTHOR_NAME: str = "Teacher"
DEFAULT_LANGUAGE: str = "en"

DEFAULT_TIMER_SECONDS: int = 8
MIN_TIMER_SECONDS: int = 3
DEFAULT_POINTS_IF_CORRECT: float = 1.0
DEFAULT_NEGATIVE_MARKING: float = 0.0
DEFAULT_MAX_PARTICIPANTS: int = 500
DEFAULT_LEADERBOARD_TOP_N: int = 10

TOKEN_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TOKEN_LENGTH: int = 8
QUIZ_ID_SLUG_LENGTH: int = 20
QUIZ_ID_SUFFIX_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
QUIZ_ID_SUFFIX_LENGTH: int = 3
JOIN_PATH_TEMPLATE: str = "/j/{quizId}?t={token}"
