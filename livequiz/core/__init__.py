"""Quiz document parsing and live hosting core."""

from .document_parser import parse_quiz_document
from .identifiers import generate_quiz_id, generate_token
from .models import ParseResult, QuizDraft, QuizOption, QuizQuestion, QuizSettings
from .shuffle import shuffle_items

__all__ = [
    "ParseResult",
    "QuizDraft",
    "QuizOption",
    "QuizQuestion",
    "QuizSettings",
    "generate_quiz_id",
    "generate_token",
    "parse_quiz_document",
    "shuffle_items",
]
