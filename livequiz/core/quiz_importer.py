"""Read a quiz document from disk and parse it into a draft.

This is the only place the parser is fed from the filesystem; the parser
itself stays a pure text-in, draft-out function so the HTTP layer and tests can
call it directly.
"""

from __future__ import annotations

import logging
from pathlib import Path

from livequiz.constants.quiz_constants import DEFAULT_AUTHOR_NAME
from livequiz.core.document_parser import parse_quiz_document
from livequiz.core.models import ParseResult

logger = logging.getLogger(__name__)


class QuizImportError(Exception):
    """Raised when a quiz document cannot be read."""


def load_quiz_from_file(file_path: Path, author_name: str = DEFAULT_AUTHOR_NAME) -> ParseResult:
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise QuizImportError(f"Could not read quiz document '{file_path}': {exc}") from exc

    result = parse_quiz_document(text, author_name)
    if result.errors:
        logger.warning("Quiz document %s parsed with errors: %s", file_path, "; ".join(result.errors))
    return result
