"""Application entry point for LiveQuiz.

    python app_main.py                 serve the HTTP API
    python app_main.py quiz.txt [name] parse a document and print the draft as JSON
"""

from __future__ import annotations

import json
from pathlib import Path
import sys

from livequiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from livequiz.constants.quiz_constants import DEFAULT_AUTHOR_NAME
from livequiz.core.quiz_importer import QuizImportError, load_quiz_from_file
from livequiz.core.quiz_manager import QuizManager
from livequiz.server.api_server import ParseOut, start_api_server
from livequiz.utils.logging_config import configure_logging


def _print_parse_result(file_path: Path, author_name: str) -> int:
    logger = configure_logging()
    try:
        result = load_quiz_from_file(file_path, author_name)
    except QuizImportError as exc:
        logger.error("%s", exc)
        return 2
    payload = ParseOut.model_validate(result).model_dump(mode="json", by_alias=True)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 1 if result.errors else 0


def main() -> None:
    """Parse a document given on the command line, or start the API server."""
    args = sys.argv[1:]
    if args:
        author_name = args[1] if len(args) > 1 else DEFAULT_AUTHOR_NAME
        sys.exit(_print_parse_result(Path(args[0]), author_name))

    logger = configure_logging()
    logger.info("Starting LiveQuiz API on %s:%d", DEFAULT_HOST, DEFAULT_PORT)
    server_thread = start_api_server(quiz_manager=QuizManager(), host=DEFAULT_HOST, port=DEFAULT_PORT)
    server_thread.join()


if __name__ == "__main__":
    main()
