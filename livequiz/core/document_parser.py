"""Turn a pasted quiz document into a structured quiz draft.

Document format (loosely written, as teachers paste it from a word processor):

    Capitals of Europe                       <- title (optional, ``#`` allowed)
    Warm-up round (default timer: 10s)       <- description (optional)
    1) What is the capital of France?
    A) Berlin
    B) Paris
    C) Rome
    [Answer: B] (time: 15s) (+2 / -1)
    [Explanation: Paris has been the capital since 987.]

    2. Which cities lie on the Danube? A. Vienna ✓ B. Madrid C. Budapest ✓

    3) Which planet is largest?
    A) Mars
    B) Jupiter
    B ✓

Parsing happens in two passes. The first scans the whole document for the
quiz-wide hints ``(default timer: Ns)``, ``(negative: X)`` and
``(all-visible)`` and freezes them into :class:`QuizSettings`. The second pass
walks the numbered blocks and uses those settings as fallbacks for every
question that does not override them.

Nothing in here raises for bad input. Problems are reported as ``errors``
(block dropped) or ``warnings`` (block kept, value corrected or flagged) on the
returned :class:`ParseResult`.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import random
import re

from livequiz.constants.quiz_constants import (
    DEFAULT_AUTHOR_NAME,
    DEFAULT_NEGATIVE_MARKING,
    DEFAULT_POINTS_IF_CORRECT,
    DEFAULT_TIMER_SECONDS,
    DEFAULT_TITLE,
    JOIN_PATH_TEMPLATE,
    MIN_TIMER_SECONDS,
    TOKEN_LENGTH,
)
from livequiz.core.annotations import (
    ALL_VISIBLE,
    ANSWER_ANNOTATION,
    ANSWER_TAG,
    DEFAULT_TIMER,
    EXPLANATION,
    NEGATIVE,
    POINTS,
    STANDALONE_CHECK,
    TIMER,
)
from livequiz.core.identifiers import generate_quiz_id, generate_token
from livequiz.core.models import (
    LeaderboardSettings,
    ParseResult,
    QuizDraft,
    QuizJoin,
    QuizMetadata,
    QuizOption,
    QuizQuestion,
    QuizSettings,
)
from livequiz.core.option_scanner import ScannedOption, scan_question_body

logger = logging.getLogger(__name__)

_NUMBERED_LINE = re.compile(r"^[ \t]*\d+[.)](?:\s|$)")
_QUESTION_SPLIT = re.compile(r"^[ \t]*(\d+)[.)](?:[ \t]+|$)", re.MULTILINE)


@dataclass(slots=True)
class _Diagnostics:
    errors: list[str]
    warnings: list[str]


def is_numbered_line(line: str) -> bool:
    return bool(_NUMBERED_LINE.match(line))


def split_header(text: str) -> tuple[str, str, str]:
    """Return ``(title, description, remaining_text)``."""
    lines = text.strip().split("\n")
    title = DEFAULT_TITLE
    description = ""
    start_index = 0

    first = lines[0].strip()
    if first and not is_numbered_line(lines[0]):
        title = first.lstrip("#").strip() or DEFAULT_TITLE
        start_index = 1
        if len(lines) > 1 and lines[1].strip() and not is_numbered_line(lines[1]):
            description = lines[1].strip()
            start_index = 2

    return title, description, "\n".join(lines[start_index:])


def extract_settings(text: str, diagnostics: _Diagnostics | None = None) -> QuizSettings:
    """First pass: read quiz-wide hints from anywhere in the document."""
    default_timer = DEFAULT_TIMER_SECONDS
    negative = DEFAULT_NEGATIVE_MARKING

    timer_match = DEFAULT_TIMER.search(text)
    if timer_match:
        default_timer = int(timer_match.group(1))
        if default_timer < MIN_TIMER_SECONDS:
            default_timer = MIN_TIMER_SECONDS
            if diagnostics is not None:
                diagnostics.warnings.append(
                    f"Default timer increased to minimum {MIN_TIMER_SECONDS} seconds"
                )

    negative_match = NEGATIVE.search(text)
    if negative_match:
        negative = float(negative_match.group(1))

    return QuizSettings(
        default_timer_seconds=default_timer,
        negative_marking_default=negative,
        display_all_questions_at_once=bool(ALL_VISIBLE.search(text)),
    )


def split_question_blocks(text: str) -> list[tuple[str, str]]:
    """Return ``(number, block)`` pairs in document order.

    Text before the first numbered line is not part of any question.
    """
    parts = _QUESTION_SPLIT.split(text)
    return [(parts[i], parts[i + 1]) for i in range(1, len(parts) - 1, 2)]


def _resolve_correct(
    number: str,
    original: str,
    scanned_options: list[ScannedOption],
    diagnostics: _Diagnostics,
) -> list[str]:
    answer_match = ANSWER_TAG.search(original)
    if answer_match:
        letters = re.split(r"[,\s]+", answer_match.group(1).upper())
    else:
        letters = [option.oid for option in scanned_options if option.checked]
        if not letters:
            letters = STANDALONE_CHECK.findall(original)

    correct = list(dict.fromkeys(letter for letter in letters if letter))
    if not correct:
        diagnostics.warnings.append(
            f"Question {number}: Answer key missing, please specify correct answer"
        )
        return []

    declared = {option.oid for option in scanned_options}
    unknown = [letter for letter in correct if letter not in declared]
    if unknown:
        diagnostics.warnings.append(
            f"Question {number}: Answer key refers to unknown option(s) {', '.join(unknown)}"
        )
    return correct


def parse_question_block(
    number: str,
    content: str,
    settings: QuizSettings,
    diagnostics: _Diagnostics,
) -> QuizQuestion | None:
    """Second pass for one block. Returns None when the block is unusable."""
    scan_copy = STANDALONE_CHECK.sub("", ANSWER_ANNOTATION.sub("", content))
    scanned = scan_question_body(scan_copy)

    if len(scanned.options) < 2:
        diagnostics.errors.append(f"Question {number}: Must have at least 2 options")
        return None

    if not scanned.stem:
        diagnostics.warnings.append(f"Question {number}: Question text missing")
    for option in scanned.options:
        if not option.text:
            diagnostics.warnings.append(f"Question {number}: Option {option.oid} has no text")

    correct = _resolve_correct(number, content, scanned.options, diagnostics)

    points_if_correct = DEFAULT_POINTS_IF_CORRECT
    points_if_wrong = settings.negative_marking_default
    points_match = POINTS.search(content)
    if points_match:
        points_if_correct = float(points_match.group(1))
        points_if_wrong = float(points_match.group(2))

    timer_seconds = settings.default_timer_seconds
    timer_match = TIMER.search(content)
    if timer_match:
        requested = int(timer_match.group(1))
        if requested < MIN_TIMER_SECONDS:
            diagnostics.warnings.append(
                f"Question {number}: Timer increased to minimum {MIN_TIMER_SECONDS} seconds"
            )
        timer_seconds = max(MIN_TIMER_SECONDS, requested)

    explanation_match = EXPLANATION.search(content)
    explanation = explanation_match.group(1).strip() if explanation_match else None

    return QuizQuestion(
        qid=f"q{number}",
        raw_text=content.strip(),
        stem=scanned.stem,
        options=[QuizOption(oid=option.oid, text=option.text) for option in scanned.options],
        correct=correct,
        points_if_correct=points_if_correct,
        points_if_wrong=points_if_wrong,
        timer_seconds=timer_seconds,
        explanation=explanation or None,
    )


def parse_quiz_document(
    document_text: str,
    author_name: str = DEFAULT_AUTHOR_NAME,
    *,
    base_url: str = "",
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> ParseResult:
    """Parse a quiz document into a draft plus errors and warnings."""
    diagnostics = _Diagnostics(errors=[], warnings=[])
    title, description, body = split_header(document_text)
    settings = extract_settings(document_text, diagnostics)

    questions: list[QuizQuestion] = []
    seen_numbers: Counter[str] = Counter()
    for number, content in split_question_blocks(body):
        if not content.strip():
            continue
        seen_numbers[number] += 1
        if seen_numbers[number] == 2:
            diagnostics.warnings.append(f"Question {number}: Duplicate question number")
        question = parse_question_block(number, content, settings, diagnostics)
        if question is not None:
            questions.append(question)

    if not questions:
        diagnostics.errors.append("No valid questions found in the document")

    answer_key_missing = any(not question.correct for question in questions)
    created_at = now or datetime.now(timezone.utc)
    token = generate_token(TOKEN_LENGTH, rng=rng)
    quiz_id = generate_quiz_id(title, rng=rng, now=created_at)

    draft = QuizDraft(
        quiz_id=quiz_id,
        title=title,
        description=description,
        settings=settings,
        join=QuizJoin(
            token=token,
            qr_payload=f"{quiz_id}|{token}",
            join_url_pattern=f"{base_url.rstrip('/')}{JOIN_PATH_TEMPLATE}",
            token_length=TOKEN_LENGTH,
        ),
        metadata=QuizMetadata(
            created_by=author_name,
            created_at=created_at,
            notes="; ".join(diagnostics.warnings),
        ),
        questions=questions,
        leaderboard=LeaderboardSettings(),
        errors=list(diagnostics.errors),
        answer_key_missing=answer_key_missing,
    )
    logger.debug(
        "Parsed quiz %s: %d question(s), %d error(s), %d warning(s)",
        quiz_id,
        len(questions),
        len(diagnostics.errors),
        len(diagnostics.warnings),
    )
    return ParseResult(
        quiz=draft,
        errors=diagnostics.errors,
        warnings=diagnostics.warnings,
        answer_key_missing=answer_key_missing,
    )
