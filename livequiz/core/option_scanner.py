"""Split the body of one question block into its stem and lettered options.

The scanner walks the text once with three states:

    IN_STEM       text before the first option marker
    IN_OPTION     text belonging to the option opened by the last marker
    AFTER_OPTION  an inline annotation closed the option; text is dropped
                  until the next marker

An option marker is an uppercase letter followed by ``.`` or ``)``, standing on
its own (start of text or whitespace before it, whitespace or end after it).
After the first marker, bracketed text and ``(time ...)``/``(+...)`` style
annotations are skipped wholesale, so letters inside them never open options.
In the stem only the recognized annotations are removed; any other bracketed
or parenthesized text stays part of the question.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
import re

from livequiz.core.annotations import CHECK_MARK, POINTS, STEM_ANNOTATION, strip_stem_annotations

_ANNOTATION_START = re.compile(
    r"\[|\((?:time\b|\+|default\s*timer|negative\s*:|all[\s-]visible\))",
    re.IGNORECASE,
)
_INLINE_SPACES = re.compile(r"[ \t]{2,}")


class ScanState(Enum):
    IN_STEM = auto()
    IN_OPTION = auto()
    AFTER_OPTION = auto()


@dataclass(slots=True)
class ScannedOption:
    oid: str
    text: str
    checked: bool = False


@dataclass(slots=True)
class ScannedBlock:
    stem: str
    options: list[ScannedOption]
    first_marker_at: int | None


def is_option_marker(text: str, index: int) -> bool:
    if index + 1 >= len(text):
        return False
    letter, punct = text[index], text[index + 1]
    if not ("A" <= letter <= "Z") or punct not in ".)":
        return False
    if index > 0 and not text[index - 1].isspace():
        return False
    after = index + 2
    return after == len(text) or text[after].isspace()


def _annotation_end(text: str, index: int) -> int | None:
    points = POINTS.match(text, index)
    if points is not None:
        return points.end()
    match = _ANNOTATION_START.match(text, index)
    if match is None:
        return None
    opener = match.group(0)
    if opener.endswith(")"):
        return match.end()
    end = text.find("]" if opener == "[" else ")", match.end())
    return len(text) if end < 0 else end + 1


def scan_question_body(text: str) -> ScannedBlock:
    """Tokenize a question body into stem and options, in document order."""
    state = ScanState.IN_STEM
    stem_chars: list[str] = []
    option_chars: list[str] = []
    current_oid: str | None = None
    options: list[ScannedOption] = []
    first_marker_at: int | None = None

    def close_option() -> None:
        raw = "".join(option_chars)
        options.append(
            ScannedOption(
                oid=current_oid,
                text=raw.replace(CHECK_MARK, "").strip(),
                checked=CHECK_MARK in raw,
            )
        )
        option_chars.clear()

    index = 0
    length = len(text)
    while index < length:
        if is_option_marker(text, index):
            if state is ScanState.IN_OPTION:
                close_option()
            if first_marker_at is None:
                first_marker_at = index
            current_oid = text[index]
            state = ScanState.IN_OPTION
            index += 2
            continue

        if state is ScanState.IN_STEM:
            stem_annotation = STEM_ANNOTATION.match(text, index)
            if stem_annotation is not None:
                index = stem_annotation.end()
            else:
                stem_chars.append(text[index])
                index += 1
            continue

        annotation_end = _annotation_end(text, index)
        if annotation_end is not None:
            if state is ScanState.IN_OPTION:
                close_option()
                state = ScanState.AFTER_OPTION
            index = annotation_end
            continue

        if state is ScanState.IN_OPTION:
            option_chars.append(text[index])
        index += 1

    if state is ScanState.IN_OPTION:
        close_option()

    if first_marker_at is None:
        # No options at all: the first line is the best guess for the question.
        first_line = text.strip().split("\n", 1)[0]
        stem = strip_stem_annotations(first_line).replace(CHECK_MARK, "").strip()
    else:
        stem = "".join(stem_chars).replace(CHECK_MARK, "").strip()
    return ScannedBlock(
        stem=_INLINE_SPACES.sub(" ", stem),
        options=options,
        first_marker_at=first_marker_at,
    )
