"""Inline annotations recognized inside a quiz document.

Shared by the option scanner (to keep them out of stems) and the document
parser (to read their values).
"""

from __future__ import annotations

import re

CHECK_MARK = "✓"

_NUMBER = r"\d+(?:\.\d+)?"
_SIGNED_NUMBER = r"[-+]?" + _NUMBER

DEFAULT_TIMER = re.compile(r"\(default\s*timer:\s*(\d+)\s*s?\)", re.IGNORECASE)
NEGATIVE = re.compile(r"\(negative:\s*(" + _SIGNED_NUMBER + r")\)", re.IGNORECASE)
ALL_VISIBLE = re.compile(r"\(all[\s-]visible\)", re.IGNORECASE)

ANSWER_TAG = re.compile(r"\[Answer:\s*([A-Za-z,\s]*)\]", re.IGNORECASE)
ANSWER_ANNOTATION = re.compile(r"\[Answer:[^\]]*\]", re.IGNORECASE)
# A letter and a check mark alone on their line, e.g. "B ✓" under the options.
STANDALONE_CHECK = re.compile(r"^[ \t]*([A-Z])[ \t]*" + CHECK_MARK + r"[ \t]*$", re.MULTILINE)

POINTS = re.compile(r"\((" + _SIGNED_NUMBER + r")\s*/\s*(" + _SIGNED_NUMBER + r")\)")
TIMER = re.compile(r"\(time:\s*(\d+)\s*s?\)", re.IGNORECASE)
EXPLANATION = re.compile(r"\[Explanation:\s*([^\]]*)\]", re.IGNORECASE)

STEM_ANNOTATION = re.compile(
    "|".join(
        pattern.pattern
        for pattern in (TIMER, POINTS, EXPLANATION, DEFAULT_TIMER, NEGATIVE, ALL_VISIBLE)
    ),
    re.IGNORECASE,
)


def strip_stem_annotations(text: str) -> str:
    return STEM_ANNOTATION.sub("", text)
