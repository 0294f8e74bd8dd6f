"""Join token and quiz identifier generation.

Tokens avoid visually ambiguous characters (0/O, 1/I) so they can be read off a
projector. Neither tokens nor ids are checked for collisions here; whoever
persists the quiz is expected to retry on a clash.
"""

from __future__ import annotations

from datetime import datetime, timezone
import random
import re

from livequiz.constants.quiz_constants import (
    QUIZ_ID_SLUG_LENGTH,
    QUIZ_ID_SUFFIX_ALPHABET,
    QUIZ_ID_SUFFIX_LENGTH,
    TOKEN_ALPHABET,
    TOKEN_LENGTH,
)

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_FALLBACK_SLUG = "quiz"
_rng = random.Random()


def generate_token(length: int = TOKEN_LENGTH, rng: random.Random | None = None) -> str:
    if length < 0:
        raise ValueError("Token length must not be negative.")
    source = rng or _rng
    return "".join(source.choice(TOKEN_ALPHABET) for _ in range(length))


def slugify_title(title: str) -> str:
    slug = _NON_ALNUM_RUN.sub("-", title.lower()).strip("-")
    slug = slug[:QUIZ_ID_SLUG_LENGTH].strip("-")
    return slug or _FALLBACK_SLUG


def generate_quiz_id(
    title: str,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> str:
    """Return ``<slug>-<YYYYMMDD>-<xyz>``; readable, not guaranteed unique."""
    source = rng or _rng
    moment = now or datetime.now(timezone.utc)
    suffix = "".join(
        source.choice(QUIZ_ID_SUFFIX_ALPHABET) for _ in range(QUIZ_ID_SUFFIX_LENGTH)
    )
    return f"{slugify_title(title)}-{moment:%Y%m%d}-{suffix}"
