"""
Deterministic identifiers (slugs, variant values) generated from free text.
"""

import re
from typing import Iterable

_NON_ALNUM = re.compile(r'[^a-z0-9]+')
_SLUG = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')


def normalize(text) -> str:
    """
    Lower-case ``text`` and collapse every run of characters outside
    ``[a-z0-9]`` into a single ``-``, trimming separators at both ends.

    Empty or whitespace-only input yields ``""``; callers must treat that as
    invalid rather than as a usable slug.

    Example:
        normalize("  A/B  ") -> "a-b"
    """
    if not text:
        return ''
    return _NON_ALNUM.sub('-', str(text).lower()).strip('-')


def is_valid_slug(text) -> bool:
    return bool(text) and bool(_SLUG.match(text))


def unique_identifier(base: str, taken: Iterable[str]) -> str:
    """Return ``base`` or ``base-2``, ``base-3``... whichever is not taken."""
    taken = set(taken)
    if base not in taken:
        return base
    counter = 2
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"
