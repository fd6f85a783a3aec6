"""Whitespace word counting."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens in *text*.

    No punctuation stripping or locale rules: a lone "-" is one word.
    """
    trimmed = text.strip()
    if not trimmed:
        return 0
    return len(_WHITESPACE.split(trimmed))
