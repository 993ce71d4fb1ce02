"""Shared helpers for letter and word normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Za-z]")


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``.

    Accents are stripped (``"é"`` becomes ``"E"``) and every character that is
    not a Latin letter is dropped.
    """

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return WORD_RE.sub("", stripped).upper()


def normalize_letter(value: str) -> str:
    """Reduce user input to the single letter a cell can hold, or ``""``."""

    cleaned = clean_word(value)
    return cleaned[:1]


__all__ = ["clean_word", "normalize_letter"]
