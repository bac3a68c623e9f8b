from __future__ import annotations

from typing import Any

import pandas as pd

from MEDBOX.server.utils.patterns import (
    DOSAGE_FORM_SUFFIX_RES,
    DRUG_PARENTHETICAL_RE,
    DRUG_STRENGTH_RE,
    TITLE_WORD_RE,
    WHITESPACE_RE,
)


# -----------------------------------------------------------------------------
def coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        return text or None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    return text or None


# -----------------------------------------------------------------------------
def normalize_whitespace(value: str) -> str:
    if not value:
        return ""
    return WHITESPACE_RE.sub(" ", value).strip()


# -----------------------------------------------------------------------------
def title_case(value: str) -> str:
    # apostrophes stay inside the word: "tylenol's" -> "Tylenol's"
    return TITLE_WORD_RE.sub(lambda match: match.group(0).capitalize(), value)


# -----------------------------------------------------------------------------
def strip_dosage_form_suffixes(value: str) -> str:
    # Each suffix is tried once, in table order; the pass is not repeated.
    stripped = value
    for pattern in DOSAGE_FORM_SUFFIX_RES:
        stripped = pattern.sub("", stripped, count=1)
    return stripped


# -----------------------------------------------------------------------------
def normalize_drug_name(value: str) -> str:
    """
    Canonicalize a raw catalog or user supplied drug name.

    Trailing dosage-form tokens, strength annotations (``10MG``, ``5 ml``) and
    parenthetical notes are removed, whitespace is collapsed and the result is
    title-cased. An empty string is returned when nothing survives.

    """
    if not value:
        return ""
    normalized = strip_dosage_form_suffixes(value.strip())
    normalized = DRUG_STRENGTH_RE.sub("", normalized)
    normalized = DRUG_PARENTHETICAL_RE.sub("", normalized)
    normalized = normalize_whitespace(normalized)
    return title_case(normalized)


# -----------------------------------------------------------------------------
def normalize_query(value: str | None) -> str:
    if not value:
        return ""
    return value.strip().lower()


__all__ = [
    "coerce_text",
    "normalize_drug_name",
    "normalize_query",
    "normalize_whitespace",
    "strip_dosage_form_suffixes",
    "title_case",
]
