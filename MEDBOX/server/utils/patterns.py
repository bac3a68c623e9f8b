from __future__ import annotations

import re

from MEDBOX.server.utils.constants import DOSAGE_FORM_SUFFIXES


# -----------------------------------------------------------------------------
def _compile_suffix(token: str) -> re.Pattern[str]:
    body = r"\s+".join(re.escape(part) for part in token.split())
    return re.compile(rf"\s+{body}$", re.IGNORECASE)


# -----------------------------------------------------------------------------
# Drug name normalization patterns
# -----------------------------------------------------------------------------
DOSAGE_FORM_SUFFIX_RES = tuple(
    _compile_suffix(token) for token in DOSAGE_FORM_SUFFIXES
)
DRUG_STRENGTH_RE = re.compile(r"\s*\d+\s*(MG|MCG|G|ML)\b", re.IGNORECASE)
DRUG_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
WHITESPACE_RE = re.compile(r"\s+")
TITLE_WORD_RE = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)?")

# -----------------------------------------------------------------------------
# Catalog parsing
# -----------------------------------------------------------------------------
UNDECODABLE_CHAR = "\ufffd"
