"""Citation extraction from free text.

Runs locally with no network access. Finds UK neutral citations and
traditional law-report citations in document text, together with the case
name written before each one, so they can be handed to the resolver.
"""

from __future__ import annotations

import re

from ..models.citation import ExtractedCitation

NEUTRAL_CITATION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (code, re.compile(pattern, re.IGNORECASE | re.ASCII))
    for code, pattern in (
        ("UKSC", r"\[(\d{4})\]\s+UKSC\s+(\d+)"),
        ("UKHL", r"\[(\d{4})\]\s+UKHL\s+(\d+)"),
        ("UKPC", r"\[(\d{4})\]\s+UKPC\s+(\d+)"),
        ("EWCA Civ", r"\[(\d{4})\]\s+EWCA\s+Civ\s+(\d+)"),
        ("EWCA Crim", r"\[(\d{4})\]\s+EWCA\s+Crim\s+(\d+)"),
        ("EWHC", r"\[(\d{4})\]\s+EWHC\s+(\d+)(?:\s+\([A-Za-z]+\))?"),
        ("EWCOP", r"\[(\d{4})\]\s+EWCOP\s+(\d+)"),
        ("EWFC", r"\[(\d{4})\]\s+EWFC\s+(\d+)"),
        ("UKUT", r"\[(\d{4})\]\s+UKUT\s+(\d+)(?:\s+\([A-Za-z]+\))?"),
        ("UKFTT", r"\[(\d{4})\]\s+UKFTT\s+(\d+)(?:\s+\([A-Za-z]+\))?"),
        ("UKEAT", r"\[(\d{4})\]\s+UKEAT\s+(\d+)"),
    )
)

TRADITIONAL_CITATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(rf"\[\d{{4}}\]\s+\d*\s*{series}\s+\d+", re.IGNORECASE | re.ASCII)
    for series in (
        r"AC",
        r"QB",
        r"KB",
        r"WLR",
        r"All\s*ER",
        r"Ch",
        r"Fam",
        r"ICR",
        r"IRLR",
        r"FLR",
        r"BCLC",
        r"BCC",
        r"Lloyd['’]\s*s\s+Rep",
        r"P\s*&\s*CR",
        r"HLR",
        r"CMLR",
    )
)

_CONTEXT_CHARS = 50
_LOOKBACK_CHARS = 300

_TRAILING_PUNCT_RE = re.compile(r"[,;:\s]+$")
_CROWN_CASE_RE = re.compile(
    r"\bR\s*(?:\([^)]+\)\s*)?v\.?\s+[A-Z][A-Za-z'’\-]+(?:\s+[A-Za-z'’\-&()]+)*$"
)
_RE_CASE_RE = re.compile(
    r"\b(?:In\s+re|Re)\s+[A-Z][A-Za-z'’\-]+(?:\s+[A-Za-z'’\-&()]+)*$", re.IGNORECASE
)
_VERSUS_RE = re.compile(r"\s+v\.?\s+")
_LEGAL_SUFFIX_RE = re.compile(
    r"^(Ltd|Limited|Plc|PLC|LLP|Inc|Corp|LLC|Council|Borough|NHS|CIC|Ors|ORS)$", re.IGNORECASE
)

# Words allowed between proper nouns inside a party name
NAME_CONNECTORS = frozenset(
    {"of", "the", "for", "and", "&", "de", "van", "von", "du", "la", "le", "el"}
)


def _extract_case_name(text: str, citation_start: int) -> str | None:
    """Find the case name written immediately before a citation.

    Walks backwards word by word from the last " v " so that surrounding
    prose ("the Court of Appeal held in") is not swept into the first party.
    """
    before = text[max(0, citation_start - _LOOKBACK_CHARS) : citation_start]
    before = _TRAILING_PUNCT_RE.sub("", before).strip()

    crown = _CROWN_CASE_RE.search(before)
    if crown:
        return crown.group(0).strip()

    in_re = _RE_CASE_RE.search(before)
    if in_re:
        return in_re.group(0).strip()

    matches = list(_VERSUS_RE.finditer(before))
    if not matches:
        return None
    versus = matches[-1]

    party2 = before[versus.end() :].strip()
    if not party2 or not party2[0].isupper():
        return None

    words = before[: versus.start()].strip().split()
    start = len(words)
    for i in range(len(words) - 1, -1, -1):
        bare = re.sub(r"[,;:()]", "", words[i])
        if bare[:1].isupper() or _LEGAL_SUFFIX_RE.match(bare) or bare == "&":
            start = i
        elif bare.lower() in NAME_CONNECTORS and start == i + 1:
            start = i
        else:
            break

    party1 = " ".join(words[start:])
    if not party1 or not any(ch.isupper() for ch in party1):
        return None

    name = f"{party1} v {party2}"
    if len(name) < 5 or len(name) > 200:
        return None
    return name


def _build(text: str, match: re.Match[str], normalised: str, is_neutral: bool) -> ExtractedCitation:
    start, end = match.span()
    context = text[max(0, start - _CONTEXT_CHARS) : min(len(text), end + _CONTEXT_CHARS)]
    return ExtractedCitation(
        citation=normalised,
        case_name=_extract_case_name(text, start),
        is_neutral=is_neutral,
        source_text=context.strip(),
    )


def extract_citations(text: str) -> list[ExtractedCitation]:
    """Extract every distinct citation from a block of text.

    Neutral citations are collected first, then traditional report
    citations. Whitespace inside a citation is normalised before
    deduplication.

    Example:
        >>> [c.citation for c in extract_citations("Patel v Mirza [2016] UKSC 42")]
        ['[2016] UKSC 42']
    """
    results: list[ExtractedCitation] = []
    seen: set[str] = set()

    passes = [
        (True, [pattern for _, pattern in NEUTRAL_CITATION_PATTERNS]),
        (False, list(TRADITIONAL_CITATION_PATTERNS)),
    ]
    for is_neutral, patterns in passes:
        for pattern in patterns:
            for match in pattern.finditer(text):
                normalised = " ".join(match.group(0).split())
                if normalised in seen:
                    continue
                seen.add(normalised)
                results.append(_build(text, match, normalised, is_neutral))

    return results


def contains_citations(text: str) -> bool:
    """Quick check for any neutral or traditional citation in the text."""
    patterns = [pattern for _, pattern in NEUTRAL_CITATION_PATTERNS]
    patterns.extend(TRADITIONAL_CITATION_PATTERNS)
    return any(pattern.search(text) for pattern in patterns)


__all__ = ["contains_citations", "extract_citations"]
