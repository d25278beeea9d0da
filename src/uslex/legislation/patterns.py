import re
from dataclasses import dataclass
from typing import Optional

from uslex.settings import MAX_TITLE_CHARS


@dataclass
class SectionPatterns:
    """Regex fragments for citation markers in US statute text.

    The finder patterns and the boundary pattern are both assembled from
    these fragments so the two always agree on what a marker looks like.
    """

    # Common fragments
    _NUMBER = r"\d+(?:[\w.-]*\w)?"
    _RANGE = rf"{_NUMBER}(?:\s*[-–]\s*{_NUMBER})?"
    _SYMBOL = r"§§?\s*"
    _WORD = r"\b(?:Sec(?:tion|\.)|Art(?:icle|\.))\s+"

    # Finder patterns, most to least specific
    SYMBOL = rf"{_SYMBOL}({_RANGE})"
    WORD = rf"{_WORD}({_NUMBER})"
    BARE = r"\b(\d{2,}(?:[.-]\d+)+[a-zA-Z]?)\b"

    # Split pattern. Bare numbers are excluded: they also match dates and
    # page numbers, which must never start a new provision.
    BOUNDARY = rf"{_SYMBOL}({_RANGE})|{_WORD}({_NUMBER})"


SECTION_PATTERNS: list[re.Pattern] = [
    re.compile(SectionPatterns.SYMBOL),
    re.compile(SectionPatterns.WORD, re.IGNORECASE),
    re.compile(SectionPatterns.BARE),
]

SECTION_BOUNDARY_RE = re.compile(SectionPatterns.BOUNDARY, re.IGNORECASE)

_LEADING_PUNCTUATION = re.compile(r"^[\s.:\-–—]+")

# Noise markers dropped while accumulating provision text
_BOILERPLATE_RE = re.compile(
    r"^(Related|Featured|Terms Used|Find a|Similar|See Also|Law Summaries"
    r"|Previous section|Next section|Table of Contents)",
    re.IGNORECASE,
)
_ADVERT_RE = re.compile(r"\b(attorneys?|lawyers?)\b", re.IGNORECASE)
_ADVERT_MAX_CHARS = 100
_STRUCTURAL_UNIT_RE = re.compile(r"\b(chapter|article|title|subchapter|part)\b", re.IGNORECASE)
_SUBSTANTIVE_UNIT_RE = re.compile(r"\b(definitions?|sections?|subsections?)\b", re.IGNORECASE)
_NAVIGATION_HEADINGS = {"h3", "h4", "h5", "h6"}


def search_section(text: str) -> Optional[re.Match]:
    """Return the match of the highest-priority pattern found anywhere in ``text``."""
    if not text:
        return None
    for pattern in SECTION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match
    return None


def find_section(text: str) -> Optional[str]:
    """Find the first citation number in ``text``.

    Symbol-prefixed citations win over word-prefixed ones, which win over
    bare dotted/dashed numbers.

    >>> find_section("See § 1798.82(a) for details")
    '1798.82'
    """
    match = search_section(text)
    return match.group(1) if match else None


def boundary_number(match: re.Match) -> str:
    """Return the captured number of a ``SECTION_BOUNDARY_RE`` match."""
    return next(group for group in match.groups() if group)


def strip_citation(text: str) -> str:
    """Remove the leading citation marker and any punctuation that follows it."""
    text = text.lstrip()
    for pattern in [SECTION_BOUNDARY_RE, *SECTION_PATTERNS]:
        match = pattern.match(text)
        if match:
            text = text[match.end():]
            break
    return _LEADING_PUNCTUATION.sub("", text)


def split_heading(line: str) -> tuple[str, str]:
    """Split a heading line into ``(title, remainder)``.

    The remainder after the citation becomes the title when it is short and
    not parenthetical. Otherwise the title is empty and the whole remainder
    belongs to the body.
    """
    remainder = strip_citation(line).strip()
    title = as_title(remainder)
    return (title, "") if title else ("", remainder)


def as_title(text: str) -> str:
    """Return ``text`` stripped if it reads as a title: short and not parenthetical."""
    text = text.strip()
    if text and len(text) < MAX_TITLE_CHARS and not text.startswith("("):
        return text
    return ""


def is_noise(fragment: str, tag_name: Optional[str] = None) -> bool:
    """Return True for boilerplate that must not end up in provision text."""
    fragment = fragment.strip()
    if not fragment:
        return True
    if _BOILERPLATE_RE.match(fragment):
        return True
    if len(fragment) < _ADVERT_MAX_CHARS and _ADVERT_RE.search(fragment):
        return True
    if (
        tag_name in _NAVIGATION_HEADINGS
        and _STRUCTURAL_UNIT_RE.search(fragment)
        and not _SUBSTANTIVE_UNIT_RE.search(fragment)
    ):
        return True
    return False
