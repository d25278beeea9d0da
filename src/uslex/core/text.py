"""Text canonicalisation shared by the parsers and the query builder."""

import re

from bs4 import BeautifulSoup, Comment, Tag

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_CLOSING = re.compile(r"\s+([.,;:!?)\]])")
_SPACE_AFTER_OPENING = re.compile(r"([(\[])\s+")
_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\ufeff]")

BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li",
    "main", "nav", "ol", "p", "pre", "section", "table", "tbody", "thead", "tr", "ul",
}
SKIP_TAGS = {"script", "style", "noscript", "template"}
CHROME_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "iframe"]


def _normalize_paragraph(paragraph: str) -> str:
    paragraph = _WHITESPACE.sub(" ", paragraph).strip()
    paragraph = _SPACE_BEFORE_CLOSING.sub(r"\1", paragraph)
    return _SPACE_AFTER_OPENING.sub(r"\1", paragraph)


def normalize(raw: str | None) -> str:
    """Canonicalise whitespace and punctuation spacing.

    Runs of whitespace collapse to one space, except that a blank line
    (an explicit paragraph break) survives as ``"\\n\\n"``. Non-breaking
    spaces, carriage returns and zero-width characters are removed, and
    spacing is tightened around punctuation (``" ."`` becomes ``"."``,
    ``"( "`` becomes ``"("``). The function is idempotent.
    """
    if not raw:
        return ""

    text = raw.replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    text = _ZERO_WIDTH.sub("", text)

    paragraphs = (_normalize_paragraph(p) for p in _PARAGRAPH_BREAK.split(text))
    return "\n\n".join(p for p in paragraphs if p)


def _collect_text(node: Tag, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if not isinstance(child, Tag):
            parts.append(str(child))
            continue
        if child.name in SKIP_TAGS:
            continue
        block = child.name in BLOCK_TAGS
        if block:
            parts.append("\n")
        _collect_text(child, parts)
        if block:
            parts.append("\n")


def element_lines(element: Tag) -> list[str]:
    """Return the non-empty, normalised lines of an element, one per block."""
    parts: list[str] = []
    _collect_text(element, parts)
    lines = (normalize(line) for line in "".join(parts).split("\n"))
    return [line for line in lines if line]


def element_text(element: Tag) -> str:
    """Return an element's text with block elements on their own lines."""
    return "\n".join(element_lines(element))


def html_to_text(html: str) -> str:
    """Strip all markup from a page, keeping one line per block element."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(CHROME_TAGS):
        if not tag.decomposed:
            tag.decompose()
    return element_text(soup)
