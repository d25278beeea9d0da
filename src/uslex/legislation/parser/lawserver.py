"""Parser for LawServer statute pages (one section per page).

LawServer republishes state codes with one page per section and surrounds
the statute text with attorney listings, "Terms Used In" glossaries and
related-section navigation, so noise filtering does most of the work here.
"""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from uslex.core.text import normalize
from uslex.legislation.models import ParsedProvision
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.patterns import is_noise

logger = logging.getLogger(__name__)

# "Alabama Code 8-38-1. Short title", "California Civil Code 1798.100 – General Duties"
HEADING_RE = re.compile(r"(?:§\s*)?(\d+[-.][\w.]+(?:[-.][\w.]+)*)(?:\s*[.–—-]\s*(.+))?$")
ALT_NUMBER_RE = re.compile(r"\b(\d+[A-Za-z]?[-_.]\d+[A-Za-z]?(?:[-_.]\d+[A-Za-z]?)*)\b")
_LEADING_PUNCTUATION = re.compile(r"^[\s.–—-]+")

CONTAINER_SELECTORS = "article, .entry-content, .content, main"
BODY_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "ol", "ul", "blockquote", "pre"]
MIN_TEXT_CHARS = 50

# Section link discovery on chapter listing pages
_SECTION_LINK_TEXT = [
    re.compile(r"§\s*\d"),
    re.compile(r"^(Section|Sec\.)\s", re.IGNORECASE),
    re.compile(r"^\d+[-.][\d.]+"),
]
_SECTION_HREF = re.compile(r"\d+[-_]\d+")
_STRUCTURAL_HREF = ("chapter", "title", "article", "part")
_SKIPPED_HREF = ("legal-dictionary", "attorney", "lawyer", "/search", "/login", "/signup", "archv-")


def split_lawserver_heading(raw_title: str) -> tuple[Optional[str], str]:
    """Split a LawServer page heading into ``(section number, title)``."""
    match = HEADING_RE.search(raw_title)
    if match:
        return match.group(1), (match.group(2) or "").strip() or raw_title

    match = ALT_NUMBER_RE.search(raw_title)
    if match:
        title = _LEADING_PUNCTUATION.sub("", raw_title[match.end():]).strip()
        return match.group(1), title or raw_title

    return None, raw_title


class LawServerParser(ProvisionParser):
    name = "lawserver"
    hosts = ("lawserver.com", "www.lawserver.com")

    def parse_content(self, html: str, url: str) -> list[ParsedProvision]:
        soup = BeautifulSoup(html, "html.parser")

        heading = soup.find("h1") or soup.find("h2")
        raw_title = normalize(heading.get_text()) if heading else ""
        if not raw_title:
            return []

        section_number, title = split_lawserver_heading(raw_title)
        if section_number is None:
            logger.debug(f"No section number in LawServer heading: {raw_title}")
            return []

        container = soup.select_one(CONTAINER_SELECTORS) or soup.body or soup
        parts = self._collect_after_heading(container, raw_title)
        if not parts:
            parts = [
                text
                for text in (normalize(p.get_text()) for p in container.find_all("p"))
                if len(text) >= 10 and not is_noise(text)
            ]

        provision = self.build_provision(section_number, title, parts)
        if len(provision.text) < MIN_TEXT_CHARS:
            return []
        return [provision]

    @staticmethod
    def _collect_after_heading(container, raw_title: str) -> list[str]:
        parts = []
        found_heading = False
        for element in container.find_all(BODY_TAGS):
            text = normalize(element.get_text())
            if not text:
                continue
            if element.name in ("h1", "h2") and text == raw_title:
                found_heading = True
                continue
            if not found_heading or is_noise(text, element.name):
                continue
            if element.name in ("ol", "ul"):
                parts.extend(
                    item_text
                    for item_text in (normalize(li.get_text()) for li in element.find_all("li"))
                    if item_text and not is_noise(item_text)
                )
            elif element.name == "p" and element.find_parent(["ol", "ul"]) is None:
                parts.append(text)
        return parts


def extract_section_links(
    html: str, page_url: str, section_filter: Optional[str] = None
) -> list[str]:
    """Find links to individual section pages on a LawServer chapter listing.

    Args:
        html: The listing page
        page_url: URL of the listing page, used to resolve relative links
        section_filter: Optional regex a link's text or URL must match

    Returns:
        De-duplicated absolute section URLs, in page order
    """
    soup = BeautifulSoup(html, "html.parser")
    wanted = re.compile(section_filter) if section_filter else None
    links: list[str] = []

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if href.startswith(("#", "http", "//")) or any(s in href for s in _SKIPPED_HREF):
            continue
        link_text = normalize(anchor.get_text())
        if not link_text:
            continue

        is_section = any(pattern.search(link_text) for pattern in _SECTION_LINK_TEXT)
        is_section_href = _SECTION_HREF.search(href) is not None and not any(
            s in href for s in _STRUCTURAL_HREF
        )
        if not (is_section or is_section_href):
            continue

        resolved = urljoin(page_url, href)
        if "lawserver.com/law/state/" not in resolved:
            continue
        if wanted and not (wanted.search(link_text) or wanted.search(resolved)):
            continue
        if resolved not in links:
            links.append(resolved)

    return links
