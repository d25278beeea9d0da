"""Generic parser for state legislature code pages.

Most state legislatures publish statutes as hand-built HTML with no shared
structure. This parser strips page chrome, picks the main content block and
then tries three increasingly loose ways of finding section boundaries:

1. Elements whose class or id says "section" (needs at least two)
2. Headings (or bold runs) that carry a section number, with the body
   accumulated from the following siblings
3. A line walk that opens a new section whenever a citation appears near
   the start of a line
"""

import logging

from bs4 import Comment, Tag

from uslex.core.text import element_lines, normalize
from uslex.legislation.models import ParsedProvision
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.patterns import find_section, is_noise, search_section, split_heading
from uslex.settings import MAX_HEADING_SIBLINGS, SECTION_START_WINDOW

logger = logging.getLogger(__name__)

REMOVE_SELECTORS = [
    "nav", "header", "footer", "aside",
    "#header", "#footer", "#sidebar", "#navigation", "#nav",
    ".nav", ".navbar", ".menu", ".sidebar", ".footer", ".header",
    ".breadcrumb", ".breadcrumbs", ".toolbar", ".pagination",
    ".cookie-banner", ".cookie-notice", ".banner",
    "script", "style", "noscript", "iframe",
]

CONTENT_SELECTORS = [
    "#content", "#main-content", "#maincontent", "#content-body", "#statute-body",
    "#lawContent", "main", "article", ".content", ".main-content", ".statute-content",
    ".law-text", ".bill-text", ".code-text", '[role="main"]', "#wrapper", ".wrapper",
    "#container", ".container", "body",
]

STRUCTURED_SELECTORS = [
    ".section",
    ".statute-section",
    ".law-section",
    '[class*="section"]',
    '[id*="section"]',
    "div.level-section",
    "div.code-section",
]

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "strong", "b"]
INLINE_HEADINGS = {"strong", "b"}

MIN_STRUCTURED_CHARS = 20
MIN_BODY_CHARS = 10


def _is_section_heading(element: Tag) -> bool:
    if element.name in INLINE_HEADINGS and element.find_parent(HEADING_TAGS[:6]) is not None:
        return False
    return find_section(normalize(element.get_text())) is not None


def _contains_section_heading(element: Tag) -> bool:
    if element.name in HEADING_TAGS and _is_section_heading(element):
        return True
    return any(_is_section_heading(child) for child in element.find_all(HEADING_TAGS))


class LegislatureParser(ProvisionParser):
    name = "legislature"

    def parse_content(self, html: str, url: str) -> list[ParsedProvision]:
        soup = self.make_soup(html, REMOVE_SELECTORS)
        content = self.select_container(soup, CONTENT_SELECTORS)
        if content is None:
            return []

        for strategy in (self._parse_structured, self._parse_headings, self._parse_lines):
            provisions = strategy(content, url)
            if provisions:
                logger.debug(
                    f"{strategy.__name__} found {len(provisions)} sections in {url}",
                    extra={"url": url, "strategy": strategy.__name__, "sections": len(provisions)},
                )
                return provisions
        return []

    def _parse_structured(self, content: Tag, url: str) -> list[ParsedProvision]:
        for selector in STRUCTURED_SELECTORS:
            matches = content.select(selector)
            if len(matches) < 2:
                continue

            # [class*="section"] also matches wrappers of other matches; keep the innermost
            matched = set(map(id, matches))
            blocks = [
                el for el in matches if not any(id(child) in matched for child in el.find_all(True))
            ]

            provisions = []
            for block in blocks:
                lines = [line for line in element_lines(block) if not is_noise(line)]
                if sum(len(line) for line in lines) < MIN_STRUCTURED_CHARS:
                    continue
                number = find_section(" ".join(lines))
                if number is None:
                    continue
                title, lead = split_heading(lines[0])
                parts = ([lead] if lead else []) + lines[1:]
                provision = self.build_provision(number, title, parts)
                if provision.text:
                    provisions.append(provision)
            if provisions:
                return provisions
        return []

    def _parse_headings(self, content: Tag, url: str) -> list[ParsedProvision]:
        provisions = []
        for heading in content.find_all(HEADING_TAGS):
            if not _is_section_heading(heading):
                continue
            heading_text = normalize(heading.get_text())
            if is_noise(heading_text, heading.name):
                continue

            number = find_section(heading_text)
            title, lead = split_heading(heading_text)
            parts = [lead] if lead else []

            start = heading
            if heading.name in INLINE_HEADINGS and heading.parent is not None:
                # <p><b>§ 5.</b> Text...</p>: the rest of the paragraph is body
                start = heading.parent
                block_text = normalize(start.get_text())
                if block_text.startswith(heading_text):
                    rest = block_text[len(heading_text):].strip()
                    if rest:
                        parts.append(rest)
            else:
                # <div><h3>§ 5</h3></div><p>...</p>: walk from the wrapper
                while (
                    start.parent is not None
                    and start.parent is not content
                    and not any(isinstance(s, Tag) for s in start.next_siblings)
                ):
                    start = start.parent

            parts.extend(self._accumulate_siblings(start, url, number))

            provision = self.build_provision(number, title, parts)
            if len(provision.text) > MIN_BODY_CHARS:
                provisions.append(provision)
        return provisions

    def _accumulate_siblings(self, start: Tag, url: str, number: str) -> list[str]:
        parts = []
        visited = 0
        for sibling in start.next_siblings:
            if isinstance(sibling, Comment):
                continue
            if not isinstance(sibling, Tag):
                text = normalize(str(sibling))
                if text and not is_noise(text):
                    parts.append(text)
                continue
            if _contains_section_heading(sibling):
                break
            if visited >= MAX_HEADING_SIBLINGS:
                logger.warning(
                    f"Section {number} truncated after {MAX_HEADING_SIBLINGS} sibling elements",
                    extra={"url": url, "section_number": number, "sibling_cap": MAX_HEADING_SIBLINGS},
                )
                break
            visited += 1
            parts.extend(
                line for line in element_lines(sibling) if not is_noise(line, sibling.name)
            )
        return parts

    def _parse_lines(self, content: Tag, url: str) -> list[ParsedProvision]:
        provisions = []
        current = None

        def close():
            if current is not None:
                provision = self.build_provision(*current)
                if len(provision.text) > MIN_BODY_CHARS:
                    provisions.append(provision)

        for line in element_lines(content):
            if is_noise(line):
                continue
            match = search_section(line)
            if match and match.start(1) < SECTION_START_WINDOW:
                close()
                title, lead = split_heading(line[match.start():])
                current = (match.group(1), title, [lead] if lead else [])
            elif current is not None:
                current[2].append(line)
        close()
        return provisions
