"""Parser for California's leginfo.legislature.ca.gov code pages.

Handles the single-section view (codes_displaySection.xhtml) and the
multi-section view (codes_displayText.xhtml). California section numbers
look like ``1798.82.`` and lead the section text.
"""

import logging
import re

from uslex.core.text import element_lines
from uslex.legislation.models import ParsedProvision
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.patterns import split_heading

logger = logging.getLogger(__name__)

CA_SECTION_RE = re.compile(r"^(\d+(?:\.\d+)*)\.\s*")

REMOVE_SELECTORS = [
    "nav", "header", "footer", "#header", "#footer", ".breadcrumbs", ".toolbar",
    "script", "style", "noscript",
]

CONTENT_SELECTORS = [
    "#content-body",
    "#codeLawContent",
    "#manylawsections",
    ".law-section-body",
    "#content_main",
    'div[id*="content"]',
    "body",
]

SECTION_SELECTORS = '.law-section, [class*="lawSection"], [id*="lawSection"]'

MIN_BODY_CHARS = 10


class LeginfoParser(ProvisionParser):
    name = "leginfo"
    hosts = ("leginfo.legislature.ca.gov",)

    def parse_content(self, html: str, url: str) -> list[ParsedProvision]:
        soup = self.make_soup(html, REMOVE_SELECTORS)
        content = self.select_container(soup, CONTENT_SELECTORS)
        if content is None:
            return []

        provisions = self._parse_section_blocks(content)
        if provisions:
            return provisions

        return self._parse_numbered_lines(element_lines(content))

    def _parse_section_blocks(self, content) -> list[ParsedProvision]:
        provisions = []
        for block in content.select(SECTION_SELECTORS):
            lines = element_lines(block)
            if not lines:
                continue
            match = CA_SECTION_RE.match(lines[0])
            if not match:
                continue
            title, lead = split_heading(lines[0][match.end():])
            parts = ([lead] if lead else []) + lines[1:]
            provision = self.build_provision(match.group(1), title, parts)
            if len(provision.text) > MIN_BODY_CHARS:
                provisions.append(provision)
        return provisions

    def _parse_numbered_lines(self, lines: list[str]) -> list[ParsedProvision]:
        provisions = []
        current = None

        def close():
            if current is not None:
                provision = self.build_provision(*current)
                if len(provision.text) > MIN_BODY_CHARS:
                    provisions.append(provision)

        for line in lines:
            match = CA_SECTION_RE.match(line)
            if match:
                close()
                title, lead = split_heading(line[match.end():])
                current = (match.group(1), title, [lead] if lead else [])
            elif current is not None:
                current[2].append(line)
        close()

        logger.debug(f"leginfo line split found {len(provisions)} sections")
        return provisions
