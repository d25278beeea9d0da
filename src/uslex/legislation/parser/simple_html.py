"""Last-resort parser: plain text split on citation markers.

Used when no structural strategy recognises the page. It never discards a
page: text without any citation marker comes back as one provision under
the ``unknown`` section identifier.
"""

from uslex.core.text import html_to_text, normalize
from uslex.legislation.models import ParsedProvision
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.patterns import (
    SECTION_BOUNDARY_RE,
    as_title,
    boundary_number,
    strip_citation,
)
from uslex.settings import MAX_PROVISION_CHARS, UNKNOWN_SECTION

MIN_BODY_CHARS = 10


class SimpleHtmlParser(ProvisionParser):
    name = "simple-html"

    def parse_content(self, html: str, url: str) -> list[ParsedProvision]:
        text = html_to_text(html)
        if not normalize(text):
            return []

        markers = list(SECTION_BOUNDARY_RE.finditer(text))
        if not markers:
            return [self._unsectioned(text)]

        provisions = []
        for i, marker in enumerate(markers):
            end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
            end = min(end, marker.start() + MAX_PROVISION_CHARS)
            chunk = text[marker.start():end]

            # Plain text has no heading markup, so the first line doubles as
            # the title and stays in the body.
            body = strip_citation(chunk)
            title = as_title(body.partition("\n")[0])
            provision = self.build_provision(boundary_number(marker), title, [body])
            if len(provision.text) > MIN_BODY_CHARS:
                provisions.append(provision)

        return provisions or [self._unsectioned(text)]

    def _unsectioned(self, text: str) -> ParsedProvision:
        return ParsedProvision(
            section_number=UNKNOWN_SECTION,
            title="",
            text=normalize(text[:MAX_PROVISION_CHARS]),
        )
