"""Ordered strategy chain that turns a publisher page into provisions."""

import logging
from typing import Mapping, Optional
from urllib.parse import urlparse

from uslex.core.exceptions import UnknownParserError
from uslex.legislation.models import ParsedProvision
from uslex.legislation.parser.base import ProvisionParser
from uslex.legislation.parser.lawserver import LawServerParser
from uslex.legislation.parser.leginfo import LeginfoParser
from uslex.legislation.parser.legislature import LegislatureParser
from uslex.legislation.parser.simple_html import SimpleHtmlParser

logger = logging.getLogger(__name__)

GENERIC_PARSER = "legislature"
FALLBACK_PARSER = "simple-html"

SITE_PARSERS: dict[str, ProvisionParser] = {
    "leginfo": LeginfoParser(),
    "lawserver": LawServerParser(),
}

PARSERS: Mapping[str, ProvisionParser] = {
    **SITE_PARSERS,
    GENERIC_PARSER: LegislatureParser(),
    FALLBACK_PARSER: SimpleHtmlParser(),
}


def site_parser_for_url(url: Optional[str]) -> Optional[str]:
    """Return the site-specific parser name for a publisher host, if one exists."""
    if not url:
        return None
    host = urlparse(url).netloc.lower()
    for name, parser in SITE_PARSERS.items():
        if host in getattr(parser, "hosts", ()):
            return name
    return None


class ExtractionChain:
    """Tries strategies in order until one returns provisions.

    Each strategy is isolated: an exception inside it is logged and treated
    as an empty result, so ``extract`` itself never raises.
    """

    def __init__(self, strategies: list[ProvisionParser]):
        self.strategies = strategies

    @classmethod
    def for_parser(
        cls,
        parser_type: Optional[str] = None,
        url: Optional[str] = None,
        parsers: Mapping[str, ProvisionParser] = PARSERS,
    ) -> "ExtractionChain":
        """Build the chain for a configured parser type.

        A site-specific parser runs first, then the generic parser, then the
        fallback. Configuring the generic parser skips the site step and
        configuring the fallback runs it alone.

        Raises:
            UnknownParserError: If ``parser_type`` is not a known parser
        """
        if parser_type is not None and parser_type not in parsers:
            raise UnknownParserError(parser_type, list(parsers))

        if parser_type == FALLBACK_PARSER:
            names = [FALLBACK_PARSER]
        elif parser_type == GENERIC_PARSER:
            names = [GENERIC_PARSER, FALLBACK_PARSER]
        else:
            site = parser_type or site_parser_for_url(url)
            names = ([site] if site else []) + [GENERIC_PARSER, FALLBACK_PARSER]

        return cls([parsers[name] for name in names])

    def extract(self, html: str, source_url: str = "") -> list[ParsedProvision]:
        if not html:
            return []

        for strategy in self.strategies:
            try:
                provisions = strategy.parse_content(html, source_url)
            except Exception as e:
                logger.warning(
                    f"Parser {strategy.name} failed on {source_url}: {e}",
                    extra={"url": source_url, "parser": strategy.name, "error_type": type(e).__name__},
                )
                continue

            if provisions:
                logger.debug(
                    f"Parser {strategy.name} extracted {len(provisions)} provisions from {source_url}",
                    extra={"url": source_url, "parser": strategy.name, "provisions": len(provisions)},
                )
                return provisions

        logger.debug(f"No provisions extracted from {source_url}")
        return []


def extract(
    html: str, source_url: str = "", parser_type: Optional[str] = None
) -> list[ParsedProvision]:
    """Extract provisions from a page with the default strategy table."""
    return ExtractionChain.for_parser(parser_type, source_url).extract(html, source_url)
