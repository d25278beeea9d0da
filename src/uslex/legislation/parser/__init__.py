from .chain import PARSERS, ExtractionChain, extract
from .lawserver import LawServerParser, extract_section_links
from .leginfo import LeginfoParser
from .legislature import LegislatureParser
from .simple_html import SimpleHtmlParser

__all__ = [
    "PARSERS",
    "ExtractionChain",
    "extract",
    "LawServerParser",
    "LeginfoParser",
    "LegislatureParser",
    "SimpleHtmlParser",
    "extract_section_links",
]
