from abc import ABC, abstractmethod
from typing import Optional

from bs4 import BeautifulSoup, Tag

from uslex.core.text import normalize
from uslex.legislation.models import ParsedProvision
from uslex.settings import MIN_CONTAINER_CHARS


class ProvisionParser(ABC):
    """Abstract base class for extraction strategies.

    A strategy turns one raw HTML page into provisions. It holds no state
    between calls, so the same page always yields the same output. An
    empty list means "try the next strategy".
    """

    name: str

    @abstractmethod
    def parse_content(self, html: str, url: str) -> list[ParsedProvision]:
        """Parse the provisions out of a raw HTML page."""
        pass

    @staticmethod
    def make_soup(html: str, remove_selectors: list[str]) -> BeautifulSoup:
        soup = BeautifulSoup(html, "html.parser")
        for element in soup.select(", ".join(remove_selectors)):
            if not element.decomposed:
                element.decompose()
        return soup

    @staticmethod
    def select_container(soup: BeautifulSoup, selectors: list[str]) -> Optional[Tag]:
        """Return the first candidate container with enough text, if any."""
        for selector in selectors:
            element = soup.select_one(selector)
            if element is not None and len(element.get_text().strip()) > MIN_CONTAINER_CHARS:
                return element
        return None

    @staticmethod
    def build_provision(section_number: str, title: str, parts: list[str]) -> ParsedProvision:
        return ParsedProvision(
            section_number=section_number,
            title=normalize(title),
            text=normalize("\n\n".join(parts)),
        )
