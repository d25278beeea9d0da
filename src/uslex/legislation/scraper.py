import logging
from typing import Iterator, Optional

from uslex.core.http import HttpClient
from uslex.legislation.manifest import StateTarget, StatuteRef
from uslex.legislation.models import Document, ParsedProvision, SeedFile, SeedProvision
from uslex.legislation.parser import ExtractionChain, extract_section_links

logger = logging.getLogger(__name__)


class StatuteScraper:
    """Fetches the manifest's statute pages and extracts their provisions."""

    def __init__(self, http_client: Optional[HttpClient] = None):
        self.http_client = http_client or HttpClient()

    def load_content(self, targets: list[StateTarget]) -> Iterator[SeedFile]:
        for target in targets:
            yield self.scrape_state(target)

    def scrape_state(self, target: StateTarget) -> SeedFile:
        """Build the seed file of one jurisdiction.

        A statute whose pages cannot be fetched, or which yields no
        provisions, is logged and left out. The rest of the state continues.
        """
        documents: list[Document] = []
        provisions: list[SeedProvision] = []

        for statute in target.statutes:
            parsed = self.scrape_statute(statute)
            if not parsed:
                logger.warning(
                    f"Skipping {target.code} {statute.short_name}: no provisions extracted",
                    extra={"jurisdiction": target.code, "short_name": statute.short_name},
                )
                continue

            document_index = len(documents)
            documents.append(
                Document(
                    jurisdiction=target.code,
                    title=statute.name,
                    identifier=statute.citation,
                    short_name=statute.short_name,
                    status=statute.status,
                    effective_date=statute.effective_date,
                    last_amended=statute.last_amended,
                    source_url=statute.url,
                )
            )
            provisions.extend(
                SeedProvision(
                    document_index=document_index,
                    jurisdiction=target.code,
                    section_number=provision.citation,
                    title=provision.title,
                    text=provision.text,
                    order_index=order_index,
                )
                for order_index, provision in enumerate(parsed, start=1)
            )
            logger.info(
                f"{target.code} {statute.short_name}: {len(parsed)} provisions",
                extra={
                    "jurisdiction": target.code,
                    "short_name": statute.short_name,
                    "provisions": len(parsed),
                },
            )

        return SeedFile(documents=documents, provisions=provisions)

    def scrape_statute(self, statute: StatuteRef) -> list[ParsedProvision]:
        chain = ExtractionChain.for_parser(statute.parser_type, statute.url)
        provisions: list[ParsedProvision] = []
        for url in self._section_urls(statute):
            html = self.http_client.fetch_text(url)
            if html is None:
                continue
            provisions.extend(chain.extract(html, url))
        return provisions

    def _section_urls(self, statute: StatuteRef) -> list[str]:
        """The page itself, or the section pages linked from its listing page.

        A listing page with no matching section links is treated as a
        section page in its own right.
        """
        if not statute.listing_url:
            return [statute.url]

        html = self.http_client.fetch_text(statute.listing_url)
        if html is None:
            return []

        links = extract_section_links(html, statute.listing_url, statute.section_filter)
        if not links:
            return [statute.listing_url]

        logger.debug(
            f"Found {len(links)} section links for {statute.short_name}",
            extra={"short_name": statute.short_name, "listing_url": statute.listing_url},
        )
        return links
