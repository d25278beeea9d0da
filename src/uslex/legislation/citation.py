import logging
import sqlite3
from enum import Enum
from typing import NamedTuple, Optional

from uslex.core.store import ProvisionStore
from uslex.legislation.patterns import find_section

logger = logging.getLogger(__name__)


class MatchQuality(str, Enum):
    """Confidence of a citation match, strongest first.

    - SECTION_EXACT: The citation text appears in a section number of the matched document
    - SECTION_FUZZY: A section number extracted from the citation appears in one
    - DOCUMENT_ONLY: The document matched but no section did
    - NONE: No document matched
    """

    SECTION_EXACT = "section_exact"
    SECTION_FUZZY = "section_fuzzy"
    DOCUMENT_ONLY = "document_only"
    NONE = "none"


class CitationMatch(NamedTuple):
    valid: bool
    match_quality: MatchQuality
    document: Optional[sqlite3.Row] = None
    provision: Optional[sqlite3.Row] = None


def match_documents(
    store: ProvisionStore, citation: str, jurisdiction: Optional[str] = None
) -> list[sqlite3.Row]:
    """Documents whose identifier, short name or title contains the citation.

    When nothing contains the whole citation, documents whose short name or
    identifier occurs inside it are tried, so "CCPA § 1798.100" still finds
    the document with short name "CCPA".
    """
    return store.documents_containing(citation, jurisdiction) or store.documents_named_in(
        citation, jurisdiction
    )


def validate_citation(
    store: ProvisionStore, citation: str, jurisdiction: Optional[str] = None
) -> CitationMatch:
    """Check whether a citation names a real document and, if so, a real section.

    Tiers are tried in order and the first hit wins. At ``document_only`` the
    returned provision is just the document's first section, as a sample.
    """
    documents = match_documents(store, citation, jurisdiction)
    if not documents:
        return CitationMatch(False, MatchQuality.NONE)

    document = documents[0]
    document_ids = [document["id"]]

    exact = store.provisions_with_section_containing(document_ids, citation)
    if exact:
        return CitationMatch(True, MatchQuality.SECTION_EXACT, document, exact[0])

    fragment = find_section(citation)
    if fragment:
        fuzzy = store.provisions_with_section_containing(document_ids, fragment)
        if fuzzy:
            return CitationMatch(True, MatchQuality.SECTION_FUZZY, document, fuzzy[0])

    sample = store.provisions(document_ids)
    logger.debug(f"Citation '{citation}' matched document {document['id']} without a section")
    return CitationMatch(
        True, MatchQuality.DOCUMENT_ONLY, document, sample[0] if sample else None
    )
