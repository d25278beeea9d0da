import logging
from itertools import groupby
from typing import Optional

from backend.legislation.models import (
    CitationValidation,
    CitationValidationResponse,
    CurrencyCheck,
    CurrencyResponse,
    CurrencyResult,
    DocumentSummary,
    JurisdictionSources,
    LegalStance,
    LegalStanceRequest,
    LegalStanceResponse,
    LegislationSearch,
    LegislationSearchResponse,
    ProvisionLookup,
    ProvisionResponse,
    ProvisionResult,
    ResponseMetadata,
    SearchResult,
    SourceDocument,
    SourcesLookup,
    SourcesResponse,
)
from uslex.core.exceptions import InputValidationError
from uslex.core.store import ProvisionStore
from uslex.core.validate import validate_jurisdiction, validate_jurisdictions, validate_non_empty
from uslex.legislation.citation import validate_citation as match_citation
from uslex.legislation.models import DocumentStatus
from uslex.legislation.query import build_variants, tokenize
from uslex.legislation.resolver import canonical_section, resolve
from uslex.requirements.models import RequirementRow
from uslex.settings import MAX_SEARCH_LIMIT, MAX_STANCE_LIMIT

logger = logging.getLogger(__name__)

SECTION_HINT_SAMPLE = 10


def response_metadata(store: ProvisionStore) -> ResponseMetadata:
    return ResponseMetadata(built_at=store.get_metadata().get("built_at"))


def _document_reference(
    law_identifier: Optional[str], short_name: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    identifier = law_identifier.strip() if law_identifier and law_identifier.strip() else None
    name = short_name.strip() if short_name and short_name.strip() else None
    if identifier is None and name is None:
        raise InputValidationError(
            'Provide either law_identifier (e.g. "18 USC 1030") or short_name '
            '(e.g. "CFAA", "HIPAA"). Use list_sources to discover available laws.',
            field="law_identifier",
        )
    return identifier, name


def search_statutes(
    store: ProvisionStore, query: str, jurisdictions: Optional[list[str]], limit: int
) -> list:
    """FTS rows for ``query``: all words first, any word only if that finds nothing."""
    variants = build_variants(query)
    if variants.primary is None:
        return []
    rows = store.search(variants.primary, jurisdictions, limit)
    if not rows and variants.fallback != variants.primary:
        logger.debug(f"No results for '{variants.primary}', trying '{variants.fallback}'")
        rows = store.search(variants.fallback, jurisdictions, limit)
    return rows


def search_legislation(store: ProvisionStore, search: LegislationSearch) -> LegislationSearchResponse:
    """Search provision text, conjunctively first and disjunctively only if that finds nothing."""
    query = validate_non_empty(search.query, "query")
    jurisdiction = validate_jurisdiction(search.jurisdiction)
    limit = max(1, min(search.limit, MAX_SEARCH_LIMIT))

    rows = search_statutes(store, query, [jurisdiction] if jurisdiction else None, limit)

    logger.info(
        f"Legislation search: query='{query}', jurisdiction={jurisdiction}, results={len(rows)}"
    )
    results = [SearchResult(**dict(row), relevance=-row["rank"]) for row in rows]
    return LegislationSearchResponse(results=results, metadata=response_metadata(store))


def get_provision(store: ProvisionStore, lookup: ProvisionLookup) -> ProvisionResponse:
    """Provisions of one statute, optionally narrowed to a section.

    Misses are not errors: the response is empty and ``hints`` names short
    names or section numbers that do exist.
    """
    jurisdiction = validate_jurisdiction(lookup.jurisdiction, required=True)
    identifier, short_name = _document_reference(lookup.law_identifier, lookup.short_name)
    metadata = response_metadata(store)

    documents = store.find_documents(jurisdiction, identifier=identifier, short_name=short_name)
    if not documents:
        hints = [f'No statute "{identifier or short_name}" found in {jurisdiction}.']
        available = store.short_names(jurisdiction)
        if available:
            hints.append(f"Available short names in {jurisdiction}: {', '.join(available)}")
        else:
            hints.append(f"No statutes are loaded for {jurisdiction}. Use list_sources to see coverage.")
        return ProvisionResponse(results=[], hints=hints, metadata=metadata)

    document_ids = [document["id"] for document in documents]
    if lookup.section_number and lookup.section_number.strip():
        section = canonical_section(lookup.section_number)
        rows = resolve(store, document_ids, section)
        if not rows:
            sample = store.section_numbers(document_ids, limit=SECTION_HINT_SAMPLE)
            hints = [f'Section "{lookup.section_number.strip()}" not found in {identifier or short_name}.']
            if sample:
                hints.append(f"Available sections include: {', '.join(sample)}")
            return ProvisionResponse(results=[], hints=hints, metadata=metadata)
    else:
        rows = store.provisions(document_ids)

    return ProvisionResponse(
        results=[ProvisionResult(**dict(row)) for row in rows], metadata=metadata
    )


def validate_citation(
    store: ProvisionStore, validation: CitationValidation
) -> CitationValidationResponse:
    citation = validate_non_empty(validation.citation, "citation")
    jurisdiction = validate_jurisdiction(validation.jurisdiction)

    match = match_citation(store, citation, jurisdiction)
    logger.info(f"Citation '{citation}' validated as {match.match_quality.value}")

    document = None
    provision = None
    if match.document is not None:
        document = DocumentSummary(**dict(match.document))
    if match.provision is not None:
        provision = ProvisionResult(**dict(match.provision))

    return CitationValidationResponse(
        valid=match.valid,
        match_quality=match.match_quality,
        document=document,
        provision=provision,
        metadata=response_metadata(store),
    )


def list_sources(store: ProvisionStore, lookup: SourcesLookup) -> SourcesResponse:
    jurisdiction = validate_jurisdiction(lookup.jurisdiction)
    rows = store.list_documents(jurisdiction)

    results = []
    for code, group in groupby(rows, key=lambda row: row["jurisdiction"]):
        documents = list(group)
        results.append(
            JurisdictionSources(
                jurisdiction=code,
                jurisdiction_name=documents[0]["jurisdiction_name"],
                document_count=len(documents),
                provision_count=sum(row["provision_count"] for row in documents),
                documents=[SourceDocument(**dict(row)) for row in documents],
            )
        )
    return SourcesResponse(results=results, metadata=response_metadata(store))


def check_currency(store: ProvisionStore, check: CurrencyCheck) -> CurrencyResponse:
    jurisdiction = validate_jurisdiction(check.jurisdiction, required=True)
    identifier, short_name = _document_reference(check.law_identifier, check.short_name)
    metadata = response_metadata(store)

    documents = store.find_documents(jurisdiction, identifier=identifier, short_name=short_name)
    if not documents:
        result = CurrencyResult(
            jurisdiction=jurisdiction,
            title="",
            identifier=identifier,
            short_name=short_name,
            status="not_found",
            is_current=False,
            warnings=["Document not found in database"],
        )
        return CurrencyResponse(results=result, metadata=metadata)

    document = documents[0]
    status = DocumentStatus(document["status"])
    warnings = []
    if status in (DocumentStatus.REPEALED, DocumentStatus.SUPERSEDED):
        warnings.append(f'"{document["title"]}" has been {status.value}')

    result = CurrencyResult(
        jurisdiction=document["jurisdiction"],
        title=document["title"],
        identifier=document["identifier"],
        short_name=document["short_name"],
        status=status.value,
        is_current=status.is_current,
        effective_date=document["effective_date"],
        last_amended=document["last_amended"],
        warnings=warnings,
    )
    return CurrencyResponse(results=result, metadata=metadata)


def build_legal_stance(store: ProvisionStore, request: LegalStanceRequest) -> LegalStanceResponse:
    """Statute matches and classified requirements for one question, across jurisdictions.

    Statutes are found with the same all-words-then-any-word search as
    ``search_legislation``. Requirements match when their summary contains
    any query word.
    """
    query = validate_non_empty(request.query, "query")
    jurisdictions = validate_jurisdictions(request.jurisdictions) or None
    limit = max(1, min(request.limit, MAX_STANCE_LIMIT))

    statutes = [
        SearchResult(**dict(row), relevance=-row["rank"])
        for row in search_statutes(store, query, jurisdictions, limit)
    ]
    requirements = [
        RequirementRow(**dict(row))
        for row in store.requirements_matching(tokenize(query), jurisdictions, limit * 2)
    ]

    covered = sorted({match.jurisdiction for match in [*statutes, *requirements]})
    logger.info(
        f"Legal stance: query='{query}', statutes={len(statutes)}, "
        f"requirements={len(requirements)}, jurisdictions={covered}"
    )
    stance = LegalStance(
        query=query,
        statute_matches=statutes,
        requirement_matches=requirements,
        jurisdictions_covered=covered,
        total_results=len(statutes) + len(requirements),
    )
    return LegalStanceResponse(results=stance, metadata=response_metadata(store))
