import logging

from fastapi import APIRouter, Depends

from backend.core.dependencies import get_store
from backend.core.error_handling import handle_errors
from backend.legislation.models import (
    CitationValidation,
    CitationValidationResponse,
    CurrencyCheck,
    CurrencyResponse,
    LegalStanceRequest,
    LegalStanceResponse,
    LegislationSearch,
    LegislationSearchResponse,
    ProvisionLookup,
    ProvisionResponse,
    SourcesLookup,
    SourcesResponse,
)
from backend.legislation.search import (
    build_legal_stance,
    check_currency,
    get_provision,
    list_sources,
    search_legislation,
    validate_citation,
)
from uslex.core.store import ProvisionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/legislation",
    tags=["legislation"],
)


@router.post(
    "/search",
    response_model=LegislationSearchResponse,
    operation_id="search_legislation",
    summary="Search the text of US federal and state statutes",
    description="Keyword search over provisions. Results are ranked by relevance with highlighted snippets.",
)
@handle_errors
async def search_legislation_endpoint(
    search: LegislationSearch, store: ProvisionStore = Depends(get_store)
):
    return search_legislation(store, search)


@router.post(
    "/provision",
    response_model=ProvisionResponse,
    operation_id="get_provision",
    summary="Get the text of a statute or one of its sections",
    description=(
        "Retrieve provisions by statute identifier or short name, optionally for one section. "
        "When nothing matches, hints list what is available."
    ),
)
@handle_errors
async def get_provision_endpoint(
    lookup: ProvisionLookup, store: ProvisionStore = Depends(get_store)
):
    return get_provision(store, lookup)


@router.post(
    "/citation/validate",
    response_model=CitationValidationResponse,
    operation_id="validate_citation",
    summary="Check that a citation refers to a real statute and section",
    description="Reports how confidently the citation matched: section_exact, section_fuzzy, document_only or none.",
)
@handle_errors
async def validate_citation_endpoint(
    validation: CitationValidation, store: ProvisionStore = Depends(get_store)
):
    return validate_citation(store, validation)


@router.post(
    "/sources",
    response_model=SourcesResponse,
    operation_id="list_sources",
    summary="List the statutes loaded for each jurisdiction",
    description="Document and provision counts per jurisdiction, with each statute's identifier and short name.",
)
@handle_errors
async def list_sources_endpoint(
    lookup: SourcesLookup, store: ProvisionStore = Depends(get_store)
):
    return list_sources(store, lookup)


@router.post(
    "/currency",
    response_model=CurrencyResponse,
    operation_id="check_currency",
    summary="Check whether a statute is in force",
    description="Returns the enforcement status and dates of a statute, with warnings if it was repealed or superseded.",
)
@handle_errors
async def check_currency_endpoint(
    check: CurrencyCheck, store: ProvisionStore = Depends(get_store)
):
    return check_currency(store, check)


@router.post(
    "/stance",
    response_model=LegalStanceResponse,
    operation_id="build_legal_stance",
    summary="Gather the statutes and requirements that bear on a legal question",
    description=(
        "Combines a statute text search with the classified requirements whose summaries mention "
        "the query, and lists which jurisdictions the results cover."
    ),
)
@handle_errors
async def build_legal_stance_endpoint(
    stance: LegalStanceRequest, store: ProvisionStore = Depends(get_store)
):
    return build_legal_stance(store, stance)
