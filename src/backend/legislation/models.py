from typing import Optional

from pydantic import BaseModel, Field

from uslex.legislation.citation import MatchQuality
from uslex.legislation.models import Provision
from uslex.requirements.models import RequirementRow
from uslex.settings import DEFAULT_SEARCH_LIMIT, DEFAULT_STANCE_LIMIT, DISCLAIMER, SOURCE_AUTHORITY


class ResponseMetadata(BaseModel):
    """Provenance attached to every tool response."""

    disclaimer: str = DISCLAIMER
    source_authority: str = SOURCE_AUTHORITY
    built_at: Optional[str] = Field(
        default=None, description="When the database was last built from seed files."
    )


class LegislationSearch(BaseModel):
    """Full-text search across provisions of US federal and state statutes."""

    query: str = Field(
        description="Keywords to search for. All words must appear; if nothing matches, any word may.",
        examples=["breach notification", "protected computer", "encryption safe harbor"],
    )
    jurisdiction: Optional[str] = Field(
        default=None,
        description="Restrict results to one jurisdiction code. If not provided, all jurisdictions are searched.",
        examples=["US-CA", "US-FED"],
    )
    limit: int = Field(
        default=DEFAULT_SEARCH_LIMIT,
        description="Number of results to return (1 to 50).",
    )


class SearchResult(BaseModel):
    jurisdiction: str
    document_title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None
    section_number: Optional[str] = None
    title: Optional[str] = None
    snippet: str = Field(description="Matching text with hits wrapped in **.")
    relevance: float = Field(description="Relevance score, higher is better.")


class LegislationSearchResponse(BaseModel):
    results: list[SearchResult]
    metadata: ResponseMetadata


class ProvisionLookup(BaseModel):
    """Retrieve the text of a statute, or of one section of it."""

    jurisdiction: str = Field(description="Jurisdiction code.", examples=["US-CA", "US-FED"])
    law_identifier: Optional[str] = Field(
        default=None,
        description="Formal citation of the statute, exactly as listed by list_sources.",
        examples=["18 USC 1030", "Cal. Civ. Code § 1798.82"],
    )
    short_name: Optional[str] = Field(
        default=None,
        description="Short name of the statute. Used when law_identifier is not given.",
        examples=["CFAA", "CCPA/CPRA"],
    )
    section_number: Optional[str] = Field(
        default=None,
        description=(
            "Section to retrieve. A parent section returns its subsections and a subsection "
            "returns its parent when no exact match exists. If not provided, all sections are returned."
        ),
        examples=["§ 1798.82", "1798.82(a)"],
    )


class ProvisionResult(Provision):
    """A stored provision with the statute it belongs to."""

    document_title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None


class ProvisionResponse(BaseModel):
    results: list[ProvisionResult]
    hints: list[str] = Field(
        default_factory=list, description="Suggestions for a better request when nothing matched."
    )
    metadata: ResponseMetadata


class CitationValidation(BaseModel):
    """Check whether a citation refers to a statute, and a section, in the database."""

    citation: str = Field(
        description="Citation as written, formal or informal.",
        examples=["CFAA", "18 USC 1030", "Cal. Civ. Code § 1798.82"],
    )
    jurisdiction: Optional[str] = Field(
        default=None, description="Restrict matching to one jurisdiction code."
    )


class DocumentSummary(BaseModel):
    jurisdiction: str
    title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None
    document_type: Optional[str] = None
    status: Optional[str] = None
    effective_date: Optional[str] = None
    last_amended: Optional[str] = None
    source_url: Optional[str] = None


class CitationValidationResponse(BaseModel):
    valid: bool
    match_quality: MatchQuality = Field(
        description=(
            "section_exact, section_fuzzy, document_only or none. At document_only the provision "
            "is a sample of the document, not the cited section."
        )
    )
    document: Optional[DocumentSummary] = None
    provision: Optional[ProvisionResult] = None
    metadata: ResponseMetadata


class SourcesLookup(BaseModel):
    """List the statutes loaded for each jurisdiction."""

    jurisdiction: Optional[str] = Field(
        default=None, description="Only list one jurisdiction. If not provided, all are listed."
    )


class SourceDocument(BaseModel):
    title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None
    status: Optional[str] = None
    provision_count: int


class JurisdictionSources(BaseModel):
    jurisdiction: str
    jurisdiction_name: Optional[str] = None
    document_count: int
    provision_count: int
    documents: list[SourceDocument]


class SourcesResponse(BaseModel):
    results: list[JurisdictionSources]
    metadata: ResponseMetadata


class CurrencyCheck(BaseModel):
    """Check whether a statute is currently in force."""

    jurisdiction: str = Field(description="Jurisdiction code.", examples=["US-FED"])
    law_identifier: Optional[str] = Field(default=None, examples=["18 USC 1030"])
    short_name: Optional[str] = Field(default=None, examples=["CFAA", "HIPAA"])


class CurrencyResult(BaseModel):
    jurisdiction: str
    title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None
    status: str = Field(description="Enforcement status, or not_found.")
    is_current: bool
    effective_date: Optional[str] = None
    last_amended: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)


class CurrencyResponse(BaseModel):
    results: CurrencyResult
    metadata: ResponseMetadata


class LegalStanceRequest(BaseModel):
    """Gather the statute text and classified requirements that bear on a legal question."""

    query: str = Field(
        description="The question or topic, in keywords.",
        examples=["breach notification deadline", "right to delete personal information"],
    )
    jurisdictions: Optional[list[str]] = Field(
        default=None,
        description='Jurisdiction codes to cover, or ["all"]. If not provided, every jurisdiction is covered.',
        examples=[["US-CA", "US-NY"], ["all"]],
    )
    limit: int = Field(
        default=DEFAULT_STANCE_LIMIT,
        description="Number of statute matches to return (1 to 20). Up to twice as many requirements are returned.",
    )


class LegalStance(BaseModel):
    query: str
    statute_matches: list[SearchResult]
    requirement_matches: list[RequirementRow]
    jurisdictions_covered: list[str]
    total_results: int


class LegalStanceResponse(BaseModel):
    results: LegalStance
    metadata: ResponseMetadata
