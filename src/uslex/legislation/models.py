from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from uslex.core.models import UslexModel
from uslex.settings import UNKNOWN_SECTION


class DocumentStatus(str, Enum):
    """Enforcement status of a legal document.

    - IN_FORCE: Currently enforceable as enacted
    - AMENDED: Enforceable, with amendments since enactment
    - REPEALED: No longer law
    - SUPERSEDED: Replaced by a later instrument
    """

    IN_FORCE = "in_force"
    AMENDED = "amended"
    REPEALED = "repealed"
    SUPERSEDED = "superseded"

    @property
    def is_current(self) -> bool:
        return self in (DocumentStatus.IN_FORCE, DocumentStatus.AMENDED)


class DocumentType(str, Enum):
    STATUTE = "statute"
    REGULATION = "regulation"
    CONSTITUTION = "constitution"


class ParsedProvision(BaseModel):
    """One section recovered from a publisher page by an extraction strategy."""

    section_number: str = Field(description="Bare citation number, e.g. '45.48.010'.")
    title: str = ""
    text: str

    @computed_field
    @property
    def citation(self) -> str:
        """The stored citation form, e.g. '§ 45.48.010'."""
        if self.section_number == UNKNOWN_SECTION or self.section_number.startswith("§"):
            return self.section_number
        return f"§ {self.section_number}"


class Document(UslexModel):
    """A named legal instrument (a statute or act as a whole)."""

    id: Optional[int] = None
    jurisdiction: str
    title: str
    identifier: Optional[str] = None
    short_name: Optional[str] = None
    document_type: DocumentType = DocumentType.STATUTE
    status: DocumentStatus = DocumentStatus.IN_FORCE
    effective_date: Optional[date] = None
    last_amended: Optional[date] = None
    source_url: Optional[str] = None

    @model_validator(mode="after")
    def check_identity(self) -> "Document":
        if not self.identifier and not self.short_name:
            raise ValueError("A document needs an identifier or a short_name")
        return self

    @field_validator("effective_date", "last_amended", mode="before")
    @classmethod
    def blank_date_to_none(cls, value):
        """Seed files and manifests use an empty string for unknown dates."""
        if value == "":
            return None
        return value


class Provision(BaseModel):
    """One citable section of a stored document."""

    id: Optional[int] = None
    document_id: Optional[int] = None
    jurisdiction: str
    section_number: Optional[str] = Field(
        default=None, description="Free-form citation, hierarchical by prefix."
    )
    title: Optional[str] = None
    text: str
    order_index: int = Field(ge=1, description="Position of the provision within its document.")


class SeedProvision(BaseModel):
    document_index: int = Field(ge=0, description="Index into SeedFile.documents.")
    jurisdiction: str
    section_number: Optional[str] = None
    title: Optional[str] = None
    text: str
    order_index: int = Field(ge=1)


class SeedFile(BaseModel):
    """The ingest output for one jurisdiction, consumed by the store loader."""

    documents: List[Document] = Field(default_factory=list)
    provisions: List[SeedProvision] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_provision_order(self) -> "SeedFile":
        """Ordinals must be unique and increasing within each document."""
        last_index: dict[int, int] = {}
        for provision in self.provisions:
            if provision.document_index >= len(self.documents):
                raise ValueError(
                    f"Provision references document {provision.document_index}, "
                    f"but only {len(self.documents)} documents are present"
                )
            previous = last_index.get(provision.document_index, 0)
            if provision.order_index <= previous:
                raise ValueError(
                    f"order_index {provision.order_index} is not increasing "
                    f"for document {provision.document_index}"
                )
            last_index[provision.document_index] = provision.order_index
        return self
