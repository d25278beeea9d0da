"""The ingest manifest: which statutes to fetch for each jurisdiction."""

import json
import logging
import os
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from uslex.core.exceptions import ConfigurationError
from uslex.legislation.models import DocumentStatus

logger = logging.getLogger(__name__)


class StatuteCategory(str, Enum):
    BREACH_NOTIFICATION = "breach_notification"
    PRIVACY = "privacy"
    CYBERSECURITY = "cybersecurity"


class StatuteRef(BaseModel):
    name: str = Field(description="Full name of the statute.")
    short_name: str
    citation: str = Field(description="Legal citation, stored as the document identifier.")
    category: StatuteCategory
    url: str = Field(description="Page holding the official text.")
    parser_type: Optional[str] = Field(
        default=None, description="Extraction strategy to try first. Picked by host when unset."
    )
    effective_date: str = ""
    last_amended: str = ""
    status: DocumentStatus = DocumentStatus.IN_FORCE
    listing_url: Optional[str] = Field(
        default=None, description="Chapter listing whose section links are fetched one by one."
    )
    section_filter: Optional[str] = Field(
        default=None, description="Regex a discovered section link must match."
    )


class StateTarget(BaseModel):
    code: str = Field(description="Jurisdiction code, e.g. 'US-CA'.")
    name: str
    abbreviation: str
    statutes: List[StatuteRef] = Field(default_factory=list)


def load_manifest(path: str, states: Optional[list[str]] = None) -> list[StateTarget]:
    """Read the manifest, optionally keeping only some jurisdictions.

    ``states`` accepts codes (``US-CA``) or abbreviations (``CA``).

    Raises:
        ConfigurationError: If the manifest is missing, or a requested state is not in it
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Manifest not found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        targets = [StateTarget(**entry) for entry in json.load(f)]

    if not states:
        return targets

    wanted = {state.upper() for state in states}
    selected = [t for t in targets if t.code.upper() in wanted or t.abbreviation.upper() in wanted]
    if not selected:
        raise ConfigurationError(
            f"No manifest entries for {', '.join(sorted(wanted))}. "
            f"Available: {', '.join(t.code for t in targets)}"
        )
    logger.debug(f"Selected {len(selected)} of {len(targets)} manifest targets")
    return selected
