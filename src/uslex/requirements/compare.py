import logging
from typing import Optional, Sequence

from uslex.core.store import ProvisionStore
from uslex.core.validate import validate_jurisdiction, validate_jurisdictions, validate_non_empty
from uslex.requirements.models import RequirementRow
from uslex.settings import MAX_COMPARISON_ROWS, MAX_REQUIREMENT_ROWS

logger = logging.getLogger(__name__)


def compare(
    store: ProvisionStore,
    category: str,
    subcategory: Optional[str],
    jurisdictions: Sequence[str],
) -> list[RequirementRow]:
    """Side-by-side requirement rows for one category across jurisdictions.

    ``["all"]`` lifts the jurisdiction filter. An empty list returns nothing.
    Any unknown code fails the whole request.

    Raises:
        InputValidationError: For an empty category or an unknown jurisdiction
    """
    category = validate_non_empty(category, "category")
    subcategory = subcategory.strip() if subcategory and subcategory.strip() else None

    if not jurisdictions:
        return []
    codes = validate_jurisdictions(jurisdictions)

    rows = store.compare_requirements(category, subcategory, codes, MAX_COMPARISON_ROWS)
    logger.info(
        f"Compared {category}/{subcategory or '*'} across {codes or 'all'}: {len(rows)} rows"
    )
    return [RequirementRow(**dict(row)) for row in rows]


def state_requirements(
    store: ProvisionStore, jurisdiction: str, category: Optional[str] = None
) -> list[RequirementRow]:
    """Every classified requirement of one jurisdiction, optionally for one category."""
    code = validate_jurisdiction(jurisdiction, required=True)
    category = category.strip() if category and category.strip() else None
    rows = store.state_requirements(code, category, MAX_REQUIREMENT_ROWS)
    return [RequirementRow(**dict(row)) for row in rows]
