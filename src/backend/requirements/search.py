from backend.legislation.search import response_metadata
from backend.requirements.models import (
    RequirementComparison,
    RequirementsResponse,
    StateRequirementsLookup,
)
from uslex.core.store import ProvisionStore
from uslex.requirements.compare import compare, state_requirements


def compare_requirements(
    store: ProvisionStore, comparison: RequirementComparison
) -> RequirementsResponse:
    rows = compare(store, comparison.category, comparison.subcategory, comparison.jurisdictions)
    return RequirementsResponse(results=rows, metadata=response_metadata(store))


def get_state_requirements(
    store: ProvisionStore, lookup: StateRequirementsLookup
) -> RequirementsResponse:
    rows = state_requirements(store, lookup.jurisdiction, lookup.category)
    return RequirementsResponse(results=rows, metadata=response_metadata(store))
