from fastapi import APIRouter, Depends

from backend.core.dependencies import get_store
from backend.core.error_handling import handle_errors
from backend.requirements.models import (
    RequirementComparison,
    RequirementsResponse,
    StateRequirementsLookup,
)
from backend.requirements.search import compare_requirements, get_state_requirements
from uslex.core.store import ProvisionStore

router = APIRouter(
    prefix="/requirements",
    tags=["requirements"],
)


@router.post(
    "/compare",
    response_model=RequirementsResponse,
    operation_id="compare_requirements",
    summary="Compare a requirement across jurisdictions",
    description=(
        "Side-by-side classified requirements (e.g. breach notification deadlines) for one "
        'category. Pass ["all"] to compare every jurisdiction.'
    ),
)
@handle_errors
async def compare_requirements_endpoint(
    comparison: RequirementComparison, store: ProvisionStore = Depends(get_store)
):
    return compare_requirements(store, comparison)


@router.post(
    "/state",
    response_model=RequirementsResponse,
    operation_id="get_state_requirements",
    summary="Get every classified requirement of one jurisdiction",
    description="Drill down into one jurisdiction's requirements, optionally for one category.",
)
@handle_errors
async def get_state_requirements_endpoint(
    lookup: StateRequirementsLookup, store: ProvisionStore = Depends(get_store)
):
    return get_state_requirements(store, lookup)
