import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_wrapped_store
from app.db.store import WrappedStore
from app.schemas.wrapped import WrappedData
from app.services.wrapped_service import WrappedService

logger = logging.getLogger(__name__)

router = APIRouter()

# Route kept for clients of the original data endpoint
legacy_router = APIRouter()


@legacy_router.get("/api/patient/{profile_id}/data", response_model=WrappedData, deprecated=True)
@router.get("/{profile_id}", response_model=WrappedData)
async def get_wrapped(
    profile_id: str,
    year: Optional[str] = Query(None, description="Calendar year, defaults to the current year"),
    store: WrappedStore = Depends(get_wrapped_store),
):
    """
    Get the annual wrapped report for a profile.

    Returns spending totals, the most expensive gift, last-minute purchases,
    list statistics, the most active day and who suggested gifts the most.

    Returns:
    - 200: Report computed
    - 400: Profile ID or year is not numeric
    - 404: Profile not found
    - 500: Report could not be computed
    """
    logger.info(f"Wrapped request: profile_id={profile_id}, year={year}")
    service = WrappedService(store)
    return await service.compute_wrapped(profile_id, year)
