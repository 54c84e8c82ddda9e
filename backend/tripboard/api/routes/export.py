"""
Document export routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from tripboard.schemas.export import ExportDocument
from tripboard.services.export_service import EXPORT_BUILDERS
from tripboard.services.stop_ledger import ALL
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.api.dependencies import get_workspace

router = APIRouter(prefix="/trips/{trip_id}/export", tags=["export"])


@router.get("/{section}", response_model=ExportDocument)
async def export_section(
    section: str,
    status_filter: str = Query(ALL, alias="status"),
    workspace: TripAggregate = Depends(get_workspace)
):
    """Printable tables for the itinerary, expenses or packing list."""
    builder = EXPORT_BUILDERS.get(section)
    if builder is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown export section"
        )
    return builder(workspace.view(status_filter))
