"""
Itinerary stop routes.
"""
from fastapi import APIRouter, Depends, status
from tripboard.schemas.itinerary import ItineraryStop, StopCreate, StopUpdate, StopStatusUpdate
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.api.dependencies import get_workspace

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["itinerary"])


@router.post("", response_model=ItineraryStop, status_code=status.HTTP_201_CREATED)
async def add_stop(
    stop_data: StopCreate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Add a stop to the itinerary."""
    return await workspace.stops.add_stop(stop_data.name, stop_data.activity, stop_data.date)


@router.patch("/{stop_id}", response_model=ItineraryStop)
async def update_stop(
    stop_id: str,
    stop_data: StopUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Edit a stop's name, activity, date or status."""
    return await workspace.stops.update_stop(stop_id, **stop_data.model_dump(exclude_unset=True))


@router.put("/{stop_id}/status", response_model=ItineraryStop)
async def update_stop_status(
    stop_id: str,
    update: StopStatusUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Move a stop to another status."""
    return await workspace.stops.set_status(stop_id, update.status)


@router.delete("/{stop_id}")
async def delete_stop(
    stop_id: str,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Delete a stop."""
    await workspace.stops.delete_stop(stop_id)
    return {"message": "Stop deleted successfully"}
