"""
Trip workspace routes: composed view and trip-level fields.
"""
from fastapi import APIRouter, Depends, Query, status
from tripboard.schemas.trip import (
    Trip, TripView, TripStatusUpdate, BudgetUpdate, CollaboratorInvite, Collaborator
)
from tripboard.services.stop_ledger import ALL
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.api.dependencies import get_workspace

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get("/{trip_id}", response_model=TripView)
async def get_trip(
    status_filter: str = Query(ALL, alias="status"),
    workspace: TripAggregate = Depends(get_workspace)
):
    """Get the trip with itinerary, expenses and packing summaries."""
    return workspace.view(status_filter)


@router.put("/{trip_id}/status", response_model=Trip)
async def update_trip_status(
    update: TripStatusUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Set the trip status."""
    return await workspace.set_trip_status(update.status)


@router.put("/{trip_id}/budget", response_model=Trip)
async def update_budget(
    update: BudgetUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Set or clear (0) the trip budget."""
    return await workspace.set_budget(update.budget)


@router.post("/{trip_id}/invite", response_model=Collaborator, status_code=status.HTTP_201_CREATED)
async def invite_collaborator(
    invite: CollaboratorInvite,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Invite a collaborator by username."""
    return await workspace.invite_collaborator(invite.username, invite.role)
