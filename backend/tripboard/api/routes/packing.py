"""
Packing list routes.
"""
from fastapi import APIRouter, Depends, status
from tripboard.schemas.packing import PackingItem, PackingItemCreate, PackingItemUpdate, QuantityUpdate
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.api.dependencies import get_workspace

router = APIRouter(prefix="/trips/{trip_id}/packing", tags=["packing"])


@router.post("", response_model=PackingItem, status_code=status.HTTP_201_CREATED)
async def add_packing_item(
    item_data: PackingItemCreate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Add an item to the packing list."""
    return await workspace.packing.add_item(
        item_data.name, item_data.category, item_data.quantity, item_data.notes
    )


@router.post("/{item_id}/toggle", response_model=PackingItem)
async def toggle_packing_item(
    item_id: str,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Mark an item packed or unpacked."""
    return await workspace.packing.toggle_item(item_id)


@router.put("/{item_id}/quantity", response_model=PackingItem)
async def update_quantity(
    item_id: str,
    update: QuantityUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Change an item's quantity."""
    return await workspace.packing.update_quantity(item_id, update.quantity)


@router.patch("/{item_id}", response_model=PackingItem)
async def update_packing_item(
    item_id: str,
    item_data: PackingItemUpdate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Edit an item's name, category, notes or quantity."""
    return await workspace.packing.update_item(item_id, **item_data.model_dump(exclude_unset=True))


@router.delete("/{item_id}")
async def delete_packing_item(
    item_id: str,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Delete an item."""
    await workspace.packing.delete_item(item_id)
    return {"message": "Item deleted successfully"}
