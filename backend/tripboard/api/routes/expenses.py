"""
Expense routes.
"""
from fastapi import APIRouter, Depends, status
from tripboard.schemas.expense import Expense, ExpenseCreate
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.api.dependencies import get_workspace

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.post("", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def add_expense(
    expense_data: ExpenseCreate,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Record a shared expense."""
    return await workspace.expenses.add_expense(expense_data.item, expense_data.amount, expense_data.category)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    workspace: TripAggregate = Depends(get_workspace)
):
    """Delete an expense."""
    await workspace.expenses.delete_expense(expense_id)
    return {"message": "Expense deleted successfully"}
