"""
Pydantic schemas for Expense entity and derived spending summaries.
"""
from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal
from tripboard.schemas.user import UserRef


class Expense(BaseModel):
    """Expense record."""
    id: str
    trip_id: str
    item: str
    amount: Decimal
    category: str = "other"
    created_at: Optional[datetime] = None
    created_by: Optional[UserRef] = None


class ExpenseCreate(BaseModel):
    """Schema for expense creation. Checked by the ledger, not here."""
    item: str = ""
    amount: Any = None
    category: str = "other"


class CategoryBreakdownItem(BaseModel):
    """Share of spending in one category."""
    category: str
    amount: Decimal
    percentage: int  # 0-100


class BudgetUtilization(BaseModel):
    """Budget usage. When is_set is False every figure is None."""
    is_set: bool
    budget: Optional[Decimal] = None
    total: Decimal = Decimal(0)
    remaining: Optional[Decimal] = None
    percent_used: Optional[int] = None  # Clamped to 0-100 for progress bars
    raw_percent: Optional[int] = None  # Unclamped
    warning: bool = False


class CollaboratorSpending(BaseModel):
    """Total spent by one user on the trip."""
    user_id: str
    name: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    amount: Decimal
    percentage: int


class ExpenseLine(BaseModel):
    """An expense with its resolved creator display name."""
    expense: Expense
    creator_name: str


class ExpenseSummary(BaseModel):
    """Expense portion of the trip view."""
    expenses: List[ExpenseLine] = []
    total: Decimal = Decimal(0)
    breakdown: List[CategoryBreakdownItem] = []
    top_category: Optional[CategoryBreakdownItem] = None
    utilization: BudgetUtilization
    spending: List[CollaboratorSpending] = []
