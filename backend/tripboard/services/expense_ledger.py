"""
Expense ledger: shared spending, budget usage and who paid for what.

Amounts are summed in trip-native units; nothing is converted. Every
summary here is recomputed from the current expense list on each read.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from tripboard.core.config import settings
from tripboard.core.errors import ValidationError, NotFoundError
from tripboard.core.utils import percent, to_decimal
from tripboard.models.expense import ExpenseCategory
from tripboard.schemas.expense import (
    Expense, BudgetUtilization, CategoryBreakdownItem, CollaboratorSpending
)
from tripboard.schemas.trip import Collaborator
from tripboard.schemas.user import UserRef
from tripboard.models.trip import CollaboratorStatus
from tripboard.services.gateway import TripGateway, persist

logger = logging.getLogger(__name__)

EXPENSE_CATEGORIES = [c.value for c in ExpenseCategory]

# Shown for expenses whose creator is unknown
VIEWER_LABEL = "You"


def compute_total(expenses: Iterable[Expense]) -> Decimal:
    """Sum of all expense amounts."""
    return sum((e.amount for e in expenses), Decimal(0))


def compute_category_breakdown(expenses: Iterable[Expense]) -> List[CategoryBreakdownItem]:
    """
    Spending per category in order of first appearance.

    Empty when nothing has been spent, so there is never a division by zero.
    """
    totals: Dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, Decimal(0)) + expense.amount

    total = sum(totals.values(), Decimal(0))
    if total <= 0:
        return []

    return [
        CategoryBreakdownItem(category=category, amount=amount, percentage=percent(amount, total))
        for category, amount in totals.items()
    ]


def top_category(breakdown: List[CategoryBreakdownItem]) -> Optional[CategoryBreakdownItem]:
    """Largest category; the first one encountered wins a tie."""
    if not breakdown:
        return None
    return max(breakdown, key=lambda item: item.amount)


def compute_budget_utilization(total: Decimal, budget: Optional[Decimal]) -> BudgetUtilization:
    """
    How much of the budget is used.

    A missing or zero budget means "not set": no figures and no warning.
    percent_used is clamped to 0-100 for progress bars; raw_percent is not.
    """
    if budget is None or budget <= 0:
        return BudgetUtilization(is_set=False, total=total)

    raw_percent = percent(total, budget)
    threshold = budget * Decimal(str(settings.BUDGET_WARNING_RATIO))
    return BudgetUtilization(
        is_set=True,
        budget=budget,
        total=total,
        remaining=budget - total,
        percent_used=min(max(raw_percent, 0), 100),
        raw_percent=raw_percent,
        warning=total > threshold,
    )


def build_roster(owner: Optional[UserRef], collaborators: Iterable[Collaborator]) -> Dict[str, UserRef]:
    """Known profiles: the owner plus accepted collaborators."""
    roster: Dict[str, UserRef] = {}
    if owner is not None:
        roster[owner.id] = owner
    for collaborator in collaborators:
        if collaborator.status == CollaboratorStatus.ACCEPTED:
            roster[collaborator.user.id] = collaborator.user
    return roster


def resolve_creator(creator: UserRef, roster: Dict[str, UserRef]) -> UserRef:
    """
    Profile to display for a record's creator.

    The roster entry wins because it reflects the current name and avatar;
    the copy embedded on the record is the fallback for people who have
    since left the trip.
    """
    known = roster.get(creator.id)
    if known is None:
        return creator
    return UserRef(
        id=creator.id,
        name=known.name or creator.name,
        username=known.username,
        avatar_url=known.avatar_url,
    )


def creator_display_name(expense: Expense, roster: Dict[str, UserRef]) -> str:
    """Display name of an expense's creator; 'You' when none is recorded."""
    if expense.created_by is None:
        return VIEWER_LABEL
    return resolve_creator(expense.created_by, roster).name or VIEWER_LABEL


def resolve_spender(
    user_id: str,
    embedded: UserRef,
    roster: Dict[str, UserRef],
    viewer: UserRef,
) -> UserRef:
    """
    Profile for one spending entry.

    Precedence: roster entry, then the viewer's own profile (for the viewer's
    id), then the copy embedded on the record. The result does not depend on
    which expense was seen first.
    """
    if user_id in roster:
        return resolve_creator(embedded, roster)
    if user_id == viewer.id:
        return viewer
    return embedded


def compute_collaborator_spending(
    expenses: Iterable[Expense],
    owner: Optional[UserRef],
    collaborators: Iterable[Collaborator],
    viewer: Optional[UserRef] = None,
) -> List[CollaboratorSpending]:
    """
    Total spent per creator, largest first.

    Expenses without a creator are attributed to the acting viewer, so the
    entries always add up to the trip total.
    """
    expenses = list(expenses)
    roster = build_roster(owner, collaborators)
    viewer = viewer or UserRef(id="", name=VIEWER_LABEL)

    totals: Dict[str, Decimal] = {}
    embedded: Dict[str, UserRef] = {}
    for expense in expenses:
        creator = expense.created_by or viewer
        embedded.setdefault(creator.id, creator)
        totals[creator.id] = totals.get(creator.id, Decimal(0)) + expense.amount

    total = compute_total(expenses)
    entries = []
    for user_id, amount in totals.items():
        profile = resolve_spender(user_id, embedded[user_id], roster, viewer)
        entries.append(CollaboratorSpending(
            user_id=user_id,
            name=profile.name or VIEWER_LABEL,
            username=profile.username,
            avatar_url=profile.avatar_url,
            amount=amount,
            percentage=percent(amount, total),
        ))
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(entries, key=lambda entry: entry.amount, reverse=True)


class ExpenseLedger:
    """Owns the expense collection of one trip."""

    def __init__(self, trip_id: str, gateway: TripGateway, actor: UserRef, expenses: Optional[List[Expense]] = None):
        self.trip_id = trip_id
        self.gateway = gateway
        self.actor = actor
        self._expenses: List[Expense] = list(expenses or [])

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses)

    def get(self, expense_id: str) -> Expense:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        raise NotFoundError("Expense not found")

    async def add_expense(self, item: str, amount, category: str = ExpenseCategory.OTHER.value) -> Expense:
        """Record an expense. Input is checked before anything is sent."""
        attempted = {"item": item, "amount": amount, "category": category}

        value = to_decimal(amount)
        if value is None or value <= 0:
            raise ValidationError("Amount must be a positive number", attempted=attempted)
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("Expense item is required", attempted=attempted)
        category = (category or ExpenseCategory.OTHER.value).lower()
        if category not in EXPENSE_CATEGORIES:
            raise ValidationError(f"Unknown expense category '{category}'", attempted=attempted)

        fields = {
            "item": item.strip(),
            "amount": value,
            "category": category,
            "created_by": self.actor.id,
        }
        created = await persist("add expense", self.gateway.create_expense(self.trip_id, fields), attempted)
        self._expenses.append(created)
        logger.info(f"Added expense {created.id} ({created.amount} {created.category}) to trip {self.trip_id}")
        return created

    async def delete_expense(self, expense_id: str):
        """Delete an expense. Callers confirm with the user first."""
        self.get(expense_id)
        await persist("delete expense", self.gateway.delete_expense(expense_id), {"id": expense_id})
        self._expenses = [e for e in self._expenses if e.id != expense_id]
        logger.info(f"Deleted expense {expense_id} from trip {self.trip_id}")

    def compute_total(self) -> Decimal:
        return compute_total(self._expenses)

    def compute_category_breakdown(self) -> List[CategoryBreakdownItem]:
        return compute_category_breakdown(self._expenses)

    def compute_budget_utilization(self, budget: Optional[Decimal]) -> BudgetUtilization:
        return compute_budget_utilization(self.compute_total(), budget)

    def compute_collaborator_spending(self, owner: Optional[UserRef], collaborators: Iterable[Collaborator]) -> List[CollaboratorSpending]:
        return compute_collaborator_spending(self._expenses, owner, collaborators, viewer=self.actor)
