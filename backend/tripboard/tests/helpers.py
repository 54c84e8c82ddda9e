"""
Record builders for tests that do not need a database.
"""
from datetime import date
from decimal import Decimal
from tripboard.schemas.expense import Expense
from tripboard.schemas.itinerary import ItineraryStop
from tripboard.schemas.packing import PackingItem
from tripboard.schemas.user import UserRef

ALEX = UserRef(id="u1", name="Alex", username="alex")
SAM = UserRef(id="u2", name="Sam", username="sam")


def make_stop(stop_id, status="planning", name=None, day=1):
    return ItineraryStop(
        id=str(stop_id),
        trip_id="t1",
        name=name or f"Stop {stop_id}",
        activity="Walk around",
        date=date(2025, 3, day),
        status=status,
    )


def make_expense(expense_id, amount, category="other", created_by=None):
    return Expense(
        id=str(expense_id),
        trip_id="t1",
        item=f"Expense {expense_id}",
        amount=Decimal(str(amount)),
        category=category,
        created_by=created_by,
    )


def make_item(item_id, category="clothing", is_packed=False, packed_by=None, created_by=None):
    return PackingItem(
        id=str(item_id),
        trip_id="t1",
        name=f"Item {item_id}",
        category=category,
        is_packed=is_packed,
        packed_by=packed_by,
        created_by=created_by,
    )


class RecordingGateway:
    """Wraps a gateway, records every call, and optionally fails them."""

    def __init__(self, inner=None, fail=None, fail_on=None):
        self.inner = inner
        self.fail = fail
        self.fail_on = fail_on
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        async def call(*args, **kwargs):
            self.calls.append(name)
            if self.fail is not None and (self.fail_on is None or name in self.fail_on):
                raise self.fail
            return await getattr(self.inner, name)(*args, **kwargs)
        return call
