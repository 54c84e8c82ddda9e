"""
Local database gateway.

Implements the TripGateway contract over the SQLAlchemy models so the
workspace can run against a local database (development, tests) instead of
the remote trip API.
"""
import logging
from typing import Any, Dict, List, Optional
from decimal import Decimal
from sqlalchemy.orm import Session, joinedload
from tripboard.core.errors import NotFoundError, ConflictError
from tripboard.models.user import User
from tripboard.models.trip import Trip, TripCollaborator, TripStatus, CollaboratorRole, CollaboratorStatus
from tripboard.models.itinerary import ItineraryStop, StopStatus
from tripboard.models.expense import Expense
from tripboard.models.packing import PackingItem
from tripboard.schemas import trip as trip_schemas
from tripboard.schemas.user import UserRef
from tripboard.schemas.itinerary import ItineraryStop as StopRecord
from tripboard.schemas.expense import Expense as ExpenseRecord
from tripboard.schemas.packing import PackingItem as PackingRecord

logger = logging.getLogger(__name__)


def _pk(value: Any, label: str) -> int:
    """Record ids are strings outside this module; anything non-numeric cannot exist here."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise NotFoundError(f"{label} not found")


def _user_ref(user: Optional[User]) -> Optional[UserRef]:
    if user is None:
        return None
    return UserRef(id=str(user.id), name=user.name, username=user.username, avatar_url=user.avatar_url)


def _trip_record(trip: Trip) -> trip_schemas.Trip:
    return trip_schemas.Trip(
        id=str(trip.id),
        title=trip.title,
        destination=trip.destination or "",
        country=trip.country or "",
        start_date=trip.start_date,
        end_date=trip.end_date,
        status=trip.status.value,
        budget=trip.budget,
        owner=_user_ref(trip.owner),
        collaborators=[
            trip_schemas.Collaborator(user=_user_ref(c.user), role=c.role.value, status=c.status.value)
            for c in sorted(trip.collaborators, key=lambda c: c.id)
        ],
    )


def _stop_record(stop: ItineraryStop) -> StopRecord:
    return StopRecord(
        id=str(stop.id),
        trip_id=str(stop.trip_id),
        name=stop.name,
        activity=stop.activity or "",
        date=stop.date,
        status=stop.status.value,
        created_by=_user_ref(stop.created_by),
    )


def _expense_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=str(expense.id),
        trip_id=str(expense.trip_id),
        item=expense.item,
        amount=Decimal(expense.amount),
        category=expense.category,
        created_at=expense.created_at,
        created_by=_user_ref(expense.created_by),
    )


def _packing_record(item: PackingItem) -> PackingRecord:
    return PackingRecord(
        id=str(item.id),
        trip_id=str(item.trip_id),
        name=item.name,
        notes=item.notes,
        quantity=item.quantity,
        category=item.category,
        is_packed=item.is_packed,
        created_by=_user_ref(item.created_by),
        packed_by=_user_ref(item.packed_by),
    )


class SqlTripGateway:
    """TripGateway backed by a SQLAlchemy session."""

    def __init__(self, db: Session, viewer_id: Optional[str] = None):
        self.db = db
        self.viewer_id = viewer_id

    def _check_trip_access(self, trip_id: str) -> Trip:
        """Load a trip the viewer owns or is on the roster of."""
        trip = self.db.query(Trip).options(
            joinedload(Trip.owner),
            joinedload(Trip.collaborators).joinedload(TripCollaborator.user)
        ).filter(Trip.id == _pk(trip_id, "Trip")).first()
        if not trip:
            raise NotFoundError("Trip not found")

        if self.viewer_id is not None:
            viewer = _pk(self.viewer_id, "User")
            on_roster = any(c.user_id == viewer for c in trip.collaborators)
            if trip.owner_id != viewer and not on_roster:
                # Indistinguishable from a missing trip for outsiders
                raise NotFoundError("Trip not found")
        return trip

    def _user_id(self, value: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        user = self.db.query(User).filter(User.id == _pk(value, "User")).first()
        return user.id if user else None

    def _commit(self, record):
        self.db.commit()
        self.db.refresh(record)
        return record

    # Trip
    async def get_trip(self, trip_id: str) -> trip_schemas.Trip:
        return _trip_record(self._check_trip_access(trip_id))

    async def update_trip(self, trip_id: str, fields: Dict[str, Any]) -> None:
        trip = self._check_trip_access(trip_id)
        if "status" in fields:
            trip.status = TripStatus(fields["status"])
        if "budget" in fields:
            trip.budget = fields["budget"]
        self.db.commit()

    async def invite_collaborator(self, trip_id: str, username: str, role: str) -> trip_schemas.Collaborator:
        trip = self._check_trip_access(trip_id)

        # Find user by username
        user = self.db.query(User).filter(User.username == username).first()
        if not user:
            raise NotFoundError("User not found")

        # Check if already on the trip
        existing = self.db.query(TripCollaborator).filter(
            TripCollaborator.trip_id == trip.id,
            TripCollaborator.user_id == user.id
        ).first()
        if existing or trip.owner_id == user.id:
            raise ConflictError("User is already a collaborator")

        # Create invitation (user needs to accept)
        collaborator = TripCollaborator(
            trip_id=trip.id,
            user_id=user.id,
            role=CollaboratorRole(role),
            status=CollaboratorStatus.PENDING
        )
        self.db.add(collaborator)
        self._commit(collaborator)
        logger.info(f"Invited {username} to trip {trip.id} as {role}")

        return trip_schemas.Collaborator(user=_user_ref(user), role=collaborator.role.value, status=collaborator.status.value)

    # Itinerary
    async def list_stops(self, trip_id: str) -> List[StopRecord]:
        trip = self._check_trip_access(trip_id)
        stops = self.db.query(ItineraryStop).options(
            joinedload(ItineraryStop.created_by)
        ).filter(ItineraryStop.trip_id == trip.id).order_by(ItineraryStop.id).all()
        return [_stop_record(s) for s in stops]

    async def create_stop(self, trip_id: str, fields: Dict[str, Any]) -> StopRecord:
        trip = self._check_trip_access(trip_id)
        stop = ItineraryStop(
            trip_id=trip.id,
            name=fields["name"],
            activity=fields.get("activity") or "",
            date=fields["date"],
            status=StopStatus(fields.get("status", "planning")),
            created_by_id=self._user_id(fields.get("created_by"))
        )
        self.db.add(stop)
        return _stop_record(self._commit(stop))

    def _get_stop(self, stop_id: str) -> ItineraryStop:
        stop = self.db.query(ItineraryStop).filter(ItineraryStop.id == _pk(stop_id, "Stop")).first()
        if not stop:
            raise NotFoundError("Stop not found")
        self._check_trip_access(str(stop.trip_id))
        return stop

    async def update_stop(self, stop_id: str, fields: Dict[str, Any]) -> StopRecord:
        stop = self._get_stop(stop_id)
        for key in ("name", "activity", "date"):
            if key in fields:
                setattr(stop, key, fields[key])
        if "status" in fields:
            stop.status = StopStatus(fields["status"])
        return _stop_record(self._commit(stop))

    async def delete_stop(self, stop_id: str) -> None:
        stop = self._get_stop(stop_id)
        self.db.delete(stop)
        self.db.commit()

    # Expenses
    async def list_expenses(self, trip_id: str) -> List[ExpenseRecord]:
        trip = self._check_trip_access(trip_id)
        expenses = self.db.query(Expense).options(
            joinedload(Expense.created_by)
        ).filter(Expense.trip_id == trip.id).order_by(Expense.id).all()
        return [_expense_record(e) for e in expenses]

    async def create_expense(self, trip_id: str, fields: Dict[str, Any]) -> ExpenseRecord:
        trip = self._check_trip_access(trip_id)
        expense = Expense(
            trip_id=trip.id,
            item=fields["item"],
            amount=fields["amount"],
            category=fields.get("category") or "other",
            created_by_id=self._user_id(fields.get("created_by"))
        )
        self.db.add(expense)
        return _expense_record(self._commit(expense))

    async def delete_expense(self, expense_id: str) -> None:
        expense = self.db.query(Expense).filter(Expense.id == _pk(expense_id, "Expense")).first()
        if not expense:
            raise NotFoundError("Expense not found")
        self._check_trip_access(str(expense.trip_id))
        self.db.delete(expense)
        self.db.commit()

    # Packing
    async def list_packing_items(self, trip_id: str) -> List[PackingRecord]:
        trip = self._check_trip_access(trip_id)
        items = self.db.query(PackingItem).options(
            joinedload(PackingItem.created_by),
            joinedload(PackingItem.packed_by)
        ).filter(PackingItem.trip_id == trip.id).order_by(PackingItem.id).all()
        return [_packing_record(i) for i in items]

    async def create_packing_item(self, trip_id: str, fields: Dict[str, Any]) -> PackingRecord:
        trip = self._check_trip_access(trip_id)
        item = PackingItem(
            trip_id=trip.id,
            name=fields["name"],
            notes=fields.get("notes"),
            quantity=fields.get("quantity", 1),
            category=fields.get("category") or "other",
            is_packed=False,
            created_by_id=self._user_id(fields.get("created_by"))
        )
        self.db.add(item)
        return _packing_record(self._commit(item))

    def _get_packing_item(self, item_id: str) -> PackingItem:
        item = self.db.query(PackingItem).filter(PackingItem.id == _pk(item_id, "Item")).first()
        if not item:
            raise NotFoundError("Item not found")
        self._check_trip_access(str(item.trip_id))
        return item

    async def update_packing_item(self, item_id: str, fields: Dict[str, Any]) -> PackingRecord:
        item = self._get_packing_item(item_id)
        for key in ("name", "notes", "quantity", "category", "is_packed"):
            if key in fields:
                setattr(item, key, fields[key])
        if "packed_by" in fields:
            item.packed_by_id = self._user_id(fields["packed_by"])
        return _packing_record(self._commit(item))

    async def delete_packing_item(self, item_id: str) -> None:
        item = self._get_packing_item(item_id)
        self.db.delete(item)
        self.db.commit()
