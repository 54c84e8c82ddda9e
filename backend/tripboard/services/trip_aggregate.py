"""
Trip aggregate: trip metadata, roster and budget, plus the three ledgers.

A workspace is loaded once per session. Mutations go through the ledgers (or
the trip-level methods here) and are applied only after the persistence
gateway accepts them. The composed view is rebuilt from current state on
every call and never cached.
"""
import logging
from typing import Awaitable, List, Optional, TypeVar
from tripboard.core.errors import TripboardError, ValidationError, NotFoundError, ConflictError
from tripboard.core.utils import to_decimal
from tripboard.models.trip import TripStatus, CollaboratorRole, CollaboratorStatus
from tripboard.schemas.trip import Trip, Collaborator, TeamSummary, TripView
from tripboard.schemas.itinerary import ItinerarySummary, DayStop
from tripboard.schemas.expense import ExpenseSummary, ExpenseLine
from tripboard.schemas.packing import PackingSummary
from tripboard.schemas.user import UserRef
from tripboard.services import expense_ledger as expense_rules
from tripboard.services.gateway import TripGateway, persist
from tripboard.services.stop_ledger import StopLedger, ALL, label_days
from tripboard.services.expense_ledger import ExpenseLedger
from tripboard.services.packing_ledger import PackingLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")

INVITABLE_ROLES = (CollaboratorRole.EDITOR.value, CollaboratorRole.VIEWER.value)


class TripAggregate:
    """One viewer's workspace for one trip."""

    def __init__(self, gateway: TripGateway, actor: UserRef):
        self.gateway = gateway
        self.actor = actor
        self.trip: Optional[Trip] = None
        self.stops: Optional[StopLedger] = None
        self.expenses: Optional[ExpenseLedger] = None
        self.packing: Optional[PackingLedger] = None
        self._load_token = 0

    @property
    def is_loaded(self) -> bool:
        return self.trip is not None

    def _require_trip(self) -> Trip:
        if self.trip is None:
            raise NotFoundError("No trip loaded")
        return self.trip

    async def _fetch_or_empty(self, label: str, call: Awaitable[List[T]]) -> List[T]:
        """A secondary list that cannot be fetched shows as empty instead of failing the load."""
        try:
            return list(await call or [])
        except Exception as e:
            logger.warning(f"{label} not available: {e}")
            return []

    async def load_trip(self, trip_id: str) -> Optional[Trip]:
        """
        Fetch the trip and its itinerary, expenses and packing list.

        Returns the loaded trip, or None when a newer load started while
        this one was in flight (its results are discarded).

        Raises:
            NotFoundError: the trip does not exist or the viewer has no access
            TransportError: the trip itself could not be fetched
        """
        self._load_token += 1
        token = self._load_token

        try:
            trip = await persist("load trip", self.gateway.get_trip(trip_id), {"trip_id": trip_id})
        except TripboardError:
            if token != self._load_token:
                return None
            raise
        stops = await self._fetch_or_empty("Itinerary", self.gateway.list_stops(trip_id))
        expenses = await self._fetch_or_empty("Expenses", self.gateway.list_expenses(trip_id))
        items = await self._fetch_or_empty("Packing list", self.gateway.list_packing_items(trip_id))

        if token != self._load_token:
            logger.warning(f"Discarding stale load of trip {trip_id}")
            return None

        self.trip = trip
        self.stops = StopLedger(trip.id, self.gateway, self.actor, stops)
        self.expenses = ExpenseLedger(trip.id, self.gateway, self.actor, expenses)
        self.packing = PackingLedger(trip.id, self.gateway, self.actor, items)
        logger.info(
            f"Loaded trip {trip.id}: {len(stops)} stops, {len(expenses)} expenses, {len(items)} packing items"
        )
        return trip

    async def set_trip_status(self, status) -> Trip:
        """Set the trip's own status; any of the three states is always allowed."""
        trip = self._require_trip()
        try:
            target = TripStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown trip status '{status}'", attempted={"status": status})

        await persist("update trip status", self.gateway.update_trip(trip.id, {"status": target}), {"status": target})
        self.trip = trip.model_copy(update={"status": target})
        logger.info(f"Trip {trip.id} status set to {target.value}")
        return self.trip

    async def set_budget(self, amount) -> Trip:
        """Set the budget; 0 means no budget."""
        trip = self._require_trip()
        value = to_decimal(amount)
        if value is None or value < 0:
            raise ValidationError("Budget must be zero or a positive number", attempted={"budget": amount})

        await persist("update budget", self.gateway.update_trip(trip.id, {"budget": value}), {"budget": amount})
        self.trip = trip.model_copy(update={"budget": value})
        logger.info(f"Trip {trip.id} budget set to {value}")
        return self.trip

    async def invite_collaborator(self, username: str, role: str = CollaboratorRole.EDITOR.value) -> Collaborator:
        """
        Invite a user by username. The invitee stays pending until they
        accept, which happens outside this workspace.
        """
        trip = self._require_trip()
        attempted = {"username": username, "role": role}
        username = (username or "").strip()
        if not username:
            raise ValidationError("Please enter a username", attempted=attempted)
        role = (role or "").lower()
        if role not in INVITABLE_ROLES:
            raise ValidationError(f"Role must be one of {', '.join(INVITABLE_ROLES)}", attempted=attempted)

        on_trip = [trip.owner.username] + [c.user.username for c in trip.collaborators]
        if username in on_trip:
            raise ConflictError(f"{username} is already on this trip", attempted=attempted)

        collaborator = await persist(
            "invite collaborator",
            self.gateway.invite_collaborator(trip.id, username, role),
            attempted,
        )
        self.trip = trip.model_copy(update={"collaborators": trip.collaborators + [collaborator]})
        logger.info(f"Invited {username} to trip {trip.id} as {role}")
        return collaborator

    def accepted_collaborators(self) -> List[Collaborator]:
        trip = self._require_trip()
        return [c for c in trip.collaborators if c.status == CollaboratorStatus.ACCEPTED]

    def team(self) -> TeamSummary:
        """Owner plus accepted collaborators; pending invites are not team members."""
        trip = self._require_trip()
        members = [c.user for c in self.accepted_collaborators()]
        return TeamSummary(owner=trip.owner, members=members, member_count=len(members) + 1)

    def team_size(self) -> int:
        return self.team().member_count

    def view(self, status_filter: str = ALL) -> TripView:
        """Compose the full trip view from current ledger state."""
        trip = self._require_trip()
        roster = expense_rules.build_roster(trip.owner, trip.collaborators)

        filtered = self.stops.filter_by_status(status_filter)
        itinerary = ItinerarySummary(
            status_filter=str(getattr(status_filter, "value", status_filter)),
            stops=[DayStop(day_label=label, stop=stop) for label, stop in label_days(filtered)],
            progress=self.stops.compute_progress(),
        )

        breakdown = self.expenses.compute_category_breakdown()
        total = self.expenses.compute_total()
        expenses = ExpenseSummary(
            expenses=[
                ExpenseLine(expense=e, creator_name=expense_rules.creator_display_name(e, roster))
                for e in self.expenses.expenses
            ],
            total=total,
            breakdown=breakdown,
            top_category=expense_rules.top_category(breakdown),
            utilization=expense_rules.compute_budget_utilization(total, trip.budget),
            spending=self.expenses.compute_collaborator_spending(trip.owner, trip.collaborators),
        )

        packing = PackingSummary(
            progress=self.packing.compute_progress(),
            groups=self.packing.group_by_category(),
            contributors=self.packing.compute_contributors(),
        )

        return TripView(trip=trip, team=self.team(), itinerary=itinerary, expenses=expenses, packing=packing)
