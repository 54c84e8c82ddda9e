"""
Stop ledger: itinerary stops and their planning/traveling/completed status.

Status is a flat label the travellers set by hand. Any state may move to any
other, so corrections and normal progress marking use the same transition.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple, Union
from tripboard.core.errors import ValidationError, NotFoundError
from tripboard.core.utils import percent
from tripboard.models.itinerary import StopStatus
from tripboard.schemas.itinerary import ItineraryStop, StopProgress
from tripboard.schemas.user import UserRef
from tripboard.services.gateway import TripGateway, persist

logger = logging.getLogger(__name__)

ALL = "all"


def parse_status(status: Union[StopStatus, str]) -> StopStatus:
    try:
        return StopStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown stop status '{status}'")


def transition(stop: ItineraryStop, status: Union[StopStatus, str]) -> ItineraryStop:
    """Move a stop to any status, leaving every other field untouched."""
    return stop.model_copy(update={"status": parse_status(status)})


def filter_by_status(stops: Iterable[ItineraryStop], status: Union[StopStatus, str] = ALL) -> List[ItineraryStop]:
    """Stops with the given status, in their original order. 'all' keeps everything."""
    if status == ALL:
        return list(stops)
    target = parse_status(status)
    return [s for s in stops if s.status == target]


def label_days(stops: Iterable[ItineraryStop]) -> List[Tuple[str, ItineraryStop]]:
    """Pair each stop with a one-based 'Day N' label taken from its position."""
    return [(f"Day {idx}", stop) for idx, stop in enumerate(stops, start=1)]


def compute_progress(stops: Iterable[ItineraryStop]) -> StopProgress:
    """Completed stops over all stops."""
    stops = list(stops)
    completed = sum(1 for s in stops if s.status == StopStatus.COMPLETED)
    return StopProgress(
        completed_count=completed,
        total_count=len(stops),
        percentage=percent(completed, len(stops)),
    )


def _require_text(value: Optional[str], field: str):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Stop {field} is required")


def _require_date(value: Optional[date]):
    if not value:
        raise ValidationError("Stop date is required")


class StopLedger:
    """Owns the itinerary stop collection of one trip."""

    def __init__(self, trip_id: str, gateway: TripGateway, actor: UserRef, stops: Optional[List[ItineraryStop]] = None):
        self.trip_id = trip_id
        self.gateway = gateway
        self.actor = actor
        self._stops: List[ItineraryStop] = list(stops or [])

    @property
    def stops(self) -> List[ItineraryStop]:
        return list(self._stops)

    def get(self, stop_id: str) -> ItineraryStop:
        for stop in self._stops:
            if stop.id == stop_id:
                return stop
        raise NotFoundError("Stop not found")

    def _replace(self, updated: ItineraryStop):
        self._stops = [updated if s.id == updated.id else s for s in self._stops]

    async def add_stop(self, name: str, activity: str = "", stop_date: Optional[date] = None) -> ItineraryStop:
        """Create a stop in the planning state."""
        attempted = {"name": name, "activity": activity, "date": stop_date}
        try:
            _require_text(name, "name")
            _require_date(stop_date)
        except ValidationError as e:
            e.attempted = attempted
            raise

        fields = {
            "name": name.strip(),
            "activity": activity or "",
            "date": stop_date,
            "status": StopStatus.PLANNING,
            "created_by": self.actor.id,
        }
        created = await persist("add stop", self.gateway.create_stop(self.trip_id, fields), attempted)
        self._stops.append(created)
        logger.info(f"Added stop {created.id} to trip {self.trip_id}")
        return created

    async def update_stop(self, stop_id: str, **changes) -> ItineraryStop:
        """
        Merge name/activity/date and/or status into a stop.

        Only the supplied fields are sent and merged; a status-only change
        leaves name, activity and date exactly as they were.
        """
        stop = self.get(stop_id)
        changes = {k: v for k, v in changes.items() if k in ("name", "activity", "date", "status") and v is not None}
        attempted = dict(changes, id=stop_id)
        try:
            if "name" in changes:
                _require_text(changes["name"], "name")
                changes["name"] = changes["name"].strip()
            if "date" in changes:
                _require_date(changes["date"])
            if "status" in changes:
                changes["status"] = transition(stop, changes["status"]).status
        except ValidationError as e:
            e.attempted = attempted
            raise
        if not changes:
            return stop

        record = await persist("update stop", self.gateway.update_stop(stop_id, changes), attempted)
        updated = stop.model_copy(update=changes)
        if record is not None:
            updated = record.model_copy(update={"trip_id": record.trip_id or stop.trip_id, **changes})
        self._replace(updated)
        logger.info(f"Updated stop {stop_id}: {sorted(changes)}")
        return updated

    async def set_status(self, stop_id: str, status: Union[StopStatus, str]) -> ItineraryStop:
        """Explicit status transition; idempotent."""
        stop = self.get(stop_id)
        try:
            updated = transition(stop, status)
        except ValidationError as e:
            e.attempted = {"id": stop_id, "status": status}
            raise
        await persist(
            "update stop status",
            self.gateway.update_stop(stop_id, {"status": updated.status}),
            {"id": stop_id, "status": updated.status},
        )
        self._replace(updated)
        logger.info(f"Stop {stop_id} is now {updated.status.value}")
        return updated

    async def delete_stop(self, stop_id: str):
        """Delete a stop. Callers confirm with the user first."""
        self.get(stop_id)
        await persist("delete stop", self.gateway.delete_stop(stop_id), {"id": stop_id})
        self._stops = [s for s in self._stops if s.id != stop_id]
        logger.info(f"Deleted stop {stop_id} from trip {self.trip_id}")

    def filter_by_status(self, status: Union[StopStatus, str] = ALL) -> List[ItineraryStop]:
        return filter_by_status(self._stops, status)

    def compute_progress(self) -> StopProgress:
        return compute_progress(self._stops)
