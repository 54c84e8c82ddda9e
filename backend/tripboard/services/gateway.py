"""
Persistence collaborator contract.

The workspace never talks to storage directly: every read and write goes
through a TripGateway. Field dictionaries use snake_case keys matching the
schemas; ``created_by`` and ``packed_by`` carry user ids.
"""
import logging
from typing import Any, Awaitable, Dict, List, Optional, Protocol, TypeVar
from tripboard.core.errors import TripboardError, TransportError
from tripboard.schemas.trip import Trip, Collaborator
from tripboard.schemas.itinerary import ItineraryStop
from tripboard.schemas.expense import Expense
from tripboard.schemas.packing import PackingItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TripGateway(Protocol):
    """Async CRUD over trip, stop, expense and packing records."""

    async def get_trip(self, trip_id: str) -> Trip: ...

    async def update_trip(self, trip_id: str, fields: Dict[str, Any]) -> None: ...

    async def invite_collaborator(self, trip_id: str, username: str, role: str) -> Collaborator: ...

    async def list_stops(self, trip_id: str) -> List[ItineraryStop]: ...

    async def create_stop(self, trip_id: str, fields: Dict[str, Any]) -> ItineraryStop: ...

    async def update_stop(self, stop_id: str, fields: Dict[str, Any]) -> Optional[ItineraryStop]: ...

    async def delete_stop(self, stop_id: str) -> None: ...

    async def list_expenses(self, trip_id: str) -> List[Expense]: ...

    async def create_expense(self, trip_id: str, fields: Dict[str, Any]) -> Expense: ...

    async def delete_expense(self, expense_id: str) -> None: ...

    async def list_packing_items(self, trip_id: str) -> List[PackingItem]: ...

    async def create_packing_item(self, trip_id: str, fields: Dict[str, Any]) -> PackingItem: ...

    async def update_packing_item(self, item_id: str, fields: Dict[str, Any]) -> Optional[PackingItem]: ...

    async def delete_packing_item(self, item_id: str) -> None: ...


async def persist(action: str, call: Awaitable[T], attempted: Optional[Dict[str, Any]] = None) -> T:
    """
    Await a single gateway call.

    Workspace errors propagate with the attempted values attached; anything
    else the gateway raises is reported as a TransportError. No retries.
    """
    try:
        return await call
    except TripboardError as e:
        if e.attempted is None:
            e.attempted = attempted
        logger.error(f"Failed to {action}: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise TransportError(f"Failed to {action}", attempted=attempted) from e
