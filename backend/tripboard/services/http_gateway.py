"""
HTTP gateway onto the remote trip API.

The remote API speaks camelCase JSON with Mongo-style ``_id`` keys and
embeds user objects (``createdBy``, ``packedBy``, ``userId``). Records are
mapped onto the workspace schemas here so nothing else sees that shape.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import httpx
from pydantic import ValidationError as SchemaError
from tripboard.core.config import settings
from tripboard.core.errors import NotFoundError, ConflictError, TransportError
from tripboard.schemas.user import UserRef
from tripboard.schemas.trip import Trip, Collaborator
from tripboard.schemas.itinerary import ItineraryStop
from tripboard.schemas.expense import Expense
from tripboard.schemas.packing import PackingItem

logger = logging.getLogger(__name__)

# Outgoing field names expected by the remote API
_OUTGOING_KEYS = {
    "date": "time",
    "is_packed": "isPacked",
    "created_by": "createdBy",
    "packed_by": "packedBy",
}


def _to_camel(fields: Dict[str, Any]) -> Dict[str, Any]:
    payload = {}
    for key, value in fields.items():
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif hasattr(value, "value"):
            value = value.value
        elif value is not None and key in ("amount", "budget"):
            value = float(value)
        payload[_OUTGOING_KEYS.get(key, key)] = value
    return payload


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _record_id(raw: Dict[str, Any]) -> str:
    value = raw.get("_id", raw.get("id"))
    if value is None:
        raise KeyError("_id")
    return str(value)


def parse_user(raw: Any) -> Optional[UserRef]:
    """Embedded user objects may also arrive as bare id strings."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return UserRef(id=raw, name="")
    return UserRef(
        id=_record_id(raw),
        name=raw.get("name") or raw.get("username") or "",
        username=raw.get("username"),
        avatar_url=raw.get("profilePicture") or raw.get("avatarUrl"),
    )


def parse_collaborator(raw: Dict[str, Any]) -> Collaborator:
    return Collaborator(
        user=parse_user(raw.get("userId") or raw.get("user")),
        role=raw.get("role") or "editor",
        status=raw.get("status") or "pending",
    )


def parse_trip(raw: Dict[str, Any]) -> Trip:
    return Trip(
        id=_record_id(raw),
        title=raw.get("title", ""),
        destination=raw.get("destination") or "",
        country=raw.get("country") or "",
        start_date=_parse_date(raw.get("startDate")),
        end_date=_parse_date(raw.get("endDate")),
        status=raw.get("status") or "planning",
        budget=raw.get("budget"),
        owner=parse_user(raw.get("userId") or raw.get("owner")),
        collaborators=[parse_collaborator(c) for c in raw.get("collaborators") or []],
    )


def parse_stop(raw: Dict[str, Any], trip_id: str = "") -> ItineraryStop:
    return ItineraryStop(
        id=_record_id(raw),
        trip_id=str(raw.get("tripId") or trip_id),
        name=raw.get("name", ""),
        activity=raw.get("activity") or "",
        date=_parse_date(raw.get("time") or raw.get("date")),
        status=raw.get("status") or "planning",
        created_by=parse_user(raw.get("createdBy")),
    )


def parse_expense(raw: Dict[str, Any], trip_id: str = "") -> Expense:
    return Expense(
        id=_record_id(raw),
        trip_id=str(raw.get("tripId") or trip_id),
        item=raw.get("item", ""),
        amount=raw["amount"],
        category=raw.get("category") or "other",
        created_at=_parse_datetime(raw.get("createdAt")),
        created_by=parse_user(raw.get("createdBy")),
    )


def parse_packing_item(raw: Dict[str, Any], trip_id: str = "") -> PackingItem:
    return PackingItem(
        id=_record_id(raw),
        trip_id=str(raw.get("tripId") or trip_id),
        name=raw.get("name", ""),
        notes=raw.get("notes") or None,
        quantity=raw.get("quantity") or 1,
        category=raw.get("category") or "other",
        is_packed=bool(raw.get("isPacked", False)),
        created_by=parse_user(raw.get("createdBy")),
        packed_by=parse_user(raw.get("packedBy")),
    )


class HttpTripGateway:
    """TripGateway backed by the remote trip API."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.PERSISTENCE_API_URL,
            headers=headers,
            timeout=settings.PERSISTENCE_TIMEOUT_SECONDS,
        )

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Send one request and map every failure onto the workspace error taxonomy."""
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Trip API request timed out: {method} {path}")
            raise TransportError("Trip API request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error with trip API: {e}")
            raise TransportError(f"Trip API network error: {e}") from e

        if not response.is_success:
            message = self._error_message(response)
            if response.status_code in (403, 404):
                raise NotFoundError(message)
            if response.status_code == 409 or (response.status_code == 400 and "already" in message.lower()):
                raise ConflictError(message)
            logger.error(f"Trip API error {response.status_code}: {message}")
            raise TransportError(f"Trip API error {response.status_code}: {message}")

        if not response.content or "application/json" not in response.headers.get("content-type", ""):
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Trip API returned a malformed response body") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"Request failed with status {response.status_code}"
        if isinstance(data, dict):
            return str(data.get("error") or data.get("message") or f"Request failed with status {response.status_code}")
        return f"Request failed with status {response.status_code}"

    @staticmethod
    def _parse(parser, data: Any, *args):
        """Apply a record parser; a body of the wrong shape is a transport failure."""
        try:
            if isinstance(data, list):
                return [parser(raw, *args) for raw in data]
            return parser(data, *args)
        except (KeyError, TypeError, ValueError, AttributeError, SchemaError) as e:
            raise TransportError(f"Trip API returned an unexpected record: {e}") from e

    @staticmethod
    def _as_list(data: Any, key: str) -> List[Any]:
        if isinstance(data, dict):
            data = data.get(key) or []
        if not isinstance(data, list):
            raise TransportError(f"Trip API returned an unexpected {key} payload")
        return data

    # Trip
    async def get_trip(self, trip_id: str) -> Trip:
        data = await self._request("GET", f"/trips/{trip_id}")
        return self._parse(parse_trip, data)

    async def update_trip(self, trip_id: str, fields: Dict[str, Any]) -> None:
        await self._request("PUT", f"/trips/{trip_id}", _to_camel(fields))

    async def invite_collaborator(self, trip_id: str, username: str, role: str) -> Collaborator:
        data = await self._request("POST", f"/trips/{trip_id}/invite", {"username": username, "role": role})
        if isinstance(data, dict) and isinstance(data.get("collaborator"), dict):
            return self._parse(parse_collaborator, data["collaborator"])
        # Upstream only acknowledges; the invitee is pending until they accept
        return Collaborator(
            user=UserRef(id=username, name=username, username=username),
            role=role,
            status="pending",
        )

    # Itinerary
    async def list_stops(self, trip_id: str) -> List[ItineraryStop]:
        data = await self._request("GET", f"/trips/{trip_id}/itinerary")
        return self._parse(parse_stop, self._as_list(data, "itinerary"), trip_id)

    async def create_stop(self, trip_id: str, fields: Dict[str, Any]) -> ItineraryStop:
        data = await self._request("POST", f"/trips/{trip_id}/itinerary", _to_camel(fields))
        return self._parse(parse_stop, data, trip_id)

    async def update_stop(self, stop_id: str, fields: Dict[str, Any]) -> Optional[ItineraryStop]:
        data = await self._request("PATCH", f"/destinations/{stop_id}", _to_camel(fields))
        if not data:
            return None
        return self._parse(parse_stop, data)

    async def delete_stop(self, stop_id: str) -> None:
        await self._request("DELETE", f"/destinations/{stop_id}")

    # Expenses
    async def list_expenses(self, trip_id: str) -> List[Expense]:
        data = await self._request("GET", f"/trips/{trip_id}/expenses")
        return self._parse(parse_expense, self._as_list(data, "expenses"), trip_id)

    async def create_expense(self, trip_id: str, fields: Dict[str, Any]) -> Expense:
        data = await self._request("POST", f"/trips/{trip_id}/expenses", _to_camel(fields))
        return self._parse(parse_expense, data, trip_id)

    async def delete_expense(self, expense_id: str) -> None:
        await self._request("DELETE", f"/expenses/{expense_id}")

    # Packing
    async def list_packing_items(self, trip_id: str) -> List[PackingItem]:
        data = await self._request("GET", f"/trips/{trip_id}/packing")
        return self._parse(parse_packing_item, self._as_list(data, "items"), trip_id)

    async def create_packing_item(self, trip_id: str, fields: Dict[str, Any]) -> PackingItem:
        data = await self._request("POST", f"/trips/{trip_id}/packing", _to_camel(fields))
        return self._parse(parse_packing_item, data, trip_id)

    async def update_packing_item(self, item_id: str, fields: Dict[str, Any]) -> Optional[PackingItem]:
        data = await self._request("PATCH", f"/trips/packing/{item_id}", _to_camel(fields))
        if not data:
            return None
        return self._parse(parse_packing_item, data)

    async def delete_packing_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/trips/packing/{item_id}")
