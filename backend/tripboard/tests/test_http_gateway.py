"""
Tests for the remote trip API gateway, against a mocked transport.
"""
import json
from datetime import date
from decimal import Decimal
import httpx
import pytest
from tripboard.core.errors import NotFoundError, ConflictError, TransportError
from tripboard.models.trip import CollaboratorStatus, TripStatus
from tripboard.services.http_gateway import HttpTripGateway

TRIP = {
    "_id": "665f1c",
    "title": "Lisbon Long Weekend",
    "destination": "Lisbon",
    "country": "Portugal",
    "startDate": "2025-03-05T00:00:00.000Z",
    "endDate": "2025-03-09T00:00:00.000Z",
    "status": "traveling",
    "budget": 1000,
    "userId": {"_id": "u1", "name": "Alex", "username": "alex", "profilePicture": "https://img.test/alex.png"},
    "collaborators": [
        {"userId": {"_id": "u2", "name": "Sam", "username": "sam"}, "role": "editor", "status": "accepted"},
    ],
}


def make_gateway(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test/api")
    return HttpTripGateway(client=client)


@pytest.mark.anyio
async def test_get_trip_maps_remote_record():
    def handler(request):
        assert request.url.path == "/api/trips/665f1c"
        return httpx.Response(200, json=TRIP)

    trip = await make_gateway(handler).get_trip("665f1c")

    assert trip.id == "665f1c"
    assert trip.start_date == date(2025, 3, 5)
    assert trip.status == TripStatus.TRAVELING
    assert trip.budget == Decimal("1000")
    assert trip.owner.avatar_url == "https://img.test/alex.png"
    assert trip.collaborators[0].user.name == "Sam"
    assert trip.collaborators[0].status == CollaboratorStatus.ACCEPTED


@pytest.mark.anyio
async def test_list_stops_accepts_keyed_payload():
    def handler(request):
        return httpx.Response(200, json={"itinerary": [
            {"_id": "s1", "name": "Alfama", "activity": "Fado", "time": "2025-03-05", "status": "planning",
             "createdBy": {"_id": "u1", "name": "Alex"}},
        ]})

    stops = await make_gateway(handler).list_stops("665f1c")

    assert stops[0].trip_id == "665f1c"
    assert stops[0].date == date(2025, 3, 5)
    assert stops[0].created_by.name == "Alex"


@pytest.mark.anyio
async def test_create_expense_sends_camel_case():
    sent = {}

    def handler(request):
        sent.update(json.loads(request.content))
        return httpx.Response(201, json={
            "_id": "e1", "item": "Hotel", "amount": 500, "category": "accommodation",
            "createdAt": "2025-03-05T10:00:00Z", "createdBy": {"_id": "u1", "name": "Alex"},
        })

    expense = await make_gateway(handler).create_expense(
        "665f1c", {"item": "Hotel", "amount": Decimal("500"), "category": "accommodation", "created_by": "u1"}
    )

    assert sent == {"item": "Hotel", "amount": 500.0, "category": "accommodation", "createdBy": "u1"}
    assert expense.amount == Decimal("500")
    assert expense.created_at.year == 2025


@pytest.mark.anyio
async def test_packing_toggle_payload_and_empty_reply():
    sent = {}

    def handler(request):
        assert request.method == "PATCH"
        assert request.url.path == "/api/trips/packing/p1"
        sent.update(json.loads(request.content))
        return httpx.Response(204)

    result = await make_gateway(handler).update_packing_item("p1", {"is_packed": True, "packed_by": "u1"})

    assert result is None
    assert sent == {"isPacked": True, "packedBy": "u1"}


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [403, 404])
async def test_missing_or_forbidden_trip(status_code):
    def handler(request):
        return httpx.Response(status_code, json={"error": "Trip not found"})

    with pytest.raises(NotFoundError) as exc_info:
        await make_gateway(handler).get_trip("nope")
    assert exc_info.value.message == "Trip not found"


@pytest.mark.anyio
async def test_duplicate_invite_reported_as_bad_request():
    def handler(request):
        return httpx.Response(400, json={"error": "User is already a collaborator"})

    with pytest.raises(ConflictError):
        await make_gateway(handler).invite_collaborator("665f1c", "sam", "editor")


@pytest.mark.anyio
async def test_invite_acknowledgement_without_record():
    def handler(request):
        return httpx.Response(200, json={"message": "Invitation sent"})

    collaborator = await make_gateway(handler).invite_collaborator("665f1c", "casey", "viewer")

    assert collaborator.user.username == "casey"
    assert collaborator.status == CollaboratorStatus.PENDING


@pytest.mark.anyio
async def test_server_error_is_transport_error():
    def handler(request):
        return httpx.Response(500, json={"message": "Internal error"})

    with pytest.raises(TransportError):
        await make_gateway(handler).list_expenses("665f1c")


@pytest.mark.anyio
async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        await make_gateway(handler).delete_expense("e1")


@pytest.mark.anyio
async def test_malformed_record_is_transport_error():
    def handler(request):
        return httpx.Response(200, json={"expenses": [{"item": "Hotel"}]})

    with pytest.raises(TransportError):
        await make_gateway(handler).list_expenses("665f1c")
