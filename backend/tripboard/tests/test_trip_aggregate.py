"""
Tests for loading a trip workspace and trip-level edits.
"""
from datetime import date
from decimal import Decimal
import anyio
import pytest
from tripboard.core.errors import ValidationError, NotFoundError, ConflictError, TransportError
from tripboard.models.trip import TripStatus, CollaboratorStatus
from tripboard.services.sql_gateway import SqlTripGateway
from tripboard.services.trip_aggregate import TripAggregate
from tripboard.tests.helpers import RecordingGateway


async def _seed(workspace):
    await workspace.stops.add_stop("Alfama", "Fado dinner", date(2025, 3, 5))
    stop = await workspace.stops.add_stop("Sintra", "Pena Palace", date(2025, 3, 6))
    await workspace.stops.set_status(stop.id, "completed")
    await workspace.expenses.add_expense("Hotel", 500, "accommodation")
    await workspace.expenses.add_expense("Dinner", 350, "food")
    await workspace.packing.add_item("Passport", "documents")


@pytest.mark.anyio
async def test_load_trip(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    trip = await workspace.load_trip(trip_id)

    assert trip.title == "Lisbon Long Weekend"
    assert trip.owner.id == actor.id
    assert workspace.is_loaded
    assert workspace.stops.stops == []


@pytest.mark.anyio
async def test_team_counts_owner_and_accepted_only(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)

    team = workspace.team()
    assert [m.username for m in team.members] == ["sam"]
    assert team.member_count == 2
    assert workspace.team_size() == 2
    assert [c.user.username for c in workspace.accepted_collaborators()] == ["sam"]


@pytest.mark.anyio
async def test_unknown_trip(gateway, actor):
    workspace = TripAggregate(gateway, actor)
    with pytest.raises(NotFoundError):
        await workspace.load_trip("9999")
    assert not workspace.is_loaded


@pytest.mark.anyio
async def test_outsider_cannot_load_trip(db, users, trip_id, actor):
    outsider = SqlTripGateway(db, viewer_id=str(users["casey"].id))
    with pytest.raises(NotFoundError):
        await TripAggregate(outsider, actor).load_trip(trip_id)


@pytest.mark.anyio
async def test_pending_collaborator_can_load_trip(db, users, trip_id, actor):
    pending = SqlTripGateway(db, viewer_id=str(users["jordan"].id))
    assert await TripAggregate(pending, actor).load_trip(trip_id) is not None


@pytest.mark.anyio
async def test_failed_sub_fetch_degrades_to_empty(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)
    await _seed(workspace)

    flaky = RecordingGateway(gateway, fail=RuntimeError("expenses service down"), fail_on={"list_expenses"})
    reloaded = TripAggregate(flaky, actor)
    await reloaded.load_trip(trip_id)

    assert reloaded.expenses.expenses == []
    assert len(reloaded.stops.stops) == 2
    assert len(reloaded.packing.items) == 1


@pytest.mark.anyio
async def test_stale_load_is_discarded(gateway, trip_id, actor):
    class FirstLoadWaits(RecordingGateway):
        def __init__(self, inner):
            super().__init__(inner)
            self.release = anyio.Event()

        async def get_trip(self, trip_id):
            self.calls.append("get_trip")
            if self.calls.count("get_trip") == 1:
                await self.release.wait()
            return await self.inner.get_trip(trip_id)

    slow = FirstLoadWaits(gateway)
    workspace = TripAggregate(slow, actor)
    results = {}

    async def first_load():
        results["first"] = await workspace.load_trip(trip_id)

    async with anyio.create_task_group() as tg:
        tg.start_soon(first_load)
        await anyio.wait_all_tasks_blocked()
        results["second"] = await workspace.load_trip(trip_id)
        slow.release.set()

    assert results["first"] is None
    assert results["second"].id == trip_id
    assert workspace.trip.id == trip_id


@pytest.mark.anyio
async def test_trip_status_moves_freely(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)

    await workspace.set_trip_status("completed")
    trip = await workspace.set_trip_status("planning")

    assert trip.status == TripStatus.PLANNING
    assert (await gateway.get_trip(trip_id)).status == TripStatus.PLANNING


@pytest.mark.anyio
async def test_unknown_trip_status(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)
    with pytest.raises(ValidationError):
        await workspace.set_trip_status("cancelled")


@pytest.mark.anyio
async def test_budget_must_not_be_negative(recording, trip_id, actor):
    workspace = TripAggregate(recording, actor)
    await workspace.load_trip(trip_id)
    recording.calls.clear()

    with pytest.raises(ValidationError) as exc_info:
        await workspace.set_budget(-1)

    assert exc_info.value.attempted == {"budget": -1}
    assert recording.calls == []


@pytest.mark.anyio
async def test_zero_budget_clears_it(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)
    await workspace.expenses.add_expense("Hotel", 900, "accommodation")

    assert workspace.view().expenses.utilization.warning
    await workspace.set_budget(0)

    utilization = workspace.view().expenses.utilization
    assert not utilization.is_set
    assert not utilization.warning


@pytest.mark.anyio
async def test_invite_starts_pending(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)

    collaborator = await workspace.invite_collaborator("casey", "viewer")

    assert collaborator.status == CollaboratorStatus.PENDING
    assert collaborator.user.username == "casey"
    assert "casey" in [c.user.username for c in workspace.trip.collaborators]
    assert workspace.team().member_count == 2


@pytest.mark.anyio
@pytest.mark.parametrize("username", ["sam", "jordan", "alex"])
async def test_invite_someone_already_on_trip(recording, trip_id, actor, username):
    workspace = TripAggregate(recording, actor)
    await workspace.load_trip(trip_id)
    recording.calls.clear()

    with pytest.raises(ConflictError):
        await workspace.invite_collaborator(username)
    assert recording.calls == []


@pytest.mark.anyio
async def test_invite_unknown_username(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)

    with pytest.raises(NotFoundError) as exc_info:
        await workspace.invite_collaborator("nobody")

    assert exc_info.value.attempted == {"username": "nobody", "role": "editor"}
    assert len(workspace.trip.collaborators) == 2


@pytest.mark.anyio
async def test_invite_with_owner_role(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)
    with pytest.raises(ValidationError):
        await workspace.invite_collaborator("casey", "owner")


@pytest.mark.anyio
async def test_view_filters_stops_but_not_progress(gateway, trip_id, actor):
    workspace = TripAggregate(gateway, actor)
    await workspace.load_trip(trip_id)
    await _seed(workspace)

    view = workspace.view("completed")

    assert [d.stop.name for d in view.itinerary.stops] == ["Sintra"]
    assert view.itinerary.stops[0].day_label == "Day 1"
    assert view.itinerary.progress.total_count == 2
    assert view.itinerary.progress.percentage == 50
    assert view.expenses.total == Decimal("850")
    assert view.expenses.utilization.warning
    assert view.expenses.top_category.category == "accommodation"
    assert [line.creator_name for line in view.expenses.expenses] == ["Alex", "Alex"]
    assert view.packing.progress.total_count == 1


@pytest.mark.anyio
async def test_failed_gateway_leaves_trip_untouched(gateway, trip_id, actor):
    flaky = RecordingGateway(
        gateway, fail=RuntimeError("connection reset"), fail_on={"update_trip", "invite_collaborator"}
    )
    workspace = TripAggregate(flaky, actor)
    before = await workspace.load_trip(trip_id)

    with pytest.raises(TransportError) as exc_info:
        await workspace.set_trip_status("completed")
    assert exc_info.value.attempted == {"status": TripStatus.COMPLETED}

    with pytest.raises(TransportError) as exc_info:
        await workspace.set_budget("250")
    assert exc_info.value.attempted == {"budget": "250"}

    with pytest.raises(TransportError) as exc_info:
        await workspace.invite_collaborator("casey", "viewer")
    assert exc_info.value.attempted == {"username": "casey", "role": "viewer"}

    assert workspace.trip == before
    assert workspace.trip.budget == Decimal("1000")
    assert (await gateway.get_trip(trip_id)).status == TripStatus.PLANNING
