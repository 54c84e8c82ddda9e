"""
Shared fixtures: an in-memory database seeded with one trip and its team.
"""
from datetime import date
from decimal import Decimal
import pytest
from sqlalchemy.orm import sessionmaker
from tripboard.db.session import build_engine, init_db
from tripboard.models import User, Trip, TripCollaborator, CollaboratorRole, CollaboratorStatus
from tripboard.schemas.user import UserRef
from tripboard.services.sql_gateway import SqlTripGateway
from tripboard.tests.helpers import RecordingGateway


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    engine = build_engine("sqlite://", echo=False)
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def users(db):
    """alex owns the trip, sam has joined, jordan is still pending, casey is an outsider."""
    people = {
        "alex": User(username="alex", name="Alex", avatar_url="https://img.test/alex.png"),
        "sam": User(username="sam", name="Sam"),
        "jordan": User(username="jordan", name="Jordan"),
        "casey": User(username="casey", name="Casey"),
    }
    db.add_all(people.values())
    db.commit()
    return people


@pytest.fixture
def trip(db, users):
    trip = Trip(
        title="Lisbon Long Weekend",
        destination="Lisbon",
        country="Portugal",
        start_date=date(2025, 3, 5),
        end_date=date(2025, 3, 9),
        budget=Decimal("1000"),
        owner_id=users["alex"].id,
    )
    db.add(trip)
    db.commit()
    db.add_all([
        TripCollaborator(
            trip_id=trip.id, user_id=users["sam"].id,
            role=CollaboratorRole.EDITOR, status=CollaboratorStatus.ACCEPTED
        ),
        TripCollaborator(
            trip_id=trip.id, user_id=users["jordan"].id,
            role=CollaboratorRole.VIEWER, status=CollaboratorStatus.PENDING
        ),
    ])
    db.commit()
    return trip


@pytest.fixture
def trip_id(trip):
    return str(trip.id)


@pytest.fixture
def actor(users):
    alex = users["alex"]
    return UserRef(id=str(alex.id), name=alex.name, username=alex.username, avatar_url=alex.avatar_url)


@pytest.fixture
def gateway(db, actor):
    return SqlTripGateway(db, viewer_id=actor.id)


@pytest.fixture
def recording(gateway):
    return RecordingGateway(gateway)
