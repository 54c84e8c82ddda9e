"""
Shared route dependencies: acting user, persistence gateway, loaded workspace.
"""
from typing import AsyncIterator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from tripboard.core.config import settings
from tripboard.core.security import decode_access_token
from tripboard.schemas.user import UserRef
from tripboard.services.gateway import TripGateway
from tripboard.services.trip_aggregate import TripAggregate

bearer_scheme = HTTPBearer()


def get_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    return credentials.credentials


def get_current_user(token: str = Depends(get_token)) -> UserRef:
    """Acting user from the identity provider's token claims."""
    payload = decode_access_token(token)
    if payload is None or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return UserRef(
        id=str(payload["sub"]),
        name=payload.get("name") or payload.get("username") or "",
        username=payload.get("username"),
        avatar_url=payload.get("avatar"),
    )


async def get_gateway(
    token: str = Depends(get_token),
    current_user: UserRef = Depends(get_current_user),
) -> AsyncIterator[TripGateway]:
    """Gateway for the configured persistence backend, closed after the request."""
    if settings.PERSISTENCE_BACKEND == "sql":
        from tripboard.db.session import SessionLocal
        from tripboard.services.sql_gateway import SqlTripGateway
        db = SessionLocal()
        try:
            yield SqlTripGateway(db, viewer_id=current_user.id)
        finally:
            db.close()
    else:
        from tripboard.services.http_gateway import HttpTripGateway
        gateway = HttpTripGateway(token=token)
        try:
            yield gateway
        finally:
            await gateway.aclose()


async def get_workspace(
    trip_id: str,
    gateway: TripGateway = Depends(get_gateway),
    current_user: UserRef = Depends(get_current_user),
) -> TripAggregate:
    """Trip workspace loaded for the acting user."""
    workspace = TripAggregate(gateway, current_user)
    await workspace.load_trip(trip_id)
    return workspace
