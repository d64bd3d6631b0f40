from __future__ import annotations

from fastapi import Header, HTTPException

from salonbook.application.exceptions import (
    ConditionFailed,
    InvalidTransitionError,
    NotFoundError,
    SlotUnavailableError,
    StoreFailure,
    UnauthorizedError,
)
from salonbook.domain.entities.caller import Caller, CallerRole

DOMAIN_ERRORS = (
    NotFoundError,
    UnauthorizedError,
    InvalidTransitionError,
    SlotUnavailableError,
    ConditionFailed,
    StoreFailure,
    ValueError,
)


def get_caller(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> Caller:
    """Identity forwarded by the authentication gateway in front of this service."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Missing caller identity", headers={"WWW-Authenticate": "Bearer"})
    try:
        role = CallerRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="Unknown caller role", headers={"WWW-Authenticate": "Bearer"})
    return Caller(user_id=x_user_id.strip(), role=role)


def to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, UnauthorizedError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, InvalidTransitionError):
        return HTTPException(
            status_code=409,
            detail={"message": str(e), "rejected": e.reason is not None, "reason": e.reason},
        )
    if isinstance(e, (SlotUnavailableError, ConditionFailed)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, StoreFailure):
        return HTTPException(status_code=503, detail="Booking store unavailable")
    return HTTPException(status_code=400, detail=str(e))
