"""Authentication and role dependencies (identity collaborator adapter)."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.user import CurrentUser
from app.domain.enums import UserRole
from app.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


def claims_to_user(payload: dict[str, Any]) -> CurrentUser | None:
    """Build CurrentUser from verified claims; None when sub is missing."""
    employee_code = str(payload.get("sub") or "").strip()
    if not employee_code:
        return None
    role = payload.get("role") or UserRole.EMPLOYEE.value
    return CurrentUser(
        employee_code=employee_code,
        fullname=payload.get("fullname"),
        role=str(role),
        dept=payload.get("dept"),
        branch_code=payload.get("branch_code"),
    )


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> CurrentUser | None:
    """Return current user from JWT if present and valid; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.info("Rejected bearer token: %s", e)
        return None
    return claims_to_user(payload)


async def get_current_user(
    current_user: Annotated[CurrentUser | None, Depends(get_current_user_optional)],
) -> CurrentUser:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_roles(*roles: UserRole):
    """Dependency factory: require JWT auth and one of the given roles."""
    allowed = {role.value for role in roles}

    async def _require(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            logger.info(
                "Role %s of %s not in %s", current_user.role, current_user.employee_code, sorted(allowed)
            )
            raise HTTPException(status_code=403, detail="Forbidden")
        return current_user

    return _require
