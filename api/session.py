"""
Per-request session context

Authentication happens upstream; the gateway forwards the caller's identity
in headers and every handler receives it explicitly.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from database.models import UserRole


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    company_id: Optional[int] = None
    role: UserRole = UserRole.EMPLOYEE


def get_session(
    x_user_id: Optional[str] = Header(None),
    x_company_id: Optional[int] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> SessionContext:
    """FastAPI dependency building the SessionContext from gateway headers"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    role = UserRole.EMPLOYEE
    if x_user_role:
        try:
            role = UserRole(x_user_role.strip().lower())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid X-User-Role: {x_user_role}") from None

    return SessionContext(user_id=x_user_id.strip(), company_id=x_company_id, role=role)


# roles allowed to change allocations and stored gap analyses
MANAGER_ROLES = (UserRole.ADMIN, UserRole.PROJECT_MANAGER)


def require_manager(session: SessionContext) -> SessionContext:
    if session.role not in MANAGER_ROLES:
        raise HTTPException(
            status_code=403,
            detail=f"Role '{session.role.value}' may not modify allocations or gap analyses",
        )
    return session


def get_manager_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    """FastAPI dependency: session of an admin or project manager, 403 otherwise"""
    return require_manager(session)
