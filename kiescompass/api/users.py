"""Admin-only router for managing user accounts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from kiescompass.schemas.auth import (
    AdminUserResponse,
    MessageResponse,
    UserRole,
    UserUpdate,
)
from kiescompass.services.auth_service import AuthService
from kiescompass.services.dependencies import (
    CallerIdentity,
    get_auth_service,
    require_admin,
)

router = APIRouter()


@router.get("", response_model=list[AdminUserResponse])
async def list_users(
    username: str | None = Query(None, description="Partial match, case-insensitive"),
    email: str | None = Query(None, description="Partial match, case-insensitive"),
    firstname: str | None = Query(None, description="Partial match, case-insensitive"),
    lastname: str | None = Query(None, description="Partial match, case-insensitive"),
    role: UserRole | None = Query(None),
    _admin: CallerIdentity = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
) -> list[AdminUserResponse]:
    return await service.get_all_users(
        username=username,
        email=email,
        firstname=firstname,
        lastname=lastname,
        role=role,
    )


@router.get("/{user_id}", response_model=AdminUserResponse)
async def get_user(
    user_id: str,
    _admin: CallerIdentity = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
) -> AdminUserResponse:
    return await service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=AdminUserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    _admin: CallerIdentity = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
) -> AdminUserResponse:
    return await service.update_user(user_id, payload)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    _admin: CallerIdentity = Depends(require_admin),
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    return await service.delete_user(user_id)
