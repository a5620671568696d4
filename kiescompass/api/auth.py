"""FastAPI router for registration, login, and the caller's profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from kiescompass.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from kiescompass.services.auth_service import AuthService
from kiescompass.services.dependencies import (
    CallerIdentity,
    get_auth_service,
    get_current_caller,
)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return await service.register(payload)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return await service.login(payload)


@router.get("/profile", response_model=UserResponse)
async def profile(
    caller: CallerIdentity = Depends(get_current_caller),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return await service.get_profile(caller.user_id)
