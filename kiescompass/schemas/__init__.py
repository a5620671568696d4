"""Pydantic schemas for API requests and responses."""

from kiescompass.schemas.auth import (  # noqa: F401
    AdminUserResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdate,
)
from kiescompass.schemas.vkm import (  # noqa: F401
    ToggleFavoriteResponse,
    VkmCreate,
    VkmResponse,
    VkmUpdate,
)
