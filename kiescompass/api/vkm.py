"""FastAPI router for the VKM catalog, favorites, and recommendations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from kiescompass.db.repositories.vkm_filters import normalize_vkm_filters
from kiescompass.schemas.vkm import (
    MAX_DB_INT,
    ToggleFavoriteResponse,
    VkmCreate,
    VkmResponse,
    VkmUpdate,
)
from kiescompass.services.catalog_service import CatalogService
from kiescompass.services.dependencies import (
    CallerIdentity,
    get_catalog_service,
    get_current_caller,
    get_favorites_service,
    get_optional_caller,
    get_recommendation_service,
    require_admin,
)
from kiescompass.services.favorites_service import FavoritesService
from kiescompass.services.recommendation_service import RecommendationService

router = APIRouter()


@router.get("", response_model=list[VkmResponse])
async def list_vkms(
    name: str | None = Query(None, description="Partial match, case-insensitive"),
    short_description: str | None = Query(None, description="Partial match, case-insensitive"),
    description: str | None = Query(None, description="Partial match, case-insensitive"),
    content: str | None = Query(None, description="Partial match, case-insensitive"),
    learning_outcomes: str | None = Query(None, description="Partial match, case-insensitive"),
    location: str | None = Query(None, description="Partial match, case-insensitive"),
    level: str | None = Query(None, description="Exact match, e.g. NLQF5"),
    study_credit: int | None = Query(None, ge=0, le=MAX_DB_INT, description="Exact match"),
    contact_id: str | None = Query(None, description="Exact match"),
    is_active: bool | None = Query(
        None,
        description="Entries with this status; entries without a status count as active",
    ),
    caller: CallerIdentity | None = Depends(get_optional_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> list[VkmResponse]:
    """List catalog entries; ``is_favorited`` is filled in for signed-in callers."""

    filters = normalize_vkm_filters(
        name=name,
        short_description=short_description,
        description=description,
        content=content,
        learning_outcomes=learning_outcomes,
        location=location,
        level=level,
        study_credit=study_credit,
        contact_id=contact_id,
        is_active=is_active,
    )
    return await service.get_all_vkms(filters, caller.user_id if caller else None)


# Fixed paths must be registered before ``/{vkm_id}`` so they are not captured by it.
@router.get("/favorites", response_model=list[VkmResponse])
async def list_favorites(
    caller: CallerIdentity = Depends(get_current_caller),
    service: FavoritesService = Depends(get_favorites_service),
) -> list[VkmResponse]:
    return await service.get_user_favorites(caller.user_id)


@router.get("/recommendations/me", response_model=list[VkmResponse])
async def my_recommendations(
    limit: int | None = Query(None, gt=0, description="Maximum number of entries"),
    caller: CallerIdentity = Depends(get_current_caller),
    service: RecommendationService = Depends(get_recommendation_service),
) -> list[VkmResponse]:
    """Cheapest active modules first, annotated with the caller's favorites."""

    return await service.get_recommendations(caller.user_id, limit)


@router.get("/{vkm_id}", response_model=VkmResponse)
async def get_vkm(
    vkm_id: str,
    caller: CallerIdentity | None = Depends(get_optional_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> VkmResponse:
    return await service.get_vkm_by_id(vkm_id, caller.user_id if caller else None)


@router.post("/{vkm_id}/favorite", response_model=ToggleFavoriteResponse)
async def toggle_favorite(
    vkm_id: str,
    caller: CallerIdentity = Depends(get_current_caller),
    service: FavoritesService = Depends(get_favorites_service),
) -> ToggleFavoriteResponse:
    """Add the entry to the caller's favorites, or remove it if already there."""

    return await service.toggle_favorite(caller.user_id, vkm_id)


# -- Admin -------------------------------------------------------------------


@router.post("", response_model=VkmResponse, status_code=status.HTTP_201_CREATED)
async def create_vkm(
    payload: VkmCreate,
    _admin: CallerIdentity = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> VkmResponse:
    return await service.create_vkm(payload)


@router.put("/{vkm_id}", response_model=VkmResponse)
async def update_vkm(
    vkm_id: str,
    payload: VkmUpdate,
    _admin: CallerIdentity = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> VkmResponse:
    return await service.update_vkm(vkm_id, payload)


@router.delete("/{vkm_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vkm(
    vkm_id: str,
    _admin: CallerIdentity = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    await service.delete_vkm(vkm_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{vkm_id}/deactivate", response_model=VkmResponse)
async def deactivate_vkm(
    vkm_id: str,
    _admin: CallerIdentity = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
) -> VkmResponse:
    """Soft delete: the entry stays but no longer counts as active."""

    return await service.deactivate_vkm(vkm_id)
