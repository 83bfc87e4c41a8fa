"""
Provider administration router.

This module contains admin endpoints for listing, saving and deleting upstream
API providers. All endpoints require an admin session.
"""

from fastapi import APIRouter, Depends
from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import mask_for_display
from app.crud.api_provider import api_provider as provider_crud
from app.database import get_db
from app.dependencies.auth import get_current_admin
from app.models.api_provider import ApiProvider
from app.schemas.base import OkResponse
from app.schemas.provider import (
    ProviderAdminView,
    ProviderListResponse,
    ProviderSave,
    ProviderSaved,
    ProviderSaveResponse,
)
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/admin/providers",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - admin session required"},
    },
)

_http_url = TypeAdapter(AnyHttpUrl)


def _clean(value):
    return value.strip() if isinstance(value, str) else ""


def validate_base_url(base_url: str) -> None:
    """Accept absolute http(s) URLs only."""
    try:
        _http_url.validate_python(base_url)
    except PydanticValidationError:
        raise ValidationError("Invalid baseUrl")


def _saved_view(provider: ApiProvider) -> ProviderSaved:
    return ProviderSaved(
        id=provider.id,
        name=provider.name,
        display_name=provider.display_name,
        model_id=provider.model_id,
        base_url=provider.base_url,
        is_active=provider.is_active,
        created_at=provider.created_at,
        updated_at=provider.updated_at,
        api_key_masked=mask_for_display(provider.api_key or ""),
        has_api_key=bool(provider.api_key),
    )


@router.get("", response_model=ProviderListResponse)
async def list_providers(db: AsyncSession = Depends(get_db)):
    """
    List all providers, newest first.

    The raw API key is included so the admin console can edit it.
    """
    providers = await provider_crud.get_multi(db, skip=0, limit=1000, newest_first=True)
    return ProviderListResponse(providers=[ProviderAdminView.model_validate(p) for p in providers])


@router.post("", response_model=ProviderSaveResponse)
async def save_provider(
    body: ProviderSave,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a provider, or update it when ``id`` is given.

    On update an empty or missing ``apiKey`` keeps the stored key.
    ``isActive`` defaults to true.

    Raises:
        ValidationError: 400 for missing fields, a non-http(s) baseUrl or a create without apiKey
        NotFoundError: 404 if ``id`` does not exist
    """
    name = _clean(body.name)
    display_name = _clean(body.display_name)
    model_id = _clean(body.model_id)
    base_url = _clean(body.base_url)
    api_key = _clean(body.api_key)
    is_active = True if body.is_active is None else body.is_active

    if not name or not display_name or not model_id or not base_url:
        raise ValidationError("Missing required fields")
    validate_base_url(base_url)

    if body.id is None:
        if not api_key:
            raise ValidationError("apiKey is required for create")
        provider = await provider_crud.create(
            db,
            name=name,
            display_name=display_name,
            model_id=model_id,
            base_url=base_url,
            api_key=api_key,
            is_active=is_active,
        )
        logger.info(f"Created provider id={provider.id} name={provider.name}")
    else:
        provider = await provider_crud.get(db, id=body.id)
        if provider is None:
            raise NotFoundError("Provider not found")
        changes = {
            "name": name,
            "display_name": display_name,
            "model_id": model_id,
            "base_url": base_url,
            "is_active": is_active,
        }
        if api_key:
            changes["api_key"] = api_key
        provider = await provider_crud.update(db, db_obj=provider, obj_in=changes)
        logger.info(f"Updated provider id={provider.id} name={provider.name}")

    return ProviderSaveResponse(provider=_saved_view(provider))


@router.delete("/{provider_id}", response_model=OkResponse)
async def delete_provider(
    provider_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Hard delete a provider."""
    removed = await provider_crud.remove(db, id=provider_id)
    if removed is None:
        raise NotFoundError("Provider not found")
    logger.info(f"Deleted provider id={provider_id}")
    return OkResponse()
