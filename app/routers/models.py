"""
Model list router.

Lists the models a logged-in user can generate with.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.api_provider import api_provider as provider_crud
from app.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user_key import UserKey
from app.schemas.provider import ModelOption, ModelsResponse

router = APIRouter(
    prefix="/models",
    tags=["models"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get("", response_model=ModelsResponse)
async def list_models(
    response: Response,
    user: UserKey = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get active providers, oldest first.

    ``modelKey`` is the provider routing name to send to ``/generate``.
    """
    providers = await provider_crud.get_active(db)
    response.headers["Cache-Control"] = "no-store"
    return ModelsResponse(
        models=[ModelOption(model_key=p.name, display_name=p.display_name) for p in providers]
    )
