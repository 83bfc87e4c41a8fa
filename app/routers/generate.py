"""
Image generation router.

Routes a user's prompt to the active provider for the chosen model and
records the usage once an image came back.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ProviderUnavailableError, ValidationError
from app.crud.api_provider import api_provider as provider_crud
from app.crud.usage import record_generation
from app.database import get_db
from app.dependencies.auth import get_current_user, get_image_client
from app.models.user_key import UserKey
from app.schemas.generation import GenerateRequest, GenerateResponse, InlineImageSchema, UsageSummary
from app.schemas.provider import ModelOption
from app.services.gemini import GeminiImageClient, GenerationInput
from app.services.response_parser import InlineImage
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/generate",
    tags=["generation"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "No active provider for the model"},
    },
)


@router.post("", response_model=GenerateResponse)
async def generate(
    body: GenerateRequest,
    response: Response,
    user: UserKey = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    client: GeminiImageClient = Depends(get_image_client),
):
    """
    Generate one image.

    Usage is only counted after the upstream returned an image; a failed call
    leaves the counters untouched.

    Raises:
        ValidationError: 400 for a missing prompt or modelKey
        ProviderUnavailableError: 503 if no active provider serves ``modelKey``
        UpstreamError: upstream failure, status passed through
        NoImageInResponseError: 502 if the upstream answer holds no image
    """
    prompt = (body.prompt or "").strip()
    model_key = body.model_key or ""
    if not prompt:
        raise ValidationError("Missing prompt")
    if not model_key:
        raise ValidationError("Missing modelKey")

    provider = await provider_crud.get_active_by_name(db, name=model_key)
    if provider is None:
        raise ProviderUnavailableError()

    input_image = None
    if body.input_image is not None:
        input_image = InlineImage(mime_type=body.input_image.mime_type, data=body.input_image.data)

    image = await client.generate_image(
        provider,
        GenerationInput(
            prompt=prompt,
            input_image=input_image,
            aspect_ratio=body.aspect_ratio,
            image_size=body.image_size,
        ),
    )

    user = await record_generation(db, user=user, model_name=provider.display_name)
    logger.info(f"User {user.id} generated an image with '{provider.name}' (total {user.usage_count})")

    response.headers["Cache-Control"] = "no-store"
    return GenerateResponse(
        model=ModelOption(model_key=model_key, display_name=provider.display_name),
        image=InlineImageSchema(mime_type=image.mime_type, data=image.data),
        usage=UsageSummary(usage_count=user.usage_count, last_used_at=user.last_used_at),
    )
