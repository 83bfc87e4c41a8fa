"""
Gemini-style image generation client.

Builds a ``generateContent`` request for a configured provider, sends it with
httpx and normalizes the reply with ``app.services.response_parser``. There is
no retry: one failed upstream call is one reported failure.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from app.core.exceptions import UpstreamError
from app.models.api_provider import ApiProvider
from app.services.response_parser import InlineImage, parse_generation_response
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

RESPONSE_MODALITIES = ["Text", "Image"]


@dataclass
class GenerationInput:
    """What a user asked for."""

    prompt: str
    input_image: Optional[InlineImage] = None
    aspect_ratio: Optional[str] = None
    image_size: Optional[str] = None


def build_generate_url(base_url: str, model_id: str) -> str:
    normalized = base_url.strip().rstrip("/")
    return f"{normalized}/v1beta/models/{quote(model_id, safe='')}:generateContent"


def build_generate_payload(request: GenerationInput) -> Dict[str, Any]:
    """
    Build the JSON body of a generateContent call.

    ``imageConfig`` only carries the options the user actually set.
    """
    parts: List[Dict[str, Any]] = []
    if request.prompt:
        parts.append({"text": request.prompt})
    if request.input_image is not None:
        parts.append({
            "inlineData": {
                "mimeType": request.input_image.mime_type,
                "data": request.input_image.data,
            }
        })

    generation_config: Dict[str, Any] = {"responseModalities": list(RESPONSE_MODALITIES)}
    image_config = {}
    if request.aspect_ratio:
        image_config["aspectRatio"] = request.aspect_ratio
    if request.image_size:
        image_config["imageSize"] = request.image_size
    if image_config:
        generation_config["imageConfig"] = image_config

    return {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": generation_config,
    }


class GeminiImageClient:
    """
    Sends generation requests to an upstream provider.

    Args:
        http_client: The httpx client to send requests with. Its lifecycle is
            owned by the caller (see ``app.dependencies.auth.get_image_client``).
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def generate_image(self, provider: ApiProvider, request: GenerationInput) -> InlineImage:
        url = build_generate_url(provider.base_url, provider.model_id)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {provider.api_key}",
            "x-goog-api-key": provider.api_key,
        }

        logger.info(f"Calling upstream provider '{provider.name}' (model={provider.model_id})")
        try:
            response = await self.http_client.post(url, headers=headers, json=build_generate_payload(request))
        except httpx.TimeoutException as exc:
            logger.error(f"Upstream provider '{provider.name}' timed out")
            raise UpstreamError("Upstream request timed out", status_code=504) from exc
        except httpx.RequestError as exc:
            logger.error(f"Upstream provider '{provider.name}' unreachable: {exc.__class__.__name__}")
            raise UpstreamError("Upstream request failed", status_code=502) from exc

        if response.is_error:
            logger.warning(f"Upstream provider '{provider.name}' answered {response.status_code}")

        return parse_generation_response(
            response.status_code,
            response.headers.get("content-type"),
            response.text,
        )
