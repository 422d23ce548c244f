from fastapi import APIRouter, Depends, HTTPException, status
import logging

from feed_service.api.auth import require_user_id
from feed_service.exceptions import EmbeddingError
from feed_service.models.request_models import EmbedRequest
from feed_service.models.response_models import EmbedResponse
from feed_service.services.embedding_service import EmbeddingProvider, get_embedding_provider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=EmbedResponse)
def embed_text(
    request: EmbedRequest,
    user_id: str = Depends(require_user_id),
    provider: EmbeddingProvider = Depends(get_embedding_provider),
):
    """
    Embed arbitrary text with the configured embedding provider.
    """
    if not request.text or not request.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required")

    try:
        return EmbedResponse(embedding=provider.embed(request.text))
    except EmbeddingError as e:
        logger.error(f"Embedding failed for user {user_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate embedding",
        )
