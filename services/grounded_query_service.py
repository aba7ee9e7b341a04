from typing import Any, List

from structlog import get_logger

from exceptions.custom_exceptions import (
    GroundedQueryException,
    UNKNOWN_AI_ERROR_MESSAGE,
)
from models.geo_query_model import (
    Coordinates,
    DispatchFailure,
    DispatchResult,
    ErrorKind,
    GroundedResponse,
    GroundingChunk,
)
from services.genai_client import generate_grounded_content

logger = get_logger(__name__)

UNKNOWN_API_ERROR_MESSAGE = "An unknown API error occurred."


async def get_grounded_response(prompt: str, location: Coordinates) -> GroundedResponse:
    """Ask Gemini one Maps-grounded question about the area around ``location``.

    Callers guarantee a non-blank prompt and one call in flight at a time.
    Any failure (missing key, transport, service side, unreadable payload)
    is raised as a single GroundedQueryException; nothing partial is returned.
    """
    try:
        response = await generate_grounded_content(
            prompt, location.latitude, location.longitude
        )
        result = GroundedResponse(
            text=getattr(response, "text", None) or "",
            sources=extract_grounding_chunks(response),
        )
    except Exception as e:
        logger.error(
            "grounded_query_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise GroundedQueryException(str(e) or UNKNOWN_AI_ERROR_MESSAGE) from e

    logger.info(
        "grounded_query_completed",
        answer_chars=len(result.text),
        source_count=len(result.sources),
    )
    return result


async def dispatch_query(prompt: str, location: Coordinates) -> DispatchResult:
    """Same call as get_grounded_response, folded into a success-or-failure value."""
    try:
        return await get_grounded_response(prompt, location)
    except GroundedQueryException as e:
        return DispatchFailure(kind=ErrorKind.SERVICE_FAILURE, message=e.message)
    except Exception as e:
        logger.error("dispatch_unexpected_error", error=str(e), exc_info=True)
        return DispatchFailure(kind=ErrorKind.UNKNOWN, message=UNKNOWN_API_ERROR_MESSAGE)


def extract_grounding_chunks(response: Any) -> List[GroundingChunk]:
    """candidates[0].grounding_metadata.grounding_chunks, or [] if any level is absent."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    return [_to_grounding_chunk(chunk) for chunk in chunks]


def _to_grounding_chunk(chunk: Any) -> GroundingChunk:
    if isinstance(chunk, dict):
        return GroundingChunk.model_validate(chunk)
    if hasattr(chunk, "model_dump"):
        return GroundingChunk.model_validate(chunk.model_dump(exclude_none=True))
    return GroundingChunk.model_validate(chunk, from_attributes=True)
