"""
Research service routes.

POST /api/research       subject -> summary + sources
POST /api/next-inquiry   summary -> nextSubject (or null)
GET  /api/health         liveness check

LLM calls are wrapped in the RetryEngine with the server retry policy;
failures that survive retries are reported as 502.
"""

import logging

from fastapi import APIRouter, Depends, status

from research_loop.api.dependencies import (
    get_research_generator,
    get_retry_engine,
    get_retry_policy,
)
from research_loop.api.exceptions import InvalidRequestError, UpstreamFailureError
from research_loop.api.models import (
    ErrorResponse,
    HealthResponse,
    NextInquiryRequest,
    NextInquiryResponse,
    ResearchRequest,
    ResearchResponse,
)
from research_loop.llm.research_generator import ResearchGenerator
from research_loop.retry.engine import RetryEngine
from research_loop.retry.exceptions import ClassifiableError
from research_loop.retry.policy import RetryPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post(
    "/research",
    response_model=ResearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Research a subject",
    responses={
        400: {"model": ErrorResponse, "description": "Subject missing or blank"},
        502: {"model": ErrorResponse, "description": "LLM failed after retries"},
    },
)
async def research(
    request: ResearchRequest,
    generator: ResearchGenerator = Depends(get_research_generator),
    retry_engine: RetryEngine = Depends(get_retry_engine),
    policy: RetryPolicy = Depends(get_retry_policy),
) -> ResearchResponse:
    subject = (request.subject or "").strip()
    if not subject:
        raise InvalidRequestError("Subject is required.")

    logger.info("Research request received", extra={"subject": subject})

    try:
        artifact = await retry_engine.execute(
            lambda: generator.fetch_research(subject),
            policy,
            operation_name="llm_research",
        )
    except ClassifiableError as e:
        logger.error(
            "Research failed",
            extra={"subject": subject, "error_type": type(e).__name__, "error": str(e)},
        )
        raise UpstreamFailureError(
            f'Failed to perform deep research on "{subject}".'
        ) from e

    return ResearchResponse(summary=artifact.summary, sources=list(artifact.sources))


@router.post(
    "/next-inquiry",
    response_model=NextInquiryResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    summary="Suggest the next subject to research",
    responses={
        400: {"model": ErrorResponse, "description": "Summary missing or blank"},
        502: {"model": ErrorResponse, "description": "LLM failed after retries"},
    },
)
async def next_inquiry(
    request: NextInquiryRequest,
    generator: ResearchGenerator = Depends(get_research_generator),
    retry_engine: RetryEngine = Depends(get_retry_engine),
    policy: RetryPolicy = Depends(get_retry_policy),
) -> NextInquiryResponse:
    summary = (request.summary or "").strip()
    if not summary:
        raise InvalidRequestError("Summary is required.")

    try:
        next_subject = await retry_engine.execute(
            lambda: generator.fetch_next_subject(summary),
            policy,
            operation_name="llm_next_inquiry",
        )
    except ClassifiableError as e:
        logger.error(
            "Next inquiry failed",
            extra={"error_type": type(e).__name__, "error": str(e)},
        )
        raise UpstreamFailureError("Failed to find the next thread of inquiry.") from e

    return NextInquiryResponse(next_subject=next_subject)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health() -> HealthResponse:
    return HealthResponse()
