# API route for the embedding backfill job
import json
import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from backend.api.cors import CORS_HEADERS
from backend.api.dependencies import get_backfill_job_factory
from backend.errors import MethodNotAllowed, Misconfigured, ServiceUnavailable, UpstreamError
from backend.models.response_models import BackfillResponse, ErrorResponse
from backend.services.backfill_service import BackfillJob

logger = logging.getLogger(__name__)
router = APIRouter()

ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _requested_batch_size(raw_body: bytes):
    """Read batch_size from the body; a missing or invalid body means the default"""
    try:
        body = json.loads(raw_body) if raw_body else {}
    except (ValueError, UnicodeDecodeError):
        logger.info("Backfill body is not valid JSON, using default batch size")
        return None
    return body.get("batch_size") if isinstance(body, dict) else None


def _run_backfill(job_factory: Callable[[], BackfillJob], batch_size) -> BackfillResponse:
    try:
        result = job_factory().run(batch_size)
    except Misconfigured as e:
        logger.error(f"Backfill misconfigured: {e.detail}")
        raise
    except UpstreamError as e:
        logger.error(f"Error in backfill_embeddings: {str(e)}")
        raise ServiceUnavailable(str(e)) from e
    return BackfillResponse(**result.model_dump())


@router.api_route(
    "/backfill-embeddings",
    methods=ROUTED_METHODS,
    response_model=BackfillResponse,
    response_model_exclude_none=True,
    responses={405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def backfill_embeddings(request: Request,
                              job_factory: Callable[[], BackfillJob] = Depends(get_backfill_job_factory)):
    """
    Embed one batch of products that have no embedding yet.
    Body: {"batch_size"?: int} (1-200, default 50)
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    if request.method != "POST":
        raise MethodNotAllowed(f"Unsupported method {request.method}")

    batch_size = _requested_batch_size(await request.body())
    return await run_in_threadpool(_run_backfill, job_factory, batch_size)
