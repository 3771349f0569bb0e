from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from backend.api.cors import CORS_HEADERS
from backend.api.dependencies import get_search_handler
from backend.models.response_models import ErrorResponse, SearchResponse
from backend.services.search_request_handler import SearchRequestHandler

router = APIRouter()

# Every verb is routed here so the handler can answer 405 itself
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(
    "/search",
    methods=ROUTED_METHODS,
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_products(request: Request, handler: SearchRequestHandler = Depends(get_search_handler)):
    """
    Search the product catalog. Body: {"q": str, "limit"?: int | str}
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    body = await request.body()
    return await run_in_threadpool(handler.handle, request.method, body)
