# Pipeline models
from .pipeline_models import SearchPipelineState

# Catalog models
from .product_models import ProductRecord, SearchResult, BackfillBatchResult

# Request/Response models
from .request_models import SearchRequest, BackfillRequest
from .response_models import SearchResponse, BackfillResponse, ErrorResponse

__all__ = [
    "SearchPipelineState",
    "ProductRecord",
    "SearchResult",
    "BackfillBatchResult",
    "SearchRequest",
    "BackfillRequest",
    "SearchResponse",
    "BackfillResponse",
    "ErrorResponse",
]
