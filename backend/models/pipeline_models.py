from typing import List, Optional
from typing_extensions import TypedDict


class SearchPipelineState(TypedDict, total=False):
    """
    State object for the semantic search pipeline
    Compatible with LangGraph's state handling
    """
    # Input
    query: str
    limit: int

    # Pipeline data
    query_embedding: Optional[List[float]]
    ranked_products: Optional[List[dict]]
    results: Optional[List[dict]]

    # Pipeline metadata
    pipeline_step: str
    error: Optional[str]
    execution_time: Optional[float]
