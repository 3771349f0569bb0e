from typing import Optional
import time
import logging
from langgraph.graph import StateGraph, END

# LangSmith tracing
from langsmith import traceable

from backend.errors import UpstreamError
from backend.models.pipeline_models import SearchPipelineState
from backend.models.product_models import SearchResult
from backend.models.response_models import SearchResponse
from backend.pipelines.embed_query_node import embed_query_node
from backend.pipelines.similarity_search_node import similarity_search_node
from backend.pipelines.shape_results_node import shape_results_node

logger = logging.getLogger(__name__)


def _route_on_error(state: SearchPipelineState) -> str:
    return "error" if state.get("error") else "continue"


class SemanticSearchOrchestrator:
    """
    Semantic search pipeline:
    1. Embed query (embedding provider)
    2. Similarity search (catalog store ranking procedure)
    3. Shape results (public response order and fields)
    A failed step ends the run and the error is raised as UpstreamError.
    """

    def __init__(self, embedding_client, similarity_service):
        self.embedding_client = embedding_client
        self.similarity_service = similarity_service
        self.graph = None
        self._build_graph()

    def _embed_query(self, state: SearchPipelineState) -> SearchPipelineState:
        return embed_query_node(state, self.embedding_client)

    def _similarity_search(self, state: SearchPipelineState) -> SearchPipelineState:
        return similarity_search_node(state, self.similarity_service)

    def _build_graph(self):
        """Build the LangGraph workflow"""
        try:
            workflow = StateGraph(SearchPipelineState)

            workflow.add_node("embed_query", self._embed_query)
            workflow.add_node("similarity_search", self._similarity_search)
            workflow.add_node("shape_results", shape_results_node)

            workflow.set_entry_point("embed_query")
            workflow.add_conditional_edges(
                "embed_query", _route_on_error, {"continue": "similarity_search", "error": END}
            )
            workflow.add_conditional_edges(
                "similarity_search", _route_on_error, {"continue": "shape_results", "error": END}
            )
            workflow.add_edge("shape_results", END)

            self.graph = workflow.compile()
            logger.info("Semantic search LangGraph workflow compiled successfully")

        except Exception as e:
            logger.error(f"Error building semantic search LangGraph workflow: {str(e)}")
            self.graph = None

    @traceable(name="semantic_search_pipeline")
    def run(self, query: str, limit: int) -> SearchResponse:
        """
        Main entry point for a semantic search
        """
        start_time = time.perf_counter()

        initial_state: SearchPipelineState = {
            "query": query,
            "limit": limit,
            "query_embedding": None,
            "ranked_products": None,
            "results": None,
            "pipeline_step": "initialized",
            "error": None,
            "execution_time": None,
        }

        if self.graph:
            result = self.graph.invoke(initial_state)
        else:
            # Sequential execution when the graph failed to compile
            result = self._embed_query(initial_state)
            if not result.get("error"):
                result = self._similarity_search(result)
            if not result.get("error"):
                result = shape_results_node(result)

        execution_time = time.perf_counter() - start_time
        result["execution_time"] = execution_time

        error: Optional[str] = result.get("error")
        if error:
            logger.error(f"Semantic search failed at {result.get('pipeline_step')} after {execution_time:.2f}s: {error}")
            raise UpstreamError(error)

        results = [SearchResult(**item) for item in result.get("results") or []]
        logger.info(f"Semantic search for '{query}' returned {len(results)} results in {execution_time:.2f}s")
        return SearchResponse(results=results)
