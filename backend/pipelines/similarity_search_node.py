import logging
from backend.errors import UpstreamError
from backend.models.pipeline_models import SearchPipelineState

logger = logging.getLogger(__name__)


def similarity_search_node(state: SearchPipelineState, similarity_service) -> SearchPipelineState:
    """
    Rank catalog products by distance to the query embedding
    """
    try:
        results = similarity_service.search(state["query_embedding"], state["limit"])

        state["ranked_products"] = [result.model_dump() for result in results]
        state["pipeline_step"] = "similarity_search_completed"

        logger.info(f"Similarity search completed: {len(results)} candidates")
        return state

    except UpstreamError as e:
        logger.error(f"Error in similarity_search_node: {str(e)}")
        state["error"] = str(e)
        state["pipeline_step"] = "error"
        return state
