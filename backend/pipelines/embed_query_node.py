import logging
from backend.errors import UpstreamError
from backend.models.pipeline_models import SearchPipelineState

logger = logging.getLogger(__name__)


def embed_query_node(state: SearchPipelineState, embedding_client) -> SearchPipelineState:
    """
    Convert the search query into an embedding vector
    """
    try:
        state["query_embedding"] = embedding_client.embed(state["query"])
        state["pipeline_step"] = "query_embedded"

        logger.info(f"Query embedded: {len(state['query_embedding'])} dimensions")
        return state

    except UpstreamError as e:
        logger.error(f"Error in embed_query_node: {str(e)}")
        state["error"] = str(e)
        state["pipeline_step"] = "error"
        return state
