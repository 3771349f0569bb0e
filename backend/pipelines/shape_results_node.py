import logging
from backend.models.pipeline_models import SearchPipelineState

logger = logging.getLogger(__name__)


def shape_results_node(state: SearchPipelineState) -> SearchPipelineState:
    """
    Map ranked products to the public result shape, keeping ranking order
    """
    state["results"] = [
        {
            "id": product["id"],
            "name": product["name"],
            "price_cents": product.get("price_cents"),
            "distance": product.get("distance"),
        }
        for product in state.get("ranked_products") or []
    ]
    state["pipeline_step"] = "completed"
    return state
