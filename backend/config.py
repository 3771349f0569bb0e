import os
import logging
from dataclasses import dataclass
from typing import List

from backend.errors import Misconfigured

logger = logging.getLogger(__name__)

SEARCH_MODE_SEMANTIC = "semantic"
SEARCH_MODE_SUBSTRING = "substring"
SEARCH_MODES = (SEARCH_MODE_SEMANTIC, SEARCH_MODE_SUBSTRING)


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the search and backfill services.
    Built once from the environment and handed to each component.
    """
    supabase_url: str = ""
    supabase_service_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_timeout_seconds: float = 30.0
    search_mode: str = SEARCH_MODE_SEMANTIC
    search_default_limit: int = 20
    search_min_limit: int = 1
    search_max_limit: int = 50
    match_products_rpc: str = "match_products"
    products_table: str = "products"
    log_level: str = "INFO"

    def missing_store_settings(self) -> List[str]:
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing

    def missing_embedding_settings(self) -> List[str]:
        return [] if self.openai_api_key else ["OPENAI_API_KEY"]

    def require_semantic_settings(self) -> None:
        """
        Raise Misconfigured when the catalog store or embedding provider
        credentials are absent
        """
        missing = self.missing_store_settings() + self.missing_embedding_settings()
        if missing:
            raise Misconfigured(f"Missing required environment variables: {', '.join(missing)}")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using default {default}")
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}: {raw!r}, using default {default}")
        return default


def load_settings() -> Settings:
    """
    Load settings from environment variables.
    Missing credentials are allowed here; components that need them raise Misconfigured.
    """
    search_mode = os.getenv("SEARCH_MODE", SEARCH_MODE_SEMANTIC).strip().lower()
    if search_mode not in SEARCH_MODES:
        logger.warning(f"Unknown SEARCH_MODE '{search_mode}' (valid: {', '.join(SEARCH_MODES)}), using semantic")
        search_mode = SEARCH_MODE_SEMANTIC

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com"),
        embedding_model=os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"),
        embedding_dimensions=_int_env("EMBEDDING_DIMENSIONS", 1536),
        embedding_timeout_seconds=_float_env("EMBEDDING_TIMEOUT_SECONDS", 30.0),
        search_mode=search_mode,
        search_default_limit=_int_env("SEARCH_DEFAULT_LIMIT", 20),
        search_min_limit=_int_env("SEARCH_MIN_LIMIT", 1),
        search_max_limit=_int_env("SEARCH_MAX_LIMIT", 50),
        match_products_rpc=os.getenv("MATCH_PRODUCTS_RPC", "match_products"),
        products_table=os.getenv("PRODUCTS_TABLE", "products"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
