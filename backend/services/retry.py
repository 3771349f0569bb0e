import time
import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(fn: Callable[[], T],
                       max_retries: int = 3,
                       base_delay: float = 1.0,
                       sleep: Callable[[float], None] = time.sleep) -> T:
    """
    Call fn up to max_retries + 1 times with exponential backoff.
    Waits base_delay * 2**attempt after each failed attempt except the last,
    then re-raises the last error.
    """
    for attempt in range(max_retries + 1):
        try:
            return fn()
        except Exception as e:
            if attempt == max_retries:
                raise
            delay = base_delay * (2 ** attempt)
            logger.warning(f"Attempt {attempt + 1} failed, retrying in {delay * 1000:.0f}ms: {str(e)}")
            sleep(delay)
