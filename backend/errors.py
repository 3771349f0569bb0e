# Error taxonomy for the search and backfill endpoints
from typing import Optional


class SearchServiceError(Exception):
    """
    Base error carrying the HTTP status and the message shown to the client.
    The exception text itself may hold internal detail and is only logged.
    """
    status_code: int = 500
    client_message: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.client_message)
        self.detail = detail or self.client_message


class MethodNotAllowed(SearchServiceError):
    status_code = 405
    client_message = "Method not allowed"


class MalformedRequest(SearchServiceError):
    status_code = 400
    client_message = "Request body must be a JSON object"


class QueryTooShort(SearchServiceError):
    status_code = 400
    client_message = 'Query parameter "q" must be at least 2 characters'


class Misconfigured(SearchServiceError):
    status_code = 500
    client_message = "Service is not configured"


class ServiceUnavailable(SearchServiceError):
    status_code = 500
    client_message = "Service temporarily unavailable"


class UpstreamError(Exception):
    """Embedding provider or catalog store call failed"""
