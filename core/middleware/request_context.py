"""Request context middleware for log correlation."""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from core.constants import REQUEST_ID_HEADER
from core.logging.context import clear_request_context, set_request_id


class RequestContextMiddleware:
    """Populate and tear down the per-request logging context.

    - Reuses an incoming X-Request-ID header or generates a UUID
    - Stores it in thread-local storage for the structlog processors
    - Echoes it back on the response
    - Clears request ID and owner ID once the response is produced

    The owner ID is bound later by the authenticated views, since DRF
    authenticates lazily inside the view.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize the middleware.

        Args:
            get_response: The next middleware or view in the chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process the request with request context bound.

        Args:
            request: The incoming HTTP request.

        Returns:
            The HTTP response with the request ID header added.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_request_id(request_id)
        request.request_id = request_id  # type: ignore[attr-defined]

        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_context()
