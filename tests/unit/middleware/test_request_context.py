"""Unit tests for RequestContextMiddleware."""

import unittest
import uuid

from django.http import HttpRequest, HttpResponse

from core.constants import REQUEST_ID_HEADER
from core.logging.context import get_owner_id, get_request_id, set_owner_id
from core.middleware.request_context import RequestContextMiddleware


class TestRequestContextMiddleware(unittest.TestCase):
    """Test cases for RequestContextMiddleware."""

    def setUp(self):
        """Set up test fixtures."""
        self.seen = {}

        def get_response(request):
            set_owner_id("owner-1")
            self.seen["request_id"] = get_request_id()
            self.seen["owner_id"] = get_owner_id()
            return HttpResponse("OK")

        self.middleware = RequestContextMiddleware(get_response)

    def _create_request(self, headers=None):
        """Helper to create a test request."""
        request = HttpRequest()
        request.method = "GET"
        request.path = "/api/v1/workspace/notifications"
        for key, value in (headers or {}).items():
            request.META[f"HTTP_{key.upper().replace('-', '_')}"] = value
        return request

    def test_generates_request_id_when_not_present(self):
        """Test that a UUID is generated and echoed back."""
        response = self.middleware(self._create_request())

        request_id = response[REQUEST_ID_HEADER]
        self.assertEqual(str(uuid.UUID(request_id)), request_id)
        self.assertEqual(self.seen["request_id"], request_id)

    def test_reuses_incoming_request_id(self):
        """Test that an upstream request ID is propagated."""
        request = self._create_request({REQUEST_ID_HEADER: "upstream-id"})

        response = self.middleware(request)

        self.assertEqual(response[REQUEST_ID_HEADER], "upstream-id")
        self.assertEqual(request.request_id, "upstream-id")

    def test_clears_context_after_response(self):
        """Test no context leaks into the next request on this thread."""
        self.middleware(self._create_request())

        self.assertEqual(self.seen["owner_id"], "owner-1")
        self.assertIsNone(get_request_id())
        self.assertIsNone(get_owner_id())

    def test_clears_context_when_view_raises(self):
        """Test context is cleared even when the response fails."""

        def failing(_request):
            raise RuntimeError("boom")

        middleware = RequestContextMiddleware(failing)

        with self.assertRaises(RuntimeError):
            middleware(self._create_request())
        self.assertIsNone(get_request_id())


if __name__ == "__main__":
    unittest.main()
