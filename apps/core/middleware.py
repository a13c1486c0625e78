import uuid

from .logging import bind_context, clear_context

CORRELATION_HEADER = 'X-Correlation-ID'


class CorrelationIdMiddleware:
    """Tag every request with a correlation id and bind it for logging."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id

        clear_context()
        bind_context(correlation_id=correlation_id, path=request.path)
        try:
            response = self.get_response(request)
        finally:
            clear_context()

        response[CORRELATION_HEADER] = correlation_id
        return response
