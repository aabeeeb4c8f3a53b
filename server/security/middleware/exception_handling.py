"""
Exception Handling Middleware

Last line of defence: anything a view lets escape still becomes a JSON
envelope instead of Django's HTML error page.
"""

import logging

from django.utils.deprecation import MiddlewareMixin

from server.errors import ApiError, unexpected_error_response

logger = logging.getLogger(__name__)


class JsonExceptionMiddleware(MiddlewareMixin):
    def process_exception(self, request, exception):
        if isinstance(exception, ApiError):
            if exception.status_code >= 500:
                logger.error(
                    "%s on %s %s", exception.message, request.method, request.path,
                    exc_info=exception,
                )
            return exception.to_response()

        logger.error(
            "Unhandled error on %s %s", request.method, request.path, exc_info=exception
        )
        return unexpected_error_response(exception)
