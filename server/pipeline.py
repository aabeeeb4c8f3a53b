"""
Endpoint pipelines.

Every route in ``server.urls`` is a ``Route`` mapping HTTP methods to
``Endpoint`` objects. An endpoint runs its stages in order against a shared
``RequestContext`` and then calls its handler:

    rate limiting (middleware) -> stages (validate, sanitize) -> handler -> envelope

A stage either returns None to continue, returns a response to finish the
request early, or raises an ``ApiError``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse

from input_validation.serializers import error_details
from server.errors import ApiError, NotFound, PersistenceFailure, ValidationFailed
from server.security.rate_limit import GENERAL

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"


@dataclass
class RequestContext:
    """State shared by the stages and the handler of one request."""

    request: HttpRequest
    params: Dict[str, Any] = field(default_factory=dict)
    validated: Dict[str, Any] = field(default_factory=dict)
    body: Any = None


Stage = Callable[[RequestContext], Optional[HttpResponse]]
Handler = Callable[[RequestContext], HttpResponse]


class Endpoint:
    """
    One method of one route.

    Args:
        handler: Produces the success response
        stages: Gates run before the handler, in order
        rate_limits: Names of the rate limit classes applied to the endpoint
        failure_message: Public message for storage and upstream failures
    """

    def __init__(
        self,
        handler: Handler,
        stages: Sequence[Stage] = (),
        rate_limits: Iterable[str] = (GENERAL,),
        failure_message: str = "An error occurred",
    ):
        self.handler = handler
        self.stages = tuple(stages)
        self.rate_limits = tuple(rate_limits)
        self.failure_message = failure_message

    def __call__(self, request: HttpRequest, **params) -> HttpResponse:
        ctx = RequestContext(request=request, params=params)

        try:
            for stage in self.stages:
                response = stage(ctx)
                if response is not None:
                    return response
            return self.handler(ctx)

        except ApiError as e:
            if e.status_code >= 500:
                logger.error(
                    "%s %s failed: %s",
                    request.method,
                    request.path,
                    e.detail or e.message,
                    exc_info=e,
                )
                e.message = self.failure_message
            return e.to_response()

        except DatabaseError as e:
            logger.error("%s %s failed", request.method, request.path, exc_info=e)
            return PersistenceFailure(self.failure_message, detail=str(e)).to_response()


class Route:
    """
    Dispatches a URL pattern to the endpoint registered for the method.

    ``HEAD`` is served by the ``GET`` endpoint. Methods without an endpoint
    answer 404, like unknown paths.
    """

    def __init__(self, **endpoints: Endpoint):
        self.endpoints = {method.upper(): endpoint for method, endpoint in endpoints.items()}
        if "GET" in self.endpoints:
            self.endpoints.setdefault("HEAD", self.endpoints["GET"])

    def endpoint_for(self, method: str) -> Optional[Endpoint]:
        return self.endpoints.get(method)

    def rate_limits_for(self, method: str) -> Sequence[str]:
        endpoint = self.endpoint_for(method)
        return endpoint.rate_limits if endpoint else (GENERAL,)

    def __call__(self, request: HttpRequest, **params) -> HttpResponse:
        endpoint = self.endpoint_for(request.method)
        if endpoint is None:
            return NotFound(ROUTE_NOT_FOUND).to_response()
        return endpoint(request, **params)


def validated_by(
    serializer_class,
    extract: Callable[[RequestContext], Dict[str, Any]],
    location: str = "body",
) -> Stage:
    """
    Build a stage validating ``extract(ctx)`` with a DRF serializer.

    Valid data is merged into ``ctx.validated``; otherwise every violation
    is reported in one ``ValidationFailed``.
    """

    def stage(ctx: RequestContext) -> None:
        serializer = serializer_class(data=extract(ctx))
        if not serializer.is_valid():
            raise ValidationFailed(error_details(serializer.errors, location))
        ctx.validated.update(serializer.validated_data)

    stage.__name__ = f"validate_{serializer_class.__name__}"
    return stage
