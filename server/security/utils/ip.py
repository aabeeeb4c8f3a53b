"""Client address resolution."""

from django.http import HttpRequest


def get_client_ip(request: HttpRequest, trust_forwarded: bool = False) -> str:
    """
    Get the client's IP address from the request.

    ``X-Forwarded-For`` is client-controlled, so it is only consulted when the
    deployment sits behind a proxy that sets it (``trust_forwarded=True``).

    Args:
        request: The Django HttpRequest object
        trust_forwarded: Whether to honour the X-Forwarded-For header

    Returns:
        Client IP address as a string
    """
    if trust_forwarded:
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            # X-Forwarded-For can contain multiple IPs, take the first one
            return x_forwarded_for.split(",")[0].strip()

    return request.META.get("REMOTE_ADDR", "0.0.0.0")
