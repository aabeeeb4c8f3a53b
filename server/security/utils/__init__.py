"""
Security Utils Module
"""

from .ip import get_client_ip

__all__ = [
    "get_client_ip",
]
