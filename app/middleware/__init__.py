"""
Middleware package for security headers
"""
from .security import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
]
