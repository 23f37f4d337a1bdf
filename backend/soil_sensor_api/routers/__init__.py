"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .readings import router as readings_router, get_context, method_not_allowed_handler

__all__ = [
    "readings_router",
    "get_context",
    "method_not_allowed_handler",
]
