"""
API Routers Package
Exposes all route modules for the service
"""

from . import agent_router
from . import capture_router
from . import status_router

__all__ = [
    "agent_router",
    "capture_router",
    "status_router",
]
