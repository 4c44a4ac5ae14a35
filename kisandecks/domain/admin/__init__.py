"""Admin domain - expert management, booking assignment and content uploads"""

from .router import router

__all__ = ["router"]
