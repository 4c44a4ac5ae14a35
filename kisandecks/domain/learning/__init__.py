"""Learning domain - videos, audio, share links, workshops and progress"""

from .router import router

__all__ = ["router"]
