"""Bookings domain - farmer consultations and the expert queue"""

from .router import expert_router, router

__all__ = ["router", "expert_router"]
