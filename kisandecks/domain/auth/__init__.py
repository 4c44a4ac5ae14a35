"""Auth domain - admin, expert and farmer login, sessions and OTP flows"""

from .router import router

__all__ = ["router"]
