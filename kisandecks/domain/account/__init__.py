"""Account domain - farm expense, income and crop ledger"""

from .router import router

__all__ = ["router"]
