"""Calculators domain - farm calculators with Hindi step-by-step explanations"""

from .router import router

__all__ = ["router"]
