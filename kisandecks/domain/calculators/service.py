"""Calculator service - maps request fields onto the calculator formulas"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ...errors import NotFound
from . import formulas
from .parsing import parse_float_or
from .schemas import CalculationResult, CalculatorInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calculator:
    formula: Callable[..., CalculationResult]
    text_fields: tuple = ()
    # (request field, fallback) in formula argument order
    numeric_fields: tuple = ()

    def run(self, body: dict) -> CalculationResult:
        args = [_text(body.get(name)) for name in self.text_fields]
        args += [parse_float_or(body.get(name), default) for name, default in self.numeric_fields]
        return self.formula(*args)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


CALCULATORS = {
    "crop-cost": Calculator(
        formulas.crop_cost,
        text_fields=("crop",),
        numeric_fields=(
            ("landSize", 1),
            ("seedCost", 0),
            ("fertilizerCost", 0),
            ("pesticideCost", 0),
            ("labourCost", 0),
            ("irrigationCost", 0),
            ("otherCost", 0),
        ),
    ),
    "profit": Calculator(
        formulas.profit,
        text_fields=("crop",),
        numeric_fields=(("expectedYield", 0), ("sellingRate", 0), ("totalCost", 0)),
    ),
    "loan-emi": Calculator(
        formulas.loan_emi,
        numeric_fields=(("loanAmount", 0), ("interestRate", 0), ("tenure", 1)),
    ),
    "seed": Calculator(formulas.seed, text_fields=("crop",), numeric_fields=(("landArea", 1),)),
    "fertilizer": Calculator(
        formulas.fertilizer,
        text_fields=("crop", "soilType"),
        numeric_fields=(("landArea", 1),),
    ),
    "pesticide": Calculator(
        formulas.pesticide,
        numeric_fields=(("pesticideQuantity", 100), ("waterQuantity", 200), ("tankSize", 16)),
    ),
    "irrigation": Calculator(
        formulas.irrigation,
        text_fields=("crop", "soilType"),
        numeric_fields=(("landArea", 1),),
    ),
    "machinery": Calculator(
        formulas.machinery,
        text_fields=("machineType",),
        numeric_fields=(("hours", 1), ("fuelRate", 90), ("fuelConsumption", 4)),
    ),
    "labour": Calculator(
        formulas.labour,
        numeric_fields=(("labourCount", 1), ("ratePerDay", 350), ("days", 1)),
    ),
    "storage": Calculator(
        formulas.storage,
        numeric_fields=(("quantity", 1), ("storageRate", 50), ("days", 30)),
    ),
}


class CalculatorService:
    """Service layer for the farm calculators"""

    def __init__(self, calculators: Optional[dict] = None):
        self.calculators = calculators if calculators is not None else CALCULATORS

    def list_calculators(self) -> list[CalculatorInfo]:
        return [
            CalculatorInfo(
                name=name,
                fields=list(calc.text_fields) + [field for field, _ in calc.numeric_fields],
            )
            for name, calc in self.calculators.items()
        ]

    def calculate(self, name: str, body: Any) -> CalculationResult:
        """Run a calculator; non-object bodies count as an empty request"""
        calculator = self.calculators.get(name)
        if calculator is None:
            raise NotFound(f"Unknown calculator: {name}", "यह कैलकुलेटर उपलब्ध नहीं है")

        if not isinstance(body, dict):
            body = {}
        return calculator.run(body)
