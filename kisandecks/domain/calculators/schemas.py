"""Calculator schemas - result, breakdown and tips payloads"""

from typing import Any

from pydantic import BaseModel


class Step(BaseModel):
    """One formula step shown to the farmer, in English and Hindi"""

    step: str
    stepHindi: str
    value: str


class Tips(BaseModel):
    action: str
    saving: str
    safety: str


class CalculationResult(BaseModel):
    result: dict[str, Any]
    breakdown: list[Step]
    tips: Tips


class CalculatorInfo(BaseModel):
    name: str
    fields: list[str]
