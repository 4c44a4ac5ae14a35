"""Calculator router - FastAPI endpoints for the farm calculators"""

import logging

from fastapi import APIRouter, Depends, Request

from ...errors import InternalError, ServiceError
from .schemas import CalculationResult, CalculatorInfo
from .service import CalculatorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculator", tags=["Calculators"])


def get_calculator_service() -> CalculatorService:
    """Dependency injection for CalculatorService"""
    return CalculatorService()


async def read_lenient_body(request: Request):
    """JSON body, or an empty object when the body is missing or malformed"""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return await request.json()
    except ValueError:
        logger.debug("Calculator request body is not valid JSON, using defaults")
        return {}


@router.get("", response_model=list[CalculatorInfo])
async def list_calculators(service: CalculatorService = Depends(get_calculator_service)):
    return service.list_calculators()


@router.post("/{name}", response_model=CalculationResult)
async def calculate(
    name: str,
    request: Request,
    service: CalculatorService = Depends(get_calculator_service),
):
    body = await read_lenient_body(request)
    try:
        return service.calculate(name, body)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Calculator {name} failed: {str(e)}", exc_info=True)
        raise InternalError("Calculation failed", "गणना नहीं हो सकी") from e
