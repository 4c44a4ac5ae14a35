"""Account router - FastAPI endpoints for the farmer's account book"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import CropTracking, Expense, Income
from ...sessions import get_ledger_owner
from .schemas import (
    AccountSummary,
    CropCreate,
    CropResponse,
    ExpenseCreate,
    ExpenseResponse,
    IncomeCreate,
    IncomeResponse,
    SuccessResponse,
)
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["Account"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


# ============================================================================
# EXPENSES
# ============================================================================


@router.post("/expense", response_model=ExpenseResponse)
async def add_expense(
    data: ExpenseCreate,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return ExpenseResponse.from_model(service.add_expense(owner, data))


@router.get("/expenses", response_model=list[ExpenseResponse])
async def list_expenses(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return [ExpenseResponse.from_model(e) for e in service.list_expenses(owner, startDate, endDate)]


@router.delete("/expense/{entry_id}", response_model=SuccessResponse)
async def delete_expense(
    entry_id: int,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    service.delete_entry(Expense, entry_id, owner)
    return SuccessResponse()


# ============================================================================
# INCOME
# ============================================================================


@router.post("/income", response_model=IncomeResponse)
async def add_income(
    data: IncomeCreate,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return IncomeResponse.from_model(service.add_income(owner, data))


@router.get("/incomes", response_model=list[IncomeResponse])
async def list_incomes(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return [IncomeResponse.from_model(i) for i in service.list_incomes(owner, startDate, endDate)]


@router.delete("/income/{entry_id}", response_model=SuccessResponse)
async def delete_income(
    entry_id: int,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    service.delete_entry(Income, entry_id, owner)
    return SuccessResponse()


# ============================================================================
# CROPS
# ============================================================================


@router.post("/crop", response_model=CropResponse)
async def add_crop(
    data: CropCreate,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return CropResponse.from_model(service.add_crop(owner, data))


@router.get("/crops", response_model=list[CropResponse])
async def list_crops(
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    return [CropResponse.from_model(c) for c in service.list_crops(owner)]


@router.delete("/crop/{entry_id}", response_model=SuccessResponse)
async def delete_crop(
    entry_id: int,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    service.delete_entry(CropTracking, entry_id, owner)
    return SuccessResponse()


@router.get("/summary", response_model=AccountSummary)
async def get_summary(
    period: Optional[str] = None,
    owner: str = Depends(get_ledger_owner),
    service: AccountService = Depends(get_account_service),
):
    """Totals, per-category and per-crop breakdowns for week, month, year or all time"""
    return service.summary(owner, period)
