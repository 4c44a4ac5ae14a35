"""Account service - Expense, income and crop ledger with period summaries"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFound, ValidationError
from ...models import CropTracking, Expense, Income, utcnow
from ...shared.validators import parse_iso_date
from ...utils.sanitization import clean_optional
from .repository import LedgerRepository
from .schemas import (
    AccountSummary,
    CategoryTotal,
    CropCreate,
    CropSummary,
    ExpenseCreate,
    IncomeCreate,
    Transaction,
)

logger = logging.getLogger(__name__)

RECENT_PER_KIND = 5
RECENT_LIMIT = 10
AMOUNT_REQUIRED = ("Category and amount are required", "श्रेणी और राशि आवश्यक है")


def period_start(period: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of a summary window; None means all time"""
    now = now or utcnow()
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if period == "year":
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def _date_range(start_date: Optional[str], end_date: Optional[str]) -> tuple[Optional[datetime], Optional[datetime]]:
    try:
        return parse_iso_date(start_date), parse_iso_date(end_date)
    except ValueError as e:
        raise ValidationError(str(e), "गलत तारीख") from e


def _amount(category: Optional[str], amount: Optional[float]) -> int:
    if not category or not category.strip() or not amount:
        raise ValidationError(*AMOUNT_REQUIRED)
    if amount < 0:
        raise ValidationError("Amount must be greater than zero", "राशि शून्य से अधिक होनी चाहिए")
    return int(round(amount))


class AccountService:
    """Service layer for the farmer's account book"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LedgerRepository()

    # ========================================================================
    # ENTRIES
    # ========================================================================

    def add_expense(self, owner: str, data: ExpenseCreate) -> Expense:
        amount = _amount(data.category, data.amount)
        expense = self.repo.create(
            self.db,
            Expense,
            farmer_id=owner,
            category=data.category.strip(),
            amount=amount,
            crop=clean_optional(data.crop, 100),
            notes=clean_optional(data.notes, 2000),
            photo_url=data.photoUrl or None,
            date=data.date or utcnow(),
        )
        logger.info(f"💸 Expense {expense.id} recorded for {owner}: {expense.category} {amount}")
        return expense

    def add_income(self, owner: str, data: IncomeCreate) -> Income:
        amount = _amount(data.category, data.amount)
        income = self.repo.create(
            self.db,
            Income,
            farmer_id=owner,
            category=data.category.strip(),
            amount=amount,
            crop=clean_optional(data.crop, 100),
            notes=clean_optional(data.notes, 2000),
            quantity=int(round(data.quantity)) if data.quantity else None,
            unit=data.unit or None,
            date=data.date or utcnow(),
        )
        logger.info(f"💰 Income {income.id} recorded for {owner}: {income.category} {amount}")
        return income

    def list_expenses(self, owner: str, start_date: Optional[str] = None, end_date: Optional[str] = None):
        start, end = _date_range(start_date, end_date)
        return self.repo.list_entries(self.db, Expense, owner, start, end)

    def list_incomes(self, owner: str, start_date: Optional[str] = None, end_date: Optional[str] = None):
        start, end = _date_range(start_date, end_date)
        return self.repo.list_entries(self.db, Income, owner, start, end)

    def delete_entry(self, model, row_id: int, owner: str) -> None:
        row = self.repo.get_owned(self.db, model, row_id, owner)
        if not row:
            raise NotFound("Entry not found", "प्रविष्टि नहीं मिली")
        self.repo.delete(self.db, row)
        logger.info(f"🗑️ {model.__tablename__} {row_id} deleted for {owner}")

    # ========================================================================
    # CROPS
    # ========================================================================

    def add_crop(self, owner: str, data: CropCreate) -> CropTracking:
        crop_name = clean_optional(data.cropName, 100)
        if not crop_name:
            raise ValidationError("Crop name is required", "फसल का नाम आवश्यक है")

        crop = self.repo.create(
            self.db,
            CropTracking,
            farmer_id=owner,
            crop_name=crop_name,
            land_area=data.landArea or None,
            area_unit=data.areaUnit or "acre",
            expected_yield=data.expectedYield or None,
            yield_unit=data.yieldUnit or "quintal",
            sowing_date=data.sowingDate,
            harvest_date=None,
            status=data.status or "active",
        )
        logger.info(f"🌱 Crop {crop.id} ({crop.crop_name}) tracked for {owner}")
        return crop

    def list_crops(self, owner: str) -> list[CropTracking]:
        return self.repo.list_crops(self.db, owner)

    # ========================================================================
    # SUMMARY
    # ========================================================================

    def summary(self, owner: str, period: Optional[str] = None, now: Optional[datetime] = None) -> AccountSummary:
        start = period_start(period, now)
        expenses = self.repo.list_entries(self.db, Expense, owner, start)
        incomes = self.repo.list_entries(self.db, Income, owner, start)

        total_expense = sum(e.amount for e in expenses)
        total_income = sum(i.amount for i in incomes)

        per_crop: dict[str, CropSummary] = {}
        for entry, side in [(e, "expense") for e in expenses] + [(i, "income") for i in incomes]:
            if not entry.crop:
                continue
            item = per_crop.setdefault(entry.crop, CropSummary(crop=entry.crop))
            setattr(item, side, getattr(item, side) + entry.amount)
        for item in per_crop.values():
            item.profit = item.income - item.expense

        recent = [self._transaction(e, "expense") for e in expenses[:RECENT_PER_KIND]]
        recent += [self._transaction(i, "income") for i in incomes[:RECENT_PER_KIND]]
        recent.sort(key=lambda t: t.date, reverse=True)

        active_crops = sum(1 for c in self.repo.list_crops(self.db, owner) if c.status == "active")

        return AccountSummary(
            totalExpense=total_expense,
            totalIncome=total_income,
            profitLoss=total_income - total_expense,
            expenseByCategory=self._category_totals(Expense, owner, start),
            incomeByCategory=self._category_totals(Income, owner, start),
            cropSummary=list(per_crop.values()),
            activeCrops=active_crops,
            recentTransactions=recent[:RECENT_LIMIT],
        )

    def _category_totals(self, model, owner: str, start: Optional[datetime]) -> list[CategoryTotal]:
        return [
            CategoryTotal(category=category, total=int(total or 0))
            for category, total in self.repo.totals_by_category(self.db, model, owner, start)
        ]

    @staticmethod
    def _transaction(entry, kind: str) -> Transaction:
        return Transaction(
            id=entry.id,
            type=kind,
            category=entry.category,
            amount=entry.amount,
            crop=entry.crop,
            notes=entry.notes,
            date=entry.date,
        )
