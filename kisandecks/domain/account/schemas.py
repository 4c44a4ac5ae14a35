"""Account ledger schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import CropTracking, Expense, Income
from ...shared.validators import parse_iso_date, validate_choice

CROP_STATUSES = ("active", "harvested", "sold")


class _DatedEntry(BaseModel):
    date: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        if isinstance(v, str):
            return parse_iso_date(v)
        return v


class ExpenseCreate(_DatedEntry):
    # Required-ness is checked in the service so both fields share one bilingual message
    category: Optional[str] = Field(default=None, max_length=50)
    amount: Optional[float] = None
    crop: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    photoUrl: Optional[str] = None


class IncomeCreate(_DatedEntry):
    category: Optional[str] = Field(default=None, max_length=50)
    amount: Optional[float] = None
    crop: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = Field(default=None, max_length=20)


class CropCreate(BaseModel):
    cropName: Optional[str] = Field(default=None, max_length=100)
    landArea: Optional[float] = Field(default=None, ge=0)
    areaUnit: Optional[str] = Field(default=None, max_length=20)
    expectedYield: Optional[float] = Field(default=None, ge=0)
    yieldUnit: Optional[str] = Field(default=None, max_length=20)
    sowingDate: Optional[datetime] = None
    status: Optional[str] = None

    @field_validator("sowingDate", mode="before")
    @classmethod
    def parse_sowing_date(cls, v):
        if isinstance(v, str):
            return parse_iso_date(v)
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, CROP_STATUSES, "status")


class ExpenseResponse(BaseModel):
    id: int
    farmerId: str
    category: str
    amount: int
    crop: Optional[str] = None
    notes: Optional[str] = None
    photoUrl: Optional[str] = None
    date: datetime
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, expense: Expense) -> "ExpenseResponse":
        return cls(
            id=expense.id,
            farmerId=expense.farmer_id,
            category=expense.category,
            amount=expense.amount,
            crop=expense.crop,
            notes=expense.notes,
            photoUrl=expense.photo_url,
            date=expense.date,
            createdAt=expense.created_at,
        )


class IncomeResponse(BaseModel):
    id: int
    farmerId: str
    category: str
    amount: int
    crop: Optional[str] = None
    notes: Optional[str] = None
    quantity: Optional[int] = None
    unit: Optional[str] = None
    date: datetime
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, income: Income) -> "IncomeResponse":
        return cls(
            id=income.id,
            farmerId=income.farmer_id,
            category=income.category,
            amount=income.amount,
            crop=income.crop,
            notes=income.notes,
            quantity=income.quantity,
            unit=income.unit,
            date=income.date,
            createdAt=income.created_at,
        )


class CropResponse(BaseModel):
    id: int
    farmerId: str
    cropName: str
    landArea: Optional[float] = None
    areaUnit: Optional[str] = None
    expectedYield: Optional[float] = None
    yieldUnit: Optional[str] = None
    sowingDate: Optional[datetime] = None
    harvestDate: Optional[datetime] = None
    status: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, crop: CropTracking) -> "CropResponse":
        return cls(
            id=crop.id,
            farmerId=crop.farmer_id,
            cropName=crop.crop_name,
            landArea=crop.land_area,
            areaUnit=crop.area_unit,
            expectedYield=crop.expected_yield,
            yieldUnit=crop.yield_unit,
            sowingDate=crop.sowing_date,
            harvestDate=crop.harvest_date,
            status=crop.status,
            createdAt=crop.created_at,
        )


class SuccessResponse(BaseModel):
    success: bool = True


# ============================================================================
# SUMMARY
# ============================================================================


class CategoryTotal(BaseModel):
    category: str
    total: int


class CropSummary(BaseModel):
    crop: str
    expense: int = 0
    income: int = 0
    profit: int = 0


class Transaction(BaseModel):
    id: int
    type: str  # expense, income
    category: str
    amount: int
    crop: Optional[str] = None
    notes: Optional[str] = None
    date: datetime


class AccountSummary(BaseModel):
    totalExpense: int
    totalIncome: int
    profitLoss: int
    expenseByCategory: list[CategoryTotal]
    incomeByCategory: list[CategoryTotal]
    cropSummary: list[CropSummary]
    activeCrops: int
    recentTransactions: list[Transaction]
