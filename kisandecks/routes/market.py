"""Mandi (APMC) price lookup over the stored market_prices table"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import MarketPrice
from ..services.market_data import MarketDataService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Market"])


class MarketPriceResponse(BaseModel):
    id: int
    state: str
    district: Optional[str] = None
    market: str
    commodity: str
    variety: Optional[str] = None
    minPrice: Optional[int] = None
    maxPrice: Optional[int] = None
    modalPrice: Optional[int] = None
    priceDate: Optional[str] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, price: MarketPrice) -> "MarketPriceResponse":
        return cls(
            id=price.id,
            state=price.state,
            district=price.district,
            market=price.market,
            commodity=price.commodity,
            variety=price.variety,
            minPrice=price.min_price,
            maxPrice=price.max_price,
            modalPrice=price.modal_price,
            priceDate=price.price_date,
            updatedAt=price.updated_at,
        )


class MarketListResponse(BaseModel):
    prices: list[MarketPriceResponse]
    totalCount: int
    lastUpdated: Optional[datetime] = None


class MarketCatalogResponse(BaseModel):
    states: list[str]
    commodities: list[str]


class StateMarketsResponse(BaseModel):
    districts: list[str]
    markets: list[str]


def get_market_service(db: Session = Depends(get_db)) -> MarketDataService:
    """Dependency injection for MarketDataService"""
    return MarketDataService(db)


@router.get("/market", response_model=MarketListResponse)
async def list_market_prices(
    state: Optional[str] = None,
    district: Optional[str] = None,
    commodity: Optional[str] = None,
    search: Optional[str] = None,
    service: MarketDataService = Depends(get_market_service),
):
    prices = service.filter_prices(state, district, commodity, search)
    return MarketListResponse(
        prices=[MarketPriceResponse.from_model(p) for p in prices],
        totalCount=len(prices),
        lastUpdated=service.last_updated(),
    )


@router.get("/market/catalog", response_model=MarketCatalogResponse)
async def market_catalog(service: MarketDataService = Depends(get_market_service)):
    return MarketCatalogResponse(**service.catalog())


@router.get("/market/districts/{state}", response_model=StateMarketsResponse)
async def state_markets(state: str, service: MarketDataService = Depends(get_market_service)):
    return StateMarketsResponse(**service.districts_for_state(state))


@router.get("/prices/{commodity}", response_model=list[MarketPriceResponse])
async def commodity_prices(commodity: str, service: MarketDataService = Depends(get_market_service)):
    return [MarketPriceResponse.from_model(p) for p in service.prices_for_commodity(commodity)]
