"""
Mandi price data

Reads the market_prices table for the market pages and advisory context,
and refreshes it from the Agmarknet daily price feed on data.gov.in.
"""

import logging
from datetime import datetime
from typing import Optional

import httpx
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import DATA_GOV_API_KEY, MARKET_PRICES_API_URL, MARKET_PRICES_FETCH_LIMIT
from ..domain.calculators.formatting import rupees
from ..errors import UpstreamError
from ..models import MarketPrice, utcnow

logger = logging.getLogger(__name__)

CONTEXT_MAX_COMMODITIES = 3
CONTEXT_ROWS_PER_COMMODITY = 5


def _price(value) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


class MarketDataService:
    """Queries and refreshes stored mandi prices"""

    def __init__(self, db: Session):
        self.db = db

    def filter_prices(
        self,
        state: Optional[str] = None,
        district: Optional[str] = None,
        commodity: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[MarketPrice]:
        query = self.db.query(MarketPrice)
        if state:
            query = query.filter(func.lower(MarketPrice.state) == state.lower())
        if district:
            query = query.filter(func.lower(MarketPrice.district) == district.lower())
        if commodity:
            query = query.filter(func.lower(MarketPrice.commodity) == commodity.lower())
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                func.lower(MarketPrice.commodity).like(pattern)
                | func.lower(MarketPrice.market).like(pattern)
                | func.lower(MarketPrice.variety).like(pattern)
            )
        return query.order_by(MarketPrice.commodity, MarketPrice.market, MarketPrice.id).all()

    def prices_for_commodity(self, commodity: str, limit: int = 20) -> list[MarketPrice]:
        """Latest rows whose commodity name contains the given text"""
        return (
            self.db.query(MarketPrice)
            .filter(func.lower(MarketPrice.commodity).like(f"%{commodity.lower()}%"))
            .order_by(MarketPrice.updated_at.desc(), MarketPrice.id.desc())
            .limit(limit)
            .all()
        )

    def last_updated(self) -> Optional[datetime]:
        return self.db.query(func.max(MarketPrice.updated_at)).scalar()

    def catalog(self) -> dict:
        states = [row[0] for row in self.db.query(MarketPrice.state).distinct().order_by(MarketPrice.state)]
        commodities = [
            row[0] for row in self.db.query(MarketPrice.commodity).distinct().order_by(MarketPrice.commodity)
        ]
        return {"states": states, "commodities": commodities}

    def districts_for_state(self, state: str) -> dict:
        rows = (
            self.db.query(MarketPrice.district, MarketPrice.market)
            .filter(func.lower(MarketPrice.state) == state.lower())
            .distinct()
            .all()
        )
        return {
            "districts": sorted({district for district, _ in rows if district}),
            "markets": sorted({market for _, market in rows if market}),
        }

    def live_context(self, message: str) -> str:
        """Price lines for commodities named in a farmer's question, or "" if none match"""
        text = (message or "").lower()
        commodities = [row[0] for row in self.db.query(MarketPrice.commodity).distinct()]
        mentioned = [c for c in commodities if c and c.lower() in text][:CONTEXT_MAX_COMMODITIES]
        if not mentioned:
            return ""

        lines = ["LIVE MANDI PRICES (₹ per quintal):"]
        for commodity in mentioned:
            for row in self.prices_for_commodity(commodity, CONTEXT_ROWS_PER_COMMODITY):
                location = f"{row.market}, {row.district}, {row.state}" if row.district else f"{row.market}, {row.state}"
                modal = rupees(row.modal_price) if row.modal_price is not None else "n/a"
                line = f"- {row.commodity} at {location}: modal {modal}"
                if row.min_price is not None and row.max_price is not None:
                    line += f" (range {rupees(row.min_price)} - {rupees(row.max_price)})"
                if row.price_date:
                    line += f" on {row.price_date}"
                lines.append(line)
        return "\n".join(lines)

    # ========================================================================
    # REFRESH
    # ========================================================================

    async def fetch_records(self) -> list[dict]:
        params = {"api-key": DATA_GOV_API_KEY, "format": "json", "limit": str(MARKET_PRICES_FETCH_LIMIT)}
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(MARKET_PRICES_API_URL, params=params)
        except httpx.HTTPError as e:
            logger.error(f"❌ Market price feed unreachable: {str(e)}")
            raise UpstreamError("Market price feed unavailable", "मंडी भाव सेवा उपलब्ध नहीं है") from e

        if response.status_code >= 400:
            logger.warning(f"Market price feed error {response.status_code}: {response.text[:200]}")
            raise UpstreamError("Market price feed unavailable", "मंडी भाव सेवा उपलब्ध नहीं है")
        return response.json().get("records", [])

    async def refresh(self) -> int:
        """Pull the latest mandi prices and upsert them; returns the number of rows written"""
        if not DATA_GOV_API_KEY:
            logger.warning("⚠️ DATA_GOV_API_KEY not set, keeping stored market prices")
            return 0

        records = await self.fetch_records()
        written = 0
        for record in records:
            state, market, commodity = record.get("state"), record.get("market"), record.get("commodity")
            if not (state and market and commodity):
                continue
            self._upsert(
                state=state,
                district=record.get("district"),
                market=market,
                commodity=commodity,
                variety=record.get("variety"),
                min_price=_price(record.get("min_price")),
                max_price=_price(record.get("max_price")),
                modal_price=_price(record.get("modal_price")),
                price_date=record.get("arrival_date"),
            )
            written += 1

        self.db.commit()
        logger.info(f"✅ Market prices refreshed: {written} rows from {len(records)} records")
        return written

    def _upsert(self, **values) -> None:
        existing = (
            self.db.query(MarketPrice)
            .filter(
                MarketPrice.state == values["state"],
                MarketPrice.district == values["district"],
                MarketPrice.market == values["market"],
                MarketPrice.commodity == values["commodity"],
                MarketPrice.variety == values["variety"],
            )
            .first()
        )
        if existing is None:
            self.db.add(MarketPrice(**values))
            # Later records in the same batch may match this row
            self.db.flush()
            return
        for key, value in values.items():
            setattr(existing, key, value)
        existing.updated_at = utcnow()
