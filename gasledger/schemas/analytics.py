"""Analytics response schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CustomerReadingCount(BaseModel):
    """Number of readings recorded for one customer."""

    customer: str
    readings: int


class OverallStats(BaseModel):
    """Ledger-wide reading statistics; averages are rounded to one decimal."""

    model_config = ConfigDict(populate_by_name=True)

    total_readings: int = Field(..., alias="totalReadings")
    avg_psi: Decimal = Field(..., alias="avgPSI")
    avg_temp: Decimal = Field(..., alias="avgTemp")
    avg_flow: Decimal = Field(..., alias="avgFlow")
    top_customers: list[CustomerReadingCount] = Field(..., alias="topCustomers")


class DailyReadingCount(BaseModel):
    """Readings recorded on one local calendar day."""

    day: date
    count: int
