"""Analytics service: ledger-wide reading statistics."""

from collections import Counter
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gasledger.core.clock import as_utc
from gasledger.models.reading import Reading
from gasledger.schemas.analytics import CustomerReadingCount, DailyReadingCount, OverallStats

TOP_CUSTOMERS_LIMIT = 5

ONE_DECIMAL = Decimal("0.1")


def _rounded_average(value: object) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def get_overall_stats(db: Session) -> OverallStats:
    """
    Reading count, average pressure, temperature and turbine counter, and the busiest customers.

    An empty ledger reports zeros and no customers.
    """
    total, avg_psi, avg_temp, avg_flow = db.execute(
        select(
            func.count(Reading.id),
            func.avg(Reading.psi),
            func.avg(Reading.temp),
            func.avg(Reading.flow_turbine),
        )
    ).one()

    top_customers = db.execute(
        select(Reading.customer_code, func.count(Reading.id))
        .group_by(Reading.customer_code)
        .order_by(func.count(Reading.id).desc(), Reading.customer_code)
        .limit(TOP_CUSTOMERS_LIMIT)
    ).all()

    return OverallStats(
        total_readings=total,
        avg_psi=_rounded_average(avg_psi),
        avg_temp=_rounded_average(avg_temp),
        avg_flow=_rounded_average(avg_flow),
        top_customers=[
            CustomerReadingCount(customer=customer, readings=count)
            for customer, count in top_customers
        ],
    )


def get_readings_over_time(
    db: Session,
    start_date: date,
    end_date: date,
    display_tz: tzinfo,
) -> list[DailyReadingCount]:
    """
    Readings per local calendar day, both bounds inclusive.

    Every day of the range is listed, including days without readings.

    Raises:
        HTTPException: If the range ends before it starts

    """
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date cannot be earlier than start_date",
        )

    range_start = datetime.combine(start_date, time.min, tzinfo=display_tz)
    range_end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=display_tz)

    recorded = db.scalars(
        select(Reading.recorded_at).where(
            Reading.recorded_at >= as_utc(range_start),
            Reading.recorded_at < as_utc(range_end),
        )
    ).all()
    per_day = Counter(as_utc(moment).astimezone(display_tz).date() for moment in recorded)

    days = (end_date - start_date).days + 1
    return [
        DailyReadingCount(day=day, count=per_day[day])
        for day in (start_date + timedelta(days=offset) for offset in range(days))
    ]
