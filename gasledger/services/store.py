"""Reading store: data access and atomic multi-row inserts."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gasledger.models.reading import Reading

logger = logging.getLogger(__name__)


class ReadingStore:
    """SQLAlchemy-backed access to the readings table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_readings(self, customer_code: str | None = None) -> list[Reading]:
        """
        Get readings ascending by (recorded_at, id).

        Operator and free-text filters are applied to processed rows instead,
        so each customer's stream is always loaded whole.

        Args:
            customer_code: Only this customer's readings

        Returns:
            List of readings

        """
        query = select(Reading)
        if customer_code:
            query = query.where(Reading.customer_code == customer_code)

        query = query.order_by(Reading.recorded_at, Reading.id)
        return list(self.db.scalars(query).all())

    def get(self, reading_id: int) -> Reading | None:
        return self.db.get(Reading, reading_id)

    def latest_for_storage(self, storage_number: str) -> Reading | None:
        """Most recent reading taken on a storage."""
        query = (
            select(Reading)
            .where(Reading.storage_number == storage_number)
            .order_by(Reading.recorded_at.desc(), Reading.id.desc())
            .limit(1)
        )
        return self.db.scalars(query).first()

    def recent_for_operator(self, operator_id: str, limit: int) -> list[Reading]:
        query = (
            select(Reading)
            .where(Reading.operator_id == operator_id)
            .order_by(Reading.recorded_at.desc(), Reading.id.desc())
            .limit(limit)
        )
        return list(self.db.scalars(query).all())

    def operator_counts(self) -> list[tuple[str, int]]:
        """Number of readings per operator, busiest first."""
        query = (
            select(Reading.operator_id, func.count(Reading.id))
            .group_by(Reading.operator_id)
            .order_by(func.count(Reading.id).desc(), Reading.operator_id)
        )
        return [(operator_id, count) for operator_id, count in self.db.execute(query).all()]

    def insert_atomic(self, readings: list[Reading]) -> list[Reading]:
        """
        Insert all readings in one transaction, or none of them.

        Readings get their ids in list order, so ties on ``recorded_at``
        keep the order given here.

        Raises:
            SQLAlchemyError: After rolling back, if any insert fails

        """
        try:
            for reading in readings:
                self.db.add(reading)
                self.db.flush()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Atomic insert of %d readings rolled back", len(readings))
            raise

        for reading in readings:
            self.db.refresh(reading)
        return readings

    def update(self, reading: Reading, changes: dict[str, Any]) -> Reading:
        for field, value in changes.items():
            setattr(reading, field, value)
        self.db.commit()
        self.db.refresh(reading)
        return reading

    def delete(self, reading: Reading) -> None:
        self.db.delete(reading)
        self.db.commit()
