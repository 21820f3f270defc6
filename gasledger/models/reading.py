"""Reading database model - the central ledger."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from gasledger.core.database import Base
from gasledger.models.enums import OperationType


class Reading(Base):
    """Operator-submitted storage reading."""

    __tablename__ = "readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Timestamps
    recorded_at: Mapped[datetime] = mapped_column(index=True)  # When reading was taken
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
    )  # When added to database, drives the edit window

    customer_code: Mapped[str] = mapped_column(String(50), index=True)
    storage_number: Mapped[str] = mapped_column(String(50), index=True)
    operator_id: Mapped[str] = mapped_column(String(64), index=True)
    operation_type: Mapped[OperationType] = mapped_column(default=OperationType.MANUAL)

    psi: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))
    temp: Mapped[Decimal] = mapped_column(Numeric(precision=8, scale=3))
    psi_out: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))
    flow_turbine: Mapped[Decimal] = mapped_column(Numeric(precision=16, scale=3))
    fixed_storage_quantity: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=3),
        nullable=True,
    )
    remarks: Mapped[str | None] = mapped_column(String(500), nullable=True)
