"""Storage database model."""

from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gasledger.core.database import Base
from gasledger.models.enums import StorageType


class Storage(Base):
    """Gas storage registry entry; readings refer to it by ``storage_number``."""

    __tablename__ = "storages"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    storage_number: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    type: Mapped[StorageType] = mapped_column(String(20), default=StorageType.MOBILE)

    # Owning customer, set for fixed storages
    customer_code: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    default_quantity: Mapped[int | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
