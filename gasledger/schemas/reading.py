"""Reading Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from gasledger.core.clock import as_utc
from gasledger.models.enums import OperationType, Role

# Naive datetimes are taken as UTC, aware ones are converted
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class RawReading(BaseModel):
    """Immutable snapshot of one stored reading, as fed to the stream processor."""

    model_config = ConfigDict(from_attributes=True, frozen=True, populate_by_name=True)

    id: int
    recorded_at: UtcDatetime
    created_at: UtcDatetime
    customer_code: str
    storage_number: str
    operator_id: str
    operation_type: OperationType
    psi: Decimal
    temp: Decimal
    psi_out: Decimal
    flow_turbine: Decimal = Field(..., allow_inf_nan=True)  # Device counter, checked downstream
    fixed_storage_quantity: Decimal | None = None
    remarks: str | None = None


class Caller(BaseModel):
    """Identity of the user making a request."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class ReadingCreate(BaseModel):
    """Schema for recording a single manual reading."""

    customer_code: str = Field(..., min_length=1, max_length=50)
    storage_number: str = Field(..., min_length=1, max_length=50)
    psi: Decimal
    temp: Decimal
    psi_out: Decimal
    flow_turbine: Decimal
    fixed_storage_quantity: Decimal | None = None
    remarks: str | None = Field(None, max_length=500)
    recorded_at: UtcDatetime | None = None  # Defaults to the time of submission


class StopCreate(BaseModel):
    """Schema for the reading that closes a metering session."""

    customer_code: str = Field(..., min_length=1, max_length=50)
    storage_number: str = Field(..., min_length=1, max_length=50)
    psi: Decimal
    temp: Decimal = Decimal("0")
    psi_out: Decimal = Decimal("0")
    flow_turbine: Decimal
    remarks: str = Field("Session report finished.", max_length=500)
    recorded_at: UtcDatetime | None = None


class ChangeCreate(BaseModel):
    """Schema for swapping an emptied storage for a fresh one."""

    old_storage_number: str = Field(..., min_length=1, max_length=50)
    new_storage_number: str = Field(..., min_length=1, max_length=50)
    old_storage_final_psi: Decimal
    new_storage_initial_psi: Decimal
    recorded_at: UtcDatetime | None = None

    @model_validator(mode="after")
    def validate_distinct_storages(self) -> "ChangeCreate":
        """A change must move to a different storage."""
        if self.old_storage_number == self.new_storage_number:
            raise ValueError("Old and new storage numbers must differ")
        return self


class DumpingCreate(BaseModel):
    """Schema for a gas transfer from a source storage into a destination storage."""

    customer_code: str = Field(..., min_length=1, max_length=50)
    source_storage_number: str = Field(..., min_length=1, max_length=50)
    destination_storage_number: str = Field(..., min_length=1, max_length=50)
    source_psi_before: Decimal
    source_psi_after: Decimal
    destination_psi_before: Decimal
    destination_psi_after: Decimal
    source_temp_before: Decimal
    source_temp_after: Decimal
    destination_temp: Decimal
    psi_out: Decimal
    flow_turbine_before: Decimal
    flow_turbine_after: Decimal
    time_before: UtcDatetime
    time_after: UtcDatetime

    @model_validator(mode="after")
    def validate_transfer(self) -> "DumpingCreate":
        """Validate storages differ and the transfer does not end before it starts."""
        if self.source_storage_number == self.destination_storage_number:
            raise ValueError("Source and destination storage numbers must differ")
        if self.time_after < self.time_before:
            raise ValueError("time_after cannot be earlier than time_before")
        return self


class ReadingUpdate(BaseModel):
    """Fields an operator may correct on an existing reading."""

    psi: Decimal | None = None
    temp: Decimal | None = None
    psi_out: Decimal | None = None
    flow_turbine: Decimal | None = None
    remarks: str | None = Field(None, max_length=500)


class ReadingResponse(RawReading):
    """Schema for a stored reading response."""


class OperatorReadingCount(BaseModel):
    """Number of readings submitted by one operator."""

    operator_id: str
    reading_count: int


class MessageResponse(BaseModel):
    """Acknowledgement for write operations."""

    message: str
    reading_ids: list[int]
