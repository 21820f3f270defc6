"""Storage Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gasledger.models.enums import StorageType


class StorageCreate(BaseModel):
    """Schema for registering a storage."""

    storage_number: str = Field(..., min_length=1, max_length=50)
    type: StorageType = StorageType.MOBILE
    customer_code: str | None = Field(None, max_length=50)
    default_quantity: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_owner(self) -> "StorageCreate":
        """A fixed storage sits at one customer's site."""
        if self.type == StorageType.FIXED and not self.customer_code:
            raise ValueError("A fixed storage needs a customer_code")
        return self


class StorageUpdate(BaseModel):
    """Schema for updating a storage. The storage number is immutable."""

    type: StorageType | None = None
    customer_code: str | None = Field(None, max_length=50)
    default_quantity: int | None = Field(None, ge=0)


class StorageResponse(BaseModel):
    """Schema for storage response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    storage_number: str
    type: StorageType
    customer_code: str | None
    default_quantity: int | None
    created_at: datetime
