"""Customer Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CustomerCreate(BaseModel):
    """Schema for registering a customer."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str | None = Field(None, max_length=255)


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. The code is immutable."""

    name: str | None = Field(None, max_length=255)


class CustomerResponse(BaseModel):
    """Schema for customer response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str | None
    created_at: datetime
