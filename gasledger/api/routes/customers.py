"""Customer registry routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from gasledger.api.dependencies import get_current_caller, require_admin
from gasledger.core.database import get_db
from gasledger.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from gasledger.schemas.reading import Caller
from gasledger.services import customers as customer_service

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Register a customer."""
    return customer_service.create_customer(db, customer_data)


@router.get("/", response_model=list[CustomerResponse])
def list_customers(
    db: Session = Depends(get_db),
    _: Caller = Depends(get_current_caller),
):
    """Get all customers."""
    return customer_service.get_customers(db)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Update a customer's name."""
    return customer_service.update_customer(db, customer_id, customer_data)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Delete a customer."""
    customer_service.delete_customer(db, customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
