"""Customer service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from gasledger.models.customer import Customer
from gasledger.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


def create_customer(db: Session, customer_data: CustomerCreate) -> Customer:
    """Register a customer."""
    existing = db.query(Customer).filter(Customer.code == customer_data.code).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Customer with code '{customer_data.code}' already exists",
        )

    db_customer = Customer(code=customer_data.code, name=customer_data.name)
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    logger.info("Customer %s registered", db_customer.code)
    return db_customer


def get_customers(db: Session) -> list[Customer]:
    """Get all customers ordered by code."""
    return db.query(Customer).order_by(Customer.code).all()


def get_customer(db: Session, customer_id: int) -> Customer:
    """Get a customer by ID."""
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with id {customer_id} not found",
        )
    return customer


def update_customer(db: Session, customer_id: int, customer_data: CustomerUpdate) -> Customer:
    """Update a customer."""
    customer = get_customer(db, customer_id)

    update_data = customer_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer_id: int) -> None:
    """Delete a customer. Readings keep their customer code."""
    customer = get_customer(db, customer_id)
    db.delete(customer)
    db.commit()
    logger.info("Customer %s deleted", customer.code)
