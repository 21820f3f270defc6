"""Storage service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from gasledger.models.enums import StorageType
from gasledger.models.storage import Storage
from gasledger.schemas.storage import StorageCreate, StorageUpdate

logger = logging.getLogger(__name__)


def create_storage(db: Session, storage_data: StorageCreate) -> Storage:
    """Register a storage."""
    existing = (
        db.query(Storage).filter(Storage.storage_number == storage_data.storage_number).first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Storage with number '{storage_data.storage_number}' already exists",
        )

    db_storage = Storage(
        storage_number=storage_data.storage_number,
        type=storage_data.type,
        customer_code=storage_data.customer_code,
        default_quantity=storage_data.default_quantity,
    )
    db.add(db_storage)
    db.commit()
    db.refresh(db_storage)
    logger.info("Storage %s registered as %s", db_storage.storage_number, storage_data.type.value)
    return db_storage


def get_storages(db: Session) -> list[Storage]:
    """Get all storages ordered by number."""
    return db.query(Storage).order_by(Storage.storage_number).all()


def get_storage(db: Session, storage_id: int) -> Storage:
    """Get a storage by ID."""
    storage = db.query(Storage).filter(Storage.id == storage_id).first()
    if not storage:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Storage with id {storage_id} not found",
        )
    return storage


def get_relevant_storages(db: Session, customer_code: str) -> list[Storage]:
    """Storages an operator may meter for a customer: every mobile one plus the customer's fixed ones."""
    return (
        db.query(Storage)
        .filter(
            or_(
                Storage.type == StorageType.MOBILE,
                and_(Storage.type == StorageType.FIXED, Storage.customer_code == customer_code),
            )
        )
        .order_by(Storage.storage_number)
        .all()
    )


def update_storage(db: Session, storage_id: int, storage_data: StorageUpdate) -> Storage:
    """Update a storage."""
    storage = get_storage(db, storage_id)

    update_data = storage_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(storage, field, value)

    db.commit()
    db.refresh(storage)
    return storage


def delete_storage(db: Session, storage_id: int) -> None:
    """Delete a storage. Readings keep their storage number."""
    storage = get_storage(db, storage_id)
    db.delete(storage)
    db.commit()
    logger.info("Storage %s deleted", storage.storage_number)
