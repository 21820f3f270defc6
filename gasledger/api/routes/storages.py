"""Storage registry routes (admin only)."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from gasledger.api.dependencies import require_admin
from gasledger.core.database import get_db
from gasledger.schemas.storage import StorageCreate, StorageResponse, StorageUpdate
from gasledger.services import storages as storage_service

router = APIRouter(prefix="/storages", tags=["storages"], dependencies=[Depends(require_admin)])


@router.post("/", response_model=StorageResponse, status_code=status.HTTP_201_CREATED)
def create_storage(storage_data: StorageCreate, db: Session = Depends(get_db)):
    """Register a storage."""
    return storage_service.create_storage(db, storage_data)


@router.get("/", response_model=list[StorageResponse])
def list_storages(db: Session = Depends(get_db)):
    """Get all storages."""
    return storage_service.get_storages(db)


@router.get("/{storage_id}", response_model=StorageResponse)
def get_storage(storage_id: int, db: Session = Depends(get_db)):
    """Get a storage by ID."""
    return storage_service.get_storage(db, storage_id)


@router.put("/{storage_id}", response_model=StorageResponse)
def update_storage(storage_id: int, storage_data: StorageUpdate, db: Session = Depends(get_db)):
    """Update a storage's type, owner or default quantity."""
    return storage_service.update_storage(db, storage_id, storage_data)


@router.delete("/{storage_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_storage(storage_id: int, db: Session = Depends(get_db)):
    """Delete a storage."""
    storage_service.delete_storage(db, storage_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
