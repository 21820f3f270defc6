"""Reading routes for ledger operations."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status

from gasledger.api.dependencies import get_current_caller, get_store
from gasledger.schemas.processed import ProcessedRow
from gasledger.schemas.reading import (
    Caller,
    ChangeCreate,
    DumpingCreate,
    MessageResponse,
    OperatorReadingCount,
    ReadingCreate,
    ReadingResponse,
    ReadingUpdate,
    StopCreate,
)
from gasledger.services import readings as reading_service
from gasledger.services.store import ReadingStore

router = APIRouter(prefix="/readings", tags=["readings"])


@router.post(
    "/",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    reading_data: ReadingCreate,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Record a single manual reading."""
    return reading_service.create_reading(store, reading_data, caller)


@router.post(
    "/stop",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_stop(
    stop_data: StopCreate,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Record the reading that closes a metering session."""
    return reading_service.create_stop(store, stop_data, caller)


@router.post(
    "/change",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_change(
    change_data: ChangeCreate,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Record a storage swap (old storage out, new storage in)."""
    created = reading_service.create_change(store, change_data, caller)
    return MessageResponse(
        message="Storage change recorded successfully.",
        reading_ids=[r.id for r in created],
    )


@router.post(
    "/dumping",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_dumping(
    dumping_data: DumpingCreate,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Record a gas transfer between two storages."""
    created = reading_service.create_dumping(store, dumping_data, caller)
    return MessageResponse(
        message="Dumping process recorded successfully.",
        reading_ids=[r.id for r in created],
    )


@router.get("/", response_model=list[ProcessedRow])
def list_readings(
    customer: str | None = Query(None, description="Customer code, or 'all'"),
    operator: str | None = Query(None, description="Operator id, or 'all'"),
    search_term: str | None = Query(None, description="Matches customer, storage or remarks"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """
    Get the display-ready reading stream.

    Readings carry their flow-meter delta and edit eligibility, interleaved
    with change, stop and dumping summary rows.
    """
    return reading_service.list_processed(
        store,
        caller,
        customer=customer,
        operator=operator,
        search_term=search_term,
        sort_order=sort_order,
    )


@router.get("/mine", response_model=list[ReadingResponse])
def list_my_readings(
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Get the most recent readings submitted by the caller."""
    return reading_service.recent_for_operator(store, caller)


@router.get("/stats/operator-counts", response_model=list[OperatorReadingCount])
def get_operator_counts(
    store: ReadingStore = Depends(get_store),
    _: Caller = Depends(get_current_caller),
):
    """Get reading counts per operator."""
    return reading_service.operator_counts(store)


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_reading(
    reading_id: int,
    store: ReadingStore = Depends(get_store),
    _: Caller = Depends(get_current_caller),
):
    """Get a reading by ID."""
    return reading_service.get_reading(store, reading_id)


@router.put("/{reading_id}", response_model=ReadingResponse)
def update_reading(
    reading_id: int,
    reading_data: ReadingUpdate,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Correct a reading within its edit window."""
    return reading_service.update_reading(store, reading_id, reading_data, caller)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(
    reading_id: int,
    store: ReadingStore = Depends(get_store),
    caller: Caller = Depends(get_current_caller),
):
    """Delete a reading within its edit window."""
    reading_service.delete_reading(store, reading_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
