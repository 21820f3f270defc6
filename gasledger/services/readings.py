"""Reading service for business logic - the ledger operations."""

import logging
from datetime import datetime, timedelta
from typing import Literal

from fastapi import HTTPException, status

from gasledger.core.clock import get_display_timezone, utcnow
from gasledger.core.config import settings
from gasledger.core.exceptions import MalformedSequenceError
from gasledger.models.enums import OperationType, ReadingRemark
from gasledger.models.reading import Reading
from gasledger.schemas.processed import DataRow, ProcessedRow
from gasledger.schemas.reading import (
    Caller,
    ChangeCreate,
    DumpingCreate,
    OperatorReadingCount,
    RawReading,
    ReadingCreate,
    ReadingUpdate,
    StopCreate,
)
from gasledger.services.edit_window import ensure_editable
from gasledger.services.pipeline import build_display_rows, filter_display_rows
from gasledger.services.store import ReadingStore

logger = logging.getLogger(__name__)


def _edit_window() -> timedelta:
    return timedelta(minutes=settings.EDIT_WINDOW_MINUTES)


def create_reading(
    store: ReadingStore,
    reading_data: ReadingCreate,
    caller: Caller,
) -> Reading:
    """Record a single manual reading."""
    reading = Reading(
        recorded_at=reading_data.recorded_at or utcnow(),
        customer_code=reading_data.customer_code,
        storage_number=reading_data.storage_number,
        operator_id=caller.id,
        operation_type=OperationType.MANUAL,
        psi=reading_data.psi,
        temp=reading_data.temp,
        psi_out=reading_data.psi_out,
        flow_turbine=reading_data.flow_turbine,
        fixed_storage_quantity=reading_data.fixed_storage_quantity,
        remarks=reading_data.remarks,
    )
    [created] = store.insert_atomic([reading])
    logger.info(
        "Reading %s recorded on storage %s by operator %s",
        created.id,
        created.storage_number,
        caller.id,
    )
    return created


def create_stop(
    store: ReadingStore,
    stop_data: StopCreate,
    caller: Caller,
) -> Reading:
    """Record the reading that closes a metering session."""
    reading = Reading(
        recorded_at=stop_data.recorded_at or utcnow(),
        customer_code=stop_data.customer_code,
        storage_number=stop_data.storage_number,
        operator_id=caller.id,
        operation_type=OperationType.STOP,
        psi=stop_data.psi,
        temp=stop_data.temp,
        psi_out=stop_data.psi_out,
        flow_turbine=stop_data.flow_turbine,
        remarks=stop_data.remarks,
    )
    [created] = store.insert_atomic([reading])
    logger.info("Session stopped on storage %s by operator %s", created.storage_number, caller.id)
    return created


def create_change(
    store: ReadingStore,
    change_data: ChangeCreate,
    caller: Caller,
) -> list[Reading]:
    """
    Record a storage swap as two readings sharing one timestamp.

    Temperature, outlet pressure and turbine counter are carried over from
    the last reading on the old storage.

    Raises:
        HTTPException: If the old storage has no previous reading

    """
    last_reading = store.latest_for_storage(change_data.old_storage_number)
    if not last_reading:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No previous reading found for storage {change_data.old_storage_number}",
        )

    recorded_at = change_data.recorded_at or utcnow()
    shared = {
        "recorded_at": recorded_at,
        "customer_code": last_reading.customer_code,
        "operator_id": caller.id,
        "operation_type": OperationType.MANUAL,
        "temp": last_reading.temp,
        "psi_out": last_reading.psi_out,
        "flow_turbine": last_reading.flow_turbine,
    }
    readings = [
        Reading(
            storage_number=change_data.old_storage_number,
            psi=change_data.old_storage_final_psi,
            remarks=ReadingRemark.CHANGE_OLD_OUT.value,
            **shared,
        ),
        Reading(
            storage_number=change_data.new_storage_number,
            psi=change_data.new_storage_initial_psi,
            remarks=ReadingRemark.CHANGE_NEW_IN.value,
            **shared,
        ),
    ]
    created = store.insert_atomic(readings)
    logger.info(
        "Storage change %s -> %s recorded for customer %s",
        change_data.old_storage_number,
        change_data.new_storage_number,
        last_reading.customer_code,
    )
    return created


def create_dumping(
    store: ReadingStore,
    dumping_data: DumpingCreate,
    caller: Caller,
) -> list[Reading]:
    """Record a gas transfer as the four tagged dumping readings."""
    common = {
        "customer_code": dumping_data.customer_code,
        "operator_id": caller.id,
        "operation_type": OperationType.DUMPING,
        "psi_out": dumping_data.psi_out,
    }
    readings = [
        Reading(
            recorded_at=dumping_data.time_before,
            storage_number=dumping_data.destination_storage_number,
            psi=dumping_data.destination_psi_before,
            temp=dumping_data.destination_temp,
            flow_turbine=dumping_data.flow_turbine_before,
            remarks=ReadingRemark.DUMPING_DESTINATION_BEFORE.value,
            **common,
        ),
        Reading(
            recorded_at=dumping_data.time_before,
            storage_number=dumping_data.source_storage_number,
            psi=dumping_data.source_psi_before,
            temp=dumping_data.source_temp_before,
            flow_turbine=dumping_data.flow_turbine_before,
            remarks=ReadingRemark.DUMPING_SOURCE_BEFORE.value,
            **common,
        ),
        Reading(
            recorded_at=dumping_data.time_after,
            storage_number=dumping_data.source_storage_number,
            psi=dumping_data.source_psi_after,
            temp=dumping_data.source_temp_after,
            flow_turbine=dumping_data.flow_turbine_after,
            remarks=ReadingRemark.DUMPING_SOURCE_AFTER.value,
            **common,
        ),
        Reading(
            recorded_at=dumping_data.time_after,
            storage_number=dumping_data.destination_storage_number,
            psi=dumping_data.destination_psi_after,
            temp=dumping_data.destination_temp,
            flow_turbine=dumping_data.flow_turbine_after,
            remarks=ReadingRemark.DUMPING_DESTINATION_AFTER.value,
            **common,
        ),
    ]
    created = store.insert_atomic(readings)
    logger.info(
        "Dumping %s -> %s recorded for customer %s",
        dumping_data.source_storage_number,
        dumping_data.destination_storage_number,
        dumping_data.customer_code,
    )
    return created


def _row_matches(row: DataRow, operator_id: str | None, search_term: str | None) -> bool:
    """Operator and free-text predicate applied to processed data rows."""
    if operator_id and row.operator_id != operator_id:
        return False
    if search_term:
        needle = search_term.casefold()
        haystack = (row.customer_code, row.storage_number, row.remarks or "")
        return any(needle in value.casefold() for value in haystack)
    return True


def list_processed(
    store: ReadingStore,
    caller: Caller,
    customer: str | None = None,
    operator: str | None = None,
    search_term: str | None = None,
    sort_order: Literal["asc", "desc"] = "asc",
    now: datetime | None = None,
) -> list[ProcessedRow]:
    """
    Get the display-ready reading stream.

    Flow deltas and summaries are computed over the complete stream of each
    customer; the operator and search filters only narrow the rows returned.

    Args:
        store: Reading store
        caller: Caller the ``isEditable`` flags are computed for
        customer: Customer code filter ("all" or None for every customer)
        operator: Operator id filter ("all" or None for every operator)
        search_term: Free-text filter on customer, storage or remarks
        sort_order: "asc" (oldest first) or "desc"
        now: Evaluation instant for the edit window, defaults to the current time

    Returns:
        Processed rows

    Raises:
        HTTPException: 409 if a customer's stream is malformed

    """
    readings = store.list_readings(customer_code=None if customer in (None, "all") else customer)
    snapshot = [RawReading.model_validate(r) for r in readings]

    try:
        rows = build_display_rows(
            snapshot,
            caller,
            now or utcnow(),
            display_tz=get_display_timezone(settings.DISPLAY_TIMEZONE),
            edit_window=_edit_window(),
        )
    except MalformedSequenceError as exc:
        logger.error("Refusing to display readings: %s", exc)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    operator_id = None if operator in (None, "all") else operator
    if operator_id or search_term:
        rows = filter_display_rows(rows, lambda row: _row_matches(row, operator_id, search_term))

    if sort_order == "desc":
        rows.reverse()
    return rows


def get_reading(store: ReadingStore, reading_id: int) -> Reading:
    """
    Get a reading by ID.

    Raises:
        HTTPException: If the reading does not exist

    """
    reading = store.get(reading_id)
    if not reading:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reading not found",
        )
    return reading


def update_reading(
    store: ReadingStore,
    reading_id: int,
    reading_data: ReadingUpdate,
    caller: Caller,
    now: datetime | None = None,
) -> Reading:
    """Correct a reading while the caller's edit window allows it."""
    reading = get_reading(store, reading_id)
    ensure_editable(RawReading.model_validate(reading), caller, now or utcnow(), _edit_window())

    changes = reading_data.model_dump(exclude_unset=True, exclude_none=True)
    updated = store.update(reading, changes)
    logger.info("Reading %s updated by %s", reading_id, caller.id)
    return updated


def delete_reading(
    store: ReadingStore,
    reading_id: int,
    caller: Caller,
    now: datetime | None = None,
) -> None:
    """Delete a reading while the caller's edit window allows it."""
    reading = get_reading(store, reading_id)
    ensure_editable(RawReading.model_validate(reading), caller, now or utcnow(), _edit_window())

    store.delete(reading)
    logger.info("Reading %s deleted by %s", reading_id, caller.id)


def recent_for_operator(store: ReadingStore, caller: Caller) -> list[Reading]:
    """The caller's most recent readings, newest first."""
    return store.recent_for_operator(caller.id, settings.RECENT_READINGS_LIMIT)


def operator_counts(store: ReadingStore) -> list[OperatorReadingCount]:
    return [
        OperatorReadingCount(operator_id=operator_id, reading_count=count)
        for operator_id, count in store.operator_counts()
    ]
