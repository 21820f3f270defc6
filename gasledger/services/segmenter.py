"""Episode segmentation of an annotated reading stream.

A single forward scan groups readings into episodes and emits synthetic
summary rows at episode boundaries. Patterns are tried in priority order at
each scan position:

1. paired storage change (two readings sharing ``recorded_at``),
2. four-reading dumping transaction,
3. manual/stop run on one storage,
4. open-ended dumping run,
5. a single reading on its own.

Summary rows already present in the input pass through unchanged, and a run
or pattern directly followed by one does not get a second summary, so the
output can be fed back in without changing.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime, tzinfo
from decimal import Decimal

from gasledger.core.clock import as_utc
from gasledger.models.enums import OperationType, ReadingRemark
from gasledger.schemas.processed import (
    AnnotatedReading,
    ChangeSummaryRow,
    DataRow,
    DumpingSummaryRow,
    DumpingTotalRow,
    ProcessedRow,
    StopSummaryRow,
    SummaryRow,
)
from gasledger.schemas.reading import RawReading

logger = logging.getLogger(__name__)

RUN_TYPES = frozenset({OperationType.MANUAL, OperationType.STOP})

CHANGE_PAIR = frozenset({ReadingRemark.CHANGE_OLD_OUT.value, ReadingRemark.CHANGE_NEW_IN.value})

DUMPING_SEQUENCE = (
    ReadingRemark.DUMPING_DESTINATION_BEFORE.value,
    ReadingRemark.DUMPING_SOURCE_BEFORE.value,
    ReadingRemark.DUMPING_SOURCE_AFTER.value,
    ReadingRemark.DUMPING_DESTINATION_AFTER.value,
)

SegmentInput = AnnotatedReading | SummaryRow


def format_duration(start: datetime, end: datetime) -> str:
    """Elapsed time between two timestamps as zero-padded ``HH:mm``, truncated to the minute."""
    minutes = int((as_utc(end) - as_utc(start)).total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def format_clock_time(moment: datetime, display_tz: tzinfo) -> str:
    """Local wall-clock ``HH:mm`` of a timestamp."""
    return as_utc(moment).astimezone(display_tz).strftime("%H:%M")


def total_flow(readings: Sequence[AnnotatedReading]) -> Decimal:
    """Sum of the computable flow deltas."""
    return sum(
        (r.flow_meter for r in readings if r.flow_meter is not None),
        Decimal("0"),
    )


def is_reading(row: SegmentInput | None) -> bool:
    return isinstance(row, RawReading)


def is_change_pair(first: object, second: object) -> bool:
    """Two readings at the same instant carrying the complementary change remarks."""
    if not (is_reading(first) and is_reading(second)):
        return False
    return (
        first.recorded_at == second.recorded_at
        and {first.remarks, second.remarks} == CHANGE_PAIR
    )


def _at(rows: Sequence[SegmentInput], index: int) -> SegmentInput | None:
    return rows[index] if index < len(rows) else None


def _matches_dumping_transaction(rows: Sequence[SegmentInput], start: int) -> bool:
    window = rows[start : start + len(DUMPING_SEQUENCE)]
    if len(window) < len(DUMPING_SEQUENCE):
        return False
    return all(
        is_reading(row) and row.remarks == remark
        for row, remark in zip(window, DUMPING_SEQUENCE, strict=True)
    )


def _starts_pattern(rows: Sequence[SegmentInput], index: int) -> bool:
    return is_change_pair(_at(rows, index), _at(rows, index + 1)) or _matches_dumping_transaction(
        rows, index
    )


def _already_summarised(rows: Sequence[SegmentInput], index: int) -> bool:
    row = _at(rows, index)
    return row is not None and not is_reading(row)


def _to_data_row(reading: AnnotatedReading, *, change: bool = False, dumping: bool = False) -> DataRow:
    data = reading.model_dump()
    data.update(is_change=change, is_dumping=dumping)
    return DataRow(**data)


def _run_end(rows: Sequence[SegmentInput], start: int, types: frozenset[OperationType]) -> int:
    """Index of the last reading of the run starting at ``start`` (inclusive)."""
    first = rows[start]
    end = start
    while not (first.operation_type in RUN_TYPES and rows[end].operation_type == OperationType.STOP):
        candidate = _at(rows, end + 1)
        if (
            not is_reading(candidate)
            or candidate.operation_type not in types
            or _starts_pattern(rows, end + 1)
        ):
            break
        if first.operation_type in RUN_TYPES and candidate.storage_number != first.storage_number:
            break
        end += 1
    return end


def _emit_change_pair(
    rows: Sequence[SegmentInput], index: int, output: list[ProcessedRow]
) -> int:
    first, second = rows[index], rows[index + 1]
    if first.remarks == ReadingRemark.CHANGE_OLD_OUT.value:
        old_storage, new_storage = first, second
    else:
        old_storage, new_storage = second, first

    output.append(_to_data_row(old_storage, change=True))
    output.append(_to_data_row(new_storage, change=True))
    if not _already_summarised(rows, index + 2):
        output.append(
            ChangeSummaryRow(
                id=f"summary_change_{first.id}",
                total_flow=total_flow([old_storage, new_storage]),
                duration=format_duration(first.recorded_at, second.recorded_at),
                customer_code=old_storage.customer_code,
                recorded_at=old_storage.recorded_at,
            )
        )
    return index + 2


def _emit_dumping_transaction(
    rows: Sequence[SegmentInput], index: int, output: list[ProcessedRow]
) -> int:
    transaction = rows[index : index + len(DUMPING_SEQUENCE)]
    output.extend(_to_data_row(r, dumping=True) for r in transaction)
    next_index = index + len(transaction)
    if not _already_summarised(rows, next_index):
        output.append(
            DumpingSummaryRow(
                id=f"summary_dumping_{transaction[0].id}",
                total_flow=Decimal("0"),
                duration=format_duration(transaction[0].recorded_at, transaction[-1].recorded_at),
                customer_code=transaction[-1].customer_code,
                recorded_at=transaction[-1].recorded_at,
            )
        )
    return next_index


def _closing_summary(
    rows: Sequence[SegmentInput],
    run: Sequence[AnnotatedReading],
    end: int,
    display_tz: tzinfo,
) -> SummaryRow | None:
    """Summary row that closes a manual run ending at ``end``, if the run needs one."""
    if _already_summarised(rows, end + 1):
        return None

    first, last = run[0], run[-1]
    if last.operation_type == OperationType.STOP:
        return StopSummaryRow(
            id=f"summary_stop_{last.id}",
            total_flow=total_flow(run),
            duration=format_duration(first.recorded_at, last.recorded_at),
            customer_code=last.customer_code,
            recorded_at=last.recorded_at,
        )

    following = _at(rows, end + 1)
    # A paired change closes the episode with its own marker
    if following is None or is_change_pair(following, _at(rows, end + 2)):
        return None

    if following.operation_type == OperationType.DUMPING:
        return DumpingTotalRow(
            id=f"summary_dumping_total_{last.id}",
            total_flow=total_flow(run),
            duration=format_clock_time(last.recorded_at, display_tz),
            customer_code=last.customer_code,
            recorded_at=last.recorded_at,
            storage_number=first.storage_number,
        )

    if following.storage_number != first.storage_number:
        return ChangeSummaryRow(
            id=f"summary_change_{last.id}",
            total_flow=total_flow(run),
            duration=format_duration(first.recorded_at, last.recorded_at),
            customer_code=last.customer_code,
            recorded_at=last.recorded_at,
        )
    return None


def _emit_manual_run(
    rows: Sequence[SegmentInput],
    index: int,
    output: list[ProcessedRow],
    display_tz: tzinfo,
) -> int:
    end = _run_end(rows, index, RUN_TYPES)
    run = rows[index : end + 1]
    output.extend(_to_data_row(r) for r in run)

    summary = _closing_summary(rows, run, end, display_tz)
    if summary is not None:
        output.append(summary)
    return end + 1


def _emit_dumping_run(rows: Sequence[SegmentInput], index: int, output: list[ProcessedRow]) -> int:
    end = _run_end(rows, index, frozenset({OperationType.DUMPING}))
    run = rows[index : end + 1]
    output.extend(_to_data_row(r, dumping=True) for r in run)

    if not _already_summarised(rows, end + 1):
        output.append(
            DumpingSummaryRow(
                id=f"summary_dumping_{run[0].id}",
                total_flow=Decimal("0"),
                duration=format_duration(run[0].recorded_at, run[-1].recorded_at),
                customer_code=run[-1].customer_code,
                recorded_at=run[-1].recorded_at,
            )
        )
    return end + 1


def segment_readings(
    rows: Sequence[SegmentInput],
    display_tz: tzinfo = UTC,
) -> list[ProcessedRow]:
    """
    Group an annotated, time-ordered stream into episodes.

    Args:
        rows: Annotated readings of one customer, ascending by (recorded_at, id).
            Summary rows from an earlier pass are accepted and passed through.
        display_tz: Timezone for local clock times (dumping total rows).

    Returns:
        Data rows interleaved with change, stop and dumping summary rows.

    """
    output: list[ProcessedRow] = []
    i = 0

    while i < len(rows):
        current = rows[i]

        if not is_reading(current):
            output.append(current)
            i += 1
            continue

        if is_change_pair(current, _at(rows, i + 1)):
            i = _emit_change_pair(rows, i, output)
            continue

        if current.remarks == ReadingRemark.DUMPING_DESTINATION_BEFORE.value:
            if _matches_dumping_transaction(rows, i):
                i = _emit_dumping_transaction(rows, i, output)
                continue
            logger.debug(
                "Incomplete dumping transaction at reading %s, treating it as a regular reading",
                current.id,
            )

        if current.operation_type in RUN_TYPES:
            i = _emit_manual_run(rows, i, output, display_tz)
        elif current.operation_type == OperationType.DUMPING:
            i = _emit_dumping_run(rows, i, output)
        else:
            output.append(_to_data_row(current))
            i += 1

    return output
