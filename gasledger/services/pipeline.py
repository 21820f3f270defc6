"""Reading stream processor: raw readings in, display rows out.

Pure and synchronous. Each call works on its own snapshot and returns a new
list; nothing is shared between calls.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta, tzinfo
from itertools import pairwise

from gasledger.core.exceptions import MalformedSequenceError
from gasledger.schemas.processed import DataRow, ProcessedRow
from gasledger.schemas.reading import Caller, RawReading
from gasledger.services.edit_window import DEFAULT_EDIT_WINDOW, apply_editability
from gasledger.services.flow_delta import annotate_flow
from gasledger.services.segmenter import is_change_pair, segment_readings

logger = logging.getLogger(__name__)


def validate_sequence(readings: Sequence[RawReading]) -> None:
    """
    Check that one customer's readings are totally ordered by (recorded_at, id).

    The paired storage change is the one case where two readings share
    ``recorded_at`` in either id order.

    Raises:
        MalformedSequenceError: On duplicate ids, mixed customers or
            out-of-order readings

    """
    if not readings:
        return

    customer_code = readings[0].customer_code
    seen_ids: set[int] = set()

    for reading in readings:
        if reading.customer_code != customer_code:
            raise MalformedSequenceError(
                customer_code,
                f"reading {reading.id} belongs to customer {reading.customer_code!r}",
            )
        if reading.id in seen_ids:
            raise MalformedSequenceError(customer_code, f"duplicate reading id {reading.id}")
        seen_ids.add(reading.id)

    for previous, current in pairwise(readings):
        if current.recorded_at < previous.recorded_at:
            raise MalformedSequenceError(
                customer_code,
                f"reading {current.id} is recorded before reading {previous.id}",
            )
        if (
            current.recorded_at == previous.recorded_at
            and current.id < previous.id
            and not is_change_pair(previous, current)
        ):
            raise MalformedSequenceError(
                customer_code,
                f"readings {previous.id} and {current.id} share a timestamp out of id order",
            )


def process_customer_stream(
    readings: Sequence[RawReading],
    caller: Caller,
    now: datetime,
    display_tz: tzinfo = UTC,
    edit_window: timedelta = DEFAULT_EDIT_WINDOW,
) -> list[ProcessedRow]:
    """Validate, annotate, segment and flag editability for one customer's stream."""
    validate_sequence(readings)
    annotated = annotate_flow(readings)
    segmented = segment_readings(annotated, display_tz)
    return apply_editability(segmented, caller, now, edit_window)


def build_display_rows(
    readings: Sequence[RawReading],
    caller: Caller,
    now: datetime,
    display_tz: tzinfo = UTC,
    edit_window: timedelta = DEFAULT_EDIT_WINDOW,
) -> list[ProcessedRow]:
    """
    Process a list that may span several customers.

    Readings are grouped by customer code in order of first appearance and
    each group is processed on its own. A malformed group aborts the whole
    call; no partial list is returned.
    """
    by_customer: dict[str, list[RawReading]] = {}
    for reading in readings:
        by_customer.setdefault(reading.customer_code, []).append(reading)

    rows: list[ProcessedRow] = []
    for customer_code, customer_readings in by_customer.items():
        processed = process_customer_stream(
            customer_readings, caller, now, display_tz, edit_window
        )
        logger.debug(
            "Processed %d readings into %d rows for customer %s",
            len(customer_readings),
            len(processed),
            customer_code,
        )
        rows.extend(processed)

    return rows


def filter_display_rows(
    rows: Sequence[ProcessedRow],
    keep: Callable[[DataRow], bool],
) -> list[ProcessedRow]:
    """
    Narrow processed rows to the data rows accepted by ``keep``.

    Filtering happens after processing, so flow deltas and summaries are
    always computed over each customer's complete stream. A summary row is
    kept when at least one data row of the episode it closes is kept.
    """
    filtered: list[ProcessedRow] = []
    episode_kept = False
    customer_code: str | None = None

    for row in rows:
        if row.customer_code != customer_code:
            customer_code = row.customer_code
            episode_kept = False

        if isinstance(row, DataRow):
            if keep(row):
                filtered.append(row)
                episode_kept = True
            continue

        if episode_kept:
            filtered.append(row)
        episode_kept = False

    return filtered
