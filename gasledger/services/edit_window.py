"""Edit-window policy for stored readings.

The same rule decides the ``isEditable`` flag shown on a displayed row and
whether a direct update or delete of that reading is allowed.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from fastapi import HTTPException, status

from gasledger.core.clock import as_utc
from gasledger.schemas.processed import DataRow, ProcessedRow
from gasledger.schemas.reading import Caller, RawReading

DEFAULT_EDIT_WINDOW = timedelta(hours=2)


def is_editable(
    reading: RawReading,
    caller: Caller,
    now: datetime,
    window: timedelta = DEFAULT_EDIT_WINDOW,
) -> bool:
    """Admins may always edit; operators only their own readings inside the window."""
    if caller.is_admin:
        return True
    if reading.operator_id != caller.id:
        return False
    return as_utc(now) - as_utc(reading.created_at) <= window


def apply_editability(
    rows: Sequence[ProcessedRow],
    caller: Caller,
    now: datetime,
    window: timedelta = DEFAULT_EDIT_WINDOW,
) -> list[ProcessedRow]:
    """Set ``is_editable`` on every data row for the given caller."""
    return [
        row.model_copy(update={"is_editable": is_editable(row, caller, now, window)})
        if isinstance(row, DataRow)
        else row
        for row in rows
    ]


def ensure_editable(
    reading: RawReading,
    caller: Caller,
    now: datetime,
    window: timedelta = DEFAULT_EDIT_WINDOW,
) -> None:
    """
    Guard a direct update or delete.

    Raises:
        HTTPException: 403 if the caller may not modify the reading

    """
    if not is_editable(reading, caller, now, window):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to modify this reading.",
        )
