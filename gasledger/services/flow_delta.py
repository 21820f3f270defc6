"""Flow-meter deltas between consecutive turbine counter readings."""

from collections.abc import Sequence
from decimal import Decimal

from gasledger.models.enums import OperationType
from gasledger.schemas.processed import AnnotatedReading
from gasledger.schemas.reading import RawReading


def compute_flow_delta(previous: RawReading | None, current: RawReading) -> Decimal | None:
    """
    Compute the flow consumed since the previous reading.

    The turbine is a cumulative counter, so the delta is only meaningful while
    the same physical counter sequence continues: same storage, same operation
    type, except that a stop may close a manual session on the same counter.

    Returns None (not computable) when there is no valid predecessor or the
    difference is not a finite, non-negative number; a negative difference
    means a rollover or a data correction, never consumption.
    """
    if previous is None:
        return None

    if current.storage_number != previous.storage_number:
        return None

    if current.operation_type != previous.operation_type and not (
        previous.operation_type == OperationType.MANUAL
        and current.operation_type == OperationType.STOP
    ):
        return None

    if not (previous.flow_turbine.is_finite() and current.flow_turbine.is_finite()):
        return None

    diff = current.flow_turbine - previous.flow_turbine
    if diff < 0:
        return None
    return diff


def annotate_flow(readings: Sequence[RawReading]) -> list[AnnotatedReading]:
    """Attach ``flow_meter`` to each reading, strictly left to right."""
    annotated: list[AnnotatedReading] = []
    previous: RawReading | None = None

    for reading in readings:
        flow_meter = compute_flow_delta(previous, reading)
        annotated.append(
            AnnotatedReading(**{**reading.model_dump(), "flow_meter": flow_meter})
        )
        previous = reading

    return annotated
