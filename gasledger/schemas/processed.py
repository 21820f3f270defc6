"""Rows produced by the reading stream processor.

Raw reading fields keep their stored snake_case names on the wire. Derived
fields use the camelCase names the display clients read (``flowMeter``,
``isEditable``, ``totalFlow``, ``isStopRow`` ...).
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from gasledger.schemas.reading import RawReading, UtcDatetime

# Rendered in place of a flow delta that has no valid predecessor
NOT_COMPUTABLE = "-"


class AnnotatedReading(RawReading):
    """Reading with its flow-meter delta; ``flow_meter`` is None when not computable."""

    flow_meter: Decimal | None = Field(None, alias="flowMeter")

    @field_validator("flow_meter", mode="before")
    @classmethod
    def parse_placeholder(cls, v: object) -> object:
        if v == NOT_COMPUTABLE:
            return None
        return v

    @field_serializer("flow_meter", when_used="json")
    def render_flow_meter(self, v: Decimal | None) -> Decimal | str:
        return NOT_COMPUTABLE if v is None else v

    @property
    def is_flow_computable(self) -> bool:
        return self.flow_meter is not None


class DataRow(AnnotatedReading):
    """A reading as displayed, with edit eligibility and episode membership."""

    is_editable: bool = Field(False, alias="isEditable")
    is_change: bool = Field(False, alias="isChangeTrue")
    is_dumping: bool = Field(False, alias="isDumpingTrue")


class SummaryRow(BaseModel):
    """Synthetic row closing an episode."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    id: str
    total_flow: Decimal = Field(..., alias="totalFlow")
    duration: str
    customer_code: str
    recorded_at: UtcDatetime


class ChangeSummaryRow(SummaryRow):
    """Closes an episode at a storage swap."""

    is_change_row: Literal[True] = Field(True, alias="isChangeRow")


class StopSummaryRow(SummaryRow):
    """Closes an episode terminated by a stop reading."""

    is_stop_row: Literal[True] = Field(True, alias="isStopRow")


class DumpingTotalRow(SummaryRow):
    """Pre-dumping total of the run that precedes a transfer.

    ``duration`` holds the run's end as a local clock time, not an elapsed span.
    """

    is_dumping_total_row: Literal[True] = Field(True, alias="isDumpingTotalRow")
    storage_number: str


class DumpingSummaryRow(SummaryRow):
    """Closes a dumping episode; dumping never accumulates throughput."""

    is_dumping_summary: Literal[True] = Field(True, alias="isDumpingSummary")


ProcessedRow = DataRow | ChangeSummaryRow | StopSummaryRow | DumpingTotalRow | DumpingSummaryRow
