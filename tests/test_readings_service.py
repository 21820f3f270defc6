"""Tests for the reading application service."""

from decimal import Decimal

import pytest
from fastapi import HTTPException

from gasledger.models.enums import OperationType
from gasledger.schemas.processed import DataRow, StopSummaryRow
from gasledger.services import readings as reading_service

from conftest import at


class StubStore:
    """Returns a fixed list and records the customer it was asked for."""

    def __init__(self, readings):
        self.readings = readings
        self.customer_code = "unset"

    def list_readings(self, customer_code=None):
        self.customer_code = customer_code
        return self.readings


def test_malformed_stream_is_conflict(make_reading, admin) -> None:
    store = StubStore([make_reading(30, reading_id=1), make_reading(0, reading_id=2)])

    with pytest.raises(HTTPException) as exc_info:
        reading_service.list_processed(store, admin, now=at(60))

    assert exc_info.value.status_code == 409
    assert "CUST-1" in exc_info.value.detail


def test_all_means_no_customer_filter(make_reading, admin) -> None:
    store = StubStore([make_reading(0)])

    rows = reading_service.list_processed(
        store, admin, customer="all", operator="all", search_term="", now=at(10)
    )

    assert store.customer_code is None
    assert len(rows) == 1


def test_desc_reverses_rows(make_reading, admin) -> None:
    store = StubStore([make_reading(0, turbine="100"), make_reading(30, turbine="130")])

    asc = reading_service.list_processed(store, admin, now=at(60))
    desc = reading_service.list_processed(store, admin, sort_order="desc", now=at(60))

    assert [row.id for row in desc] == [row.id for row in reversed(asc)]


class TestFilteringAfterProcessing:
    """Operator and search filters never change the computed values."""

    def test_operator_filter_keeps_full_stream_deltas(self, make_reading, admin) -> None:
        store = StubStore(
            [
                make_reading(0, turbine="100", operator="op-1"),
                make_reading(30, turbine="150", operator="op-2"),
                make_reading(60, turbine="170", operator="op-1"),
            ]
        )

        rows = reading_service.list_processed(store, admin, operator="op-1", now=at(90))

        assert [row.operator_id for row in rows] == ["op-1", "op-1"]
        assert [row.flow_meter for row in rows] == [None, Decimal("20")]

    def test_search_keeps_episode_summary(self, make_reading, admin) -> None:
        store = StubStore(
            [
                make_reading(0, turbine="100"),
                make_reading(30, turbine="150", remarks="Valve check"),
                make_reading(60, operation=OperationType.STOP, turbine="170"),
            ]
        )

        rows = reading_service.list_processed(store, admin, search_term="VALVE", now=at(90))

        assert [type(row) for row in rows] == [DataRow, StopSummaryRow]
        assert rows[0].remarks == "Valve check"
        assert rows[1].total_flow == Decimal("70")
        assert rows[1].duration == "01:00"

    def test_no_match_drops_summaries(self, make_reading, admin) -> None:
        store = StubStore(
            [
                make_reading(0, turbine="100"),
                make_reading(60, operation=OperationType.STOP, turbine="170"),
            ]
        )

        assert reading_service.list_processed(store, admin, operator="op-9", now=at(90)) == []
