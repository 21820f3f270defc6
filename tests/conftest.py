"""Shared fixtures for reading stream tests."""

import itertools
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gasledger.core.database import Base, get_db
from gasledger.main import app
from gasledger.models import customer, reading, storage  # noqa: F401
from gasledger.models.enums import OperationType, Role
from gasledger.schemas.reading import Caller, RawReading

BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


def at(minutes: int) -> datetime:
    """Timestamp ``minutes`` after the base time."""
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture
def make_reading():
    """Factory for raw readings with sequential ids."""
    ids = itertools.count(1)

    def _make(
        minutes: int = 0,
        *,
        storage: str = "STG-1",
        operation: OperationType = OperationType.MANUAL,
        turbine: str | Decimal = "0",
        remarks: str | None = None,
        customer: str = "CUST-1",
        operator: str = "op-1",
        reading_id: int | None = None,
        created_at: datetime | None = None,
    ) -> RawReading:
        return RawReading(
            id=reading_id if reading_id is not None else next(ids),
            recorded_at=at(minutes),
            created_at=created_at or at(minutes),
            customer_code=customer,
            storage_number=storage,
            operator_id=operator,
            operation_type=operation,
            psi=Decimal("1500"),
            temp=Decimal("25"),
            psi_out=Decimal("1450"),
            flow_turbine=Decimal(turbine),
            remarks=remarks,
        )

    return _make


@pytest.fixture
def admin() -> Caller:
    return Caller(id="admin-1", role=Role.ADMIN)


@pytest.fixture
def operator() -> Caller:
    return Caller(id="op-1", role=Role.OPERATOR)


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


OPERATOR = {"X-User-Id": "op-1", "X-User-Role": "operator"}
OTHER_OPERATOR = {"X-User-Id": "op-2", "X-User-Role": "operator"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def post_reading(
    client: TestClient,
    recorded_at: str,
    flow_turbine: str,
    storage_number: str = "STG-1",
    customer_code: str = "CUST-1",
    headers: dict[str, str] = OPERATOR,
) -> dict:
    """Record a manual reading through the API and return the response body."""
    response = client.post(
        "/api/readings/",
        json={
            "customer_code": customer_code,
            "storage_number": storage_number,
            "psi": "1500",
            "temp": "25.5",
            "psi_out": "1450",
            "flow_turbine": flow_turbine,
            "recorded_at": recorded_at,
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()
