"""
Pytest fixtures for the asset registry test suite.

Provides:
- Structured logging configuration and a JSON log capture fixture
- An in-memory SQLite session with every module table created
- A small catalog (category, supplier, location, model) shared by the
  registry and import tests
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import UUID

import pytest
from sqlalchemy.orm import Session

from asset_kernel.db.engine import (
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from asset_kernel.domain.clock import DeterministicClock
from asset_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from asset_modules._orm_registry import create_all_tables
from asset_modules.assets.memory import InMemoryAssetRepository, InMemoryCatalogStore
from asset_modules.assets.models import (
    AssetCategory,
    Location,
    ProductModel,
    Supplier,
)

# Test actor ID for all test operations
TEST_ACTOR_ID = UUID("00000000-0000-4000-a000-00000000a001")

TEST_CATEGORY_ID = UUID("00000000-0000-4000-a000-000000000020")
TEST_SUPPLIER_ID = UUID("00000000-0000-4000-a000-000000000001")
TEST_LOCATION_ID = UUID("00000000-0000-4000-a000-000000000030")
TEST_MODEL_ID = UUID("00000000-0000-4000-a000-000000000040")

TEST_SUPPLIER_CNPJ = "12.345.678/0001-90"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture asset_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            FreightAllocator().allocate(...)
            logs = captured_logs()
            assert any(r["message"] == "freight_allocated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("asset_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database with all tables."""
    init_engine_from_url("sqlite://")
    create_all_tables()
    db_session = get_session()
    try:
        yield db_session
    finally:
        db_session.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def test_actor_id() -> UUID:
    return TEST_ACTOR_ID


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2024, 6, 30, 12, 0, 0))


# =============================================================================
# Catalog fixtures
# =============================================================================


@pytest.fixture
def category() -> AssetCategory:
    """Five-year straight-line category with a 10% residual value."""
    return AssetCategory(
        id=TEST_CATEGORY_ID,
        name="Computers",
        useful_life_years=5,
        residual_value_percentage=Decimal("10"),
    )


@pytest.fixture
def supplier() -> Supplier:
    return Supplier(
        id=TEST_SUPPLIER_ID,
        name="Tech Distribuidora",
        legal_name="Tech Distribuidora Ltda",
        cnpj=TEST_SUPPLIER_CNPJ,
    )


@pytest.fixture
def location() -> Location:
    return Location(id=TEST_LOCATION_ID, name="Head office")


@pytest.fixture
def product_model() -> ProductModel:
    return ProductModel(id=TEST_MODEL_ID, name="Latitude 5440", brand="Dell")


@pytest.fixture
def repository() -> InMemoryAssetRepository:
    return InMemoryAssetRepository()


@pytest.fixture
def catalog(category, supplier, location, product_model, repository) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(
        categories=[category],
        suppliers=[supplier],
        locations=[location],
        models=[product_model],
        assets=repository,
    )


@pytest.fixture
def nfe_payload() -> dict:
    """Extraction output for a two-line invoice with 50.00 freight."""
    return {
        "supplierCNPJ": TEST_SUPPLIER_CNPJ,
        "supplierName": "Tech Distribuidora Ltda",
        "invoiceNumber": "000123",
        "emissionDate": "2024-03-10T14:30:00-03:00",
        "nfeTotalValue": 1050,
        "shippingValue": 50,
        "products": [
            {"description": "Notebook", "quantity": 3, "unitValue": 100, "totalValue": 300},
            {"description": "Monitor", "quantity": 7, "unitValue": 100, "totalValue": 700},
        ],
    }
