"""
Test Configuration and Fixtures

Provides sample cost data, report snapshots, an isolated report store
and the async API test client.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from backend.db.session import create_db_engine, create_session_factory, init_db
from backend.main import app
from engines.schemas.report import ReportData
from reports.store import ReportStore, get_report_store
from tests.factories import make_report_dict


@pytest.fixture
def variable_cost_dicts() -> list[dict]:
    """Variable costs of the reference scenario: 3.20 per customer."""
    return [
        {
            "id": "api-1",
            "name": "AI API Calls",
            "unit": "1K tokens",
            "costPerUnit": 0.03,
            "usagePerCustomer": 100,
            "description": "LLM API usage",
        },
        {
            "id": "storage-1",
            "name": "Cloud Storage",
            "unit": "GB",
            "costPerUnit": 0.10,
            "usagePerCustomer": 2,
            "description": "File storage",
        },
    ]


@pytest.fixture
def fixed_cost_dicts() -> list[dict]:
    """Fixed costs of the reference scenario: 75 per month."""
    return [
        {"id": "hosting-1", "name": "Hosting", "monthlyCost": 50, "description": "Server hosting"},
        {"id": "db-1", "name": "Database", "monthlyCost": 25, "description": "Managed database"},
    ]


@pytest.fixture
def report_dict() -> dict:
    return make_report_dict()


@pytest.fixture
def report(report_dict: dict) -> ReportData:
    return ReportData.model_validate(report_dict)


@pytest.fixture
def report_store(tmp_path) -> ReportStore:
    """Report store on a throwaway SQLite file."""
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'reports.db'}")
    init_db(db_engine)
    yield ReportStore(create_session_factory(db_engine), ttl_days=30)
    db_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(report_store: ReportStore) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async test client with the report store overridden."""
    app.dependency_overrides[get_report_store] = lambda: report_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
