"""
Test configuration and shared fixtures for the transaction ledger test suite.
"""
import pytest
import pytest_asyncio
import os
from datetime import timezone
from typing import AsyncGenerator, Dict, Any
import httpx
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from faker import Faker

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
if os.path.exists(".env.test"):
    from dotenv import load_dotenv
    load_dotenv(".env.test")

# Override database URL for tests to ensure SQLite
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("PORT", "8000")

from app.main import create_application
from app.core.database import Base, get_db
from app.db.models import TransactionRecord


# Configure Faker for consistent test data
fake = Faker()
fake.seed_instance(42)  # For reproducible test data


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine with a fresh in-memory schema."""
    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncSession:
    """Create a fresh database session for each test."""
    async_session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with dependency overrides."""
    app = create_application()

    # Override database dependency
    app.dependency_overrides[get_db] = lambda: db_session

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def drop_schema(test_engine):
    """Drop the transactions table to simulate storage failures."""
    async def _drop():
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    return _drop


@pytest.fixture
def transaction_count(db_session: AsyncSession):
    """Count stored transaction rows through the test session."""
    async def _count() -> int:
        result = await db_session.execute(select(func.count()).select_from(TransactionRecord))
        return result.scalar_one()

    return _count


# ============================================================================
# Data Generator Fixtures
# ============================================================================

@pytest.fixture
def transaction_payload_generator():
    """Generate synthetic transaction payloads in wire (camelCase) form."""
    def generate_transaction(**overrides) -> Dict[str, Any]:
        date_time = fake.date_time_between(start_date="-2y", end_date="now", tzinfo=timezone.utc)

        defaults = {
            "dateTime": date_time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "centsAmount": fake.random_int(min=1, max=1_000_000),
            "currencyCode": fake.currency_code(),
            "reference": fake.bothify("REF-####-????"),
            "merchantName": fake.company(),
            "merchantCity": fake.city(),
            "merchantCountryCode": fake.country_code(),
            "merchantCountryName": fake.country(),
            "merchantCategoryCode": fake.numerify("####"),
            "merchantCategoryName": fake.random_element(["Restaurants", "Groceries", "Travel", "Fuel"]),
        }
        defaults.update(overrides)
        return defaults

    return generate_transaction


@pytest.fixture
def coffee_shop_payload() -> Dict[str, Any]:
    """The canonical single-purchase payload."""
    return {
        "dateTime": "2023-01-01T00:00:00Z",
        "centsAmount": 1999,
        "currencyCode": "USD",
        "reference": "abc123",
        "merchantName": "Coffee Shop",
        "merchantCity": "Seattle",
        "merchantCountryCode": "US",
        "merchantCountryName": "United States",
        "merchantCategoryCode": "5812",
        "merchantCategoryName": "Restaurants",
    }
