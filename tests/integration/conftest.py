import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import parking_billing.domain  # noqa: F401 registers the tables
from parking_billing.adapter.services.notification_service import LoggingNotificationService
from parking_billing.adapter.services.payment_gateway import ZarinpalPaymentGateway
from parking_billing.depends import get_notification_service, get_payment_gateway, get_session


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database, recreated for every test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from parking_billing.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_notification_service] = lambda: LoggingNotificationService()
    app.dependency_overrides[get_payment_gateway] = lambda: ZarinpalPaymentGateway(
        merchant_id="test-merchant",
        callback_url="http://test/callback",
        sandbox=True,
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
