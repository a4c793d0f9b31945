from zoneinfo import ZoneInfo
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.adapter.services.notification_service import create_notification_service
from parking_billing.adapter.services.payment_gateway import create_payment_gateway
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.services.payment_gateway import PaymentGateway
from parking_billing.domain.credit_notification import NotificationChannel

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

LOCAL_TZ = ZoneInfo(ApplicationConfig.TIMEZONE)

DEFAULT_CHANNELS = [NotificationChannel(c) for c in ApplicationConfig.DEFAULT_NOTIFICATION_CHANNELS]


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)


def get_payment_gateway() -> PaymentGateway:
    return create_payment_gateway(ApplicationConfig)
