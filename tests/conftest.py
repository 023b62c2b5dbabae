from datetime import datetime, timedelta

import pytest

from ledgerapi.config import Settings
from ledgerapi.core.security import IdentityResolver
from ledgerapi.database.connection import build_engine, build_session_factory
from ledgerapi.models import Base
from ledgerapi.utils.timezone_utils import KST


class FixedClock:
    """테스트용 시계 - 호출할 때마다 같은 KST 시각을 반환"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path}/test.db",
        DEVICE_HASH_SECRET="test-secret",
        TRANSACTION_MAX_ATTEMPTS=5,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def identity():
    return IdentityResolver("test-secret")


@pytest.fixture
def clock():
    # 2024-01-16 (화) 10:00 KST
    return FixedClock(datetime(2024, 1, 16, 10, 0, tzinfo=KST))
