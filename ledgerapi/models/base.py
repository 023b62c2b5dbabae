from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """타임스탬프 필드를 위한 믹스인"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), default=utc_now, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
        )


class VersionedMixin:
    """
    낙관적 동시성 제어용 버전 컬럼

    같은 행을 읽은 두 트랜잭션이 동시에 갱신하면 나중에 flush 하는 쪽이
    StaleDataError 로 실패하고, run_transaction 이 처음부터 재시도한다.
    """

    @declared_attr
    def version(cls):
        return Column(Integer, nullable=False, default=1)

    @declared_attr
    def __mapper_args__(cls):
        return {"version_id_col": cls.version}


class BaseModel(Base, TimestampMixin):
    """모든 모델의 베이스 클래스"""

    __abstract__ = True

    def dict(self):
        """모델을 딕셔너리로 변환"""
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }
