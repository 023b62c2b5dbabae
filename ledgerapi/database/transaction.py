"""
낙관적 트랜잭션 실행기

모든 변경 연산은 run_transaction 하나를 통해 실행됩니다.

work(db) 는 (읽기 → 메모리 계산 → 쓰기) 만 수행하는 함수여야 하며, 커밋 시점에
다른 트랜잭션과 충돌하면(유니크 제약 위반, 버전 불일치) 전체를 롤백하고
work 를 처음부터 다시 실행합니다. 재시도 시 이전 시도에서 읽은 값은 모두 버려지므로
충돌한 상대의 커밋 결과를 다시 관찰하게 됩니다.
"""

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ledgerapi.core.exceptions import BaseAPIException, InternalServerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5

# 재시도로 해소될 수 있는 커밋 충돌
CONFLICT_ERRORS = (IntegrityError, StaleDataError)


def run_transaction(
    db: Session,
    work: Callable[[Session], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    name: str = "transaction",
) -> T:
    """
    work 를 하나의 원자적 트랜잭션으로 실행하고, 충돌 시 재시도

    Args:
        db: 요청 범위 세션
        work: 세션을 받아 결과를 반환하는 함수 (모든 읽기를 내부에서 수행)
        max_attempts: 최대 시도 횟수
        name: 로그용 연산 이름

    Returns:
        work 의 반환값 (커밋 성공 후)

    Raises:
        BaseAPIException: work 가 발생시킨 비즈니스 오류 (롤백 후 그대로 전파)
        InternalServerError: 재시도 소진 또는 예상치 못한 저장소 오류
    """
    if db.in_transaction():
        # 이전 요청 단계에서 남은 미완료 상태를 정리하고 깨끗한 스냅샷에서 시작
        db.rollback()

    for attempt in range(1, max_attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except BaseAPIException:
            db.rollback()
            raise
        except CONFLICT_ERRORS as e:
            db.rollback()
            if attempt == max_attempts:
                logger.error(
                    f"[{name}] conflict not resolved after {max_attempts} attempts: {type(e).__name__}"
                )
                raise InternalServerError(f"Failed to complete {name}")
            logger.warning(
                f"[{name}] commit conflict on attempt {attempt} ({type(e).__name__}), retrying..."
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"[{name}] storage failure: {type(e).__name__}: {str(e)}")
            raise InternalServerError(f"Failed to complete {name}")

    # max_attempts < 1
    raise InternalServerError(f"Failed to complete {name}")
