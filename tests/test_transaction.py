from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from ledgerapi.core.exceptions import InternalServerError, NotFoundError
from ledgerapi.database.transaction import run_transaction


@pytest.fixture
def mock_db():
    db = Mock()
    db.in_transaction.return_value = False
    return db


def _integrity_error():
    return IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))


class TestRunTransaction:
    """run_transaction 재시도 동작 테스트"""

    def test_commits_and_returns_result(self, mock_db):
        result = run_transaction(mock_db, lambda db: 42)

        assert result == 42
        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_retries_on_conflict(self, mock_db):
        # Given: 첫 커밋이 유니크 제약 충돌로 실패
        mock_db.commit.side_effect = [_integrity_error(), None]
        work = Mock(side_effect=["first", "second"])

        # When
        result = run_transaction(mock_db, work, max_attempts=3)

        # Then: 롤백 후 work 를 처음부터 다시 실행
        assert result == "second"
        assert work.call_count == 2
        mock_db.rollback.assert_called_once()

    def test_gives_up_after_max_attempts(self, mock_db):
        mock_db.commit.side_effect = _integrity_error()
        work = Mock(return_value=None)

        with pytest.raises(InternalServerError):
            run_transaction(mock_db, work, max_attempts=3)

        assert work.call_count == 3
        assert mock_db.rollback.call_count == 3

    def test_business_error_propagates_without_retry(self, mock_db):
        work = Mock(side_effect=NotFoundError("User not found"))

        with pytest.raises(NotFoundError):
            run_transaction(mock_db, work, max_attempts=3)

        assert work.call_count == 1
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    def test_storage_failure_becomes_internal(self, mock_db):
        mock_db.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O"))

        with pytest.raises(InternalServerError):
            run_transaction(mock_db, lambda db: None, max_attempts=3)

        mock_db.commit.assert_called_once()

    def test_discards_open_transaction_before_start(self, mock_db):
        mock_db.in_transaction.return_value = True

        run_transaction(mock_db, lambda db: None)

        mock_db.rollback.assert_called_once()
