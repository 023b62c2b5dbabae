from contextlib import contextmanager
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from ledgerapi.core.exceptions import (
    AlreadyExistsError,
    InsufficientBalanceError,
    InvalidArgumentError,
    ResourceExhaustedError,
)
from ledgerapi.deps import (
    get_attendance_service,
    get_discussion_service,
    get_favorites_service,
    get_ledger_service,
    get_recovery_service,
    get_registration_service,
)
from ledgerapi.main import create_app
from ledgerapi.schemas.account import RegisterDeviceResponse
from ledgerapi.schemas.attendance import ClaimDailyRewardResponse
from ledgerapi.schemas.favorites import ToggleFavoriteResponse
from ledgerapi.schemas.ledger import UpdateTokensResponse
from ledgerapi.schemas.recovery import TransferAccountResponse, TransferredData


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


class TestRegisterDeviceRouter:
    """POST /api/v1/registerDevice"""

    def test_success_camel_case(self, app, client):
        service = Mock()
        service.register_device.return_value = RegisterDeviceResponse(
            uid="a" * 32, is_new_user=True, nickname="익명00001", token_count=100
        )
        app.dependency_overrides[get_registration_service] = lambda: service

        res = client.post(
            "/api/v1/registerDevice",
            json={"deviceId": "device-0001-abcdef", "platform": "ios", "appVersion": "1.0.0"},
        )

        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["isNewUser"] is True
        assert body["tokenCount"] == 100
        service.register_device.assert_called_once_with(
            device_id="device-0001-abcdef", platform="ios", app_version="1.0.0"
        )

    def test_missing_device_id_is_invalid_argument(self, app, client):
        app.dependency_overrides[get_registration_service] = lambda: Mock()

        res = client.post("/api/v1/registerDevice", json={})

        assert res.status_code == 400
        body = res.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INVALID_ARGUMENT"

    def test_short_device_id(self, app, client):
        service = Mock()
        service.register_device.side_effect = InvalidArgumentError("Invalid device ID")
        app.dependency_overrides[get_registration_service] = lambda: service

        res = client.post("/api/v1/registerDevice", json={"deviceId": "short"})

        assert res.status_code == 400
        assert res.json()["error"]["message"] == "Invalid device ID"

    def test_quota_exceeded_carries_retry_after(self, app, client):
        service = Mock()
        service.register_device.side_effect = ResourceExhaustedError(
            "Account creation limit reached for this device",
            details={"recentCreations": 3, "limit": 3, "retryAfter": "2025-01-16T01:00:00+00:00"},
        )
        app.dependency_overrides[get_registration_service] = lambda: service

        res = client.post("/api/v1/registerDevice", json={"deviceId": "device-0001-abcdef"})

        assert res.status_code == 429
        error = res.json()["error"]
        assert error["code"] == "RESOURCE_EXHAUSTED"
        assert error["details"]["retryAfter"] == "2025-01-16T01:00:00+00:00"


class TestTokenRouter:
    """POST /api/v1/updateTokens"""

    def test_success(self, app, client):
        service = Mock()
        service.update_tokens.return_value = UpdateTokensResponse(token_count=70)
        app.dependency_overrides[get_ledger_service] = lambda: service

        res = client.post(
            "/api/v1/updateTokens",
            json={"uid": "u1", "amount": -30, "type": "purchase", "description": "구매"},
        )

        assert res.status_code == 200
        assert res.json() == {"success": True, "tokenCount": 70}
        service.update_tokens.assert_called_once_with(
            uid="u1", amount=-30, kind="purchase", description="구매"
        )

    def test_insufficient_balance(self, app, client):
        service = Mock()
        service.update_tokens.side_effect = InsufficientBalanceError()
        app.dependency_overrides[get_ledger_service] = lambda: service

        res = client.post(
            "/api/v1/updateTokens", json={"uid": "u1", "amount": -150, "type": "purchase"}
        )

        assert res.status_code == 412
        assert res.json()["error"]["code"] == "FAILED_PRECONDITION"


class TestAttendanceRouter:
    """POST /api/v1/claimDailyReward"""

    def test_success(self, app, client):
        service = Mock()
        service.claim_daily_reward.return_value = ClaimDailyRewardResponse(
            reward_tokens=30, new_balance=130, consecutive_days=1, total_days=1, is_weekend=True
        )
        app.dependency_overrides[get_attendance_service] = lambda: service

        res = client.post("/api/v1/claimDailyReward", json={"uid": "u1"})

        assert res.status_code == 200
        body = res.json()
        assert body["rewardTokens"] == 30
        assert body["isWeekend"] is True

    def test_already_claimed(self, app, client):
        service = Mock()
        service.claim_daily_reward.side_effect = AlreadyExistsError("Already claimed today")
        app.dependency_overrides[get_attendance_service] = lambda: service

        res = client.post("/api/v1/claimDailyReward", json={"uid": "u1"})

        assert res.status_code == 409
        assert res.json()["error"]["code"] == "ALREADY_EXISTS"


class TestRecoveryRouter:
    """POST /api/v1/transferAccountData"""

    def test_success(self, app, client):
        service = Mock()
        service.transfer_account.return_value = TransferAccountResponse(
            new_uid="new",
            previous_uid="old",
            nickname="익명00001",
            token_count=90,
            transferred_data=TransferredData(
                token_history=4, attendance_records=2, attendance_summary=True, copy_completed=True
            ),
        )
        app.dependency_overrides[get_recovery_service] = lambda: service

        res = client.post(
            "/api/v1/transferAccountData",
            json={"recoveryCode": "ABCD-EFGH-JKMN", "newDeviceId": "device-new-000002"},
        )

        assert res.status_code == 200
        body = res.json()
        assert body["newUid"] == "new"
        assert body["transferredData"]["tokenHistory"] == 4
        assert body["transferredData"]["copyCompleted"] is True


class TestFavoritesRouter:
    """POST /api/v1/toggleFavorite"""

    def test_success(self, app, client):
        service = Mock()
        service.toggle_favorite.return_value = ToggleFavoriteResponse(
            action="added", favorite_count=1
        )
        app.dependency_overrides[get_favorites_service] = lambda: service

        res = client.post(
            "/api/v1/toggleFavorite",
            json={"uid": "u1", "newsId": "news-1", "newsData": {"title": "기사"}},
        )

        assert res.status_code == 200
        assert res.json()["favoriteCount"] == 1
        service.toggle_favorite.assert_called_once_with(
            uid="u1", news_id="news-1", news_data={"title": "기사"}
        )


class TestBatchRouter:
    """POST /api/v1/batch/popular-discussions/refresh"""

    def test_refresh(self, app, client):
        service = Mock()
        service.refresh_popular_discussions.return_value = 5
        app.dependency_overrides[get_discussion_service] = lambda: service

        res = client.post("/api/v1/batch/popular-discussions/refresh")

        assert res.status_code == 200
        assert res.json() == {"success": True, "refreshed": True, "itemCount": 5}

    def test_refresh_failure_still_200(self, app, client):
        service = Mock()
        service.refresh_popular_discussions.return_value = None
        app.dependency_overrides[get_discussion_service] = lambda: service

        res = client.post("/api/v1/batch/popular-discussions/refresh")

        assert res.status_code == 200
        assert res.json()["refreshed"] is False


class TestUnexpectedError:
    """처리되지 않은 예외는 INTERNAL 로 변환"""

    def test_internal_error_hides_detail(self, app):
        service = Mock()
        service.update_tokens.side_effect = RuntimeError("secret stack detail")
        app.dependency_overrides[get_ledger_service] = lambda: service
        client = TestClient(app, raise_server_exceptions=False)

        res = client.post(
            "/api/v1/updateTokens", json={"uid": "u1", "amount": 1, "type": "bonus"}
        )

        assert res.status_code == 500
        body = res.json()
        assert body["error"]["code"] == "INTERNAL"
        assert "secret" not in body["error"]["message"]


class TestHealthRouter:
    """GET /health"""

    def test_healthy(self, client):
        @contextmanager
        def fake_db_context():
            yield Mock()

        with patch("ledgerapi.routers.health_router.get_db_context", fake_db_context):
            res = client.get("/health")

        assert res.status_code == 200
        assert res.json()["status"] == "healthy"

    def test_degraded_when_database_unreachable(self, client):
        @contextmanager
        def broken_db_context():
            raise ConnectionError("db down")
            yield

        with patch("ledgerapi.routers.health_router.get_db_context", broken_db_context):
            res = client.get("/health")

        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "degraded"
        assert body["database_ok"] is False
        assert body["error"] == "database unavailable"
        assert "db down" not in res.text
