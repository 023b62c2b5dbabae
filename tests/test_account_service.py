import pytest

from ledgerapi.core.exceptions import InvalidArgumentError, NotFoundError
from ledgerapi.models.account import Account, AccountStatus
from ledgerapi.services.account_service import AccountService, VerifyFailureReason
from ledgerapi.services.registration_service import RegistrationService

DEVICE_ID = "device-acct-000001"


@pytest.fixture
def service(db, settings, identity, clock):
    return AccountService(db, settings, identity=identity, clock=clock)


@pytest.fixture
def uid(db, settings, identity, clock):
    return (
        RegistrationService(db, settings, identity=identity, clock=clock)
        .register_device(DEVICE_ID)
        .uid
    )


def _retire(db, uid):
    account = db.get(Account, uid)
    account.status = AccountStatus.TRANSFERRED.value
    db.commit()


class TestVerifyUID:
    """verifyUID 테스트"""

    def test_valid(self, service, uid):
        result = service.verify_uid(uid, DEVICE_ID)

        assert result.valid is True
        assert result.token_count == 100

    def test_unknown_uid(self, service):
        result = service.verify_uid("no-such-account", DEVICE_ID)

        assert result.valid is False
        assert result.reason == VerifyFailureReason.USER_NOT_FOUND

    def test_device_mismatch(self, service, uid):
        result = service.verify_uid(uid, "device-other-0002")

        assert result.valid is False
        assert result.reason == VerifyFailureReason.DEVICE_MISMATCH

    def test_transferred_account_inactive(self, service, db, uid):
        _retire(db, uid)

        result = service.verify_uid(uid, DEVICE_ID)

        assert result.valid is False
        assert result.reason == VerifyFailureReason.ACCOUNT_INACTIVE


class TestUpdateNickname:
    """닉네임 변경 테스트"""

    def test_trimmed(self, service, db, uid):
        result = service.update_nickname(uid, "  새이름  ")

        assert result.nickname == "새이름"
        assert db.get(Account, uid).nickname == "새이름"

    @pytest.mark.parametrize("nickname", ["a", " b ", "x" * 21])
    def test_length_rejected(self, service, uid, nickname):
        with pytest.raises(InvalidArgumentError):
            service.update_nickname(uid, nickname)

    def test_transferred_account_rejected(self, service, db, uid):
        original = db.get(Account, uid).nickname
        _retire(db, uid)

        with pytest.raises(NotFoundError):
            service.update_nickname(uid, "새이름")

        db.expire_all()
        assert db.get(Account, uid).nickname == original
