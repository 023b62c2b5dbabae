import re

import pytest

from ledgerapi.core.security import RECOVERY_CODE_ALPHABET, IdentityResolver


class TestFingerprint:
    """기기 지문 테스트"""

    def test_same_device_same_fingerprint(self, identity):
        assert identity.fingerprint("device-abc-123") == identity.fingerprint(
            "device-abc-123"
        )

    def test_different_devices_differ(self, identity):
        assert identity.fingerprint("device-abc-123") != identity.fingerprint(
            "device-abc-124"
        )

    def test_depends_on_secret(self):
        a = IdentityResolver("secret-a").fingerprint("device-abc-123")
        b = IdentityResolver("secret-b").fingerprint("device-abc-123")
        assert a != b

    def test_is_hex_sha256_and_hides_raw_id(self, identity):
        fp = identity.fingerprint("device-abc-123")
        assert re.fullmatch(r"[0-9a-f]{64}", fp)
        assert "device-abc-123" not in fp

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            IdentityResolver("")


class TestRecoveryCode:
    """복구 코드 생성/정규화 테스트"""

    def test_format(self, identity):
        code = identity.new_recovery_code()

        assert re.fullmatch(r"[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}", code)
        assert all(ch in RECOVERY_CODE_ALPHABET for ch in code.replace("-", ""))

    def test_alphabet_excludes_ambiguous_symbols(self):
        for ch in "IO01":
            assert ch not in RECOVERY_CODE_ALPHABET
        assert len(RECOVERY_CODE_ALPHABET) == 32

    def test_normalize_user_input(self, identity):
        assert identity.normalize_recovery_code(" abcd efgh-jkmn ") == "ABCD-EFGH-JKMN"
        assert identity.normalize_recovery_code("ABCDEFGHJKMN") == "ABCD-EFGH-JKMN"

    def test_new_identity_is_random_hex(self):
        a = IdentityResolver.new_identity()
        b = IdentityResolver.new_identity()
        assert re.fullmatch(r"[0-9a-f]{32}", a)
        assert a != b
