"""
Tests for the mocked OTP service.
"""

import pytest

from registration.otp import MockOtpService, OtpError


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


PHONE = "01012345678"


class TestVerify:

    def test_mocked_accepts_any_code(self):
        service = MockOtpService(mocked=True)
        service.send_code(PHONE)
        assert service.verify(PHONE, "999999") is True

    def test_strict_mode_checks_code(self):
        service = MockOtpService(mocked=False, code_length=6)
        service.send_code(PHONE)

        with pytest.raises(OtpError, match="Invalid verification code"):
            service.verify(PHONE, "000000")
        assert service.verify(PHONE, "123456") is True

    def test_code_is_single_use(self):
        service = MockOtpService(mocked=False, code_length=6)
        service.send_code(PHONE)
        service.verify(PHONE, "123456")

        with pytest.raises(OtpError):
            service.verify(PHONE, "123456")

    def test_code_length(self):
        assert MockOtpService(code_length=4)._mock_code() == "1234"


class TestResend:

    def test_cooldown(self):
        clock = FakeClock()
        service = MockOtpService(cooldown_seconds=60, clock=clock)
        service.send_code(PHONE)

        clock.now += 15
        assert service.seconds_until_resend(PHONE) == 45
        with pytest.raises(OtpError, match="Resend OTP in 45s"):
            service.resend(PHONE)

    def test_resend_after_cooldown(self):
        clock = FakeClock()
        service = MockOtpService(cooldown_seconds=60, clock=clock)
        service.send_code(PHONE)

        clock.now += 60
        service.resend(PHONE)
        assert service.seconds_until_resend(PHONE) == 60

    def test_unknown_phone_can_send_immediately(self):
        assert MockOtpService().seconds_until_resend(PHONE) == 0
