"""
OTP Verification (mocked).

Real SMS delivery is out of scope. The mock issues a predictable code and,
while `otp_mocked` is on, accepts any well-formed code. Resends are rate
limited by a cooldown measured with an injectable clock.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from selal.config import settings

logger = logging.getLogger(__name__)


class OtpError(ValueError):
    """Wrong code, or a resend requested before the cooldown elapsed."""


class OtpService(Protocol):
    """What the wizard needs from an OTP provider."""

    def send_code(self, phone: str) -> None: ...

    def resend(self, phone: str) -> None: ...

    def verify(self, phone: str, code: str) -> bool: ...

    def seconds_until_resend(self, phone: str) -> int: ...


@dataclass
class _Issued:
    code: str
    sent_at: float


class MockOtpService:
    """In-memory OTP issuer used for development and tests."""

    def __init__(
        self,
        mocked: bool | None = None,
        code_length: int | None = None,
        cooldown_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.mocked = settings.otp_mocked if mocked is None else mocked
        self.code_length = code_length or settings.otp_code_length
        self.cooldown_seconds = (
            settings.otp_resend_cooldown_seconds if cooldown_seconds is None else cooldown_seconds
        )
        self._clock = clock
        self._issued: dict[str, _Issued] = {}

    def _mock_code(self) -> str:
        # 123456 for the default length
        return "".join(str((i % 9) + 1) for i in range(self.code_length))

    def send_code(self, phone: str) -> None:
        code = self._mock_code()
        self._issued[phone] = _Issued(code=code, sent_at=self._clock())
        logger.info(f"Mocked OTP sent to {phone[:3]}***{phone[-2:]}")
        logger.debug(f"OTP code for {phone}: {code}")

    def seconds_until_resend(self, phone: str) -> int:
        issued = self._issued.get(phone)
        if issued is None:
            return 0
        remaining = self.cooldown_seconds - (self._clock() - issued.sent_at)
        return max(0, int(remaining + 0.999))

    def resend(self, phone: str) -> None:
        wait = self.seconds_until_resend(phone)
        if wait > 0:
            raise OtpError(f"Resend OTP in {wait}s")
        self.send_code(phone)

    def verify(self, phone: str, code: str) -> bool:
        if self.mocked:
            logger.info("Mocked OTP verification accepted")
            return True

        issued = self._issued.get(phone)
        if issued is None or issued.code != code:
            raise OtpError("Invalid verification code")

        del self._issued[phone]
        return True
