"""Pytest fixtures: settings, in-memory gateway and mail sender, test client."""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from booking_relay.config import Settings
from booking_relay.email_service import MailSender, OutgoingEmail, SendResult
from booking_relay.errors import ErrorKind
from booking_relay.gateway import GatewayResult, PaymentGateway
from booking_relay.server import create_app
from booking_relay.signature import verify_payment_signature

TEST_KEY_ID = "rzp_test_ABCDEFGHIJKL"
TEST_SECRET = "s"
ADMIN = "coach@example.com"


class FakeGateway(PaymentGateway):
    """Gateway double that records order calls and checks real signatures."""

    def __init__(
        self,
        secret: str = TEST_SECRET,
        fail_with: Optional[str] = None,
        fail_kind: ErrorKind = ErrorKind.GATEWAY,
    ):
        self.secret = secret
        self.fail_with = fail_with
        self.fail_kind = fail_kind
        self.calls: list[dict] = []

    @property
    def key_id(self) -> str:
        return TEST_KEY_ID

    async def create_order(self, amount, currency, receipt, notes=None) -> GatewayResult:
        call = {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        self.calls.append(call)
        if self.fail_with:
            return GatewayResult(ok=False, error=self.fail_with, error_kind=self.fail_kind)
        order = {
            "id": "order_1",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
            "notes": notes,
            "attempts": 0,
        }
        return GatewayResult(ok=True, order=order, latency_ms=3)

    def verify_payment_signature(self, order_id, payment_id, signature) -> bool:
        return verify_payment_signature(self.secret, order_id, payment_id, signature)


class FakeMailer(MailSender):
    """Mail sender double. Every attempt is recorded; ``sent`` holds successes."""

    def __init__(self, fail_for: tuple = (), raise_for: tuple = ()):
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.attempts: list[OutgoingEmail] = []
        self.sent: list[OutgoingEmail] = []

    @property
    def sender_address(self) -> str:
        return ADMIN

    @property
    def admin_address(self) -> str:
        return ADMIN

    async def send(self, email: OutgoingEmail) -> SendResult:
        self.attempts.append(email)
        if email.to_email in self.raise_for:
            raise RuntimeError(f"connection reset sending to {email.to_email}")
        if email.to_email in self.fail_for:
            return SendResult(
                ok=False,
                to_email=email.to_email,
                error="550 mailbox unavailable",
                error_kind=ErrorKind.MAIL_TRANSPORT,
            )
        self.sent.append(email)
        return SendResult(ok=True, to_email=email.to_email, latency_ms=1)

    async def verify(self):
        return True, None


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        RAZORPAY_KEY_ID=TEST_KEY_ID,
        RAZORPAY_SECRET=TEST_SECRET,
        EMAIL_USER=ADMIN,
        EMAIL_PASSWORD="app-password",
        BUILD_DIR=str(tmp_path / "no-build"),
        SMTP_VERIFY_ON_STARTUP=False,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(settings, gateway, mailer):
    app = create_app(settings=settings, gateway=gateway, mailer=mailer)
    return TestClient(app)


@pytest.fixture
def customer():
    return {"fullName": "Asha Rao", "email": "asha@example.com", "phone": "+919800000000"}
