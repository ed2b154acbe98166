"""
Payment gateway capability.

The relay only needs three things from a gateway: its public key id, order
creation, and payment signature verification. ``PaymentGateway`` is the
interface the HTTP layer depends on; ``RazorpayGateway`` is the production
implementation backed by the Razorpay SDK.
"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import razorpay
from fastapi.concurrency import run_in_threadpool

from .config import Settings
from .errors import ErrorKind
from .signature import verify_payment_signature

logger = logging.getLogger(__name__)


@dataclass
class GatewayResult:
    """Result from a gateway order creation."""
    ok: bool
    order: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    latency_ms: int = 0


class PaymentGateway(ABC):
    """Abstract interface for the payment gateway."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key id handed to the browser checkout widget."""
        pass

    @abstractmethod
    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[dict] = None,
    ) -> GatewayResult:
        """
        Create an order on the gateway.

        Args:
            amount: Amount in the smallest currency unit
            currency: ISO currency code
            receipt: Caller-side receipt id
            notes: Free-form metadata stored on the order

        Returns:
            GatewayResult carrying the gateway's order object on success.
            Transport and API failures are returned, not raised.
        """
        pass

    @abstractmethod
    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check a checkout signature against the account secret."""
        pass


class RazorpayGateway(PaymentGateway):
    """Razorpay implementation of the payment gateway."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        timeout: float = 30.0,
        client: Optional[Any] = None,
    ):
        self._key_id = key_id
        self._key_secret = key_secret
        self._timeout = timeout
        self._client = client or razorpay.Client(auth=(key_id, key_secret))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayGateway":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_SECRET,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    @property
    def key_id(self) -> str:
        return self._key_id

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[dict] = None,
    ) -> GatewayResult:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }

        start_time = time.time()
        try:
            # The SDK is blocking (requests); keep it off the event loop
            order = await asyncio.wait_for(
                run_in_threadpool(self._client.order.create, data=payload),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error("Razorpay order creation timed out after %.1fs", self._timeout)
            return GatewayResult(
                ok=False,
                error=f"Razorpay did not respond within {self._timeout:g}s",
                error_kind=ErrorKind.TIMEOUT,
                latency_ms=latency_ms,
            )
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error("Razorpay API error: %s", e)
            return GatewayResult(
                ok=False,
                error=str(e),
                error_kind=ErrorKind.GATEWAY,
                latency_ms=latency_ms,
            )

        latency_ms = int((time.time() - start_time) * 1000)
        return GatewayResult(ok=True, order=order, latency_ms=latency_ms)

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(self._key_secret, order_id, payment_id, signature)
