"""
FastAPI application factory for the booking relay.

The gateway and mail capabilities are passed in rather than created at import
time, so tests (and alternative deployments) can supply their own.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from . import templates
from .config import Settings, get_settings
from .email_service import MailSender, OutgoingEmail, SendResult, SMTPEmailService
from .errors import ConfigurationError, ErrorKind
from .gateway import PaymentGateway, RazorpayGateway
from .models import (
    ContactMessage,
    ContactResponse,
    HealthResponse,
    KeyResponse,
    OrderRequest,
    PaymentConfirmation,
    PaymentSuccessResponse,
    SignedPayment,
)
from .stats import RelayStats
from .templates import Branding

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[PaymentGateway] = None,
    mailer: Optional[MailSender] = None,
) -> FastAPI:
    """
    Create the booking relay application.

    Args:
        settings: Configuration; defaults to the cached environment settings.
        gateway: Payment gateway; defaults to Razorpay built from settings.
        mailer: Mail sender; defaults to SMTP built from settings.

    Raises:
        ConfigurationError: if no gateway is given and Razorpay credentials
            are missing.
    """
    settings = settings or get_settings()

    if gateway is None:
        errors = settings.validate_required_config()
        if errors:
            raise ConfigurationError(errors)
        gateway = RazorpayGateway.from_settings(settings)

    if mailer is None:
        if not settings.is_email_configured:
            logger.warning("EMAIL_USER or EMAIL_PASSWORD is missing, emails will not be sent")
        mailer = SMTPEmailService(settings)

    branding = Branding.from_settings(settings)
    stats = RelayStats()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Booking relay starting up")
        logger.info("Configuration: %s", settings.get_config_summary())
        logger.info("Razorpay configured with key: %s...", gateway.key_id[:10])
        logger.info("Email configured with: %s", mailer.sender_address or "(none)")

        if settings.SMTP_VERIFY_ON_STARTUP:
            ok, error = await mailer.verify()
            if ok:
                logger.info("SMTP server is ready to take our messages")
            else:
                logger.error("SMTP connection error: %s", error)

        yield

        logger.info("Booking relay shutting down")

    app = FastAPI(
        title="Booking Relay",
        description="Checkout, payment verification and contact mail relay",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.mailer = mailer
    app.state.stats = stats

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def deliver(email: OutgoingEmail, label: str) -> SendResult:
        """Send one email; never raises."""
        try:
            result = await mailer.send(email)
        except Exception as e:
            logger.error("Unexpected error sending %s email: %s", label, e, exc_info=True)
            result = SendResult(
                ok=False,
                to_email=email.to_email,
                error=str(e),
                error_kind=ErrorKind.MAIL_TRANSPORT,
            )

        stats.email.record(result.ok, result.latency_ms, result.error)
        if result.ok:
            logger.info("%s email sent to: %s", label, email.to_email)
        else:
            logger.error("Failed to send %s email to %s: %s", label, email.to_email, result.error)
        return result

    router = APIRouter(prefix=settings.api_prefix)

    # =========================================================================
    # Checkout
    # =========================================================================

    @router.get("/api/razorpay-key", response_model=KeyResponse)
    async def razorpay_key():
        """Public key id for the browser checkout widget."""
        return KeyResponse(key_id=gateway.key_id)

    @router.post("/api/create-order")
    async def create_order(request: Request):
        """Create a gateway order and return it unmodified."""
        try:
            order_request = OrderRequest.model_validate(await request.json())

            logger.info(
                "Creating order: amount=%s currency=%s receipt=%s",
                order_request.amount, order_request.currency, order_request.receipt,
            )

            result = await gateway.create_order(
                amount=order_request.amount,
                currency=order_request.currency,
                receipt=order_request.receipt,
                notes=order_request.gateway_notes(),
            )
        except Exception as e:
            logger.error("Order creation failed: %s", e, exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to create order", "details": str(e)},
            )

        stats.gateway.record(result.ok, result.latency_ms, result.error)

        if not result.ok:
            logger.error("Order creation failed (%s): %s", result.error_kind, result.error)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to create order", "details": result.error},
            )

        logger.info("Order created successfully: %s", result.order.get("id"))
        return JSONResponse(content=result.order)

    @router.post("/api/payment-success", response_model=PaymentSuccessResponse)
    async def payment_success(request: Request):
        """
        Verify the checkout signature and send booking emails.

        Emails are best effort: each send is isolated and neither affects
        the response once the signature has been accepted.
        """
        try:
            body = await request.json()
            signed = SignedPayment.model_validate(body)

            logger.info(
                "Payment success callback received: payment_id=%s order_id=%s",
                signed.payment_id, signed.order_id,
            )

            if not gateway.verify_payment_signature(signed.order_id, signed.payment_id, signed.signature):
                stats.signature_rejections += 1
                logger.error("Invalid signature for order %s", signed.order_id)
                return JSONResponse(
                    status_code=400,
                    content={"success": False, "message": "Invalid signature"},
                )

            # Display fields are only read once the payment is known to be genuine
            payment = PaymentConfirmation.model_validate(body)

            await deliver(templates.booking_confirmation(payment, branding), "Customer")
            await deliver(
                templates.booking_admin_alert(payment, mailer.admin_address, branding),
                "Admin notification",
            )

            return PaymentSuccessResponse(success=True)

        except Exception as e:
            logger.error("Payment verification failed: %s", e, exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": "Payment verification failed", "details": str(e)},
            )

    # =========================================================================
    # Contact form
    # =========================================================================

    @router.post("/api/contact", response_model=ContactResponse)
    async def contact(request: Request):
        """
        Relay a contact form: admin notification first, then the user copy.

        The sends are sequential; if the admin notification fails the user
        copy is not sent and the request fails.
        """
        try:
            message = ContactMessage.model_validate(await request.json())

            logger.info(
                "Contact form submission received: name=%s email=%s subject=%s",
                message.name, message.email, message.subject,
            )

            outgoing = [
                (templates.contact_admin_notification(message, mailer.admin_address, branding), "Contact form"),
                (templates.contact_user_confirmation(message, branding), "Contact confirmation"),
            ]
            for email, label in outgoing:
                result = await deliver(email, label)
                if not result.ok:
                    return JSONResponse(
                        status_code=500,
                        content={"success": False, "message": "Failed to send message", "details": result.error},
                    )

            return ContactResponse(success=True, message="Message sent successfully!")

        except Exception as e:
            logger.error("Failed to process contact form: %s", e, exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Failed to send message", "details": str(e)},
            )

    app.include_router(router)

    # =========================================================================
    # Health & Stats
    # =========================================================================

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(
            status="ok" if settings.is_email_configured else "degraded",
            gateway_configured=settings.is_gateway_configured,
            email_configured=settings.is_email_configured,
            timestamp=datetime.now().isoformat(),
        )

    @app.get("/stats")
    async def stats_endpoint():
        """Outbound call statistics."""
        return stats.get_summary()

    # =========================================================================
    # Frontend (single-page app fallback)
    # =========================================================================

    build_path = Path(settings.BUILD_DIR)
    if build_path.is_dir():
        build_root = build_path.resolve()
        index_file = build_root / "index.html"
        logger.info("Serving frontend from %s", build_root)

        @app.get("/{full_path:path}", include_in_schema=False)
        async def serve_frontend(full_path: str):
            """Serve a built asset, or index.html for client-side routes."""
            if full_path:
                candidate = (build_root / full_path).resolve()
                if candidate.is_file() and candidate.is_relative_to(build_root):
                    return FileResponse(candidate)

            if not index_file.is_file():
                raise HTTPException(status_code=404, detail="Not Found")
            return FileResponse(index_file)
    else:
        logger.warning("Build folder not found at %s. Frontend not served.", build_path)

    return app
