"""
Booking Relay - checkout backend for a coaching practice.

- Razorpay order creation and payment signature verification
- Booking confirmation and contact-form emails over SMTP
- Optional hosting of the built frontend

Build an app with ``create_app``; supply your own ``PaymentGateway`` and
``MailSender`` implementations to replace Razorpay or SMTP.
"""

from .config import Settings, get_settings
from .email_service import MailSender, OutgoingEmail, SendResult, SMTPEmailService
from .errors import ConfigurationError, ErrorKind
from .gateway import GatewayResult, PaymentGateway, RazorpayGateway
from .server import create_app
from .signature import generate_signature, verify_payment_signature

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Capabilities
    "PaymentGateway",
    "RazorpayGateway",
    "GatewayResult",
    "MailSender",
    "SMTPEmailService",
    "OutgoingEmail",
    "SendResult",
    # Errors
    "ConfigurationError",
    "ErrorKind",
    # Signatures
    "generate_signature",
    "verify_payment_signature",
    # App factory
    "create_app",
]
