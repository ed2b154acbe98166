"""
Error types shared across the relay.
"""
from enum import Enum


class ErrorKind(str, Enum):
    """Why an outbound call failed."""
    GATEWAY = "gateway_error"
    MAIL_NOT_CONFIGURED = "mail_not_configured"
    MAIL_TRANSPORT = "mail_transport_error"
    TIMEOUT = "timeout"


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
