"""
Pydantic models for the booking relay API.

Field aliases match the camelCase payloads the checkout frontend sends.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """
    Base model accepting either the wire alias or the field name.

    Numbers sent for text fields (e.g. a phone typed as digits) are kept as
    strings instead of rejected.
    """
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class CustomerDetails(WireModel):
    """Customer identity collected at checkout."""
    full_name: str = Field(alias="fullName")
    email: str
    phone: Optional[str] = None


class CartItem(WireModel):
    """A single line in the checkout cart."""
    title: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Union[int, float]] = None
    quantity: Optional[int] = None

    @property
    def label(self) -> str:
        return self.title or self.name or ""


class OrderRequest(WireModel):
    """Request body for POST /api/create-order."""
    amount: int  # smallest currency unit, e.g. paise
    currency: str
    receipt: str
    customer_details: CustomerDetails = Field(alias="customerDetails")
    cart_items: list[CartItem] = Field(default_factory=list, alias="cartItems")

    def gateway_notes(self) -> dict:
        """Notes block attached to the gateway order for support lookups."""
        return {
            "customerName": self.customer_details.full_name,
            "customerEmail": self.customer_details.email,
            "customerPhone": self.customer_details.phone,
        }


class SignedPayment(WireModel):
    """The gateway-signed part of a payment confirmation."""
    payment_id: str = Field(alias="razorpayPaymentId")
    order_id: str = Field(alias="razorpayOrderId")
    signature: str = Field(alias="razorpaySignature")


class PaymentConfirmation(SignedPayment):
    """Request body for POST /api/payment-success."""
    customer_details: CustomerDetails = Field(alias="customerDetails")
    cart_items: Optional[list[CartItem]] = Field(default_factory=list, alias="cartItems")
    amount: float  # major currency unit, display only


class ContactMessage(BaseModel):
    """Request body for POST /api/contact."""
    name: str
    email: str
    subject: str
    message: str


class KeyResponse(BaseModel):
    """Response body for GET /api/razorpay-key."""
    key_id: str


class PaymentSuccessResponse(BaseModel):
    """Response body for a verified payment."""
    success: bool = True


class ContactResponse(BaseModel):
    """Response body for a relayed contact form."""
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Response body for GET /health."""
    status: str  # "ok", "degraded"
    gateway_configured: bool
    email_configured: bool
    timestamp: str
