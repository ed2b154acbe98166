"""
HTML email templates.

Pure functions: structured request data in, OutgoingEmail out. User-supplied
text is HTML-escaped before it is placed in markup.
"""
from dataclasses import dataclass
from html import escape
from typing import Optional, Sequence, Union

from .config import Settings
from .email_service import OutgoingEmail
from .models import CartItem, ContactMessage, PaymentConfirmation

ACCENT = "#8e44ad"
PANEL = "#f8f4ff"

WRAPPER_STYLE = "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;"
PANEL_STYLE = f"background-color: {PANEL}; padding: 15px; border-radius: 5px; margin: 20px 0;"
QUOTE_STYLE = "background-color: white; padding: 15px; border-radius: 5px;"


@dataclass(frozen=True)
class Branding:
    """Business copy used across all templates."""
    business_name: str = "Mrs. Shereen Life Coaching"
    coach_name: str = "Mrs. Shereen"
    currency_symbol: str = "₹"

    @classmethod
    def from_settings(cls, settings: Settings) -> "Branding":
        return cls(
            business_name=settings.BUSINESS_NAME,
            coach_name=settings.COACH_NAME,
            currency_symbol=settings.CURRENCY_SYMBOL,
        )


def format_amount(amount: float) -> str:
    """Two-decimal display amount, e.g. 1500 -> '1500.00'."""
    return f"{amount:.2f}"


def format_price(price: Union[int, float]) -> str:
    """Display a cart price as entered: 1500 and 1500.0 both render as '1500'."""
    if isinstance(price, float) and price.is_integer():
        return str(int(price))
    return str(price)


def render_message_body(message: str) -> str:
    """Escape free text and keep its line breaks."""
    text = message.replace("\r\n", "\n")
    return escape(text).replace("\n", "<br>")


def render_cart_items(cart_items: Optional[Sequence[CartItem]], currency_symbol: str = "₹") -> str:
    """Itemized purchase block, or '' when there is nothing in the cart."""
    if not cart_items:
        return ""

    rows = []
    for item in cart_items:
        price = f" - {currency_symbol}{format_price(item.price)}" if item.price is not None else ""
        quantity = f" x {item.quantity}" if item.quantity else ""
        rows.append(f"<li><strong>{escape(item.label)}</strong>{price}{quantity}</li>")

    return (
        f'<h3 style="margin-top: 20px; color: {ACCENT};">Items Purchased:</h3>'
        f'<ul style="padding-left: 20px;">{"".join(rows)}</ul>'
    )


def booking_confirmation(payment: PaymentConfirmation, branding: Branding = Branding()) -> OutgoingEmail:
    """Confirmation sent to the customer after a verified payment."""
    customer = payment.customer_details
    cart_html = render_cart_items(payment.cart_items, branding.currency_symbol)

    html = f"""
<div style="{WRAPPER_STYLE}">
  <h2 style="color: {ACCENT};">Thank you for your booking!</h2>
  <p>Dear {escape(customer.full_name)},</p>
  <p>We are pleased to confirm your booking with {escape(branding.business_name)}.</p>
  <div style="{PANEL_STYLE}">
    <h3 style="margin-top: 0; color: {ACCENT};">Booking Details:</h3>
    <p><strong>Amount Paid:</strong> {branding.currency_symbol}{format_amount(payment.amount)}</p>
    <p><strong>Transaction ID:</strong> {escape(payment.payment_id)}</p>
    {cart_html}
  </div>
  <p>{escape(branding.coach_name)} will contact you within 24 hours on your provided phone number to schedule your session.</p>
  <p>Warm regards,<br>The {escape(branding.business_name)} Team</p>
</div>
"""
    return OutgoingEmail(
        to_email=customer.email,
        subject=f"Booking Confirmation - {branding.business_name}",
        html=html,
        from_name=branding.business_name,
    )


def booking_admin_alert(
    payment: PaymentConfirmation,
    admin_email: str,
    branding: Branding = Branding(),
) -> OutgoingEmail:
    """New-booking alert sent to the business inbox."""
    customer = payment.customer_details
    cart_html = render_cart_items(payment.cart_items, branding.currency_symbol)

    html = f"""
<div style="{WRAPPER_STYLE}">
  <h2 style="color: {ACCENT};">New Booking Received!</h2>
  <div style="{PANEL_STYLE}">
    <p><strong>Name:</strong> {escape(customer.full_name)}</p>
    <p><strong>Email:</strong> {escape(customer.email)}</p>
    <p><strong>Phone:</strong> {escape(customer.phone or "")}</p>
    <p><strong>Amount Paid:</strong> {branding.currency_symbol}{format_amount(payment.amount)}</p>
    <p><strong>Transaction ID:</strong> {escape(payment.payment_id)}</p>
    {cart_html}
  </div>
  <p>Please contact the customer within 24 hours to schedule their session.</p>
</div>
"""
    return OutgoingEmail(
        to_email=admin_email,
        subject="New Booking Alert - Life Coaching",
        html=html,
        from_name=f"{branding.coach_name} Booking System",
    )


def contact_admin_notification(
    contact: ContactMessage,
    admin_email: str,
    branding: Branding = Branding(),
) -> OutgoingEmail:
    """Contact-form submission forwarded to the business inbox."""
    html = f"""
<div style="{WRAPPER_STYLE}">
  <h2 style="color: {ACCENT};">New Contact Form Submission</h2>
  <div style="{PANEL_STYLE}">
    <p><strong>Name:</strong> {escape(contact.name)}</p>
    <p><strong>Email:</strong> {escape(contact.email)}</p>
    <p><strong>Subject:</strong> {escape(contact.subject)}</p>
    <p><strong>Message:</strong></p>
    <div style="{QUOTE_STYLE}">
      {render_message_body(contact.message)}
    </div>
  </div>
</div>
"""
    return OutgoingEmail(
        to_email=admin_email,
        subject=f"New Contact Form: {contact.subject}",
        html=html,
        from_name="Contact Form",
    )


def contact_user_confirmation(contact: ContactMessage, branding: Branding = Branding()) -> OutgoingEmail:
    """Copy of the message sent back to whoever filled in the form."""
    html = f"""
<div style="{WRAPPER_STYLE}">
  <h2 style="color: {ACCENT};">Thank You for Your Message</h2>
  <p>Dear {escape(contact.name)},</p>
  <p>Thank you for reaching out to {escape(branding.business_name)}. I have received your message and will get back to you shortly.</p>
  <p>Here's a copy of your message:</p>
  <div style="{PANEL_STYLE}">
    <p><strong>Subject:</strong> {escape(contact.subject)}</p>
    <p><strong>Message:</strong></p>
    <div style="{QUOTE_STYLE}">
      {render_message_body(contact.message)}
    </div>
  </div>
  <p>Warm regards,<br>{escape(branding.coach_name)}</p>
</div>
"""
    return OutgoingEmail(
        to_email=contact.email,
        subject=f"Thank You for Contacting {branding.coach_name}",
        html=html,
        from_name=branding.business_name,
    )
