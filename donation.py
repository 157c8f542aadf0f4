import math
import time
import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from config import Settings

CENT = Decimal("0.01")
PAYER_FIELDS = ("name_first", "name_last", "email_address", "cell_number")


class InvalidAmountError(ValueError):
    """Raised when a donation amount is not a positive number."""


def format_amount(raw) -> str:
    """Return ``raw`` as a PayFast amount string with exactly two decimals.

    PayFast signs the string form of the amount, so ``26.8`` must become
    ``"26.80"`` before it reaches :func:`payment_gateway.sign`. Halves round
    up on the exact binary value of the number, matching JavaScript's
    ``Number.prototype.toFixed(2)``.
    """
    text = str(raw).strip()
    if "_" in text:
        raise InvalidAmountError(f"Amount is not a number: {raw!r}")
    try:
        value = float(text)
    except ValueError:
        raise InvalidAmountError(f"Amount is not a number: {raw!r}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidAmountError(f"Amount is not a finite number: {raw!r}")

    try:
        cents = Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmountError(f"Amount is out of range: {raw!r}")
    if cents <= 0:
        raise InvalidAmountError(f"Amount must be positive: {raw!r}")
    return f"{cents:.2f}"


def new_payment_id() -> str:
    return f"don-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def build_payment_fields(
    settings: Settings,
    amount: str,
    base_url: str,
    payer: dict[str, str] | None = None,
    payment_id: str | None = None,
) -> dict[str, str]:
    """Assemble the PayFast field mapping for a single donation.

    ``amount`` must already be formatted by :func:`format_amount`. Only the
    keys listed in ``PAYER_FIELDS`` are taken from ``payer``.
    """
    base_url = base_url.rstrip("/")
    fields = {
        "merchant_id": settings.merchant_id,
        "merchant_key": settings.merchant_key,
        "return_url": f"{base_url}/thank-you",
        "cancel_url": f"{base_url}/cancel",
        "notify_url": f"{base_url}/payfast-itn",
        "m_payment_id": payment_id or new_payment_id(),
        "amount": amount,
        "item_name": settings.item_name,
        "item_description": settings.item_description,
    }
    for key in PAYER_FIELDS:
        value = (payer or {}).get(key)
        if value:
            fields[key] = value
    return fields
