"""Verification of PayFast Instant Transaction Notifications (ITN).

PayFast posts the outcome of a payment to ``notify_url`` as a
form-urlencoded body.  A notification is only trusted after

* its ``signature`` matches the MD5 of the other fields (in the order they
  were posted, ``urlencode``-style, plus the passphrase), and
* optionally, PayFast itself answers ``VALID`` when the same parameter string
  is posted back to ``/eng/query/validate``.
"""

from __future__ import annotations

import hmac
import logging
from urllib.parse import quote_plus

import requests

from payment_gateway import digest

logger = logging.getLogger(__name__)


class ITNVerificationError(Exception):
    """Raised when a notification cannot be shown to come from PayFast."""


def param_string(pairs: list[tuple[str, str]]) -> str:
    """Return the ITN parameter string, excluding the ``signature`` field."""
    return "&".join(
        f"{name}={quote_plus(value)}" for name, value in pairs if name != "signature"
    )


def expected_signature(pairs: list[tuple[str, str]], passphrase: str = "") -> str:
    payload = param_string(pairs)
    if passphrase:
        payload += f"&passphrase={quote_plus(passphrase)}"
    return digest(payload)


def verify_signature(pairs: list[tuple[str, str]], passphrase: str = "") -> bool:
    """Check the posted ``signature`` against the notification fields.

    Raises:
        ITNVerificationError: If the signature is missing or does not match.
    """
    received = next((value for name, value in pairs if name == "signature"), "")
    if not received:
        raise ITNVerificationError("Missing signature field")

    if not hmac.compare_digest(received.strip().lower(), expected_signature(pairs, passphrase)):
        raise ITNVerificationError("Signature mismatch")
    return True


def confirm_with_gateway(
    pairs: list[tuple[str, str]], validate_url: str, timeout: float = 10
) -> bool:
    """Ask PayFast to confirm the notification server-to-server.

    Raises:
        ITNVerificationError: If PayFast cannot be reached or does not answer
            ``VALID``.
    """
    try:
        res = requests.post(
            validate_url,
            data=param_string(pairs),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=timeout,
        )
        res.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error("ITN validation request failed: %s", e)
        raise ITNVerificationError(f"Could not reach PayFast: {e}")

    answer = res.text.strip()
    if answer != "VALID":
        raise ITNVerificationError(f"PayFast rejected notification: {answer[:50]!r}")
    return True
