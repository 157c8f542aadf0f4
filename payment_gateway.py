"""Utilities for the PayFast payment gateway.

This module generates the ``signature`` field PayFast requires on every
checkout redirect.  A redirect is only accepted when the hash below is
reproduced exactly:

1. Walk the known fields in PayFast's fixed order (``PAYFAST_FIELD_ORDER``).
2. Skip fields that are missing, ``None`` or blank after trimming.
3. Join ``name=value`` pairs with ``&``, percent-encoding every value.
4. Append ``&passphrase=...`` when a passphrase is configured.
5. Compute the MD5 digest and output the lowercase hex string.

The form posted to PayFast must carry exactly the values that were signed, so
callers render hidden inputs from :func:`ordered_fields` rather than from the
raw mapping.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

PAYFAST_FIELD_ORDER = (
    "merchant_id",
    "merchant_key",
    "return_url",
    "cancel_url",
    "notify_url",
    "name_first",
    "name_last",
    "email_address",
    "cell_number",
    "m_payment_id",
    "amount",
    "item_name",
    "item_description",
)


def percent_encode(value: str) -> str:
    """Return ``value`` percent-encoded the way PayFast expects.

    Equivalent to JavaScript's ``encodeURIComponent`` with ``!'()*`` escaped
    as well, so only ``A-Z a-z 0-9 - _ . ~`` survive unescaped.
    """
    return quote(value, safe="")


def ordered_fields(fields: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Return the signable ``(name, value)`` pairs of ``fields`` in PayFast order.

    Values are converted to ``str`` and trimmed; blank values are dropped.
    """
    pairs = []
    for key in PAYFAST_FIELD_ORDER:
        value = fields.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            pairs.append((key, text))
    return pairs


def canonicalize(fields: Mapping[str, Any]) -> str:
    """Return the canonical query string PayFast signs for ``fields``."""
    return "&".join(f"{k}={percent_encode(v)}" for k, v in ordered_fields(fields))


def digest(payload: str) -> str:
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def sign(fields: Mapping[str, Any], passphrase: str = "") -> str:
    """Return the PayFast ``signature`` for ``fields``.

    Parameters
    ----------
    fields:
        Payment attributes keyed by PayFast field name. Unknown keys are
        ignored. The mapping is not modified.
    passphrase:
        The passphrase set on the merchant account, or ``""`` if none.
    """

    canonical = canonicalize(fields)
    if passphrase:
        canonical += f"&passphrase={percent_encode(passphrase)}"
    return digest(canonical)


__all__ = [
    "PAYFAST_FIELD_ORDER",
    "canonicalize",
    "digest",
    "ordered_fields",
    "percent_encode",
    "sign",
]
