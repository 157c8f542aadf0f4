import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
import payment_gateway
from donation import InvalidAmountError, build_payment_fields, format_amount, new_payment_id


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("26.8", "26.80"),
        (26.8, "26.80"),
        ("100", "100.00"),
        (" 5.5 ", "5.50"),
        ("0.005", "0.01"),
        ("0.125", "0.13"),
        ("10.125", "10.13"),
        ("1.005", "1.00"),
    ],
)
def test_format_amount(raw, expected):
    assert format_amount(raw) == expected


@pytest.mark.parametrize(
    "raw", ["", "abc", "0", "-10", "0.001", "nan", "inf", None, "1_000", "1e30"]
)
def test_format_amount_rejects(raw):
    with pytest.raises(InvalidAmountError):
        format_amount(raw)


def test_invalid_amount_is_value_error():
    assert issubclass(InvalidAmountError, ValueError)


def test_new_payment_id_is_unique():
    first, second = new_payment_id(), new_payment_id()
    assert first.startswith("don-")
    assert len(first.split("-")[2]) == 9
    assert first != second


def test_build_payment_fields(settings):
    fields = build_payment_fields(
        settings, "50.00", "https://donations.example.org/", payment_id="don-1"
    )
    assert fields == {
        "merchant_id": "10000100",
        "merchant_key": "46f0cd694581a",
        "return_url": "https://donations.example.org/thank-you",
        "cancel_url": "https://donations.example.org/cancel",
        "notify_url": "https://donations.example.org/payfast-itn",
        "m_payment_id": "don-1",
        "amount": "50.00",
        "item_name": "Donation to I.C Norath NGO",
        "item_description": "Charitable donation",
    }


def test_build_payment_fields_takes_known_payer_fields(settings):
    payer = {"name_first": "Thandi", "email_address": "thandi@example.org", "signature": "x"}
    fields = build_payment_fields(settings, "10.00", "https://d.example.org", payer=payer)
    assert fields["name_first"] == "Thandi"
    assert fields["email_address"] == "thandi@example.org"
    assert "signature" not in fields
    keys = [k for k, _ in payment_gateway.ordered_fields(fields)]
    assert keys.index("notify_url") < keys.index("name_first") < keys.index("email_address")
    assert keys.index("email_address") < keys.index("m_payment_id")
