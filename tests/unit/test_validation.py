"""Unit tests for IBAN and amount validation"""

import re
from decimal import Decimal

import pytest

from transfer_desk.domain.exceptions import InvalidAmountError
from transfer_desk.domain.validation import (
    accepts_amount_input,
    format_iban,
    normalize_iban,
    parse_amount,
    validate_iban,
)


@pytest.mark.parametrize(
    "iban",
    [
        "DE89370400440532013000",
        "de89 3704 0044 0532 0130 00",  # lower case and grouped
        "DE893704004405320130XX",
        "GB29NWBK60161331926819",
        "NL91ABNA0417164300",
        "FR1420041010050500013M02606",
    ],
)
def test_validate_iban_accepts_well_formed(iban):
    assert validate_iban(iban) is True


@pytest.mark.parametrize(
    "iban",
    [
        "",
        None,
        "DE8937040044053201300",  # 21 chars
        "DE893704004405320130000",  # 23 chars
        "D189370400440532013000",  # second char not a letter
        "DEX9370400440532013000",  # check digits not digits
        "DE89",  # no account part
        "DE89-3704-0044",
        "NL91ABNA0417164300ABCDEFGHIJKLMNOPQRSTUVWX",  # tail longer than 30
    ],
)
def test_validate_iban_rejects_malformed(iban):
    assert validate_iban(iban) is False


def test_only_german_prefix_has_fixed_length():
    # Same short shape is fine for other countries
    assert validate_iban("AT611904300234573201") is True
    assert validate_iban("DE611904300234573201") is False


def test_normalize_iban_strips_all_whitespace():
    assert normalize_iban(" de89 3704\t0044 0532 0130 00 ") == "DE89370400440532013000"
    assert normalize_iban(None) == ""


def test_format_iban_groups_in_blocks_of_four():
    assert format_iban("DE89370400440532013000") == "DE89 3704 0044 0532 0130 00"


@pytest.mark.parametrize(
    "iban",
    ["DE89370400440532013000", "DE89 3704 0044 0532 0130 00", "NL91ABNA0417164300", "GB29 NWBK6016 1331926819"],
)
def test_format_iban_round_trips_through_whitespace_stripping(iban):
    canonical = re.sub(r"\s", "", iban)
    assert re.sub(r"\s", "", format_iban(canonical)) == canonical


@pytest.mark.parametrize("value", ["", "12", "12.", "12.3", "12.34", ".5", "0"])
def test_amount_mask_accepts(value):
    assert accepts_amount_input(value) is True


@pytest.mark.parametrize("value", ["12.345", "-1", "1,50", "12.3.4", "abc", "1e5", " 12", "12\n"])
def test_amount_mask_rejects(value):
    assert accepts_amount_input(value) is False


def test_parse_amount():
    assert parse_amount("250.00") == Decimal("250.00")
    assert parse_amount("12") == Decimal("12")
    assert parse_amount("0.5") == Decimal("0.5")


@pytest.mark.parametrize("value", ["", ".", "12.345", "abc"])
def test_parse_amount_rejects_unsubmittable_values(value):
    with pytest.raises(InvalidAmountError):
        parse_amount(value)
