import pytest

from currency_utils import format_currency, parse_currency_to_minor_units


def test_format_currency() -> None:
    assert format_currency(12345, "USD") == "$123.45"
    assert format_currency(1234567, "usd") == "$12,345.67"
    assert format_currency(-250, "EUR") == "-€2.50"
    assert format_currency(12345, "UAH") == "123.45₴"
    assert format_currency(500, "JPY") == "¥500"
    assert format_currency(12345, "XYZ") == "123.45 XYZ"


def test_parse_currency_to_minor_units() -> None:
    assert parse_currency_to_minor_units("$12.30", "USD") == 1230
    assert parse_currency_to_minor_units("1 234,50 ₴") == 123450
    assert parse_currency_to_minor_units("1,234.50", "EUR") == 123450
    assert parse_currency_to_minor_units("500", "JPY") == 500
    assert parse_currency_to_minor_units("12.30 USD", "USD") == 1230


def test_parse_currency_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Invalid amount"):
        parse_currency_to_minor_units("twelve", "USD")


def test_parse_currency_reads_grouping_commas() -> None:
    assert parse_currency_to_minor_units("1,234", "USD") == 123_400
    assert parse_currency_to_minor_units("$1,234,567", "USD") == 123_456_700
    assert parse_currency_to_minor_units("¥1,234", "JPY") == 1_234
    assert parse_currency_to_minor_units("12,30", "EUR") == 1_230
    assert parse_currency_to_minor_units("1.234.567,89 €", "EUR") == 123_456_789
