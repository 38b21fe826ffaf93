from decimal import Decimal, InvalidOperation
from typing import Union


# code -> (symbol, fraction digits)
SUPPORTED_CURRENCIES: dict[str, tuple[str, int]] = {
    "UAH": ("₴", 2),
    "USD": ("$", 2),
    "EUR": ("€", 2),
    "GBP": ("£", 2),
    "PLN": ("zł", 2),
    "JPY": ("¥", 0),
    "KRW": ("₩", 0),
}


def fraction_digits(currency: str) -> int:
    return SUPPORTED_CURRENCIES.get(currency.upper(), ("", 2))[1]


def format_currency(amount: Union[int, float], currency: str = "UAH") -> str:
    """Format an amount given in minor units, e.g. ``12345, "USD"`` -> ``$123.45``.

    UAH puts its sign after the number; unknown codes fall back to
    ``<amount> <CODE>``.
    """

    code = currency.upper()
    digits = fraction_digits(code)
    major = amount / (10**digits)

    if code == "UAH":
        return f"{major:,.{digits}f}₴"
    if code in SUPPORTED_CURRENCIES:
        symbol = SUPPORTED_CURRENCIES[code][0]
        sign = "-" if major < 0 else ""
        return f"{sign}{symbol}{abs(major):,.{digits}f}"
    return f"{major:,.{digits}f} {code}"


def _normalize_separators(text: str, digits: int) -> str:
    """Rewrite ``text`` with a single ``.`` decimal point and no grouping.

    With both separators present the rightmost one is the decimal point. A
    lone comma is a decimal comma only when exactly ``digits`` digits follow
    it; otherwise commas, and repeated dots, are thousands separators.
    """

    if "," in text and "." in text:
        decimal = "," if text.rfind(",") > text.rfind(".") else "."
        grouping = "." if decimal == "," else ","
        return text.replace(grouping, "").replace(decimal, ".")
    if "," in text:
        head, _, tail = text.rpartition(",")
        if text.count(",") == 1 and digits > 0 and len(tail) == digits:
            return f"{head}.{tail}"
        return text.replace(",", "")
    if text.count(".") > 1:
        return text.replace(".", "")
    return text


def parse_currency_to_minor_units(value: str, currency: str = "UAH") -> int:
    """Parse user-typed money text (``"1 234,50 ₴"``, ``"$12.30"``) into minor units."""

    code = currency.upper()
    clean = value.strip().replace(code, "").replace(code.lower(), "")
    for symbol, _digits in SUPPORTED_CURRENCIES.values():
        clean = clean.replace(symbol, "")
    clean = _normalize_separators(
        clean.replace(" ", "").replace("\u00a0", ""), fraction_digits(code)
    )
    try:
        amount = Decimal(clean)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    return int((amount * (10 ** fraction_digits(code))).quantize(Decimal("1")))
