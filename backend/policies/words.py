import math
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

INVALID = "Invalid Amount"
OVERFLOW = "Overflow"
MAX_DIGITS = 9


def _two_digits(n: int) -> str:
    if n < 20:
        return ONES[n]
    tens, units = divmod(n, 10)
    return f"{TENS[tens]} {ONES[units]}".strip()


def _to_integer(amount):
    if isinstance(amount, bool) or amount is None:
        return None
    if isinstance(amount, float):
        if math.isnan(amount) or math.isinf(amount):
            return None
        return math.floor(amount)
    if isinstance(amount, Decimal):
        try:
            if not amount.is_finite():
                return None
            return int(amount.to_integral_value(rounding=ROUND_FLOOR))
        except InvalidOperation:
            return None
    if isinstance(amount, int):
        return amount
    return None


def amount_in_words(amount) -> str:
    """
    Indian numbering in words for the certificate: 4499 ->
    "Four Thousand Four Hundred and Ninety Nine Only". Fractions are dropped.
    """
    num = _to_integer(amount)
    if num is None or num < 0:
        return INVALID
    if num == 0:
        return "Zero Only"
    if len(str(num)) > MAX_DIGITS:
        return OVERFLOW

    crore, rest = divmod(num, 10_000_000)
    lakh, rest = divmod(rest, 100_000)
    thousand, rest = divmod(rest, 1_000)
    hundred, rest = divmod(rest, 100)

    parts = []
    if crore:
        parts.append(f"{_two_digits(crore)} Crore")
    if lakh:
        parts.append(f"{_two_digits(lakh)} Lakh")
    if thousand:
        parts.append(f"{_two_digits(thousand)} Thousand")
    if hundred:
        parts.append(f"{ONES[hundred]} Hundred")
    if rest:
        if parts:
            parts.append("and")
        parts.append(_two_digits(rest))
    return " ".join(parts) + " Only"
