import re

# largest value accepted from user input; anything bigger parses as 0
MAX_INPUT_AMOUNT = 2**63 - 1

_NON_DIGITS = re.compile(r"[^0-9]")


def format_dollars(amount: int) -> str:
    """Render whole dollars with thousands separators, e.g. 1234 -> '$1,234'."""
    return f"${amount:,}"


def parse_dollar_input(raw: str) -> int:
    """Parse free-form user input into whole dollars.

    Every non-digit character is dropped, decimal points included, so
    "$12.50" reads as 1250. Input with no digits, or a value past
    MAX_INPUT_AMOUNT, yields 0. Never raises.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if not digits:
        return 0
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(MAX_INPUT_AMOUNT)):
        return 0
    value = int(digits)
    if value > MAX_INPUT_AMOUNT:
        return 0
    return value
