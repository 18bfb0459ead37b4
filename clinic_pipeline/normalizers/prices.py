"""Price parsing for free-text listings."""

import re
from typing import Optional

CURRENCY_CODES = "USD|CAD|EUR|GBP|AUD|CHF|SEK|NOK|DKK|JPY|CZK|RUB|KRW|CNY"

AMOUNT_PATTERN = re.compile(rf"[$€£¥]?\s*(\d[\d,]*\.?\d*)\s*({CURRENCY_CODES})?", re.I)
CODE_PATTERN = re.compile(rf"\b({CURRENCY_CODES})\b", re.I)

# Symbols override whatever code was read
SYMBOL_CURRENCIES = [
    (r"€", "EUR"),
    (r"£", "GBP"),
    (r"¥", "JPY"),
    (r"\bkr\b|\dkr\b", "SEK"),
    (r"Kč", "CZK"),
    (r"₽", "RUB"),
]


def currency_from_text(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    currency = None
    code = CODE_PATTERN.search(text)
    if code:
        currency = code.group(1).upper()
    for symbol, symbol_currency in SYMBOL_CURRENCIES:
        if re.search(symbol, text):
            currency = symbol_currency
    return currency


def parse_price(
    price_text: Optional[str],
    amount: Optional[float] = None,
    currency: Optional[str] = None,
) -> tuple[float, str]:
    """Resolve (amount, currency); typed values first, then the text, then 0 USD."""
    if amount and amount > 0:
        return amount, (currency or currency_from_text(price_text) or "USD").upper()

    if price_text:
        match = AMOUNT_PATTERN.search(price_text)
        if match:
            try:
                value = float(match.group(1).replace(",", ""))
            except ValueError:
                value = 0.0
            code = match.group(2) or currency
            resolved = currency_from_text(price_text) or code or "USD"
            return value, resolved.upper()

    return 0.0, "USD"
