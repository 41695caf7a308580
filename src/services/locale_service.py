"""Locale service for currency formatting and money parsing.

Single source of truth for turning user input into 2-decimal ``Decimal``
amounts and for rendering amounts in human-readable messages.

Configuration:
    LOCALE env var (default: pt_BR) - determines currency and number formatting

Example:
    >>> from src.services.locale_service import format_amount, to_money
    >>> to_money("10.005")
    Decimal('10.01')
    >>> format_amount(Decimal("1234.56"))
    'R$ 1.234,56'
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from babel import Locale, UnknownLocaleError
from babel.numbers import (
    NumberFormatError,
    get_territory_currencies,
)
from babel.numbers import (
    format_currency as babel_format_currency,
)
from babel.numbers import (
    format_decimal as babel_format_decimal,
)
from babel.numbers import (
    parse_decimal as babel_parse_decimal,
)

from src.services.config import settings

logger = logging.getLogger(__name__)

# Default locale if LOCALE setting is invalid
DEFAULT_LOCALE = "pt_BR"

CENT = Decimal("0.01")


def _get_locale() -> str:
    """Get locale from settings with validation and fallback."""
    locale_str = settings.locale or DEFAULT_LOCALE
    try:
        Locale.parse(locale_str)
        return locale_str
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Invalid LOCALE '{locale_str}': {e}. Falling back to '{DEFAULT_LOCALE}'")
        return DEFAULT_LOCALE


def _get_currency_from_locale(locale_str: str) -> str:
    """Derive currency code from locale territory (e.g. 'pt_BR' -> 'BRL')."""
    try:
        locale = Locale.parse(locale_str)
        territory = locale.territory
        if territory:
            currencies = get_territory_currencies(territory)
            if currencies:
                return currencies[0]
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Could not derive currency from locale '{locale_str}': {e}")

    return "BRL"


# Module-level constants (computed once at import)
LOCALE = _get_locale()
CURRENCY = _get_currency_from_locale(LOCALE)


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert a decimal-compatible value to a 2-decimal ``Decimal``.

    Floats go through ``str`` first so binary noise does not leak into the
    result. Strings that are not plain decimals are read in the locale
    format, so "1.234,56" is accepted for pt_BR. Rounds half up to the cent.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a monetary amount")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        if isinstance(value, str):
            return parse_amount(value)
        raise ValueError(f"Invalid monetary amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid monetary amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: str) -> Decimal:
    """Parse a locale-formatted amount (e.g. '1.234,56' for pt_BR).

    Misplaced grouping separators are rejected.

    Raises:
        ValueError: If value cannot be parsed
    """
    try:
        return to_money(babel_parse_decimal(value.strip(), locale=LOCALE, strict=True))
    except NumberFormatError as e:
        raise ValueError(f"Invalid monetary amount: {value!r}") from e


def format_amount(amount: Decimal | float, include_symbol: bool = True) -> str:
    """Format monetary amount according to locale.

    Example:
        >>> format_amount(Decimal("1234.56"), include_symbol=False)
        '1.234,56'
    """
    if include_symbol:
        return babel_format_currency(amount, CURRENCY, locale=LOCALE)
    return babel_format_decimal(amount, format="#,##0.00", locale=LOCALE)


__all__ = [
    "LOCALE",
    "CURRENCY",
    "CENT",
    "to_money",
    "parse_amount",
    "format_amount",
]
