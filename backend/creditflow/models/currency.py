from enum import Enum


class CurrencyCode(str, Enum):
    """Currencies the converter knows an exchange rate for."""

    USD = "USD"
    CLP = "CLP"
