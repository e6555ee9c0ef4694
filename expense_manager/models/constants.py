"""Domain constants shared by services and API models."""

from typing import Tuple

# Every cross-currency conversion is routed through this code.
PIVOT_CURRENCY = "USD"

# Served 1:1 when the rate source is unavailable.
FALLBACK_CURRENCIES: Tuple[str, ...] = (
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CNY",
    "INR",
    "AUD",
    "CAD",
    "CHF",
    "SEK",
    "NZD",
    "SGD",
)

DEFAULT_EXPENSE_CURRENCY = "USD"

UNCATEGORIZED_LABEL = "Uncategorized"
ALL_EXPENSES_LABEL = "All expenses"

MIN_BUDGET_YEAR = 2000
MAX_BUDGET_YEAR = 2100
