"""
Engine Constants

Shipped defaults for margin thresholds, currencies, valuation multiples
and growth milestones. Entry points may override any of these through
configuration; the engines receive them as explicit parameters.
"""

from engines.schemas.costs import Currency, CurrencyCode, MarginThresholds

# Industry-standard SaaS gross margin bands
DEFAULT_MARGIN_THRESHOLDS = MarginThresholds(healthy=70.0, acceptable=50.0, minimum=0.0)

DEFAULT_CURRENCY = CurrencyCode.MYR

CURRENCIES: dict[CurrencyCode, Currency] = {
    CurrencyCode.MYR: Currency(
        code=CurrencyCode.MYR, symbol="RM", name="Malaysian Ringgit", rate=1.0
    ),
    CurrencyCode.USD: Currency(
        code=CurrencyCode.USD, symbol="$", name="US Dollar", rate=0.22
    ),
    CurrencyCode.SGD: Currency(
        code=CurrencyCode.SGD, symbol="S$", name="Singapore Dollar", rate=0.29
    ),
    CurrencyCode.EUR: Currency(
        code=CurrencyCode.EUR,
        symbol="€",
        name="Euro",
        rate=0.20,
        thousands_separator=".",
        decimal_separator=",",
    ),
    CurrencyCode.GBP: Currency(
        code=CurrencyCode.GBP, symbol="£", name="British Pound", rate=0.17
    ),
    CurrencyCode.AUD: Currency(
        code=CurrencyCode.AUD, symbol="A$", name="Australian Dollar", rate=0.33
    ),
}

# ARR multiples: conservative, typical, high-growth
VALUATION_MULTIPLES: tuple[float, float, float] = (5.0, 10.0, 15.0)

# Ascending ARR targets for growth projections: (label, target ARR)
MILESTONE_LADDER: tuple[tuple[str, float], ...] = (
    ("10K ARR", 10_000.0),
    ("50K ARR", 50_000.0),
    ("100K ARR", 100_000.0),
    ("500K ARR", 500_000.0),
    ("1M ARR", 1_000_000.0),
)

# Compound-growth projections beyond this many months are reported as unreachable
PROJECTION_HORIZON_MONTHS = 120

DEFAULT_CUSTOMER_COUNT = 100
