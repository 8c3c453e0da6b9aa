"""IRS Section 41 credit constants and service pricing reference data.

This module is the single place where regulatory rates, statutory limits,
validation thresholds and the flat-fee pricing table are defined. Nothing
here is mutated at runtime; legislative updates are made by editing this
file and bumping RULES_VERSION.

Sources:
- Alternative Simplified Credit: IRC §41(c)(4)
- Contract research limitation: IRC §41(b)(3)(A)
- Qualified small business payroll election: IRC §41(h)
- Reduced credit election: IRC §280C(c)
- Research expenditure capitalization: IRC §174
"""

from decimal import Decimal
from typing import NamedTuple, Optional


# =============================================================================
# VERSION TRACKING
# =============================================================================

RULES_VERSION = "2025.1"


def get_rules_version() -> str:
    """Return current credit rules version."""
    return RULES_VERSION


# =============================================================================
# ALTERNATIVE SIMPLIFIED CREDIT
# =============================================================================

ASC_RATE_FIRST_TIME = Decimal("0.06")
ASC_RATE_REPEAT = Decimal("0.14")

# Base amount is 50% of the average QREs of the three preceding years
ASC_BASE_REDUCTION = Decimal("0.50")
ASC_LOOKBACK_YEARS = 3


# =============================================================================
# QUALIFIED RESEARCH EXPENSES
# =============================================================================

# Only 65% of amounts paid to contractors count as contract research expenses
CONTRACTOR_LIMIT = Decimal("0.65")


# =============================================================================
# INPUT VALIDATION THRESHOLDS
# =============================================================================

MIN_ALLOCATION_PERCENTAGE = Decimal("0")
MAX_ALLOCATION_PERCENTAGE = Decimal("100")
HIGH_ALLOCATION_PERCENTAGE = Decimal("80")
LOW_ALLOCATION_PERCENTAGE = Decimal("20")
LOW_TECHNICAL_SALARY = Decimal("40000")
HIGH_TECHNICAL_SALARY = Decimal("200000")

CUSTOM_GPT_ACTIVITY = "custom-gpt"

# Input ceilings, keeping every product within Decimal context precision
MAX_EMPLOYEES = 10_000_000
MAX_CURRENCY_AMOUNT = Decimal("1000000000000")


# =============================================================================
# LEGISLATIVE CONSTANTS
# =============================================================================

# Payroll tax offset cap doubled by the Inflation Reduction Act of 2022
PAYROLL_CAP_PRE_2023 = Decimal("250000")
PAYROLL_CAP_POST_2023 = Decimal("500000")
PAYROLL_CAP_INCREASE_YEAR = 2023

# Section 174 five-year amortization of domestic research expenditures
AMORTIZATION_START_YEAR = 2022
AMORTIZED_DEDUCTION_PERCENTAGE = 20
FULL_DEDUCTION_PERCENTAGE = 100

QSB_REVENUE_LIMIT = Decimal("5000000")
QSB_AGE_LIMIT = 5

CORPORATE_TAX_RATE = Decimal("0.21")
SECTION_280C_REDUCED_FACTOR = Decimal("0.84")

# Share of the credit assumed usable in years 2 and 3 when carried forward
CARRYFORWARD_YEAR_2 = Decimal("0.3")
CARRYFORWARD_YEAR_3 = Decimal("0.4")

QUARTERS_PER_YEAR = 4
DAYS_PER_YEAR = 365


# =============================================================================
# PRICING TIERS
# =============================================================================

class PricingBand(NamedTuple):
    """A flat-fee service band covering credits in [min_credit, max_credit)."""
    tier: int
    name: str
    min_credit: Decimal
    max_credit: Optional[Decimal]  # None means unbounded
    price: Decimal

    def contains(self, credit: Decimal) -> bool:
        if credit < self.min_credit:
            return False
        return self.max_credit is None or credit < self.max_credit


PRICING_BANDS: tuple[PricingBand, ...] = (
    PricingBand(1, "Starter", Decimal("0"), Decimal("5000"), Decimal("500")),
    PricingBand(2, "Growth", Decimal("5000"), Decimal("10000"), Decimal("700")),
    PricingBand(3, "Professional", Decimal("10000"), Decimal("20000"), Decimal("900")),
    PricingBand(4, "Scale", Decimal("20000"), Decimal("40000"), Decimal("1200")),
    PricingBand(5, "Advanced", Decimal("40000"), Decimal("75000"), Decimal("1500")),
    PricingBand(6, "Premium", Decimal("75000"), Decimal("150000"), Decimal("1800")),
    PricingBand(7, "Enterprise", Decimal("150000"), None, Decimal("2000")),
)


def get_payroll_tax_cap(tax_year: int) -> Decimal:
    """Get the annual QSB payroll tax offset cap for a tax year."""
    if tax_year >= PAYROLL_CAP_INCREASE_YEAR:
        return PAYROLL_CAP_POST_2023
    return PAYROLL_CAP_PRE_2023
