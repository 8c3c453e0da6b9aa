"""Supplementary benefit analyses shown alongside the credit estimate.

These describe how the credit can be taken (Section 280C election, QSB
payroll tax offset) and which legislative rules apply in the tax year. None
of them change the federal credit, pricing tier or ROI.
"""

from decimal import Decimal

from .credit_rules import (
    AMORTIZATION_START_YEAR,
    AMORTIZED_DEDUCTION_PERCENTAGE,
    CARRYFORWARD_YEAR_2,
    CARRYFORWARD_YEAR_3,
    CORPORATE_TAX_RATE,
    FULL_DEDUCTION_PERCENTAGE,
    PAYROLL_CAP_INCREASE_YEAR,
    QSB_AGE_LIMIT,
    QSB_REVENUE_LIMIT,
    QUARTERS_PER_YEAR,
    SECTION_280C_REDUCED_FACTOR,
    get_payroll_tax_cap,
)
from .formatting import format_currency, round_whole
from .models import (
    AlertType,
    CalculationInput,
    CashFlowComparison,
    CreditOption,
    CreditOptions,
    LegislativeAlert,
    LegislativeContext,
    PayrollOffsetSchedule,
    QSBAnalysis,
    Section280CChoice,
    TraditionalCreditSchedule,
)


# =============================================================================
# SECTION 280C ELECTION
# =============================================================================

def compute_credit_options(credit: Decimal) -> CreditOptions:
    """Compare taking the full credit against the reduced 280C(c) credit.

    The full credit reduces the research deduction by the credit amount,
    costing roughly the corporate rate times the credit. The reduced credit
    keeps the full deduction.
    """
    full_amount = round_whole(credit)
    deduction_value = round_whole(full_amount * CORPORATE_TAX_RATE)
    reduced_amount = round_whole(full_amount * SECTION_280C_REDUCED_FACTOR)

    full = CreditOption(
        amount=full_amount,
        deduction_reduction=full_amount,
        net_benefit=round_whole(full_amount - full_amount * CORPORATE_TAX_RATE),
        complexity="Simple - take full credit, reduce deduction",
    )
    reduced = CreditOption(
        amount=reduced_amount,
        deduction_reduction=Decimal("0"),
        net_benefit=reduced_amount,
        complexity="Complex - reduced credit preserves deduction",
    )

    if full_amount > reduced_amount + deduction_value:
        recommendation = Section280CChoice.FULL
        reasoning = "Full credit provides higher net benefit despite deduction reduction"
    else:
        recommendation = Section280CChoice.REDUCED
        reasoning = "Reduced credit with full deduction provides better total value"

    return CreditOptions(
        full_credit=full,
        reduced_credit=reduced,
        recommendation=recommendation,
        reasoning=reasoning,
    )


# =============================================================================
# LEGISLATIVE CONTEXT
# =============================================================================

def get_legislative_context(tax_year: int) -> LegislativeContext:
    """Get the Section 174 and payroll offset rules for a tax year."""
    alerts: list[LegislativeAlert] = []
    amortization_required = tax_year >= AMORTIZATION_START_YEAR

    if amortization_required:
        alerts.append(LegislativeAlert(
            type=AlertType.WARNING,
            message="Section 174: R&D expenses must be capitalized and amortized",
            impact="Reduces immediate deduction benefit but R&D credit still applies",
        ))

    if tax_year >= PAYROLL_CAP_INCREASE_YEAR:
        alerts.append(LegislativeAlert(
            type=AlertType.BENEFIT,
            message="IRA 2022: Payroll tax offset cap increased to $500k",
            impact="Doubles potential quarterly cash benefit for startups",
        ))

    return LegislativeContext(
        tax_year=tax_year,
        amortization_required=amortization_required,
        payroll_tax_cap=get_payroll_tax_cap(tax_year),
        deduction_percentage=(
            AMORTIZED_DEDUCTION_PERCENTAGE if amortization_required
            else FULL_DEDUCTION_PERCENTAGE
        ),
        alerts=tuple(alerts),
    )


# =============================================================================
# QUALIFIED SMALL BUSINESS
# =============================================================================

def analyze_qsb(
    credit: Decimal,
    data: CalculationInput,
    context: LegislativeContext,
) -> QSBAnalysis:
    """Determine QSB status and the payroll tax offset it unlocks.

    A QSB has under $5M of current-year gross receipts and no gross receipts
    more than five years before the tax year. A QSB without income tax
    liability can apply the credit against payroll taxes quarterly instead of
    carrying it forward.

    Args:
        credit: Federal credit in whole dollars
        data: Calculation input; current_year_revenue and
            year_of_first_revenue must be set
        context: Legislative context for the tax year

    Returns:
        QSBAnalysis with eligibility reasons and cash flow comparison
    """
    if data.current_year_revenue is None or data.year_of_first_revenue is None:
        raise ValueError("QSB analysis requires current_year_revenue and year_of_first_revenue")

    revenue = data.current_year_revenue
    years_in_business = max(0, context.tax_year - data.year_of_first_revenue)

    revenue_ok = revenue < QSB_REVENUE_LIMIT
    age_ok = years_in_business <= QSB_AGE_LIMIT
    is_eligible = revenue_ok and age_ok

    reasons: list[str] = []
    if not revenue_ok:
        reasons.append(f"Revenue {format_currency(revenue)} exceeds $5M limit")
    if not age_ok:
        reasons.append(f"{years_in_business} years in business exceeds 5-year limit")
    if is_eligible:
        reasons.append("Qualifies as QSB for payroll tax offset")

    max_offset = min(credit, context.payroll_tax_cap)
    offset_available = is_eligible and not data.has_income_tax_liability
    quarterly = round_whole(max_offset / QUARTERS_PER_YEAR) if offset_available else Decimal("0")

    with_offset = PayrollOffsetSchedule(
        q1=quarterly,
        q2=quarterly,
        q3=quarterly,
        q4=quarterly,
        total=quarterly * QUARTERS_PER_YEAR,
    )

    if data.has_income_tax_liability:
        traditional = TraditionalCreditSchedule(
            year1=credit,
            year2=Decimal("0"),
            year3=Decimal("0"),
            year_to_breakeven=1,
        )
    else:
        traditional = TraditionalCreditSchedule(
            year1=Decimal("0"),
            year2=round_whole(credit * CARRYFORWARD_YEAR_2),
            year3=round_whole(credit * CARRYFORWARD_YEAR_3),
            year_to_breakeven=3,
        )

    if offset_available:
        action = (
            f"Elect payroll offset for immediate {format_currency(quarterly)} quarterly benefit"
        )
    elif is_eligible:
        action = "Consider payroll offset when you have payroll tax liability"
    else:
        action = "Focus on traditional income tax credit"

    return QSBAnalysis(
        is_eligible=is_eligible,
        current_year_revenue=revenue,
        years_in_business=years_in_business,
        eligibility_reasons=tuple(reasons),
        payroll_offset_available=offset_available,
        max_payroll_offset=max_offset,
        quarterly_benefit=quarterly,
        cash_flow_comparison=CashFlowComparison(
            with_payroll_offset=with_offset,
            traditional_credit=traditional,
        ),
        lifetime_remaining=context.payroll_tax_cap,
        recommended_action=action,
    )
