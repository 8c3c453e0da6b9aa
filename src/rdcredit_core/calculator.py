"""Federal R&D tax credit calculation using the Alternative Simplified Credit.

The pipeline is strictly linear:

    validate -> QREs -> ASC credit -> pricing tier -> ROI -> result

Each step is a pure function of its inputs. Currency amounts are rounded to
whole dollars as soon as they are computed and later steps build on the
rounded values, so results are reproducible to the dollar.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional, Union

import structlog

from .benefits import analyze_qsb, compute_credit_options, get_legislative_context
from .config import EngineSettings, get_settings
from .credit_rules import (
    AMORTIZATION_START_YEAR,
    ASC_BASE_REDUCTION,
    ASC_LOOKBACK_YEARS,
    ASC_RATE_FIRST_TIME,
    ASC_RATE_REPEAT,
    CONTRACTOR_LIMIT,
    DAYS_PER_YEAR,
    HIGH_ALLOCATION_PERCENTAGE,
    LOW_ALLOCATION_PERCENTAGE,
    RULES_VERSION,
)
from .exceptions import ValidationError
from .formatting import format_currency, format_percentage, round_tenth, round_whole
from .models import (
    ASCResult,
    AuditEntry,
    CalculationInput,
    CalculationResult,
    ConfidenceLevel,
    FilerMethod,
    QREBreakdown,
    ROICalculation,
)
from .pricing import map_to_pricing_tier
from .validation import validate_input

logger = structlog.get_logger()


class _AuditTrail:
    """Per-call collector of calculation steps."""

    def __init__(self, emit_logs: bool):
        self._emit_logs = emit_logs
        self.entries: list[AuditEntry] = []

    def log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        self.entries.append(AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        ))
        if self._emit_logs:
            logger.info(
                "calculation_step",
                step=step,
                input=input_value,
                output=output_value,
                source=source,
            )


# =============================================================================
# QUALIFIED RESEARCH EXPENSES
# =============================================================================

def compute_qre(data: CalculationInput) -> QREBreakdown:
    """
    Convert raw expenses into Qualified Research Expenses.

    - Wages: technical payroll x R&D allocation, no further reduction
    - Contractors: limited to 65% per IRC 41(b)(3)
    - Supplies: 100%
    - Cloud and software: 100%

    Each category is rounded to whole dollars before the total is summed.

    Args:
        data: Validated calculation input

    Returns:
        QREBreakdown with per-category amounts and audit strings
    """
    wages = round_whole(data.annual_technical_wages * data.rd_allocation_percentage / 100)
    contractors = round_whole(data.contractor_costs * CONTRACTOR_LIMIT)
    supplies = round_whole(data.supplies_costs)
    cloud_and_software = round_whole(data.cloud_and_software_costs)

    total = wages + contractors + supplies + cloud_and_software

    return QREBreakdown(
        wages=wages,
        contractors=contractors,
        supplies=supplies,
        cloud_and_software=cloud_and_software,
        total=total,
        wage_calculation=(
            f"{data.technical_employees} employees × "
            f"{format_currency(data.average_technical_salary)} × "
            f"{format_percentage(data.rd_allocation_percentage)} R&D time"
        ),
        contractor_calculation=(
            f"{format_currency(data.contractor_costs)} × "
            f"{format_percentage(CONTRACTOR_LIMIT * 100)} IRS limit"
        ),
        supply_calculation=f"{format_currency(data.supplies_costs)} supplies",
        cloud_and_software_calculation=(
            f"{format_currency(data.cloud_costs)} cloud + "
            f"{format_currency(data.software_costs)} software"
        ),
    )


# =============================================================================
# ALTERNATIVE SIMPLIFIED CREDIT
# =============================================================================

def _has_prior_qres(prior_year_qres: tuple[Decimal, ...]) -> bool:
    return any(qre > 0 for qre in prior_year_qres)


def compute_asc(current_year_qre: Decimal, data: CalculationInput) -> ASCResult:
    """
    Apply the Alternative Simplified Credit to the current-year QREs.

    First-time filers, and filers with no positive prior-year QREs, get 6%
    of current QREs. Repeat filers get 14% of the QREs exceeding half the
    average of the (up to) three most recent prior years.

    Args:
        current_year_qre: Total current-year QREs in whole dollars
        data: Calculation input (filer status and prior-year QREs)

    Returns:
        ASCResult with every intermediate rounded to whole dollars
    """
    current = round_whole(current_year_qre)

    if data.is_first_time_filer or not _has_prior_qres(data.prior_year_qres):
        return ASCResult(
            method=FilerMethod.FIRST_TIME,
            current_year_qre=current,
            prior_year_average=Decimal("0"),
            base_amount=Decimal("0"),
            excess_qre=current,
            credit_rate=ASC_RATE_FIRST_TIME,
            federal_credit=round_whole(current * ASC_RATE_FIRST_TIME),
        )

    lookback = data.prior_year_qres[-ASC_LOOKBACK_YEARS:]
    prior_year_average = round_whole(sum(lookback) / len(lookback))
    base_amount = round_whole(prior_year_average * ASC_BASE_REDUCTION)
    excess_qre = round_whole(max(Decimal("0"), current - base_amount))

    return ASCResult(
        method=FilerMethod.REPEAT,
        current_year_qre=current,
        prior_year_average=prior_year_average,
        base_amount=base_amount,
        excess_qre=excess_qre,
        credit_rate=ASC_RATE_REPEAT,
        federal_credit=round_whole(excess_qre * ASC_RATE_REPEAT),
    )


# =============================================================================
# RETURN ON INVESTMENT
# =============================================================================

def compute_roi(credit_amount: Decimal, service_cost: Decimal) -> ROICalculation:
    """
    Calculate net benefit, ROI multiple and payback period for the service fee.

    Payback assumes the credit is realized evenly over a year. When the ROI
    multiple rounds to zero there is no finite payback and ``payback_days``
    is None.

    Args:
        credit_amount: Federal credit in whole dollars
        service_cost: Flat service price

    Returns:
        ROICalculation
    """
    credit_amount = Decimal(credit_amount)
    service_cost = Decimal(service_cost)
    net_benefit = credit_amount - service_cost

    if service_cost > 0:
        roi_multiple = round_tenth(credit_amount / service_cost)
        if roi_multiple > 0:
            payback_days: Optional[int] = int(round_whole(DAYS_PER_YEAR / roi_multiple))
        else:
            payback_days = None
    else:
        roi_multiple = Decimal("0")
        payback_days = 0

    return ROICalculation(
        credit_amount=credit_amount,
        service_cost=service_cost,
        net_benefit=net_benefit,
        roi_multiple=roi_multiple,
        payback_days=payback_days,
    )


# =============================================================================
# RESULT ASSEMBLY
# =============================================================================

def build_assumptions(data: CalculationInput, method: FilerMethod) -> list[str]:
    """Generate the assumptions the estimate rests on, for display and documents."""
    rate = ASC_RATE_FIRST_TIME if method == FilerMethod.FIRST_TIME else ASC_RATE_REPEAT
    assumptions = [
        f"{format_percentage(rate * 100)} credit rate based on {method.value} filer status",
        f"{format_percentage(data.rd_allocation_percentage)} of technical employee time "
        "spent on R&D activities",
        "All expenses are properly documented and qualify under Section 41",
    ]

    if data.contractor_costs > 0:
        assumptions.append("Contractor costs limited to 65% qualification per IRS rules")

    if data.cloud_and_software_costs > 0:
        assumptions.append(
            "Cloud and software costs included at 100% as R&D computing expenses"
        )

    if data.tax_year is not None and data.tax_year >= AMORTIZATION_START_YEAR:
        assumptions.append(
            "Section 174 amortization rules apply - expenses capitalized over 5 years"
        )

    return assumptions


def assess_confidence(data: CalculationInput, warnings: tuple[str, ...]) -> ConfidenceLevel:
    """Rate the estimate from the number of warnings and the R&D allocation."""
    allocation = data.rd_allocation_percentage
    typical_allocation = LOW_ALLOCATION_PERCENTAGE <= allocation <= HIGH_ALLOCATION_PERCENTAGE

    if not warnings and typical_allocation:
        return ConfidenceLevel.HIGH
    if len(warnings) <= 2:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def _effective_credit_rate(credit: Decimal, total_qre: Decimal) -> Decimal:
    if total_qre <= 0:
        return Decimal("0.0")
    return round_tenth(credit / total_qre * 100)


def calculate(
    data: Union[CalculationInput, Mapping[str, Any]],
    *,
    settings: Optional[EngineSettings] = None,
) -> CalculationResult:
    """
    Estimate the federal R&D credit, service tier and ROI.

    Validation runs before any computation; on a hard error nothing else is
    computed and a ValidationError carrying every violated rule is raised.

    Args:
        data: Calculation input, or a mapping with its (snake_case or
            camelCase) fields
        settings: Engine settings (default: cached settings from environment)

    Returns:
        CalculationResult with full audit trail

    Raises:
        ValidationError: If any hard business rule is violated
        pydantic.ValidationError: If a mapping does not have the input shape
    """
    settings = settings or get_settings()
    if not isinstance(data, CalculationInput):
        data = CalculationInput.model_validate(dict(data))

    audit = _AuditTrail(emit_logs=settings.audit_logging)

    # Step 1: Validate
    validation = validate_input(data)
    if not validation.is_valid:
        logger.warning(
            "calculation_rejected",
            errors=list(validation.errors),
            warning_count=len(validation.warnings),
        )
        raise ValidationError(
            list(validation.errors),
            warnings=list(validation.warnings),
        )

    audit.log_step(
        step="validation",
        input_value=(
            f"technical={data.technical_employees}/{data.total_employees} employees, "
            f"allocation={data.rd_allocation_percentage}%"
        ),
        output_value=f"{len(validation.warnings)} warnings",
        source="Input validation rules",
    )

    # Step 2: Qualified research expenses
    qre = compute_qre(data)
    audit.log_step(
        step="qualified_wages",
        input_value=qre.wage_calculation,
        output_value=str(qre.wages),
        source="IRC §41(b)(2)(D) - wages for qualified services",
    )
    audit.log_step(
        step="qualified_contractors",
        input_value=qre.contractor_calculation,
        output_value=str(qre.contractors),
        source="IRC §41(b)(3)(A) - 65% contract research limitation",
    )
    audit.log_step(
        step="qualified_supplies",
        input_value=qre.supply_calculation,
        output_value=str(qre.supplies),
        source="IRC §41(b)(2)(C) - supplies",
    )
    audit.log_step(
        step="qualified_cloud_and_software",
        input_value=qre.cloud_and_software_calculation,
        output_value=str(qre.cloud_and_software),
        source="IRC §41(b)(2)(A)(iii) - computer use charges",
    )
    audit.log_step(
        step="total_qre",
        input_value=f"{qre.wages} + {qre.contractors} + {qre.supplies} + {qre.cloud_and_software}",
        output_value=str(qre.total),
        source="Sum of rounded categories",
    )

    # Step 3: ASC credit
    asc = compute_asc(qre.total, data)
    if asc.method == FilerMethod.FIRST_TIME:
        asc_input = f"{asc.current_year_qre} × {asc.credit_rate}"
    else:
        asc_input = (
            f"({asc.current_year_qre} - 50% × avg {asc.prior_year_average}"
            f" = {asc.excess_qre}) × {asc.credit_rate}"
        )
    audit.log_step(
        step="asc_credit",
        input_value=asc_input,
        output_value=str(asc.federal_credit),
        source="IRC §41(c)(4) - Alternative Simplified Credit",
        notes=f"{asc.method.value} filer",
    )
    federal_credit = asc.federal_credit
    state_credit = Decimal("0")

    # Step 4: Pricing tier
    tier = map_to_pricing_tier(federal_credit)
    audit.log_step(
        step="pricing_tier",
        input_value=str(federal_credit),
        output_value=f"{tier.name} ({format_currency(tier.price)})",
        source=f"Pricing table {RULES_VERSION}",
        notes=tier.credit_range,
    )

    # Step 5: ROI
    roi = compute_roi(federal_credit, tier.price)
    audit.log_step(
        step="roi",
        input_value=f"credit={federal_credit}, fee={tier.price}",
        output_value=(
            f"net={roi.net_benefit}, multiple={roi.roi_multiple_label}, "
            f"payback_days={roi.payback_days}"
        ),
        source="Service ROI",
    )

    # Step 6: Supplementary analyses
    credit_options = compute_credit_options(federal_credit)
    legislative_context = None
    qsb_analysis = None
    if data.tax_year is not None:
        legislative_context = get_legislative_context(data.tax_year)
        if data.current_year_revenue is not None and data.year_of_first_revenue is not None:
            qsb_analysis = analyze_qsb(federal_credit, data, legislative_context)
            audit.log_step(
                step="qsb_analysis",
                input_value=(
                    f"revenue={data.current_year_revenue}, "
                    f"first_revenue_year={data.year_of_first_revenue}"
                ),
                output_value=(
                    f"eligible={qsb_analysis.is_eligible}, "
                    f"quarterly_offset={qsb_analysis.quarterly_benefit}"
                ),
                source="IRC §41(h) - qualified small business payroll election",
            )

    result = CalculationResult(
        qre_breakdown=qre,
        asc_calculation=asc,
        federal_credit=federal_credit,
        state_credit=state_credit,
        total_benefit=federal_credit + state_credit,
        effective_credit_rate=_effective_credit_rate(federal_credit, qre.total),
        pricing_tier=tier,
        roi=roi,
        credit_options=credit_options,
        legislative_context=legislative_context,
        qsb_analysis=qsb_analysis,
        warnings=validation.warnings,
        assumptions=tuple(build_assumptions(data, asc.method)),
        confidence=assess_confidence(data, validation.warnings),
        audit_log=tuple(audit.entries),
        rules_version=RULES_VERSION,
    )

    logger.info(
        "calculation_complete",
        method=asc.method.value,
        total_qre=str(qre.total),
        federal_credit=str(federal_credit),
        tier=tier.name,
    )
    return result
