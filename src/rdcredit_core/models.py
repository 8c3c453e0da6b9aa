"""Data models for the R&D tax credit estimate.

Inputs and results are immutable pydantic models. Attributes use snake_case
in Python; every model also accepts and emits the camelCase names used by
the web client (``model_dump(by_alias=True)``).
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .credit_rules import MAX_CURRENCY_AMOUNT, MAX_EMPLOYEES
from .formatting import format_multiple, format_percentage


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


NonNegativeAmount = Annotated[Decimal, Field(ge=0, le=MAX_CURRENCY_AMOUNT)]


# =============================================================================
# ENUMERATIONS
# =============================================================================

class FilerMethod(str, Enum):
    """ASC branch used for the credit."""
    FIRST_TIME = "first-time"
    REPEAT = "repeat"


class Section280CChoice(str, Enum):
    """Full credit with reduced deduction, or reduced credit with full deduction."""
    FULL = "full"
    REDUCED = "reduced"


class AlertType(str, Enum):
    BENEFIT = "benefit"
    WARNING = "warning"


class ConfidenceLevel(str, Enum):
    """How much the estimate can be relied on given the inputs."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EngineModel(BaseModel):
    """Base for all engine models: frozen, camelCase aliases."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


# =============================================================================
# INPUT
# =============================================================================

class CalculationInput(EngineModel):
    """Self-reported business and expense data for one tax year.

    Shape constraints (non-negative counts and amounts) are enforced here.
    Business rules such as the R&D allocation range or technical staff not
    exceeding total staff are checked by ``validate_input`` so they can be
    reported together with warnings.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "businessType": "Software",
                    "totalEmployees": 12,
                    "technicalEmployees": 5,
                    "averageTechnicalSalary": "120000",
                    "rdAllocationPercentage": "60",
                    "contractorCosts": "40000",
                    "suppliesCosts": "0",
                    "softwareCosts": "12000",
                    "cloudCosts": "18000",
                    "priorYearQREs": [],
                    "isFirstTimeFiler": True,
                    "qualifyingActivities": ["custom-gpt", "algorithms"],
                }
            ]
        },
    }

    business_type: str = Field(
        default="Software",
        description="Business category, carried through to documentation only",
    )
    total_employees: int = Field(ge=0, le=MAX_EMPLOYEES)
    technical_employees: int = Field(ge=0, le=MAX_EMPLOYEES)
    average_technical_salary: NonNegativeAmount = Decimal("0")
    rd_allocation_percentage: Decimal = Field(
        description="Share of technical staff time spent on qualified research, 0-100",
    )

    contractor_costs: NonNegativeAmount = Decimal("0")
    supplies_costs: NonNegativeAmount = Decimal("0")
    software_costs: NonNegativeAmount = Decimal("0")
    cloud_costs: NonNegativeAmount = Decimal("0")

    prior_year_qres: tuple[NonNegativeAmount, ...] = Field(
        default=(),
        alias="priorYearQREs",
        description="Prior-year QRE totals, oldest first",
    )
    is_first_time_filer: bool = True
    qualifying_activities: frozenset[str] = Field(default_factory=frozenset)

    # Optional fields for the legislative and QSB analyses
    tax_year: Optional[int] = Field(default=None, ge=1981)
    current_year_revenue: Optional[NonNegativeAmount] = None
    year_of_first_revenue: Optional[int] = None
    has_income_tax_liability: bool = False

    @property
    def annual_technical_wages(self) -> Decimal:
        """Total technical payroll before R&D allocation."""
        return self.technical_employees * self.average_technical_salary

    @property
    def cloud_and_software_costs(self) -> Decimal:
        return self.cloud_costs + self.software_costs


class ValidationResult(EngineModel):
    """Outcome of business-rule validation."""
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


# =============================================================================
# CALCULATION RESULTS
# =============================================================================

class QREBreakdown(EngineModel):
    """Qualified research expenses by category, in whole dollars."""
    wages: Decimal
    contractors: Decimal
    supplies: Decimal
    cloud_and_software: Decimal
    total: Decimal

    # Audit trail text, not used in the math
    wage_calculation: str
    contractor_calculation: str
    supply_calculation: str
    cloud_and_software_calculation: str


class ASCResult(EngineModel):
    """Alternative Simplified Credit computation."""
    method: FilerMethod
    current_year_qre: Decimal
    prior_year_average: Decimal
    base_amount: Decimal
    excess_qre: Decimal
    credit_rate: Decimal
    federal_credit: Decimal


class PricingTier(EngineModel):
    """Flat-fee service tier selected for a credit amount."""
    tier: int
    name: str
    min_credit: Decimal
    max_credit: Optional[Decimal] = None
    credit_range: str
    price: Decimal


class ROICalculation(EngineModel):
    """Return on the service fee.

    ``payback_days`` is None when the ROI multiple rounds to zero, since no
    finite payback period exists.
    """
    credit_amount: Decimal
    service_cost: Decimal
    net_benefit: Decimal
    roi_multiple: Decimal
    payback_days: Optional[int]

    @property
    def roi_multiple_label(self) -> str:
        return format_multiple(self.roi_multiple)


class CreditOption(EngineModel):
    amount: Decimal
    deduction_reduction: Decimal
    net_benefit: Decimal
    complexity: str


class CreditOptions(EngineModel):
    """Section 280C full vs reduced credit comparison."""
    full_credit: CreditOption
    reduced_credit: CreditOption
    recommendation: Section280CChoice
    reasoning: str


class LegislativeAlert(EngineModel):
    type: AlertType
    message: str
    impact: str


class LegislativeContext(EngineModel):
    """Rules in force for the tax year being estimated."""
    tax_year: int
    amortization_required: bool
    payroll_tax_cap: Decimal
    deduction_percentage: int
    alerts: tuple[LegislativeAlert, ...] = ()


class PayrollOffsetSchedule(EngineModel):
    q1: Decimal
    q2: Decimal
    q3: Decimal
    q4: Decimal
    total: Decimal


class TraditionalCreditSchedule(EngineModel):
    year1: Decimal
    year2: Decimal
    year3: Decimal
    year_to_breakeven: int


class CashFlowComparison(EngineModel):
    with_payroll_offset: PayrollOffsetSchedule
    traditional_credit: TraditionalCreditSchedule


class QSBAnalysis(EngineModel):
    """Qualified Small Business eligibility and payroll offset benefit."""
    is_eligible: bool
    current_year_revenue: Decimal
    years_in_business: int
    eligibility_reasons: tuple[str, ...]
    payroll_offset_available: bool
    max_payroll_offset: Decimal
    quarterly_benefit: Decimal
    cash_flow_comparison: CashFlowComparison
    lifetime_remaining: Decimal = Field(
        description="Payroll offset still available under the annual cap",
    )
    recommended_action: str


class AuditEntry(EngineModel):
    """Audit log entry for calculation transparency."""
    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class CalculationResult(EngineModel):
    """Complete federal R&D credit estimate."""

    qre_breakdown: QREBreakdown
    asc_calculation: ASCResult

    federal_credit: Decimal
    state_credit: Decimal = Decimal("0")
    total_benefit: Decimal
    effective_credit_rate: Decimal = Field(
        description="Federal credit as a percentage of total QREs, one decimal",
    )

    pricing_tier: PricingTier
    roi: ROICalculation

    credit_options: CreditOptions
    legislative_context: Optional[LegislativeContext] = None
    qsb_analysis: Optional[QSBAnalysis] = None

    warnings: tuple[str, ...] = ()
    assumptions: tuple[str, ...] = ()
    confidence: ConfidenceLevel

    audit_log: tuple[AuditEntry, ...] = ()
    rules_version: str
    calculated_at: datetime = Field(default_factory=_utc_now)

    @property
    def effective_credit_rate_label(self) -> str:
        return format_percentage(self.effective_credit_rate)
