"""Business-rule validation of calculation input.

Hard errors stop the calculation. Warnings flag unusual but possible input
and are carried into the result. Every check runs on every call, in a fixed
order, so the lists are deterministic.
"""

from decimal import Decimal

from .credit_rules import (
    CUSTOM_GPT_ACTIVITY,
    HIGH_ALLOCATION_PERCENTAGE,
    HIGH_TECHNICAL_SALARY,
    LOW_ALLOCATION_PERCENTAGE,
    LOW_TECHNICAL_SALARY,
    MAX_ALLOCATION_PERCENTAGE,
    MIN_ALLOCATION_PERCENTAGE,
)
from .models import CalculationInput, ValidationResult

ERROR_TECHNICAL_EXCEEDS_TOTAL = "Technical employees cannot exceed total employees"
ERROR_ALLOCATION_RANGE = "R&D allocation must be between 0-100%"
ERROR_NO_QUALIFYING_EXPENSES = "Must have qualifying R&D expenses"

WARNING_HIGH_ALLOCATION = "Over 80% R&D allocation is unusual - ensure accurate time tracking"
WARNING_LOW_ALLOCATION = "Low R&D allocation - ensure all experimentation time is included"
WARNING_LOW_SALARY = "Salary seems low for technical employees"
WARNING_HIGH_SALARY = "High average salary - ensure this reflects actual wages"
WARNING_HIGH_CONTRACTORS = "High contractor costs - ensure proper documentation"
WARNING_CUSTOM_GPT_NO_CLOUD = (
    "Custom GPT development typically involves cloud or API costs - consider including them"
)
WARNING_NO_ACTIVITIES = (
    "No qualifying activities selected - credit estimate may be less defensible"
)


def _has_wage_basis(data: CalculationInput) -> bool:
    return data.technical_employees > 0 and data.average_technical_salary > 0


def _has_other_expenses(data: CalculationInput) -> bool:
    return any(
        amount > 0
        for amount in (
            data.contractor_costs,
            data.supplies_costs,
            data.cloud_costs,
            data.software_costs,
        )
    )


def _collect_errors(data: CalculationInput) -> list[str]:
    errors: list[str] = []

    if data.technical_employees > data.total_employees:
        errors.append(ERROR_TECHNICAL_EXCEEDS_TOTAL)

    allocation = data.rd_allocation_percentage
    if allocation < MIN_ALLOCATION_PERCENTAGE or allocation > MAX_ALLOCATION_PERCENTAGE:
        errors.append(ERROR_ALLOCATION_RANGE)

    if not _has_wage_basis(data) and not _has_other_expenses(data):
        errors.append(ERROR_NO_QUALIFYING_EXPENSES)

    return errors


def _collect_warnings(data: CalculationInput) -> list[str]:
    warnings: list[str] = []
    allocation = data.rd_allocation_percentage
    salary = data.average_technical_salary

    if allocation > HIGH_ALLOCATION_PERCENTAGE:
        warnings.append(WARNING_HIGH_ALLOCATION)

    if allocation < LOW_ALLOCATION_PERCENTAGE and data.technical_employees > 0:
        warnings.append(WARNING_LOW_ALLOCATION)

    if Decimal("0") < salary < LOW_TECHNICAL_SALARY:
        warnings.append(WARNING_LOW_SALARY)

    if salary > HIGH_TECHNICAL_SALARY:
        warnings.append(WARNING_HIGH_SALARY)

    if data.contractor_costs > data.annual_technical_wages:
        warnings.append(WARNING_HIGH_CONTRACTORS)

    if CUSTOM_GPT_ACTIVITY in data.qualifying_activities and data.cloud_costs == 0:
        warnings.append(WARNING_CUSTOM_GPT_NO_CLOUD)

    if not data.qualifying_activities:
        warnings.append(WARNING_NO_ACTIVITIES)

    return warnings


def validate_input(data: CalculationInput) -> ValidationResult:
    """Check calculation input against the engine's business rules.

    Args:
        data: Shape-validated calculation input

    Returns:
        ValidationResult with hard errors and soft warnings, each in
        detection order
    """
    errors = _collect_errors(data)
    warnings = _collect_warnings(data)
    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )
