"""Shared fixtures for the credit engine tests."""

from decimal import Decimal

import pytest
import structlog

from rdcredit_core import CalculationInput


def _build_input(**overrides) -> CalculationInput:
    """Build a valid first-time-filer input, overriding selected fields."""
    fields = dict(
        business_type="Software",
        total_employees=12,
        technical_employees=5,
        average_technical_salary=Decimal("120000"),
        rd_allocation_percentage=Decimal("60"),
        contractor_costs=Decimal("40000"),
        supplies_costs=Decimal("0"),
        software_costs=Decimal("12000"),
        cloud_costs=Decimal("18000"),
        is_first_time_filer=True,
        qualifying_activities=frozenset({"custom-gpt", "algorithms"}),
    )
    fields.update(overrides)
    return CalculationInput(**fields)


@pytest.fixture
def make_input():
    """Factory for valid inputs with selected fields overridden."""
    return _build_input


@pytest.fixture
def software_startup() -> CalculationInput:
    """A first-time filer with wages, contractors and cloud spend."""
    return _build_input()


@pytest.fixture
def repeat_filer() -> CalculationInput:
    """A repeat filer with three prior years of QREs."""
    return _build_input(
        total_employees=10,
        technical_employees=4,
        average_technical_salary=Decimal("100000"),
        rd_allocation_percentage=Decimal("50"),
        contractor_costs=Decimal("0"),
        software_costs=Decimal("0"),
        cloud_costs=Decimal("0"),
        prior_year_qres=(Decimal("80000"), Decimal("90000"), Decimal("100000")),
        is_first_time_filer=False,
        qualifying_activities=frozenset({"algorithms"}),
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep logging configuration from leaking between tests."""
    yield
    structlog.reset_defaults()
