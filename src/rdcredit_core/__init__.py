"""R&D Credit Core - Federal R&D tax credit estimation engine."""

__version__ = "0.1.0"

from .calculator import calculate, compute_asc, compute_qre, compute_roi
from .exceptions import RDCreditError, ValidationError
from .models import (
    ASCResult,
    CalculationInput,
    CalculationResult,
    FilerMethod,
    PricingTier,
    QREBreakdown,
    ROICalculation,
    ValidationResult,
)
from .pricing import map_to_pricing_tier
from .validation import validate_input

__all__ = [
    "calculate",
    "compute_asc",
    "compute_qre",
    "compute_roi",
    "map_to_pricing_tier",
    "validate_input",
    "ASCResult",
    "CalculationInput",
    "CalculationResult",
    "FilerMethod",
    "PricingTier",
    "QREBreakdown",
    "ROICalculation",
    "ValidationResult",
    "RDCreditError",
    "ValidationError",
]
