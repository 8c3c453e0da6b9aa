"""Custom exceptions for the R&D credit engine.

All engine exceptions inherit from RDCreditError, so callers that only need
to know "the estimate could not be produced" can catch a single type.

Example:
    try:
        result = calculate(calculation_input)
    except ValidationError as e:
        # e.errors holds each violated rule, str(e) the joined message
        return {"error": str(e), "fields": e.errors}
    except RDCreditError as e:
        logger.error("estimate_failed", error=str(e))
        raise
"""

from typing import Any, Optional


class RDCreditError(Exception):
    """Base exception for all R&D credit engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the problem and retry.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(RDCreditError):
    """Raised when calculation input breaks a hard business rule.

    The message is every violated rule joined with "; " so a single string
    can be shown to the user. The individual rules stay available on
    ``errors``; any soft warnings gathered in the same pass are kept on
    ``warnings``.

    Example:
        >>> raise ValidationError(
        ...     ["Technical employees cannot exceed total employees"],
        ... )
        ValidationError: Technical employees cannot exceed total employees
    """

    def __init__(
        self,
        errors: list[str],
        *,
        warnings: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            errors: Each violated rule, in the order they were detected.
            warnings: Soft warnings collected alongside the errors.
            details: Optional dictionary with additional context.
            recoverable: Defaults to True since validation errors are fixed
                by correcting the input.
        """
        super().__init__("; ".join(errors), details=details, recoverable=recoverable)
        self.errors = list(errors)
        self.warnings = list(warnings or [])

        self.details["errors"] = self.errors
        if self.warnings:
            self.details["warnings"] = self.warnings


__all__ = [
    "RDCreditError",
    "ValidationError",
]
