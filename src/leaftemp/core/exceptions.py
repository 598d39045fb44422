"""
Custom exception hierarchy for the leaftemp package.
Provides clear error categories and rich error information.
"""
from typing import Optional, Any, Dict
from dataclasses import dataclass


@dataclass
class ErrorContext:
    """Context information for errors"""
    component: Optional[str] = None
    operation: Optional[str] = None
    leaf_temperature_c: Optional[float] = None
    details: Optional[Dict[str, Any]] = None


class LeafTempError(Exception):
    """Base exception for all leaftemp errors"""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def __str__(self) -> str:
        context_str = ""
        if self.context.component:
            context_str += f" [Component: {self.context.component}]"
        if self.context.operation:
            context_str += f" [Operation: {self.context.operation}]"
        if self.context.leaf_temperature_c is not None:
            context_str += f" [Tleaf: {self.context.leaf_temperature_c:.4f} °C]"

        return f"{self.__class__.__name__}: {self.message}{context_str}"


# Input errors
class InputError(LeafTempError):
    """Base class for input errors"""
    pass


class InvalidInputError(InputError):
    """Weather or leaf parameters are non-numeric or physically out of range"""
    pass


# Physics model errors
class PhysicsModelError(LeafTempError):
    """Base class for physics model errors"""
    pass


class DegenerateConductanceError(PhysicsModelError):
    """Total surface conductance is zero, so surface resistance is undefined"""
    pass


class ConvergenceError(PhysicsModelError):
    """Leaf temperature solver failed to converge"""
    pass


# Configuration errors
class ConfigurationError(LeafTempError):
    """Configuration error"""
    pass


def handle_exception(exc: Exception, context: Optional[ErrorContext] = None) -> LeafTempError:
    """
    Wrap generic exceptions in the LeafTempError hierarchy.
    Useful for catching and categorizing numerical exceptions.
    """
    if isinstance(exc, LeafTempError):
        return exc

    error_map = {
        ZeroDivisionError: DegenerateConductanceError,
        FloatingPointError: PhysicsModelError,
        OverflowError: PhysicsModelError,
        ValueError: InvalidInputError,
        TypeError: InvalidInputError,
    }

    for exc_type, leaf_exc_type in error_map.items():
        if isinstance(exc, exc_type):
            return leaf_exc_type(str(exc), context)

    return LeafTempError(str(exc), context)
