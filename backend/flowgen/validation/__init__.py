"""
Validation of Stage-1 diagram candidates.
"""

from flowgen.validation.diagram_validator import (
    DiagramValidator,
    DiagramValidationResult,
    validate_candidate,
    validate_diagram_specs,
)

__all__ = [
    "DiagramValidator",
    "DiagramValidationResult",
    "validate_candidate",
    "validate_diagram_specs",
]
