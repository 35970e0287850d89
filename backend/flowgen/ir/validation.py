from dataclasses import dataclass, field
from typing import List, Optional

from .diagram import DiagramSpec
from .errors import ValidationIssue, ValidationSeverity


@dataclass
class ValidationResult:
    """
    Outcome of validating one candidate diagram.

    Valid results carry the parsed DiagramSpec (plus any non-blocking
    issues), invalid ones carry only the issues.
    """
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    diagram: Optional[DiagramSpec] = None
    index: int = 0

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    @classmethod
    def success(cls, diagram: DiagramSpec, issues: Optional[List[ValidationIssue]] = None, index: int = 0):
        return cls(is_valid=True, issues=list(issues or []), diagram=diagram, index=index)

    @classmethod
    def failure(cls, issues: List[ValidationIssue], index: int = 0):
        return cls(is_valid=False, issues=list(issues), diagram=None, index=index)
