from dataclasses import dataclass, field
from typing import List

from flowgen.compiler.types import RenderOutcome
from flowgen.ir.diagram import DiagramSpec
from flowgen.ir.validation import ValidationResult


@dataclass
class PipelineContext:
    # Raw input (authoritative)
    article: str
    theme_instructions: str = ""
    count: int = 3

    # Stage 1
    diagrams: List[DiagramSpec] = field(default_factory=list)
    validation_results: List[ValidationResult] = field(default_factory=list)

    # Stage 2
    render_outcome: RenderOutcome = field(default_factory=RenderOutcome)

    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
