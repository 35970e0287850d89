from dataclasses import dataclass, field
from typing import List

from flowgen.ir.diagram import RenderedDiagram
from flowgen.ir.errors import RenderError


@dataclass
class RenderFailure:
    index: int  # position in the input list
    error: RenderError


@dataclass
class RenderOutcome:
    diagrams: List[RenderedDiagram] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)  # input position of each rendered diagram
    failures: List[RenderFailure] = field(default_factory=list)
