from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal


DiagramType = Literal["flowchart", "sequence"]
Direction = Literal["TD", "TB", "LR", "RL", "BT"]
NodeShape = Literal[
    "rect",
    "rounded",
    "stadium",
    "circle",
    "diamond",
    "hexagon",
    "cylinder",
    "parallelogram",
    "subroutine",
]

DIAGRAM_TYPES = ("flowchart", "sequence")
DIRECTIONS = ("TD", "TB", "LR", "RL", "BT")
NODE_SHAPES = (
    "rect",
    "rounded",
    "stadium",
    "circle",
    "diamond",
    "hexagon",
    "cylinder",
    "parallelogram",
    "subroutine",
)


class NodeSpec(BaseModel):
    id: str
    label: str
    shape: Optional[NodeShape] = None


class EdgeSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    label: Optional[str] = None


class DiagramSpec(BaseModel):
    """
    Structured intermediate form produced by Stage 1.

    Edge endpoints reference NodeSpec.id. The extractor only hands out
    specs that passed validation, so renderers may rely on that.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str
    diagram_type: DiagramType = Field(default="flowchart", alias="diagramType")
    direction: Direction = "TD"
    nodes: List[NodeSpec]
    edges: List[EdgeSpec] = Field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]


class RenderedDiagram(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mmd: str
    source_title: str = Field(alias="sourceTitle")


class SpecStep(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    diagrams: List[DiagramSpec]
    count: int = Field(alias="diagramCount")


class RenderStep(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    diagrams: List[RenderedDiagram]
    count: int = Field(alias="diagramCount")


class PipelineResult(BaseModel):
    step1: SpecStep
    step2: RenderStep
