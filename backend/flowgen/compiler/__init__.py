from flowgen.compiler.render_mermaid import DiagramRenderer, render_mermaid
from flowgen.compiler.types import RenderFailure, RenderOutcome

__all__ = ["DiagramRenderer", "render_mermaid", "RenderFailure", "RenderOutcome"]
