import logging
from typing import Optional

from flowgen import config
from flowgen.compiler.render_mermaid import DiagramRenderer
from flowgen.inference.engine import AIEngine
from flowgen.ir.diagram import PipelineResult, RenderStep, SpecStep
from flowgen.pipeline.context import PipelineContext
from flowgen.pipeline.extractor import StructuredExtractor, ExtractStage
from flowgen.pipeline.stage import PipelineStage

logger = logging.getLogger(__name__)


def clamp_count(value) -> int:
    """
    Request-level count handling: absent, zero or non-numeric -> default,
    anything else clamped into [1, MAX_DIAGRAM_COUNT].
    """
    if isinstance(value, bool) or value is None:
        return config.DEFAULT_DIAGRAM_COUNT
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return config.DEFAULT_DIAGRAM_COUNT
    if count == 0:
        return config.DEFAULT_DIAGRAM_COUNT
    return min(max(count, 1), config.MAX_DIAGRAM_COUNT)


class RenderStage(PipelineStage):
    name = "render"

    def __init__(self, renderer: DiagramRenderer):
        self.renderer = renderer

    def run(self, context: PipelineContext) -> None:
        context.render_outcome = self.renderer.render(context.diagrams)
        for failure in context.render_outcome.failures:
            context.add_error(f"diagram {failure.index} not rendered: {failure.error.message}")


class PipelineExecutor:
    """
    Article -> Stage 1 (extract) -> Stage 2 (render).

    step1[i] always describes step2[i]: diagrams that fail to render are
    removed from both lists.
    """

    def __init__(
        self,
        engine: Optional[AIEngine] = None,
        extractor: Optional[StructuredExtractor] = None,
        renderer: Optional[DiagramRenderer] = None,
    ):
        if extractor is None:
            extractor = StructuredExtractor(engine or AIEngine())
        self.extractor = extractor
        self.renderer = renderer or DiagramRenderer()

        self.stages = [
            ExtractStage(self.extractor),
            RenderStage(self.renderer),
        ]

    def run(self, article: str, theme_instructions: str = "", count: Optional[int] = None) -> PipelineResult:
        context = PipelineContext(
            article=article,
            theme_instructions=theme_instructions or "",
            count=clamp_count(count),
        )

        for stage in self.stages:
            logger.info("[PIPELINE] running stage '%s'", stage.name)
            stage.run(context)

        outcome = context.render_outcome
        if not outcome.diagrams:
            first = outcome.failures[0].error
            logger.error("[PIPELINE] no diagram could be rendered: %s", first.message)
            raise first

        specs = [context.diagrams[i] for i in outcome.indices]

        logger.info(
            "[PIPELINE] done: %d diagram(s) (requested %d)",
            len(specs), context.count,
        )
        return PipelineResult(
            step1=SpecStep(diagrams=specs, count=len(specs)),
            step2=RenderStep(diagrams=outcome.diagrams, count=len(outcome.diagrams)),
        )
