from abc import ABC, abstractmethod
from flowgen.pipeline.context import PipelineContext


class PipelineStage(ABC):
    name: str

    @abstractmethod
    def run(self, context: PipelineContext) -> None:
        """
        Must:
        - read from context
        - write to context
        - raise a PipelineError when the stage cannot produce output
        - NEVER call other stages
        """
        pass
