import logging
from dataclasses import dataclass, field
from typing import List, Optional

from flowgen import config
from flowgen.inference.engine import AIEngine
from flowgen.inference.types import GenerationOptions
from flowgen.ir.diagram import DiagramSpec
from flowgen.ir.errors import (
    AIError,
    AIErrorKind,
    ExtractError,
    ExtractErrorKind,
    InputValidationError,
    ValidationIssue,
)
from flowgen.ir.validation import ValidationResult
from flowgen.llm.parser import parse_diagrams
from flowgen.llm.prompt_registry import PromptRegistry, get_prompt_registry
from flowgen.pipeline.context import PipelineContext
from flowgen.pipeline.stage import PipelineStage
from flowgen.validation.diagram_validator import validate_diagram_specs

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    diagrams: List[DiagramSpec]
    count: int
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def issues(self) -> List[ValidationIssue]:
        return [issue for r in self.results for issue in r.issues]

    @property
    def rejected(self) -> List[ValidationResult]:
        return [r for r in self.results if not r.is_valid]


def check_article(article) -> str:
    if not isinstance(article, str) or not article.strip():
        raise InputValidationError("Article text is required")
    if len(article.strip()) < config.MIN_ARTICLE_LENGTH:
        raise InputValidationError(
            f"Article must be at least {config.MIN_ARTICLE_LENGTH} characters long"
        )
    return article.strip()


def check_count(count) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InputValidationError("count must be an integer")
    if not 1 <= count <= config.MAX_DIAGRAM_COUNT:
        raise InputValidationError(f"count must be between 1 and {config.MAX_DIAGRAM_COUNT}")
    return count


class StructuredExtractor:
    """
    Stage 1: article -> validated DiagramSpecs, in a single backend call.

    At most one follow-up call is made, and only when the first answer
    cannot be parsed as diagram JSON at all. Backend failures and
    "parsed, but nothing valid" are not retried.
    """

    def __init__(
        self,
        engine: AIEngine,
        prompts: Optional[PromptRegistry] = None,
        options: Optional[GenerationOptions] = None,
        malformed_retries: Optional[int] = None,
    ):
        self.engine = engine
        self.prompts = prompts or get_prompt_registry()
        self.options = options
        if malformed_retries is None:
            malformed_retries = config.EXTRACT_MALFORMED_RETRIES
        self.malformed_retries = min(max(malformed_retries, 0), 1)

    def _ask(self, prompt: str, messages=None) -> str:
        response = self.engine.ask_ai(prompt, self.options, messages)
        if not response.success:
            raise AIError(response.error or "AI request failed", response.error_kind or AIErrorKind.PROVIDER_ERROR)
        return response.text

    def _candidates(self, prompt: str, count: int) -> list:
        text = self._ask(prompt)
        attempts_left = self.malformed_retries

        while True:
            try:
                return parse_diagrams(text)
            except ValueError as e:
                if attempts_left <= 0:
                    logger.warning("[EXTRACT] unparseable response (%d chars): %s", len(text), e)
                    raise ExtractError(
                        f"Could not parse diagrams from AI response: {e}",
                        ExtractErrorKind.MALFORMED_RESPONSE,
                    ) from e

                attempts_left -= 1
                logger.info("[EXTRACT] unparseable response, asking once more: %s", e)
                repair = self.prompts.render("repair-diagrams-json", {"count": count, "error": str(e)})
                text = self._ask(
                    repair,
                    messages=[
                        {"role": "user", "content": prompt},
                        {"role": "assistant", "content": text},
                    ],
                )

    def extract(self, article: str, theme_instructions: str = "", count: int = 3) -> ExtractionResult:
        article = check_article(article)
        count = check_count(count)

        prompt = self.prompts.render(
            "article-to-diagrams",
            {
                "article": article,
                "count": count,
                "theme_instructions": (theme_instructions or "").strip(),
            },
        )

        logger.info("[EXTRACT] requesting %d diagram(s) for %d-char article", count, len(article))
        candidates = self._candidates(prompt, count)

        results = validate_diagram_specs(candidates)
        valid = [r.diagram for r in results if r.is_valid]

        for r in results:
            if not r.is_valid:
                logger.warning(
                    "[EXTRACT] dropped candidate %d: %s",
                    r.index, "; ".join(f"{i.code}: {i.message}" for i in r.errors),
                )

        if not valid:
            codes = sorted({i.code for r in results for i in r.errors})
            raise ExtractError(
                f"No valid diagrams in AI response ({len(candidates)} candidate(s); {', '.join(codes) or 'empty list'})",
                ExtractErrorKind.NO_VALID_DIAGRAMS,
            )

        if len(valid) > count:
            logger.info("[EXTRACT] got %d valid diagrams, truncating to %d", len(valid), count)
            valid = valid[:count]
        elif len(valid) < count:
            logger.info("[EXTRACT] got %d of %d requested diagrams", len(valid), count)

        return ExtractionResult(diagrams=valid, count=len(valid), results=results)


class ExtractStage(PipelineStage):
    name = "extract"

    def __init__(self, extractor: StructuredExtractor):
        self.extractor = extractor

    def run(self, context: PipelineContext) -> None:
        result = self.extractor.extract(context.article, context.theme_instructions, context.count)
        context.diagrams = result.diagrams
        context.validation_results = result.results
        for r in result.rejected:
            context.add_error(f"diagram {r.index} dropped: {', '.join(r.codes)}")
