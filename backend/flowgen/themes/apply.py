import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from flowgen.inference.engine import AIEngine
from flowgen.inference.types import GenerationOptions
from flowgen.ir.errors import AIError, AIErrorKind, InputValidationError
from flowgen.llm.prompt_registry import PromptRegistry, get_prompt_registry
from flowgen.themes.theme_template import (
    ThemeConfig,
    generate_sample_themed_code,
    generate_theme_prompt,
    get_preset,
    validate_theme_config,
)

logger = logging.getLogger(__name__)

MIN_MERMAID_LENGTH = 10

_FENCE_OPEN_RE = re.compile(r"^```(?:mermaid)?[ \t]*\n?", re.MULTILINE)
_FENCE_CLOSE_RE = re.compile(r"\n?```[ \t]*$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    text = _FENCE_OPEN_RE.sub("", text.strip())
    text = _FENCE_CLOSE_RE.sub("", text)
    return text.strip()


@dataclass
class ThemedDiagram:
    mermaid_code: str
    title: str
    theme_applied: bool
    original_length: int
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "mermaidCode": self.mermaid_code,
            "title": self.title,
            "warnings": self.warnings,
            "metadata": {
                "originalLength": self.original_length,
                "themedLength": len(self.mermaid_code),
                "themeApplied": self.theme_applied,
                "method": "ai-regeneration" if self.theme_applied else "unchanged",
            },
        }


def apply_theme(
    engine: AIEngine,
    mermaid_code: str,
    preset: Optional[str] = None,
    instructions: Optional[str] = None,
    sample_code: Optional[str] = None,
    title: Optional[str] = None,
    theme_config: Optional[ThemeConfig] = None,
    prompts: Optional[PromptRegistry] = None,
) -> ThemedDiagram:
    """
    Ask the backend to restyle existing Mermaid code.

    Precedence: free-form instructions, then an explicit ThemeConfig,
    then a named preset. With none of them (or an unknown preset) the
    code is returned unchanged and no backend call is made.
    """
    if not isinstance(mermaid_code, str) or len(mermaid_code.strip()) < MIN_MERMAID_LENGTH:
        raise InputValidationError("Mermaid code is required (at least 10 characters)")

    original = mermaid_code.strip()
    title = title or "Themed Diagram"
    warnings: List[str] = []

    if instructions and instructions.strip():
        theme_instructions = instructions.strip()
        sample_code = sample_code or ""
    else:
        config = theme_config or get_preset(preset)
        if config is None:
            if preset:
                logger.warning("[THEME] unknown preset '%s', returning diagram unchanged", preset)
            return ThemedDiagram(original, title, False, len(mermaid_code))
        warnings = validate_theme_config(config)
        theme_instructions = generate_theme_prompt(config)
        sample_code = generate_sample_themed_code(config)

    prompt = (prompts or get_prompt_registry()).render(
        "apply-theme-to-mermaid",
        {
            "mermaid_code": original,
            "theme_instructions": theme_instructions,
            "sample_themed_code": sample_code,
            "diagram_title": title,
        },
    )

    logger.info("[THEME] restyling %d chars of Mermaid (preset=%s)", len(original), preset)
    response = engine.ask_ai(prompt, GenerationOptions(temperature=0.3))
    if not response.success:
        raise AIError(
            f"AI failed to apply theme: {response.error}",
            response.error_kind or AIErrorKind.PROVIDER_ERROR,
        )

    themed = strip_code_fences(response.text)
    if not themed:
        raise AIError("AI returned empty Mermaid code", AIErrorKind.MALFORMED)

    return ThemedDiagram(themed, title, True, len(mermaid_code), warnings)
