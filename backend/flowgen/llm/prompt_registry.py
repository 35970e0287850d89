import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

_IF_BLOCK_RE = re.compile(r"\{\{#if\s+(\w+)\s*\}\}(.*?)\{\{/if\}\}", re.DOTALL)
_VAR_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def load_prompt(filename: str) -> str:
    """
    Load LLM prompt files safely in Docker and local environments.
    """
    prompt_dir = Path(__file__).resolve().parent / "prompts"
    return (prompt_dir / filename).read_text(encoding="utf-8")


def render_template(template: str, variables: Dict[str, object]) -> str:
    """
    {{#if name}}...{{/if}} blocks are kept only when `name` is truthy,
    then every {{name}} is substituted (missing names become "").
    """
    def _if(match):
        return match.group(2) if variables.get(match.group(1)) else ""

    def _var(match):
        value = variables.get(match.group(1))
        return "" if value is None else str(value)

    text = _IF_BLOCK_RE.sub(_if, template)
    text = _VAR_RE.sub(_var, text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


@dataclass
class PromptTemplate:
    id: str
    name: str
    description: str
    filename: str
    variables: List[str]


DEFAULT_PROMPTS = [
    PromptTemplate(
        id="article-to-diagrams",
        name="Article to diagrams",
        description="Stage 1: extract N structured diagrams from an article",
        filename="article_to_diagrams.txt",
        variables=["article", "count", "theme_instructions"],
    ),
    PromptTemplate(
        id="repair-diagrams-json",
        name="Repair diagrams JSON",
        description="Follow-up asking for the Stage 1 JSON again after a parse failure",
        filename="repair_diagrams_json.txt",
        variables=["count", "error"],
    ),
    PromptTemplate(
        id="apply-theme-to-mermaid",
        name="Apply theme to Mermaid",
        description="Restyle existing Mermaid code",
        filename="apply_theme.txt",
        variables=["mermaid_code", "theme_instructions", "sample_themed_code", "diagram_title"],
    ),
]


class PromptRegistry:
    def __init__(self, prompts: Optional[List[PromptTemplate]] = None):
        self._prompts: Dict[str, PromptTemplate] = {}
        self._cache: Dict[str, str] = {}
        for prompt in prompts if prompts is not None else DEFAULT_PROMPTS:
            self.register(prompt)

    def register(self, prompt: PromptTemplate) -> None:
        self._prompts[prompt.id] = prompt
        self._cache.pop(prompt.id, None)

    def has(self, prompt_id: str) -> bool:
        return prompt_id in self._prompts

    def get(self, prompt_id: str) -> PromptTemplate:
        if prompt_id not in self._prompts:
            raise KeyError(f"Unknown prompt '{prompt_id}'")
        return self._prompts[prompt_id]

    def list(self) -> List[PromptTemplate]:
        return list(self._prompts.values())

    def template(self, prompt_id: str) -> str:
        if prompt_id not in self._cache:
            self._cache[prompt_id] = load_prompt(self.get(prompt_id).filename)
        return self._cache[prompt_id]

    def render(self, prompt_id: str, variables: Dict[str, object]) -> str:
        return render_template(self.template(prompt_id), variables)


_registry: Optional[PromptRegistry] = None


def get_prompt_registry() -> PromptRegistry:
    global _registry
    if _registry is None:
        _registry = PromptRegistry()
    return _registry
