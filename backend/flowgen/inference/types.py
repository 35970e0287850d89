from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from flowgen.ir.errors import AIErrorKind


@dataclass
class GenerationOptions:
    """Per-call overrides. None means "use the provider configuration"."""
    provider: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timeout: Optional[float] = None


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ModelDescriptor:
    id: str
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    max_tokens: Optional[int] = None
    supported_features: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "displayName": self.display_name or self.name,
            "description": self.description,
            "maxTokens": self.max_tokens,
            "supportedFeatures": list(self.supported_features),
        }


@dataclass
class AIResponse:
    success: bool
    text: str = ""
    error: Optional[str] = None
    error_kind: Optional[AIErrorKind] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    usage: Optional[TokenUsage] = None

    @classmethod
    def ok(cls, text: str, provider: str, model: str, usage: Optional[TokenUsage] = None):
        return cls(success=True, text=text, provider=provider, model=model, usage=usage)

    @classmethod
    def fail(cls, kind: AIErrorKind, error: str, provider: Optional[str] = None, model: Optional[str] = None):
        return cls(success=False, error=error, error_kind=kind, provider=provider, model=model)

    def to_dict(self) -> Dict:
        data = {
            "success": self.success,
            "text": self.text,
            "provider": self.provider,
            "model": self.model,
        }
        if self.usage is not None:
            data["usage"] = asdict(self.usage)
        if not self.success:
            data["error"] = self.error
            data["kind"] = self.error_kind.value if self.error_kind else None
        return data
