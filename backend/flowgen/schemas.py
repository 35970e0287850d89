from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class ArticleToFlowchartRequest(BaseModel):
    """Body of POST /article-to-flowchart. Loosely typed; the route validates."""
    model_config = ConfigDict(populate_by_name=True)

    article: Any = None
    theme_instructions: Optional[str] = Field(default=None, alias="themeInstructions")
    theme_preset: Optional[str] = Field(default=None, alias="themePreset")
    count: Any = None


class ChatMessage(BaseModel):
    role: str = "user"  # system | user | assistant
    content: str


class GenerateOptionsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens")


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    messages: List[ChatMessage] = []
    action: Optional[str] = None  # "check-models"
    options: Optional[GenerateOptionsModel] = None


class CustomThemeConfig(BaseModel):
    """Either free-form instructions or ThemeConfig fields (camelCase)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    custom_instructions: Optional[str] = Field(default=None, alias="customInstructions")
    sample_themed_code: Optional[str] = Field(default=None, alias="sampleThemedCode")


class ApplyThemeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mermaid_code: Any = Field(default=None, alias="mermaidCode")
    diagram_title: Optional[str] = Field(default=None, alias="diagramTitle")
    theme_preset: Optional[str] = Field(default=None, alias="themePreset")
    custom_theme_config: Optional[CustomThemeConfig] = Field(default=None, alias="customThemeConfig")

    def theme_fields(self) -> Dict[str, Any]:
        if self.custom_theme_config is None:
            return {}
        return dict(self.custom_theme_config.model_extra or {})
