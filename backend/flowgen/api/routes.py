import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from flowgen import config
from flowgen.api.serializers import error_payload, serialize_ir, serialize_pipeline_result
from flowgen.inference.engine import AIEngine
from flowgen.inference.types import GenerationOptions
from flowgen.ir.errors import AIConfigurationError, AIError, InputValidationError, PipelineError
from flowgen.pipeline.executor import PipelineExecutor
from flowgen.schemas import ApplyThemeRequest, ArticleToFlowchartRequest, GenerateRequest
from flowgen.themes.apply import apply_theme
from flowgen.themes.theme_template import (
    ORIENTATION_OPTIONS,
    PRESET_THEMES,
    ThemeConfig,
    generate_theme_prompt,
    get_preset,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_engine() -> AIEngine:
    return AIEngine()


def _error(status_code: int, error: str, exc=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_payload(error, exc))


# ============================
# Article -> flowcharts
# ============================

@router.post("/article-to-flowchart")
def article_to_flowchart(request: ArticleToFlowchartRequest, engine: AIEngine = Depends(get_engine)):
    theme_instructions = request.theme_instructions or ""
    if not theme_instructions.strip() and get_preset(request.theme_preset):
        theme_instructions = generate_theme_prompt(get_preset(request.theme_preset))

    try:
        result = PipelineExecutor(engine=engine).run(
            request.article,
            theme_instructions=theme_instructions,
            count=request.count,
        )
    except InputValidationError as e:
        return _error(e.status_code, e.message, e)
    except PipelineError as e:
        logger.error("[API] article-to-flowchart failed (%s): %s", e.kind, e.message)
        return _error(500, "Failed to process article", e)

    return serialize_pipeline_result(result)


# ============================
# Raw generation / diagnostics
# ============================

@router.post("/generate")
def generate(request: GenerateRequest, engine: AIEngine = Depends(get_engine)):
    try:
        if request.action == "check-models":
            provider = request.options.provider if request.options else None
            models = engine.get_models_for_provider(provider)
            return {
                "success": True,
                "provider": provider or engine.provider,
                "models": serialize_ir(models),
            }

        messages = [m.model_dump() for m in request.messages]
        prompt = request.prompt
        if not prompt and messages and messages[-1]["role"] == "user":
            prompt = messages.pop()["content"]

        if not prompt or not prompt.strip():
            return _error(400, "Either prompt or messages (ending with a user message) is required")

        options = None
        if request.options is not None:
            options = GenerationOptions(
                provider=request.options.provider,
                model=request.options.model,
                temperature=request.options.temperature,
                max_tokens=request.options.max_tokens,
            )

        response = engine.ask_ai(prompt, options, messages)
    except AIConfigurationError as e:
        return _error(500, "AI backend is not configured", e)
    except AIError as e:
        return _error(500, "AI request failed", e)

    if not response.success:
        return JSONResponse(status_code=500, content=response.to_dict())
    return response.to_dict()


@router.get("/models/{provider}")
def list_models(provider: str, engine: AIEngine = Depends(get_engine)):
    try:
        models = engine.get_models_for_provider(provider)
    except AIConfigurationError as e:
        status = 404 if e.kind == "unknown_provider" else 500
        return _error(status, "Cannot list models", e)
    except AIError as e:
        return _error(500, "Cannot list models", e)

    return {"provider": provider, "models": serialize_ir(models)}


# ============================
# Themes
# ============================

@router.get("/themes")
def list_themes():
    return {
        "presets": {name: serialize_ir(theme) for name, theme in PRESET_THEMES.items()},
        "orientations": ORIENTATION_OPTIONS,
    }


@router.post("/apply-theme-to-diagram")
def apply_theme_to_diagram(request: ApplyThemeRequest, engine: AIEngine = Depends(get_engine)):
    custom = request.custom_theme_config

    try:
        theme_config = ThemeConfig.model_validate(request.theme_fields()) if request.theme_fields() else None
    except SchemaError as e:
        return _error(400, "Invalid customThemeConfig", InputValidationError(str(e)))

    try:
        themed = apply_theme(
            engine,
            request.mermaid_code,
            preset=request.theme_preset,
            instructions=custom.custom_instructions if custom else None,
            sample_code=custom.sample_themed_code if custom else None,
            title=request.diagram_title,
            theme_config=theme_config,
        )
    except InputValidationError as e:
        return _error(e.status_code, e.message, e)
    except PipelineError as e:
        logger.error("[API] apply-theme failed (%s): %s", e.kind, e.message)
        return _error(500, "Failed to apply theme to diagram", e)

    return themed.to_dict()


@router.get("/health")
def health():
    return {"status": "ok", "provider": config.AI_PROVIDER}
