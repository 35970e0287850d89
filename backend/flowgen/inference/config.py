from typing import Optional

from flowgen import config
from flowgen.ir.errors import AIConfigurationError

from .base import LLMClient
from .chat_completions_client import ChatCompletionsClient
from .gemini_client import GeminiClient
from .ollama_client import OllamaClient
from .types import GenerationOptions

PROVIDERS = ("gemini", "openai", "ollama")


def get_llm_client(provider: Optional[str] = None, options: Optional[GenerationOptions] = None) -> LLMClient:
    """
    Build the client for `provider` (defaults to AI_PROVIDER).

    Raises AIConfigurationError for unknown providers or missing keys;
    nothing is sent over the network here.
    """
    options = options or GenerationOptions()
    provider = (provider or config.AI_PROVIDER).strip().lower()

    temperature = options.temperature if options.temperature is not None else config.AI_TEMPERATURE
    max_tokens = options.max_tokens or config.AI_MAX_TOKENS
    timeout = options.timeout or config.AI_TIMEOUT_SECONDS

    if provider == "gemini":
        if not config.GEMINI_API_KEY:
            raise AIConfigurationError(
                "GEMINI_API_KEY is not set",
                kind="missing_configuration",
            )
        return GeminiClient(
            api_key=config.GEMINI_API_KEY,
            model=options.model or config.GEMINI_MODEL,
            base_url=config.GEMINI_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    if provider == "openai":
        return ChatCompletionsClient(
            base_url=config.LLM_BASE_URL,
            model=options.model or config.LLM_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            api_key=config.LLM_API_KEY,
        )

    if provider == "ollama":
        return OllamaClient(
            base_url=config.OLLAMA_BASE_URL,
            model=options.model or config.OLLAMA_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    raise AIConfigurationError(
        f"Unknown AI provider '{provider}' (expected one of: {', '.join(PROVIDERS)})",
        kind="unknown_provider",
    )
