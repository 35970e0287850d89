import logging
from typing import Callable, Dict, List, Optional

import requests

from flowgen import config
from flowgen.ir.errors import AIConfigurationError, AIError, AIErrorKind

from .base import LLMClient
from .config import PROVIDERS, get_llm_client
from .types import AIResponse, GenerationOptions, ModelDescriptor

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Optional[str], Optional[GenerationOptions]], LLMClient]


def _http_error_message(exc: requests.HTTPError) -> str:
    response = exc.response
    if response is None:
        return str(exc)
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"HTTP {response.status_code}: {error['message']}"
    if isinstance(error, str):
        return f"HTTP {response.status_code}: {error}"
    return f"HTTP {response.status_code}"


AUTH_REASONS = {"API_KEY_INVALID", "UNAUTHENTICATED", "PERMISSION_DENIED"}
QUOTA_REASONS = {"RESOURCE_EXHAUSTED", "RATE_LIMIT_EXCEEDED"}


def _http_error_reasons(exc: requests.HTTPError) -> set:
    """
    Google-style error bodies carry a status string and details[].reason;
    Gemini reports a bad key as HTTP 400 with reason API_KEY_INVALID.
    """
    response = exc.response
    if response is None:
        return set()
    try:
        body = response.json()
    except ValueError:
        return set()
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return set()

    reasons = set()
    if isinstance(error.get("status"), str):
        reasons.add(error["status"])
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and isinstance(detail.get("reason"), str):
            reasons.add(detail["reason"])
    return reasons


def classify_exception(exc: Exception) -> AIError:
    """Map a client-side exception onto the AIError taxonomy."""
    if isinstance(exc, AIError):
        return exc
    if isinstance(exc, requests.Timeout):
        return AIError(f"Backend timed out: {exc}", AIErrorKind.TIMEOUT)
    if isinstance(exc, requests.ConnectionError):
        return AIError(f"Backend unavailable: {exc}", AIErrorKind.UNAVAILABLE)
    if isinstance(exc, requests.HTTPError):
        status = exc.response.status_code if exc.response is not None else None
        message = _http_error_message(exc)
        reasons = _http_error_reasons(exc)
        if status in (401, 403) or reasons & AUTH_REASONS:
            return AIError(f"Backend rejected credentials ({message})", AIErrorKind.AUTH)
        if status == 429 or reasons & QUOTA_REASONS:
            return AIError(f"Backend quota exceeded ({message})", AIErrorKind.QUOTA)
        return AIError(f"Backend error ({message})", AIErrorKind.PROVIDER_ERROR)
    if isinstance(exc, requests.exceptions.InvalidJSONError):
        return AIError(f"Backend returned invalid JSON: {exc}", AIErrorKind.MALFORMED)
    if isinstance(exc, requests.RequestException):
        return AIError(f"Backend request failed: {exc}", AIErrorKind.UNAVAILABLE)
    if isinstance(exc, AIConfigurationError):
        raise exc
    # anything else came out of walking the response body
    return AIError(f"Unexpected response shape from backend: {exc!r}", AIErrorKind.MALFORMED)


class AIEngine:
    """
    Provider-agnostic entry point for text generation.

    The engine holds only read-only configuration; a client is built per
    call, so one engine can serve concurrent requests.

    Usage:
        engine = AIEngine()
        response = engine.ask_ai("Summarize ...")
        if response.success:
            print(response.text)
    """

    def __init__(self, provider: Optional[str] = None, client_factory: ClientFactory = get_llm_client):
        self.provider = (provider or config.AI_PROVIDER).strip().lower()
        self.client_factory = client_factory

    def _client(self, options: Optional[GenerationOptions]) -> LLMClient:
        provider = (options.provider if options and options.provider else self.provider)
        return self.client_factory(provider, options)

    def ask_ai(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        messages: Optional[List[Dict]] = None,
    ) -> AIResponse:
        """
        Send one generation request.

        `messages` is prior conversation (system / user / assistant); the
        prompt is appended as the final user turn. Backend failures come
        back as AIResponse(success=False), they are never raised.
        Configuration problems raise AIConfigurationError.
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must be a non-empty string")

        client = self._client(options)
        conversation = list(messages or []) + [{"role": "user", "content": prompt}]

        logger.info(
            "[AI] provider=%s model=%s messages=%d prompt_chars=%d",
            client.provider, client.model, len(conversation), len(prompt),
        )

        try:
            text = client.generate(conversation, options)
        except AIConfigurationError:
            raise
        except Exception as exc:
            error = classify_exception(exc)
            logger.warning("[AI] %s failure from %s: %s", error.kind, client.provider, error.message)
            return AIResponse.fail(AIErrorKind(error.kind), error.message, client.provider, client.model)

        if not isinstance(text, str) or not text.strip():
            logger.warning("[AI] empty response from %s", client.provider)
            return AIResponse.fail(
                AIErrorKind.MALFORMED,
                "Backend returned an empty response",
                client.provider,
                client.model,
            )

        logger.info("[AI] received %d chars from %s", len(text), client.provider)
        return AIResponse.ok(text, client.provider, client.model, client.last_usage)

    def get_models_for_provider(self, provider_id: Optional[str] = None) -> List[ModelDescriptor]:
        """
        Diagnostic model listing. Raises AIConfigurationError for unknown
        providers and AIError when the backend cannot be reached.
        """
        provider_id = (provider_id or self.provider).strip().lower()
        if provider_id not in PROVIDERS:
            raise AIConfigurationError(f"Unknown AI provider '{provider_id}'", kind="unknown_provider")

        client = self.client_factory(provider_id, None)
        try:
            models = client.list_models()
        except AIConfigurationError:
            raise
        except Exception as exc:
            raise classify_exception(exc) from exc

        logger.info("[AI] %d models available from %s", len(models), provider_id)
        return models
