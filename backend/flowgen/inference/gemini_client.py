import requests
from typing import Dict, List, Optional

from flowgen.ir.errors import AIError, AIErrorKind

from .base import LLMClient
from .types import GenerationOptions, ModelDescriptor, TokenUsage


class GeminiClient(LLMClient):
    """
    Google Generative Language REST API (generateContent).

    Chat messages are mapped onto Gemini "contents": the assistant role
    becomes "model" and system messages are sent as systemInstruction.
    """

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.7,
        max_tokens: int = 8192,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.last_usage = None

    @staticmethod
    def _to_contents(messages: List[Dict]):
        system_parts = []
        contents = []
        for message in messages:
            role = message.get("role", "user")
            text = message.get("content", "")
            if role == "system":
                system_parts.append({"text": text})
                continue
            contents.append({
                "role": "model" if role == "assistant" else "user",
                "parts": [{"text": text}],
            })
        return system_parts, contents

    def generate(self, messages: List[Dict], options: Optional[GenerationOptions] = None) -> str:
        options = options or GenerationOptions()
        system_parts, contents = self._to_contents(messages)

        body = {
            "contents": contents,
            "generationConfig": {
                "temperature": options.temperature if options.temperature is not None else self.temperature,
                "maxOutputTokens": options.max_tokens or self.max_tokens,
            },
        }
        if system_parts:
            body["systemInstruction"] = {"parts": system_parts}

        response = requests.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json=body,
            timeout=options.timeout or self.timeout,
        )
        response.raise_for_status()

        data = response.json()

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise AIError(f"Prompt blocked by provider: {block_reason}", AIErrorKind.PROVIDER_ERROR)

        usage = data.get("usageMetadata") or {}
        self.last_usage = TokenUsage(
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            total_tokens=usage.get("totalTokenCount", 0),
        )

        candidate = data["candidates"][0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)

        if not text and candidate.get("finishReason") not in (None, "STOP", "MAX_TOKENS"):
            raise AIError(
                f"Generation stopped by provider: {candidate['finishReason']}",
                AIErrorKind.PROVIDER_ERROR,
            )

        return text

    def list_models(self) -> List[ModelDescriptor]:
        response = requests.get(
            f"{self.base_url}/models",
            params={"key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()

        models = []
        for m in response.json().get("models", []):
            methods = m.get("supportedGenerationMethods") or []
            if "generateContent" not in methods:
                continue
            model_id = m["name"].split("/", 1)[-1]
            models.append(
                ModelDescriptor(
                    id=model_id,
                    name=m["name"],
                    display_name=m.get("displayName"),
                    description=m.get("description"),
                    max_tokens=m.get("inputTokenLimit"),
                    supported_features=list(methods),
                )
            )
        return models
