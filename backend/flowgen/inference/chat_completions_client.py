import requests
from typing import Dict, List, Optional

from .base import LLMClient
from .types import GenerationOptions, ModelDescriptor, TokenUsage


class ChatCompletionsClient(LLMClient):
    """OpenAI-compatible /chat/completions (llama.cpp server, vLLM, OpenAI)."""

    provider = "openai"

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 8192,
        timeout: float = 60.0,
        api_key: str = "",
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.api_key = api_key
        self.last_usage = None

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def generate(self, messages: List[Dict], options: Optional[GenerationOptions] = None) -> str:
        options = options or GenerationOptions()
        url = f"{self.base_url}/chat/completions"

        response = requests.post(
            url,
            json={
                "model": self.model,
                "messages": messages,
                "temperature": options.temperature if options.temperature is not None else self.temperature,
                "max_tokens": options.max_tokens or self.max_tokens,
            },
            headers=self._headers(),
            timeout=options.timeout or self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        usage = data.get("usage") or {}
        self.last_usage = TokenUsage(
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
        )

        return data["choices"][0]["message"]["content"] or ""

    def list_models(self) -> List[ModelDescriptor]:
        response = requests.get(
            f"{self.base_url}/models",
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()

        return [
            ModelDescriptor(
                id=m["id"],
                name=m["id"],
                description=m.get("owned_by"),
                supported_features=["chat"],
            )
            for m in response.json().get("data", [])
        ]
