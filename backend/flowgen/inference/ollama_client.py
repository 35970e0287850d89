import requests
from typing import Dict, List, Optional

from .base import LLMClient
from .types import GenerationOptions, ModelDescriptor, TokenUsage


class OllamaClient(LLMClient):
    provider = "ollama"

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 8192,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.last_usage = None

    def generate(self, messages: List[Dict], options: Optional[GenerationOptions] = None) -> str:
        options = options or GenerationOptions()
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": options.temperature if options.temperature is not None else self.temperature,
                "num_predict": options.max_tokens or self.max_tokens,
            },
        }

        response = requests.post(
            f"{self.base_url}/api/chat",
            json=payload,
            timeout=options.timeout or self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        prompt_tokens = data.get("prompt_eval_count", 0)
        completion_tokens = data.get("eval_count", 0)
        self.last_usage = TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )

        return data["message"]["content"]

    def list_models(self) -> List[ModelDescriptor]:
        response = requests.get(f"{self.base_url}/api/tags", timeout=self.timeout)
        response.raise_for_status()

        models = []
        for m in response.json().get("models", []):
            details = m.get("details") or {}
            models.append(
                ModelDescriptor(
                    id=m["name"],
                    name=m["name"],
                    description=details.get("parameter_size"),
                    supported_features=["chat"],
                )
            )
        return models
