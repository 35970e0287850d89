from abc import ABC, abstractmethod
from typing import List, Dict, Optional

from .types import GenerationOptions, ModelDescriptor, TokenUsage


class LLMClient(ABC):
    """
    One concrete client per backend.

    Clients talk HTTP and let transport errors (requests exceptions,
    KeyError on unexpected payloads) propagate. AIEngine turns them into
    AIResponse failures.
    """

    provider: str = ""
    model: str = ""
    last_usage: Optional[TokenUsage] = None

    @abstractmethod
    def generate(self, messages: List[Dict], options: Optional[GenerationOptions] = None) -> str:
        """Generate assistant text from chat messages"""
        pass

    @abstractmethod
    def list_models(self) -> List[ModelDescriptor]:
        """Models this backend can serve"""
        pass
