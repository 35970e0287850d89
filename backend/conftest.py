"""
Shared fixtures: a scripted LLM client and an AIEngine wired to it.

No test talks to a real backend.
"""

import json

import pytest

from flowgen.inference.base import LLMClient
from flowgen.inference.engine import AIEngine
from flowgen.inference.types import ModelDescriptor


class FakeLLMClient(LLMClient):
    """
    Returns queued responses in order. An Exception instance in the queue
    is raised instead of returned. Every call is recorded.
    """

    provider = "fake"
    model = "fake-model"

    def __init__(self, responses=None, models=None):
        self.responses = list(responses or [])
        self.models = models or []
        self.calls = []
        self.last_usage = None

    def generate(self, messages, options=None):
        self.calls.append({"messages": messages, "options": options})
        if not self.responses:
            raise AssertionError("FakeLLMClient ran out of scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def list_models(self):
        if isinstance(self.models, Exception):
            raise self.models
        return self.models

    @property
    def prompts(self):
        return [call["messages"][-1]["content"] for call in self.calls]


def make_engine(client: FakeLLMClient) -> AIEngine:
    return AIEngine(provider="gemini", client_factory=lambda provider, options: client)


def diagram(title="Order Flow", nodes=None, edges=None, **extra):
    """A well-formed diagram object as the model would emit it."""
    data = {
        "title": title,
        "diagramType": "flowchart",
        "direction": "TD",
        "nodes": nodes if nodes is not None else [
            {"id": "start", "label": "Start"},
            {"id": "pay", "label": "Take payment"},
            {"id": "ship", "label": "Ship order"},
        ],
        "edges": edges if edges is not None else [
            {"from": "start", "to": "pay"},
            {"from": "pay", "to": "ship", "label": "paid"},
        ],
    }
    data.update(extra)
    return data


def diagrams_json(*items) -> str:
    return json.dumps({"diagrams": list(items)})


ARTICLE = (
    "Customers place orders online. The shop takes payment, then the "
    "warehouse picks, packs and ships the order."
)


@pytest.fixture
def article():
    return ARTICLE


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def engine(fake_client):
    return make_engine(fake_client)


@pytest.fixture
def sample_models():
    return [
        ModelDescriptor(id="gemini-2.5-flash", name="models/gemini-2.5-flash", display_name="Gemini 2.5 Flash"),
    ]
