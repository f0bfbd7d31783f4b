"""Shared fixtures for planning agent tests."""

from datetime import date
from typing import List

import pytest

from config import PlannerConfig
from core.llm.base import ChatMessage, ChatResponse, LLMProvider
from core.renderer import DocumentRenderer

GOAL = "Build a personal portfolio website"
TASKS = [
    "Choose a tech stack",
    "Design the page layout",
    "Deploy the site",
]
GENERATED_ON = date(2024, 5, 17)


class FakeProvider(LLMProvider):
    """Records calls and replies with a canned ChatResponse."""

    def __init__(self, response: ChatResponse):
        super().__init__("fake-model")
        self.response = response
        self.calls: List[tuple] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    def chat(self, messages: List[ChatMessage], system_instruction: str) -> ChatResponse:
        self.calls.append((messages, system_instruction))
        return self.response


@pytest.fixture
def goal() -> str:
    return GOAL


@pytest.fixture
def tasks() -> List[str]:
    return list(TASKS)


@pytest.fixture
def plan_text() -> str:
    """A freshly built three-task plan document."""
    return DocumentRenderer().build(GOAL, TASKS, GENERATED_ON)


@pytest.fixture
def fake_provider_factory():
    def _make(text: str = "", success: bool = True, error_message: str = "") -> FakeProvider:
        return FakeProvider(ChatResponse(text=text, success=success, error_message=error_message))
    return _make


@pytest.fixture
def planner_config(tmp_path) -> PlannerConfig:
    return PlannerConfig(
        api_key="test-key",
        output_dir=str(tmp_path / "plans"),
        log_dir=str(tmp_path / "logs"),
        task_count=3,
    )
