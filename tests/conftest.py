"""Shared pytest fixtures: preference sets and a stub Gemini chat model.

The stub records the prompts it receives and either returns canned text or
raises, so no test ever reaches the real generative-language service.
"""

import os

# Keep test runs from writing a log file into the working directory
os.environ["LOG_FILE"] = ""

from types import SimpleNamespace

import pytest
from langchain_core.messages import AIMessage

from models import NamePreferences


class StubChatModel:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def ainvoke(self, messages, **kwargs):
        self.prompts.append(messages[0].content)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


@pytest.fixture
def make_stub():
    return StubChatModel


@pytest.fixture
def preferences() -> NamePreferences:
    return NamePreferences(
        fatherName="Rahul",
        motherName="Priya",
        gender="boy",
        religion="Hindu",
        culture="sanskrit",
        birthDate="2024-03-21",
        siblingNames="Rohan, Meera",
        searchType="syllable-blend",
    )


@pytest.fixture
def plain_preferences() -> NamePreferences:
    """Required fields only: no birth data, siblings or blending."""
    return NamePreferences(fatherName="Rahul", motherName="Priya", gender="girl")


@pytest.fixture
def stub_llm_manager(monkeypatch):
    """Swaps the module-level LLM manager used by the pipelines for one holding a stub."""
    import name_generator

    def install(stub):
        monkeypatch.setattr(name_generator, "llm_manager", SimpleNamespace(creative_llm=stub, llm=stub))
        return stub

    return install
