"""
Pytest configuration and fixtures for all tests.

Provides a scripted generation collaborator so no test talks to a real
LLM provider.
"""

import pytest

from prompt_framework.config.limits import EngineLimits
from prompt_framework.llm.mock import MockProvider
from prompt_framework.session.controller import PromptSessionController
from prompt_framework.synthesis.generation import GenerationClient


@pytest.fixture
def mock_provider() -> MockProvider:
    """Mock LLM provider; script it with set_responses()."""
    return MockProvider()


@pytest.fixture
def generation_client(mock_provider) -> GenerationClient:
    return GenerationClient(mock_provider)


@pytest.fixture
def limits() -> EngineLimits:
    return EngineLimits()


@pytest.fixture
def controller(generation_client, limits) -> PromptSessionController:
    return PromptSessionController(generation_client, limits=limits)


@pytest.fixture
def guided_questions_reply() -> dict:
    """A valid guided_questions response with five questions."""
    return {
        "questions": [
            {
                "question": f"Question number {i}?",
                "options": [
                    {"text": "Option A", "emoji": "🅰️"},
                    {"text": "Option B", "emoji": "🅱️"},
                ],
            }
            for i in range(1, 6)
        ]
    }


@pytest.fixture
def topic_questions_reply() -> dict:
    """A valid topic questions response covering all six topics."""
    topics = ["goal", "role", "context", "output_format", "warning", "example"]
    return {
        "questions": [
            {
                "topic": topic,
                "question": f"What about {topic}?",
                "options": [{"text": "Yes", "emoji": "👍"}, {"text": "No", "emoji": "👎"}],
                "allow_custom": True,
            }
            for topic in topics
        ]
    }


@pytest.fixture
def final_result_reply() -> dict:
    return {
        "enhanced_prompt": "Write a friendly email to the team about Friday's demo.",
        "lazy_tweaks": [
            {"name": "Make it funnier", "emoji": "😄", "description": "Add humor"},
        ],
        "laziness_score": 9,
        "prompt_quality": 8,
    }


@pytest.fixture
def analysis_reply() -> dict:
    return {
        "score": 42,
        "score_label": "Needs Work",
        "suggested_questions": {
            "goals": [
                {"question": "What is the purpose of the email?", "type": "textarea"},
            ],
            "context": [
                {"question": "Who will receive it?", "type": "select",
                 "options": ["Colleagues", "Clients", "Friends"]},
            ],
        },
    }
