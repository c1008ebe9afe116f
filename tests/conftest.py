"""
Pytest configuration and fixtures for dinner-ideas tests.
"""

import os
import tempfile

import pytest

# Point profiles and logs at a scratch directory before importing dinner_ideas
os.environ["DINNER_IDEAS_HOME"] = tempfile.mkdtemp(prefix="dinner-ideas-tests-")
os.environ.pop("DINNER_IDEAS_MODEL", None)
os.environ.pop("DINNER_IDEAS_GENERATION_TIMEOUT", None)

from pydantic_ai.models.function import AgentInfo, DeltaToolCall, FunctionModel  # noqa: E402

from dinner_ideas.recipes import FoodTag, RecipeDraft, StepDraft  # noqa: E402


TACO_CHUNKS = [
    '{"name": "Crispy Fish Tacos", ',
    '"description": "Beer-battered fish in warm tortillas with lime slaw.", ',
    '"prep_time": 20, "cook_time": 15, ',
    '"steps": [{"title": "Make the slaw", "description": "Toss cabbage with lime and salt."}, ',
    '{"title": "Fry the fish", "description": "Dip fish in batter and fry until golden."}], ',
    '"tags": ["Quick", "FamilyFriendly"]}',
]


def make_function_model(chunks=TACO_CHUNKS, *, error=None, prompts=None):
    """FunctionModel that streams ``chunks`` as the structured output tool call."""

    async def stream_function(messages, info: AgentInfo):
        if prompts is not None:
            prompts.append(messages)
        name = info.output_tools[0].name
        for index, chunk in enumerate(chunks):
            yield {0: DeltaToolCall(name=name if index == 0 else None, json_args=chunk)}
        if error is not None:
            raise error

    return FunctionModel(stream_function=stream_function)


@pytest.fixture
def complete_draft():
    """A fully populated draft."""
    return RecipeDraft(
        name="Crispy Fish Tacos",
        description="Beer-battered fish in warm tortillas with lime slaw.",
        prep_time=20,
        cook_time=15,
        steps=[
            StepDraft(title="Make the slaw", description="Toss cabbage with lime and salt."),
            StepDraft(title="Fry the fish"),
        ],
        tags=[FoodTag.QUICK, FoodTag.FAMILY_FRIENDLY],
    )


@pytest.fixture
def draft_sequence(complete_draft):
    """Drafts in the order a model fills them in."""
    return [
        RecipeDraft(name="Crispy Fish Tacos"),
        RecipeDraft(name="Crispy Fish Tacos", description=complete_draft.description),
        complete_draft.model_copy(update={"tags": None}),
        complete_draft,
    ]


@pytest.fixture
def store_path(tmp_path):
    """Collection file location inside a per-test directory."""
    return tmp_path / "documents" / "dinner-items.json"


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Per-test data root picked up by Profile."""
    monkeypatch.setenv("DINNER_IDEAS_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def function_model():
    """Factory for streaming FunctionModels, see make_function_model."""
    return make_function_model
