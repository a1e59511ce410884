import asyncio

import pytest

from conftest import FakeLLM
from studyflow.agents.chat import (
    CreateContext,
    DashboardContext,
    NoContext,
    RoadmapContext,
    TaskContext,
    WriteupContext,
    build_system_instruction,
    chat_greeting,
    get_chat_response,
    parse_chat_context,
    suggested_questions,
)
from studyflow.agents.schemas import ChatMessage
from studyflow.errors import ChatError


def test_task_context_instruction_contains_title_and_subtopics():
    context = parse_chat_context({
        "type": "task",
        "data": {
            "task": {"title": "Pandas DataFrames", "subtopics": ["indexing", "merging"]},
            "roadmapTitle": "Data Science",
        },
    })

    assert context == TaskContext(
        title="Pandas DataFrames",
        roadmap_title="Data Science",
        subtopics=("indexing", "merging"),
    )
    instruction = build_system_instruction(context)
    assert "Pandas DataFrames" in instruction
    assert "indexing" in instruction
    assert "merging" in instruction
    assert "Data Science" in instruction


def test_roadmap_context_lists_milestones():
    context = parse_chat_context({
        "type": "roadmap",
        "data": {
            "title": "Rust Systems Programming",
            "description": "Ownership to async.",
            "milestones": [{"title": "Ownership"}, {"title": "Traits"}],
        },
    })

    instruction = build_system_instruction(context)
    assert isinstance(context, RoadmapContext)
    assert '"Rust Systems Programming"' in instruction
    assert "Ownership, Traits" in instruction


def test_dashboard_context_includes_stats():
    context = parse_chat_context({
        "type": "dashboard",
        "data": {
            "roadmaps": [{"title": "Go"}, {"title": "SQL"}],
            "stats": {"hoursStudied": 12.5, "roadmapsCompleted": 1, "currentStreak": 3},
        },
    })

    assert context == DashboardContext(roadmap_titles=("Go", "SQL"), hours_studied=12.5, roadmaps_completed=1)
    instruction = build_system_instruction(context)
    assert "Go, SQL" in instruction
    assert "12.5" in instruction


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, NoContext()),
        ({"type": "create"}, CreateContext()),
        ({"type": "writeup"}, WriteupContext()),
        ({"type": "task", "data": {}}, NoContext()),
        ({"type": "something-new"}, NoContext()),
    ],
)
def test_parse_chat_context_variants(raw, expected):
    assert parse_chat_context(raw) == expected


def test_every_variant_has_an_instruction_greeting_and_suggestions():
    for context in (
        NoContext(),
        RoadmapContext(title="R"),
        TaskContext(title="T", roadmap_title="R"),
        DashboardContext(),
        CreateContext(),
        WriteupContext(),
    ):
        assert "StudyFlow AI" in build_system_instruction(context)
        assert chat_greeting(context)
        assert suggested_questions(context)


def test_unknown_context_type_is_rejected():
    with pytest.raises(TypeError):
        build_system_instruction({"type": "task"})


def test_get_chat_response_forwards_history_and_message():
    llm = FakeLLM(chat_reply="Try the official tutorial.")
    history = [
        ChatMessage(role="model", text="Hi! How can I help?"),
        ChatMessage(role="user", text="What is a DataFrame?"),
        ChatMessage(role="model", text="A 2D labeled table."),
    ]
    context = TaskContext(title="Pandas DataFrames", roadmap_title="Data Science")

    reply = asyncio.run(get_chat_response(history, "Any resources?", context, llm=llm))

    assert reply == "Try the official tutorial."
    call = llm.chat_calls[0]
    assert call["history"] == history
    assert call["message"] == "Any resources?"
    assert call["use_search"] is True
    assert call["system_instruction"] == build_system_instruction(context)


def test_get_chat_response_wraps_failures():
    llm = FakeLLM(chat_reply=RuntimeError("connection reset"))

    with pytest.raises(ChatError) as exc:
        asyncio.run(get_chat_response([], "hello", llm=llm))

    assert str(exc.value) == "Failed to get chat response."
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert len(llm.chat_calls) == 1
