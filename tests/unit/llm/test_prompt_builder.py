"""Unit tests for PromptBuilder."""

import pytest

from research_loop.llm.prompt_builder import PromptBuilder


@pytest.fixture
def builder():
    return PromptBuilder(default_model="test-model", summary_char_limit=100, max_sources=5)


def test_research_prompt_contains_subject(builder):
    prompt = builder.build_research_prompt("quantum computing")

    assert 'The subject is: "quantum computing"' in prompt
    assert "up to 5 sources" in prompt
    assert '"summary"' in prompt


def test_research_prompt_without_sources_instruction():
    builder = PromptBuilder(max_sources=0)

    assert "List up to" not in builder.build_research_prompt("x")


def test_next_inquiry_prompt_contains_summary(builder):
    prompt = builder.build_next_inquiry_prompt("Qubits are fragile.")

    assert "Qubits are fragile." in prompt
    assert "next thread of inquiry" in prompt


def test_next_inquiry_prompt_truncates_long_summary(builder):
    summary = "a" * 100 + "TAIL"

    prompt = builder.build_next_inquiry_prompt(summary)

    assert "a" * 100 in prompt
    assert "TAIL" not in prompt


def test_research_request_includes_schema(builder):
    request = builder.build_research_request("x")

    assert request.model == "test-model"
    assert request.format_schema == builder.json_schema
    assert request.format_schema["required"] == ["summary", "sources"]
    assert request.stream is False


def test_research_request_overrides(builder):
    request = builder.build_research_request("x", model="other", temperature=0.0)

    assert request.model == "other"
    assert request.temperature == 0.0


def test_next_inquiry_request_is_plain_text(builder):
    request = builder.build_next_inquiry_request("summary")

    assert request.format_schema is None
    assert request.max_tokens == 256
    assert request.model == "test-model"


def test_custom_templates_dir(tmp_path):
    (tmp_path / "research_prompt.txt").write_text("Research {{ subject }}")
    (tmp_path / "next_inquiry_prompt.txt").write_text("Next after {{ summary }}")
    schema_path = tmp_path / "schema.json"
    schema_path.write_text('{"type": "object"}')

    builder = PromptBuilder(templates_dir=tmp_path, schema_path=schema_path)

    assert builder.build_research_prompt("bees") == "Research bees"
    assert builder.build_next_inquiry_prompt("hives") == "Next after hives"
    assert builder.json_schema == {"type": "object"}
