"""Unit tests for ResearchGenerator (LLM-backed research backend)."""

import json

import pytest

from research_loop.llm.exceptions import LLMConnectionError, LLMSchemaViolationError
from research_loop.llm.prompt_builder import PromptBuilder
from research_loop.llm.research_generator import ResearchGenerator
from research_loop.models.enums import ErrorKind
from research_loop.models.research_models import Source
from research_loop.retry.classifier import is_retryable


@pytest.fixture
def generator(mock_llm_client) -> ResearchGenerator:
    return ResearchGenerator(mock_llm_client, PromptBuilder(default_model="test-model"))


@pytest.mark.asyncio
async def test_fetch_research_parses_structured_output(
    generator, mock_llm_client, make_llm_response
):
    mock_llm_client.generate.return_value = make_llm_response(
        json.dumps(
            {
                "summary": "  Qubits are fragile.  ",
                "sources": [
                    {"uri": "https://a.example", "title": " A "},
                    {"uri": " ", "title": "blank uri"},
                ],
            }
        )
    )

    artifact = await generator.fetch_research("quantum computing")

    assert artifact.summary == "Qubits are fragile."
    assert artifact.sources == (Source(uri="https://a.example", title="A"),)

    request = mock_llm_client.generate.await_args.args[0]
    assert "quantum computing" in request.prompt
    assert request.format_schema is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [
        "not json at all",
        json.dumps({"summary": "no sources key"}),
        json.dumps({"summary": 1, "sources": []}),
        json.dumps({"summary": "x", "sources": [{"uri": "u"}]}),
        json.dumps({"summary": "   ", "sources": []}),
    ],
)
async def test_fetch_research_invalid_output_is_terminal(
    generator, mock_llm_client, make_llm_response, content
):
    mock_llm_client.generate.return_value = make_llm_response(content)

    with pytest.raises(LLMSchemaViolationError) as exc_info:
        await generator.fetch_research("x")

    assert exc_info.value.kind is ErrorKind.INVALID_PAYLOAD
    assert is_retryable(exc_info.value) is False


@pytest.mark.asyncio
async def test_fetch_research_propagates_client_errors(generator, mock_llm_client):
    mock_llm_client.generate.side_effect = LLMConnectionError("refused")

    with pytest.raises(LLMConnectionError):
        await generator.fetch_research("x")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content,expected",
    [
        ("Quantum error correction", "Quantum error correction"),
        ('  "Topological qubits"\n', "Topological qubits"),
        ("", None),
        ('  ""  ', None),
    ],
)
async def test_fetch_next_subject(
    generator, mock_llm_client, make_llm_response, content, expected
):
    mock_llm_client.generate.return_value = make_llm_response(content)

    assert await generator.fetch_next_subject("summary") == expected

    request = mock_llm_client.generate.await_args.args[0]
    assert request.format_schema is None


@pytest.mark.asyncio
async def test_health_check_and_close_delegate(generator, mock_llm_client):
    mock_llm_client.health_check.return_value = True

    assert await generator.health_check() is True
    await generator.close()

    mock_llm_client.close.assert_awaited_once()
