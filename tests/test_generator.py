# tests/test_generator.py
import pytest

from solflow_api.errors import RemoteServiceError
from solflow_api.ia import (
    CompletionProviderFactory,
    MockCompletionProvider,
    OpenAIProvider,
    WorkflowGenerator,
    extract_json,
)
from solflow_api.ia import generator as generator_module


def test_extract_json_prefers_fenced_block():
    text = 'Intro {"not": "this"} then\n```json\n{"nodes": [], "edges": []}\n```'
    assert extract_json(text) == {"nodes": [], "edges": []}


def test_extract_json_from_prose():
    assert extract_json('Sure! {"a": 1} Hope that helps.') == {"a": 1}


def test_extract_json_skips_unbalanced_braces():
    assert extract_json('use {curly} braces, then {"ok": true}') == {"ok": True}


def test_extract_json_array():
    assert extract_json('Here: [{"type": "math-add"}]', "[") == [{"type": "math-add"}]


@pytest.mark.parametrize("text", ["", "no json at all", "{broken"])
def test_extract_json_failures(text):
    with pytest.raises(ValueError):
        extract_json(text)


def test_generate_returns_graph_and_model():
    result = WorkflowGenerator(MockCompletionProvider()).generate("show balance")
    assert result.model == "mock"
    assert result.prompt == "show balance"
    assert result.workflow.nodes[0]["type"] == "rpc-connection"


def test_generate_rejects_non_graph_json():
    gen = WorkflowGenerator(MockCompletionProvider(responses=['{"nodes": "nope", "edges": []}']))
    with pytest.raises(RemoteServiceError) as exc:
        gen.generate("p")
    assert exc.value.status_code == 500


def test_suggest_next_sends_no_system_prompt():
    provider = MockCompletionProvider()
    WorkflowGenerator(provider).suggest_next([{"type": "rpc-connection"}])
    call = provider.calls[0]
    assert call["system"] is None
    assert "Last selected node: none" in call["user"]


def test_factory_builds_mock_by_default():
    assert isinstance(CompletionProviderFactory.create_provider("mock"), MockCompletionProvider)


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider type"):
        CompletionProviderFactory.create_provider("llama")


def test_openai_requires_api_key():
    with pytest.raises(ValueError, match="OpenAI API key not configured"):
        OpenAIProvider(api_key="")


def test_singleton_is_reused(monkeypatch):
    monkeypatch.setattr(generator_module, "_instance", None)
    first = generator_module.get_workflow_generator()
    assert generator_module.get_workflow_generator() is first
