# solflow_api/ia/__init__.py
"""
AI module for the workflow builder.

- Providers: completion backends (Strategy Pattern)
- Factory: builds the configured provider
- Generator: prompt building and JSON extraction for graph generation
"""

from .providers import CompletionProviderStrategy, MockCompletionProvider, OpenAIProvider, GeminiProvider
from .factory import CompletionProviderFactory
from .generator import WorkflowGenerator, extract_json, get_workflow_generator

__all__ = [
    "CompletionProviderStrategy",
    "MockCompletionProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "CompletionProviderFactory",
    "WorkflowGenerator",
    "extract_json",
    "get_workflow_generator",
]
