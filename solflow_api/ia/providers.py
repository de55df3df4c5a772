# solflow_api/ia/providers.py
"""
Strategy Pattern: interchangeable completion providers.

Every provider turns a (system prompt, user prompt) pair into free text. The
workflow generator does the JSON extraction, so providers stay dumb.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import openai

from ..errors import RemoteServiceError

logger = logging.getLogger(__name__)


class CompletionProviderStrategy(ABC):
    """Common interface for every completion provider."""

    name: str = "abstract"
    model: str = ""

    @abstractmethod
    def complete(
        self,
        system_prompt: Optional[str],
        user_prompt: str,
        *,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """
        Run one completion.

        Args:
            system_prompt: Instructions for the model (may be None)
            user_prompt: The user's request
            model: Override of the provider's default model
            temperature: Sampling temperature
            max_tokens: Completion length cap

        Returns:
            Raw completion text

        Raises:
            RemoteServiceError: If the remote service fails or returns nothing
        """


class MockCompletionProvider(CompletionProviderStrategy):
    """
    Deterministic provider for development and tests.

    Without canned responses it answers with a small balance-check workflow,
    or a list of node suggestions when asked to suggest.
    """

    name = "mock"
    model = "mock"

    def __init__(self, responses: Optional[List[str]] = None):
        self._responses = list(responses or [])
        self.calls: List[dict] = []

    def complete(self, system_prompt, user_prompt, *, model=None, temperature=0.7, max_tokens=2000) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "model": model or self.model})
        if self._responses:
            return self._responses.pop(0)

        if "JSON array" in user_prompt:
            return json.dumps([
                {"type": "get-balance", "reason": "Read the account balance"},
                {"type": "lamports-to-sol", "reason": "Convert lamports to SOL"},
                {"type": "output-display", "reason": "Show the result"},
            ])

        workflow = {
            "nodes": [
                {"type": "rpc-connection", "label": "RPC", "position": {"x": 100, "y": 100}, "values": {}},
                {"type": "input-publickey", "label": "Address", "position": {"x": 100, "y": 250}, "values": {}},
                {"type": "get-balance", "label": "Balance", "position": {"x": 350, "y": 150}, "values": {}},
                {"type": "output-display", "label": "Show", "position": {"x": 600, "y": 150}, "values": {}},
            ],
            "edges": [
                {"sourceIndex": 0, "targetIndex": 2, "sourceHandle": "connection", "targetHandle": "connection"},
                {"sourceIndex": 1, "targetIndex": 2, "sourceHandle": "publicKey", "targetHandle": "publicKey"},
                {"sourceIndex": 2, "targetIndex": 3, "sourceHandle": "sol", "targetHandle": "value"},
            ],
        }
        return "Here is your workflow:\n```json\n" + json.dumps(workflow, indent=2) + "\n```"


class OpenAIProvider(CompletionProviderStrategy):
    """Provider backed by the OpenAI chat completions API."""

    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o", timeout: float = 60.0):
        if not api_key:
            raise ValueError("OpenAI API key not configured")

        self.model = model
        self.client = openai.OpenAI(api_key=api_key, timeout=timeout)

    def complete(self, system_prompt, user_prompt, *, model=None, temperature=0.7, max_tokens=2000) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        try:
            response = self.client.chat.completions.create(
                model=model or self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.warning("OpenAI completion failed: %s", e)
            raise RemoteServiceError(str(e) or "OpenAI API request failed", status_code=500) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise RemoteServiceError("No response from AI", status_code=500)
        logger.debug("OpenAI returned %d characters", len(content))
        return content


class GeminiProvider(CompletionProviderStrategy):
    """Provider backed by Google Gemini (Google AI Studio API key)."""

    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-pro"):
        import google.generativeai as genai

        if not api_key:
            raise ValueError("Gemini API key not configured")

        self.model = model
        genai.configure(api_key=api_key)
        self._genai = genai

    def complete(self, system_prompt, user_prompt, *, model=None, temperature=0.7, max_tokens=2000) -> str:
        # Gemini takes one prompt; system instructions go first
        full_prompt = f"{system_prompt}\n\n{user_prompt}" if system_prompt else user_prompt
        try:
            response = self._genai.GenerativeModel(model or self.model).generate_content(
                full_prompt,
                generation_config={"temperature": temperature, "max_output_tokens": max_tokens},
            )
            text = response.text
        except Exception as e:
            # SDK errors span google.api_core exceptions and ValueError (blocked prompts)
            logger.warning("Gemini completion failed: %s", e)
            raise RemoteServiceError(f"Gemini API request failed: {e}", status_code=500) from e

        if not text:
            raise RemoteServiceError("No response from AI", status_code=500)
        return text
