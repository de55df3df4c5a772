# solflow_api/ia/generator.py
"""
AI workflow generator.

Turns a natural-language request into a node/edge graph for the visual
builder, and suggests the next nodes to add to an existing graph. The
completion text is free-form; the first JSON value of the expected kind is
pulled out of it and checked against the expected shape.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import RemoteServiceError
from ..models.ai import GeneratedWorkflow, GenerateWorkflowResponse, NodeSuggestion
from .factory import CompletionProviderFactory
from .providers import CompletionProviderStrategy

logger = logging.getLogger(__name__)


WORKFLOW_SYSTEM_PROMPT = """You are a Solana workflow builder AI. Given a user's request, generate a workflow using the available node types.

Available node types and their purposes:
- rpc-connection: Connect to Solana RPC
- get-balance: Get SOL balance of an account
- wallet-connect: Get connected wallet's public key
- get-token-accounts: Get token accounts for an owner
- get-token-balance: Get balance of specific token
- transfer-sol: Create SOL transfer instruction
- transfer-token: Create token transfer instruction
- create-transaction: Create new transaction
- send-transaction: Send transaction to blockchain
- math-add/subtract/multiply/divide: Math operations
- lamports-to-sol, sol-to-lamports: Conversions
- logic-compare, logic-and, logic-or: Logic operations
- input-string, input-number, input-publickey: Input values
- output-display: Display results
- loop-for-each, loop-repeat, loop-range: Loop operations
- bags-bonding-curve: Check Bags.fm bonding curve
- bags-migration-check: Check migration readiness
- bags-token-info: Get Bags token info

Respond ONLY with a JSON object in this exact format:
{
  "nodes": [
    {
      "type": "node-type",
      "label": "Node Label",
      "position": { "x": 100, "y": 100 },
      "values": { "inputKey": "value" }
    }
  ],
  "edges": [
    {
      "sourceIndex": 0,
      "targetIndex": 1,
      "sourceHandle": "outputId",
      "targetHandle": "inputId"
    }
  ]
}

Rules:
- Space nodes horizontally (x += 250) and vertically (y varies by flow)
- Connect nodes logically based on data flow
- Use appropriate node types for the task
- Include necessary input nodes for user-provided values"""


_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n(.*?)\n```", re.DOTALL)


def extract_json(text: str, opener: str = "{") -> Any:
    """
    Return the first JSON value starting with `opener` ("{" or "[") in text.

    Fenced ```json blocks are tried first. Raises ValueError when nothing
    parses.
    """
    if not text:
        raise ValueError("empty completion")

    candidates = [m.group(1) for m in _FENCED_BLOCK.finditer(text)] + [text]
    decoder = json.JSONDecoder()
    for candidate in candidates:
        start = candidate.find(opener)
        while start != -1:
            try:
                value, _ = decoder.raw_decode(candidate, start)
                return value
            except json.JSONDecodeError:
                start = candidate.find(opener, start + 1)
    raise ValueError("no JSON value found in completion")


class WorkflowGenerator:
    """Coordinates a completion provider with prompt building and parsing."""

    def __init__(self, provider: Optional[CompletionProviderStrategy] = None):
        self.provider = provider or CompletionProviderFactory.create_provider()

    def generate(self, prompt: str, node_types: Optional[List[str]] = None) -> GenerateWorkflowResponse:
        system_prompt = WORKFLOW_SYSTEM_PROMPT
        if node_types:
            system_prompt += "\n- Prefer these node types: " + ", ".join(node_types)

        content = self.provider.complete(system_prompt, prompt, temperature=0.7, max_tokens=2000)

        try:
            workflow = GeneratedWorkflow.model_validate(extract_json(content, "{"))
        except (ValueError, PydanticValidationError) as e:
            logger.warning("Unusable workflow completion: %s", e)
            raise RemoteServiceError("AI response is not valid JSON", status_code=500) from e

        return GenerateWorkflowResponse(workflow=workflow, prompt=prompt, model=self.provider.model)

    def suggest_next(
        self, current_nodes: List[Dict[str, Any]], selected_node: Optional[Dict[str, Any]] = None
    ) -> List[NodeSuggestion]:
        node_types = ", ".join(str(n.get("type")) for n in current_nodes)
        selected = (selected_node or {}).get("type") or "none"
        prompt = f"""Current workflow has these nodes: {node_types}.
Last selected node: {selected}.

Suggest 3 most logical next nodes to add to this workflow. Respond with JSON array:
[
  {{ "type": "node-type", "reason": "why this node makes sense" }}
]"""

        model = settings.openai_suggest_model if self.provider.name == "openai" else None
        content = self.provider.complete(None, prompt, model=model, temperature=0.5, max_tokens=300)

        try:
            raw = extract_json(content, "[")
        except ValueError:
            return []

        suggestions = []
        for item in raw:
            try:
                suggestions.append(NodeSuggestion.model_validate(item))
            except PydanticValidationError:
                continue
        return suggestions


# Singleton getter, same shape as the IA client: tests may reset `_instance`.
_instance: Optional[WorkflowGenerator] = None


def get_workflow_generator() -> WorkflowGenerator:
    inst = globals().get("_instance", None)
    if not isinstance(inst, WorkflowGenerator):
        inst = WorkflowGenerator()
        globals()["_instance"] = inst
    return inst
