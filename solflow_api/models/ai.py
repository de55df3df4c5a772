from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import CamelModel


class GenerateWorkflowRequest(CamelModel):
    prompt: str = Field(min_length=1)
    node_types: Optional[List[str]] = None


class GeneratedWorkflow(BaseModel):
    """Shape expected back from the completion; node payloads stay opaque."""
    model_config = ConfigDict(extra="allow")

    nodes: List[Dict[str, Any]]
    edges: List[Dict[str, Any]]


class GenerateWorkflowResponse(BaseModel):
    workflow: GeneratedWorkflow
    prompt: str
    model: str


class SuggestNextRequest(CamelModel):
    current_nodes: List[Dict[str, Any]] = Field(default_factory=list)
    selected_node: Optional[Dict[str, Any]] = None


class NodeSuggestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    reason: str = ""


class SuggestNextResponse(BaseModel):
    suggestions: List[NodeSuggestion]
