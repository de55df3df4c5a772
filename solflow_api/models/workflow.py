"""
Workflow Data Models
Graph documents built in the visual editor: opaque nodes plus edges that
reference node ids.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, StringConstraints, conlist, field_validator
from sqlmodel import Field, SQLModel

from ..config import settings
from .base import CamelModel, Url

WorkflowName = Annotated[str, StringConstraints(min_length=1, max_length=settings.max_workflow_name_length)]
Description = Annotated[str, StringConstraints(max_length=settings.max_description_length)]
NodeList = conlist(Any, max_length=settings.max_workflow_nodes)
EdgeList = conlist(Any, max_length=settings.max_workflow_edges)


# ============================================================================
# DATABASE MODEL (used by SQLiteWorkflowStore)
# ============================================================================

class WorkflowTable(SQLModel, table=True):
    """
    Persistent row for a workflow graph.
    Nodes and edges are stored as JSON text; timestamps as fixed-width ISO
    strings, so text order is time order.
    """
    __tablename__ = "workflows"

    id: str = Field(primary_key=True)
    name: str
    description: Optional[str] = None
    nodes: str = "[]"
    edges: str = "[]"
    rpc_endpoint: str = ""
    owner: Optional[str] = Field(default=None, index=True)
    created_at: str
    updated_at: str


# ============================================================================
# API DTOs
# ============================================================================

class CreateWorkflowDTO(CamelModel):
    """Request to create a workflow"""
    name: WorkflowName
    description: Optional[Description] = None
    nodes: NodeList
    edges: EdgeList
    rpc_endpoint: Url = ""


class UpdateWorkflowDTO(CamelModel):
    """Partial update; only the keys present in the request are applied"""
    name: Optional[WorkflowName] = None
    description: Optional[Description] = None
    nodes: Optional[NodeList] = None
    edges: Optional[EdgeList] = None
    rpc_endpoint: Optional[Url] = None

    @field_validator("name", "nodes", "edges", "rpc_endpoint")
    @classmethod
    def _not_null(cls, v):
        # Only reached when the key was sent explicitly; defaults are not validated.
        if v is None:
            raise ValueError("must not be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Workflow(CamelModel):
    """Full workflow record"""
    id: str
    name: str
    description: Optional[str] = None
    nodes: List[Any]
    edges: List[Any]
    rpc_endpoint: str = ""
    owner: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def summary(self) -> "WorkflowSummary":
        return WorkflowSummary(
            id=self.id,
            name=self.name,
            description=self.description,
            node_count=len(self.nodes),
            edge_count=len(self.edges),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class WorkflowSummary(CamelModel):
    """Workflow summary for list view"""
    id: str
    name: str
    description: Optional[str] = None
    node_count: int
    edge_count: int
    created_at: datetime
    updated_at: datetime


class WorkflowListResponse(BaseModel):
    workflows: List[WorkflowSummary]
    total: int


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str]
    warnings: List[str]
