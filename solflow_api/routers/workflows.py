from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Response, status

from ..deps import get_workflow_store, wallet_address
from ..models.workflow import (
    CreateWorkflowDTO,
    UpdateWorkflowDTO,
    ValidationResult,
    Workflow,
    WorkflowListResponse,
)
from ..services.store import WorkflowStore
from ..services.validation import validate_structure

router = APIRouter()


@router.get("/workflows", response_model=WorkflowListResponse)
def list_workflows(
    owner: Optional[str] = Depends(wallet_address),
    store: WorkflowStore = Depends(get_workflow_store),
) -> WorkflowListResponse:
    """List summaries, restricted to the caller's wallet when the header is sent"""
    workflows = store.list(owner)
    return WorkflowListResponse(workflows=workflows, total=len(workflows))


# Declared before /workflows/{id} so "validate" is not taken for an id
@router.post("/workflows/validate", response_model=ValidationResult)
def validate_workflow(body: Any = Body(default=None)) -> ValidationResult:
    """Check that every edge points at existing nodes. Never persists."""
    body = body if isinstance(body, dict) else {}
    return validate_structure(body.get("nodes"), body.get("edges"))


@router.get("/workflows/{id}", response_model=Workflow)
def get_workflow(id: str, store: WorkflowStore = Depends(get_workflow_store)) -> Workflow:
    return store.get(id)


@router.post("/workflows", response_model=Workflow, status_code=status.HTTP_201_CREATED)
def create_workflow(
    data: CreateWorkflowDTO,
    owner: Optional[str] = Depends(wallet_address),
    store: WorkflowStore = Depends(get_workflow_store),
) -> Workflow:
    return store.create(data, owner)


@router.put("/workflows/{id}", response_model=Workflow)
def update_workflow(
    id: str,
    data: UpdateWorkflowDTO,
    owner: Optional[str] = Depends(wallet_address),
    store: WorkflowStore = Depends(get_workflow_store),
) -> Workflow:
    """Apply the keys present in the body; owned workflows need the same wallet"""
    return store.update(id, data, owner)


@router.delete("/workflows/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workflow(
    id: str,
    owner: Optional[str] = Depends(wallet_address),
    store: WorkflowStore = Depends(get_workflow_store),
) -> Response:
    store.delete(id, owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
