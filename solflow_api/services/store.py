# solflow_api/services/store.py
"""
Workflow Store
Keyed collection of workflow graphs with ownership-gated mutation.

`WorkflowStore` holds the lifecycle rules (id/timestamp assignment, partial
merge, owner checks); backends only provide load/save/remove/scan. Every
public operation runs under one lock, so concurrent callers touching the same
id resolve as last-write-wins between whole operations.

The owner value comes from the client-asserted `x-wallet-address` header. It
is a trust boundary, not authentication.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Dict, List, Optional

from ..errors import ForbiddenError, NotFoundError
from ..models.workflow import CreateWorkflowDTO, UpdateWorkflowDTO, Workflow, WorkflowSummary
from ..util.ids import new_uuid

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WorkflowStore(ABC):
    """Interface used by the workflow routes. Subclasses pick the storage."""

    backend = "abstract"

    def __init__(self) -> None:
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _load(self, workflow_id: str) -> Optional[Workflow]:
        ...

    @abstractmethod
    def _save(self, workflow: Workflow) -> None:
        """Insert or replace by id."""

    @abstractmethod
    def _remove(self, workflow_id: str) -> None:
        ...

    @abstractmethod
    def _scan(self, owner: Optional[str] = None) -> List[Workflow]:
        """All records in a stable order, optionally restricted to one owner."""

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, data: CreateWorkflowDTO, owner: Optional[str] = None) -> Workflow:
        now = _utcnow()
        with self._lock:
            workflow_id = new_uuid()
            while self._load(workflow_id) is not None:
                workflow_id = new_uuid()

            workflow = Workflow(
                id=workflow_id,
                name=data.name,
                description=data.description,
                nodes=list(data.nodes),
                edges=list(data.edges),
                rpc_endpoint=data.rpc_endpoint,
                owner=owner or None,
                created_at=now,
                updated_at=now,
            )
            self._save(workflow)

        logger.info("Created workflow %s (%d nodes, %d edges)", workflow.id, len(workflow.nodes), len(workflow.edges))
        return workflow

    def get(self, workflow_id: str) -> Workflow:
        with self._lock:
            return self._require(workflow_id)

    def list(self, owner: Optional[str] = None) -> List[WorkflowSummary]:
        with self._lock:
            return [w.summary() for w in self._scan(owner or None)]

    def update(self, workflow_id: str, data: UpdateWorkflowDTO, owner: Optional[str] = None) -> Workflow:
        with self._lock:
            current = self._require(workflow_id)
            self._check_owner(current, owner, "update")

            changes = data.changes()
            # updatedAt must never go backwards, even if the clock does
            changes["updated_at"] = max(_utcnow(), current.updated_at)
            updated = current.model_copy(update=changes)
            self._save(updated)

        logger.info("Updated workflow %s fields=%s", workflow_id, sorted(k for k in changes if k != "updated_at"))
        return updated

    def delete(self, workflow_id: str, owner: Optional[str] = None) -> None:
        with self._lock:
            current = self._require(workflow_id)
            self._check_owner(current, owner, "delete")
            self._remove(workflow_id)

        logger.info("Deleted workflow %s", workflow_id)

    # ------------------------------------------------------------------

    def _require(self, workflow_id: str) -> Workflow:
        workflow = self._load(workflow_id)
        if workflow is None:
            raise NotFoundError("Workflow not found")
        return workflow

    @staticmethod
    def _check_owner(workflow: Workflow, owner: Optional[str], action: str) -> None:
        if workflow.owner and workflow.owner != owner:
            raise ForbiddenError(f"Not authorized to {action} this workflow")


class InMemoryWorkflowStore(WorkflowStore):
    """Process-local dict; insertion order is list order. Lost on restart."""

    backend = "memory"

    def __init__(self) -> None:
        super().__init__()
        self._items: Dict[str, Workflow] = {}

    def _load(self, workflow_id: str) -> Optional[Workflow]:
        workflow = self._items.get(workflow_id)
        return workflow.model_copy(deep=True) if workflow is not None else None

    def _save(self, workflow: Workflow) -> None:
        self._items[workflow.id] = workflow.model_copy(deep=True)

    def _remove(self, workflow_id: str) -> None:
        del self._items[workflow_id]

    def _scan(self, owner: Optional[str] = None) -> List[Workflow]:
        return [w for w in self._items.values() if owner is None or w.owner == owner]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
