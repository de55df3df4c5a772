"""
Repository Layer
SQLModel-backed workflow store, for deployments that want workflows to
survive a restart. Same semantics as the in-memory store.
"""

import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, select

from ..models.workflow import Workflow, WorkflowTable
from .store import WorkflowStore


class SQLiteWorkflowStore(WorkflowStore):
    """Repository for workflow CRUD operations"""

    backend = "sqlite"

    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine

    def create_schema(self):
        """Create all database tables"""
        SQLModel.metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Row <-> model conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _to_row(workflow: Workflow) -> WorkflowTable:
        return WorkflowTable(
            id=workflow.id,
            name=workflow.name,
            description=workflow.description,
            nodes=json.dumps(workflow.nodes),
            edges=json.dumps(workflow.edges),
            rpc_endpoint=workflow.rpc_endpoint,
            owner=workflow.owner,
            created_at=workflow.created_at.isoformat(timespec="microseconds"),
            updated_at=workflow.updated_at.isoformat(timespec="microseconds"),
        )

    @staticmethod
    def _to_model(row: WorkflowTable) -> Workflow:
        return Workflow(
            id=row.id,
            name=row.name,
            description=row.description,
            nodes=json.loads(row.nodes) if row.nodes else [],
            edges=json.loads(row.edges) if row.edges else [],
            rpc_endpoint=row.rpc_endpoint,
            owner=row.owner,
            created_at=datetime.fromisoformat(row.created_at),
            updated_at=datetime.fromisoformat(row.updated_at),
        )

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    def _load(self, workflow_id: str) -> Optional[Workflow]:
        with Session(self.engine) as session:
            row = session.get(WorkflowTable, workflow_id)
            return self._to_model(row) if row else None

    def _save(self, workflow: Workflow) -> None:
        with Session(self.engine) as session:
            session.merge(self._to_row(workflow))
            session.commit()

    def _remove(self, workflow_id: str) -> None:
        with Session(self.engine) as session:
            row = session.get(WorkflowTable, workflow_id)
            if row:
                session.delete(row)
                session.commit()

    def _scan(self, owner: Optional[str] = None) -> List[Workflow]:
        with Session(self.engine) as session:
            statement = select(WorkflowTable)
            if owner is not None:
                statement = statement.where(WorkflowTable.owner == owner)
            statement = statement.order_by(WorkflowTable.created_at, WorkflowTable.id)
            return [self._to_model(row) for row in session.exec(statement).all()]
