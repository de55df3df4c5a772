# tests/test_repo_sqlmodel_unit.py
"""
SQLModel-backed store against SQLite in memory.
No .db files are created.
"""

import json

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from solflow_api.models.workflow import CreateWorkflowDTO, UpdateWorkflowDTO, WorkflowTable
from solflow_api.services.repository import SQLiteWorkflowStore


@pytest.fixture()
def engine():
    # "sqlite://" with StaticPool keeps ONE connection alive, shared across threads
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    yield eng
    SQLModel.metadata.drop_all(eng)


@pytest.fixture()
def repo(engine):
    r = SQLiteWorkflowStore(engine=engine)
    r.create_schema()
    return r


def test_schema_has_workflows_table_with_owner_index(engine, repo):
    inspector = inspect(engine)
    assert "workflows" in inspector.get_table_names()
    indexed = {col for ix in inspector.get_indexes("workflows") for col in ix["column_names"]}
    assert "owner" in indexed


def test_graph_is_stored_as_json_text(engine, repo):
    wf = repo.create(CreateWorkflowDTO(name="etl", nodes=[{"id": "n1"}], edges=[]))
    with Session(engine) as session:
        row = session.get(WorkflowTable, wf.id)
    assert json.loads(row.nodes) == [{"id": "n1"}]
    assert json.loads(row.edges) == []
    assert row.created_at.endswith("+00:00")


def test_records_survive_a_new_store_instance(engine, repo):
    wf = repo.create(CreateWorkflowDTO(name="persisted", nodes=[], edges=[]), owner="wallet")
    reopened = SQLiteWorkflowStore(engine)
    fetched = reopened.get(wf.id)
    assert fetched.name == "persisted"
    assert fetched.owner == "wallet"


def test_update_overwrites_row(engine, repo):
    wf = repo.create(CreateWorkflowDTO(name="a", nodes=[], edges=[]))
    repo.update(wf.id, UpdateWorkflowDTO(nodes=[{"id": "x"}], description="now described"))
    with Session(engine) as session:
        row = session.get(WorkflowTable, wf.id)
    assert json.loads(row.nodes) == [{"id": "x"}]
    assert row.description == "now described"


def test_delete_removes_row(engine, repo):
    wf = repo.create(CreateWorkflowDTO(name="gone", nodes=[], edges=[]))
    repo.delete(wf.id)
    with Session(engine) as session:
        assert session.get(WorkflowTable, wf.id) is None
