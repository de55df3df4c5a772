"""
Request-scoped dependencies.

Stores and client factories are resolved through `Depends` so tests can
swap them with `app.dependency_overrides`.
"""

import logging
import os
import threading
from typing import Callable, Optional

from fastapi import Header
from sqlmodel import create_engine

from .config import settings
from .errors import InternalError
from .ia import WorkflowGenerator, get_workflow_generator
from .services.bags import BagsClient
from .services.payments import PaymentLedger
from .services.repository import SQLiteWorkflowStore
from .services.solana import RpcClientFactory, SolanaRpcClient
from .services.store import InMemoryWorkflowStore, WorkflowStore

logger = logging.getLogger(__name__)

BagsClientFactory = Callable[[Optional[str]], BagsClient]


async def wallet_address(x_wallet_address: str | None = Header(default=None)) -> Optional[str]:
    # Client-asserted; an empty header means "no owner"
    return x_wallet_address or None


# ============================================================================
# Stores
# ============================================================================

_store: Optional[WorkflowStore] = None
_ledger: Optional[PaymentLedger] = None
_lock = threading.Lock()


def _build_store() -> WorkflowStore:
    if settings.workflow_store == "sqlite":
        path = settings.database_url.removeprefix("sqlite:///")
        if path and path != settings.database_url and os.path.dirname(path):
            os.makedirs(os.path.dirname(path), exist_ok=True)
        engine = create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
        store = SQLiteWorkflowStore(engine)
        store.create_schema()
        logger.info("Workflow store: sqlite (%s)", settings.database_url)
        return store

    logger.info("Workflow store: memory")
    return InMemoryWorkflowStore()


def get_workflow_store() -> WorkflowStore:
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = _build_store()
    return _store


def get_payment_ledger() -> PaymentLedger:
    global _ledger
    if _ledger is None:
        with _lock:
            if _ledger is None:
                _ledger = PaymentLedger()
    return _ledger


# ============================================================================
# Remote clients
# ============================================================================

def get_rpc_factory() -> RpcClientFactory:
    return lambda endpoint: SolanaRpcClient(endpoint, timeout=settings.http_timeout)


def get_bags_factory() -> BagsClientFactory:
    return lambda api_key: BagsClient(settings.bags_api_base, api_key=api_key, timeout=settings.http_timeout)


def get_generator() -> WorkflowGenerator:
    try:
        return get_workflow_generator()
    except ValueError as e:
        # Missing API key or unknown provider
        raise InternalError(str(e)) from e
