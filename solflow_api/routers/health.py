import time
from datetime import datetime, UTC

from fastapi import APIRouter, Depends

from ..deps import get_workflow_store
from ..services.store import WorkflowStore

router = APIRouter()

_started = time.monotonic()


def _now() -> str:
    return datetime.now(UTC).isoformat()


@router.get("/health")
def health():
    return {"status": "ok", "timestamp": _now(), "uptime": time.monotonic() - _started}


@router.get("/health/ready")
def ready(store: WorkflowStore = Depends(get_workflow_store)):
    return {"status": "ready", "timestamp": _now(), "store": store.backend}
