from .base import CamelModel
from .workflow import (
    WorkflowTable,
    Workflow,
    WorkflowSummary,
    WorkflowListResponse,
    CreateWorkflowDTO,
    UpdateWorkflowDTO,
    ValidationResult,
)
from .payment import PaymentRecord, PaymentStatus

__all__ = [
    "CamelModel",
    "WorkflowTable", "Workflow", "WorkflowSummary", "WorkflowListResponse",
    "CreateWorkflowDTO", "UpdateWorkflowDTO", "ValidationResult",
    "PaymentRecord", "PaymentStatus",
]
