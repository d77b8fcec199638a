"""Adapters do workflow engine (HTTP e em memória)."""

from app.infra.workflow.http_client import WorkflowEngineClient
from app.infra.workflow.memory_engine import MemoryWorkflowEngine

__all__ = ["MemoryWorkflowEngine", "WorkflowEngineClient"]
