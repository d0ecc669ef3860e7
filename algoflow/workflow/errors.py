from __future__ import annotations

from typing import List


class WorkflowError(Exception):
    """Base exception for workflow failures."""

    def __init__(self, message: str, code: str = "WORKFLOW_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class GraphValidationError(WorkflowError):
    """Raised when the node/edge structure is invalid."""

    def __init__(self, message: str):
        super().__init__(message, "GRAPH_VALIDATION_ERROR")


class CycleDetectedError(WorkflowError):
    """Raised when the graph is not acyclic; ``node_ids`` are the nodes left unsorted."""

    def __init__(self, node_ids: List[str]):
        super().__init__(
            f"Cycle detected in workflow graph: {' -> '.join(node_ids)}",
            "CYCLE_DETECTED",
        )
        self.node_ids = list(node_ids)


class NodeExecutionError(WorkflowError):
    """Raised when a single node fails during a live run."""

    def __init__(self, node_id: str, node_type: str, original_error: Exception):
        super().__init__(
            f"Node {node_id} ({node_type}) failed: {original_error}",
            "NODE_EXECUTION_ERROR",
        )
        self.node_id = node_id
        self.node_type = node_type
        self.original_error = original_error
