"""
Workflow graph validation, ordering and live execution.
"""

from .errors import CycleDetectedError, GraphValidationError, NodeExecutionError, WorkflowError
from .executor import WorkflowExecutor, execute_workflow
from .graph import (
    VALID_NODE_TYPES,
    find_node_by_type,
    get_inputs_for_node,
    get_node_by_id,
    get_terminal_nodes,
    topo_sort,
    validate_graph,
)

__all__ = [
    'WorkflowError',
    'GraphValidationError',
    'CycleDetectedError',
    'NodeExecutionError',
    'WorkflowExecutor',
    'execute_workflow',
    'VALID_NODE_TYPES',
    'validate_graph',
    'topo_sort',
    'get_node_by_id',
    'get_inputs_for_node',
    'get_terminal_nodes',
    'find_node_by_type',
]
