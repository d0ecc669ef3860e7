"""
DAG validation and ordering for workflow graphs.
"""

from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models.workflow import NodeType, WorkflowEdge, WorkflowNode
from .errors import CycleDetectedError, GraphValidationError


VALID_NODE_TYPES = [t.value for t in NodeType]


def validate_graph(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> None:
    """
    Check graph structure.

    Raises:
        GraphValidationError: On an empty graph, a blank or duplicate node ID,
            an unknown node type, an edge to an unknown node, or a self-loop
    """
    if not nodes:
        raise GraphValidationError("Workflow must have at least one node")

    node_ids = set()
    for node in nodes:
        if not node.id or not node.id.strip():
            raise GraphValidationError("All nodes must have a valid ID")
        if node.id in node_ids:
            raise GraphValidationError(f"Duplicate node ID: {node.id}")
        node_ids.add(node.id)

    for node in nodes:
        if node.type not in VALID_NODE_TYPES:
            raise GraphValidationError(
                f'Invalid node type "{node.type}" for node {node.id}. '
                f"Must be one of: {', '.join(VALID_NODE_TYPES)}"
            )

    for edge in edges:
        if edge.source not in node_ids:
            raise GraphValidationError(f"Edge references unknown source node: {edge.source}")
        if edge.target not in node_ids:
            raise GraphValidationError(f"Edge references unknown target node: {edge.target}")
        if edge.source == edge.target:
            raise GraphValidationError(f"Self-loop detected on node: {edge.source}")


def topo_sort(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> List[WorkflowNode]:
    """
    Order nodes with Kahn's algorithm.

    Nodes touched by an edge are sorted first (FIFO, seeded in input
    order); nodes with no edges follow in input order.

    Raises:
        CycleDetectedError: Carrying every node ID that could not be ordered
    """
    connected = set()
    for edge in edges:
        connected.add(edge.source)
        connected.add(edge.target)

    adjacency: Dict[str, List[str]] = {node.id: [] for node in nodes}
    in_degree: Dict[str, int] = {node.id: 0 for node in nodes}
    for edge in edges:
        adjacency[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    queue = deque(
        node.id for node in nodes
        if node.id in connected and in_degree[node.id] == 0
    )

    ordered: List[str] = []
    while queue:
        node_id = queue.popleft()
        ordered.append(node_id)
        for neighbor in adjacency[node_id]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    emitted = set(ordered)
    stuck = [node.id for node in nodes if node.id in connected and node.id not in emitted]
    if stuck:
        raise CycleDetectedError(stuck)

    ordered.extend(node.id for node in nodes if node.id not in connected)

    by_id = {node.id: node for node in nodes}
    return [by_id[node_id] for node_id in ordered]


def get_node_by_id(node_id: str, nodes: Sequence[WorkflowNode]) -> Optional[WorkflowNode]:
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def get_inputs_for_node(
    node_id: str,
    context: Mapping[str, Any],
    edges: Sequence[WorkflowEdge],
) -> Dict[str, Any]:
    """Outputs of upstream nodes that feed ``node_id``, keyed by source ID."""
    return {
        edge.source: context[edge.source]
        for edge in edges
        if edge.target == node_id and edge.source in context
    }


def get_terminal_nodes(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> List[WorkflowNode]:
    """Nodes with no outgoing edges."""
    sources = {edge.source for edge in edges}
    return [node for node in nodes if node.id not in sources]


def find_node_by_type(nodes: Sequence[WorkflowNode], node_type: NodeType) -> Optional[WorkflowNode]:
    for node in nodes:
        if node.type == node_type.value:
            return node
    return None
