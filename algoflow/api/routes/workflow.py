# algoflow/api/routes/workflow.py
"""
API route for workflow validation.
"""

from fastapi import APIRouter

from ...models.workflow import WorkflowGraph
from ...workflow.graph import topo_sort, validate_graph


router = APIRouter()


@router.post("/api/workflow/validate")
def validate_workflow(graph: WorkflowGraph):
    """Validate a graph and return its execution order."""
    validate_graph(graph.nodes, graph.edges)
    ordered = topo_sort(graph.nodes, graph.edges)
    return {"valid": True, "order": [node.id for node in ordered]}
