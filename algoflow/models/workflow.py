# algoflow/models/workflow.py
"""
Workflow graph models.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NodeType(str, Enum):
    """Node kinds a workflow may contain."""
    CANDLES = "candles"
    INDICATORS = "indicators"
    CONDITION = "condition"
    ORDER = "order"
    NOTIFY = "notify"


class WorkflowNode(BaseModel):
    """A node in the workflow graph; ``data`` holds node-specific settings."""
    id: str = Field(..., description="Unique node ID")
    type: str = Field(..., description="Node type (candles, indicators, condition, order, notify)")
    data: Dict[str, Any] = Field(default_factory=dict, description="Node configuration")

    @property
    def node_type(self) -> NodeType:
        return NodeType(self.type)


class WorkflowEdge(BaseModel):
    """Directed edge from ``source`` to ``target``."""
    source: str = Field(..., description="Source node ID")
    target: str = Field(..., description="Target node ID")
    id: Optional[str] = Field(None, description="Edge ID")


class WorkflowGraph(BaseModel):
    """Nodes plus edges."""
    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)

    def find_node_by_type(self, node_type: NodeType) -> Optional[WorkflowNode]:
        """Return the first node of the given type, if any."""
        for node in self.nodes:
            if node.type == node_type.value:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(exclude_none=True)


class ExecutionLog(BaseModel):
    """Per-node record of a live workflow run."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str = Field(..., description="Executed node ID")
    type: str = Field(..., description="Node type")
    input: Any = Field(None, description="Context the node received")
    output: Any = Field(None, description="Node result, None on failure")
    duration_ms: float = Field(..., description="Wall time spent in the node")
    error: Optional[str] = Field(None, description="Failure message")


class WorkflowResult(BaseModel):
    """Outcome of a live workflow run."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    logs: List[ExecutionLog] = Field(default_factory=list)
    final_output: Any = Field(None, description="Result of the last executed node")
    success: bool = Field(..., description="True when every node completed")
    total_duration_ms: float = Field(..., description="Wall time for the whole run")
    error: Optional[str] = Field(None, description="Failure message when success is False")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')
