# algoflow/api/routes/templates.py
"""
API routes for strategy templates.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...strategies.templates import build_workflow


router = APIRouter()


class BuildTemplateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str = Field(..., min_length=1)
    params: Dict[str, Any] = Field(default_factory=dict)
    interval: str = "1d"
    broker: str = "dhan"
    security_id: Optional[str] = None
    exchange_segment: Optional[str] = None
    quantity: float = Field(default=1, gt=0)
    dry_run: Optional[bool] = None


@router.get("/api/templates")
def list_templates(request: Request):
    return {"templates": [t.to_dict() for t in request.app.state.template_registry.list_templates()]}


@router.post("/api/templates/{template_id}/build")
def build_template(template_id: str, body: BuildTemplateRequest, request: Request):
    graph = build_workflow(
        template_id,
        body.symbol,
        params=body.params,
        interval=body.interval,
        broker=body.broker,
        security_id=body.security_id,
        exchange_segment=body.exchange_segment,
        quantity=body.quantity,
        dry_run=body.dry_run if body.dry_run is not None else request.app.state.config.broker.dry_run,
        registry=request.app.state.template_registry,
    )
    return {"workflow": graph.to_dict()}
