# algoflow/api/main.py
"""
FastAPI application exposing the engine over HTTP.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..brokers.errors import BrokerError
from ..brokers.router import BrokerRouter, create_default_router
from ..conditions.errors import ConditionError
from ..core.errors import BacktestError
from ..indicators.errors import IndicatorError
from ..indicators.registry import IndicatorRegistry, create_default_registry
from ..models.config import AppConfig
from ..strategies.templates import TemplateError, TemplateRegistry
from ..utils.config_loader import get_default_config, load_config
from ..workflow.errors import CycleDetectedError, WorkflowError
from .routes import backtest, conditions, indicators, templates, workflow


logger = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    try:
        return load_config()
    except FileNotFoundError:
        logger.warning("No configuration file found, using defaults")
        return get_default_config()


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(BrokerError)
    async def broker_error_handler(request: Request, exc: BrokerError):
        logger.error(f"Broker error on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code or 502, content=exc.to_dict())

    @app.exception_handler(IndicatorError)
    async def indicator_error_handler(request: Request, exc: IndicatorError):
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "code": exc.code, "indicatorType": exc.indicator_type},
        )

    @app.exception_handler(ConditionError)
    async def condition_error_handler(request: Request, exc: ConditionError):
        content = {"error": exc.message, "code": exc.code}
        if exc.position is not None:
            content["position"] = exc.position
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(TemplateError)
    async def template_error_handler(request: Request, exc: TemplateError):
        status = 404 if exc.code == "TEMPLATE_NOT_FOUND" else 400
        return JSONResponse(status_code=status, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(WorkflowError)
    async def workflow_error_handler(request: Request, exc: WorkflowError):
        content = {"error": exc.message, "code": exc.code}
        if isinstance(exc, CycleDetectedError):
            content["nodeIds"] = exc.node_ids
        return JSONResponse(status_code=422, content=content)

    @app.exception_handler(BacktestError)
    async def backtest_error_handler(request: Request, exc: BacktestError):
        return JSONResponse(status_code=422, content={"error": exc.message, "code": exc.code})


def create_app(
    config: Optional[AppConfig] = None,
    router: Optional[BrokerRouter] = None,
    registry: Optional[IndicatorRegistry] = None,
    template_registry: Optional[TemplateRegistry] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Application configuration (configs/config.yaml or defaults if None)
        router: Broker router (default adapters if None)
        registry: Indicator registry (default calculators if None)
        template_registry: Strategy templates (presets if None)
    """
    config = config or _load_app_config()

    app = FastAPI(title=config.ui.title)
    app.state.config = config
    app.state.broker_router = router or create_default_router(timeout_ms=config.broker.timeout_ms)
    app.state.indicator_registry = registry if registry is not None else create_default_registry()
    app.state.template_registry = template_registry if template_registry is not None else TemplateRegistry()

    _register_exception_handlers(app)

    app.include_router(backtest.router)
    app.include_router(indicators.router)
    app.include_router(conditions.router)
    app.include_router(templates.router)
    app.include_router(workflow.router)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    logger.info(f"API ready: {len(app.state.indicator_registry)} indicators, {len(app.state.template_registry)} templates")
    return app


app = create_app()
