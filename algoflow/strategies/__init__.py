"""
Strategy templates.
"""

from .templates import (
    StrategyTemplate,
    TemplateCategory,
    TemplateError,
    TemplateParameter,
    TemplateRegistry,
    build_workflow,
    default_templates,
)

__all__ = [
    "StrategyTemplate",
    "TemplateCategory",
    "TemplateError",
    "TemplateParameter",
    "TemplateRegistry",
    "build_workflow",
    "default_templates",
]
