"""
eqrewrite.core: infrastructure shared by the rule layer.

Modules:
    config   - RewriteConfiguration and RuleConfiguration (JSON options)
    logging  - EqLogger with MDC support, configure_loggers
    registry - EventEmitter
    stats    - RewriteStatistics tracking
"""

from .config import (
    DEFAULT_APPLICATION_LIMIT,
    ConfigConstants,
    RewriteConfiguration,
    RuleConfiguration,
)
from .logging import (
    EqLogger,
    configure_loggers,
    getLogger,
)
from .registry import EventEmitter
from .stats import RewriteEvent, RewriteStatistics, RuleExecution

__all__ = [
    "DEFAULT_APPLICATION_LIMIT",
    "ConfigConstants",
    "RewriteConfiguration",
    "RuleConfiguration",
    "EqLogger",
    "configure_loggers",
    "getLogger",
    "EventEmitter",
    "RewriteEvent",
    "RewriteStatistics",
    "RuleExecution",
]
