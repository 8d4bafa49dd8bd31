"""
structlog setup for pricewatch.

Every entry carries the trace id of the request (or refresh run) that
produced it, and the pipeline stage that emitted it, so a single product
URL can be followed from fetch through the extractors to the merged
result.
"""
import uuid
import logging
import structlog
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

from pricewatch.config import config

# One id per scrape/refresh request; empty until first used
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def _new_trace_id() -> str:
    return uuid.uuid4().hex[:8]


def get_trace_id() -> str:
    """Trace id of the current request, created on first use."""
    trace_id = trace_id_var.get()
    if not trace_id:
        trace_id = _new_trace_id()
        trace_id_var.set(trace_id)
    return trace_id


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Start a new trace (or adopt the caller's id) and return it."""
    trace_id = trace_id or _new_trace_id()
    trace_id_var.set(trace_id)
    return trace_id


def add_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict["trace_id"] = get_trace_id()
    return event_dict


def configure_logging():
    """
    Install the structlog pipeline.

    LOG_FORMAT=json emits one JSON object per line for log shipping;
    anything else uses the colored console renderer. Entries below
    LOG_LEVEL are dropped before any processor runs.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_id,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


class LayerLogger:
    """
    Logger for one pipeline stage (fetcher, an extractor, a layer).

    The stage name is bound once as ``stage``; the helpers below fix the
    event names so that log queries can rely on them:

        stage_decision, stage_<status>, stage_skip, source_fallback,
        stage_error, page_fetch, product_extracted
    """

    def __init__(self, layer_name: str):
        self.layer_name = layer_name
        self.logger = get_logger(layer_name).bind(stage=layer_name)

    def log_decision(self, decision: str, reason: str, url: Optional[str] = None, **extra):
        """A branch taken by the stage, e.g. known vs generic retailer."""
        self.logger.info("stage_decision", decision=decision, reason=reason, url=url, **extra)

    def log_action(self, action: str, status: str = "started", **extra):
        self.logger.info(f"stage_{status}", action=action, **extra)

    def log_skip(self, action: str, reason: str, **extra):
        """Expected, absorbed failure such as one malformed JSON-LD block."""
        self.logger.debug("stage_skip", action=action, reason=reason, **extra)

    def log_fallback(self, from_source: str, to_source: str, reason: str, **extra):
        """A higher-priority source produced nothing; a lower one takes over."""
        self.logger.warning(
            "source_fallback",
            from_source=from_source,
            to_source=to_source,
            reason=reason,
            **extra
        )

    def log_error(self, error: str, error_type: str = "unknown", **extra):
        self.logger.error("stage_error", error=error, error_type=error_type, **extra)

    def log_fetch(self, url: str, status_code: Optional[int], result: str, **extra):
        """Outcome of one page request ("success", "http_status_error", ...)."""
        self.logger.info("page_fetch", url=url, status_code=status_code, result=result, **extra)

    def log_extraction(
        self,
        fields_present: List[str],
        fields_missing: List[str],
        sources: Dict[str, str],
        **extra
    ):
        """
        Final merged product for a URL.

        ``sources`` maps each present field to the extractor that won it
        (retailer, json_ld, meta or generic).
        """
        self.logger.info(
            "product_extracted",
            fields_present=fields_present,
            fields_missing=fields_missing,
            sources=sources,
            **extra
        )


configure_logging()
