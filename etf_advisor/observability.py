"""
Observability bootstrap.

PURPOSE:
- Optionally enables AWS X-Ray distributed tracing when USE_XRAY=1.
- Provides a subsegment context manager for the slow steps of a request
  (market snapshot, allocation).

CONTEXT:
- In Lambda the parent segment is owned by the runtime; locally and in tests
  tracing stays off and xray_segment is a no-op.
- Logging is configured separately in logging_setup.py.

CREDITS:
- Original work — no external code reuse.
"""
from __future__ import annotations
import os

import structlog
from aws_xray_sdk.core import patch_all, xray_recorder

log = structlog.get_logger(component="observability")


def tracing_enabled() -> bool:
    return os.getenv("USE_XRAY", "0") == "1"


def init_observability():
    """
    Optionally initialise AWS X-Ray instrumentation.

    returns:
    - xray_recorder if tracing is enabled, otherwise None.

    notes:
    - patch_all() instruments boto3/botocore so DynamoDB session calls show up
      as subsegments.
    """
    if not tracing_enabled():
        return None
    xray_recorder.configure(service=os.getenv("XRAY_SERVICE_NAME", "ETFAdvisor"))
    patch_all()
    return xray_recorder


class xray_segment:
    """
    Context manager for manual subsegments.

    usage example:
    >>> with xray_segment("market_context"):
    >>>     market = get_market_context()

    behaviour:
    - No-op unless USE_XRAY=1.
    - Tracing problems are logged and never interrupt the wrapped code.
    """

    def __init__(self, name: str):
        self.name = name
        self.sub = None

    def __enter__(self):
        if tracing_enabled():
            try:
                self.sub = xray_recorder.begin_subsegment(self.name)
            except Exception as e:
                log.warning("xray.begin_failed", segment=self.name, error=str(e))
                self.sub = None
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.sub is None:
            return False
        try:
            if exc is not None:
                self.sub.add_exception(exc, [])
            xray_recorder.end_subsegment()
        except Exception as e:
            log.warning("xray.end_failed", segment=self.name, error=str(e))
        return False
