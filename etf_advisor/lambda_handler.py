"""
AWS Lambda handler: normalises the event, calls the Agent, returns schema-valid output.
Adds structured, JSON CloudWatch-friendly logs with correlation IDs.

PURPOSE:
- Entry point for AWS Lambda behind API Gateway.
- Parses proxy-integration bodies, delegates to Agent, validates the result
  against agent_output.schema.json and wraps it in an HTTP-style response.

CONTEXT:
- Always answers 200 with a JSON body so API Gateway never retries a chat turn.

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
import json
import time
import traceback
import uuid
from typing import Any, Dict

from jsonschema import ValidationError

from etf_advisor.agent import UNEXPECTED_ERROR, Agent
from etf_advisor.agent_io import error_to_string, make_ok_message, validate_agent_output
from etf_advisor.logging_setup import configure_logging
from etf_advisor.observability import init_observability

log = configure_logging()
init_observability()


def _response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """Wrap a dict into an API Gateway compatible response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _latency_ms(t0: float) -> float:
    return round((time.time() - t0) * 1000, 1)


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Lambda entry point.

    flow:
    1) Bind request/correlation IDs for traceability.
    2) Normalise body (API Gateway proxy format if present).
    3) Agent().handle(body).
    4) Validate the result against the AgentOutput schema; a violation becomes
       a schema-valid error payload.
    5) Unhandled exceptions become a generic error payload; details go to the log only.
    """
    t0 = time.time()
    event = event if isinstance(event, dict) else {}

    request_id = getattr(context, "aws_request_id", None) or str(uuid.uuid4())
    correlation_id = (event.get("headers", {}) or {}).get("x-correlation-id") or str(uuid.uuid4())
    rlog = log.bind(request_id=request_id, correlation_id=correlation_id)
    rlog.info("request.received", has_body="body" in event)

    body = event
    if "body" in event:
        try:
            body = json.loads(event["body"]) if isinstance(event["body"], str) else (event["body"] or {})
        except json.JSONDecodeError:
            body = {}
            rlog.warning("request.body_parse_failed")

    try:
        result = Agent().handle(body)

        try:
            validate_agent_output(result)
        except ValidationError as e:
            latency_ms = _latency_ms(t0)
            rlog.error("response.schema_invalid", error=error_to_string(e), latency_ms=latency_ms)
            return _response({
                "status": "error",
                "messages": [make_ok_message(UNEXPECTED_ERROR)],
                "latency_ms": latency_ms,
                "trace": result.get("trace", []),
            })

        result["latency_ms"] = _latency_ms(t0)
        rlog.info("response.success", status=result["status"], latency_ms=result["latency_ms"])
        return _response(result)

    except Exception as e:
        latency_ms = _latency_ms(t0)
        rlog.error("response.error", error=str(e), traceback=traceback.format_exc(limit=2),
                   latency_ms=latency_ms)
        return _response({
            "status": "error",
            "messages": [make_ok_message(UNEXPECTED_ERROR)],
            "latency_ms": latency_ms,
        })
