"""
I/O helpers for schemas and message construction.

PURPOSE: Central place for JSON schema validation and chat message formatting used
         across the advisor agent, the allocation pipeline and the Lambda entrypoint.
CONTEXT: Schemas ship inside the package (etf_advisor/schemas/), so validation works
         the same from a checkout, an installed wheel or a Lambda bundle.
CREDITS: Original work — no external code reuse.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft7Validator, ValidationError

SCHEMA_DIR = pathlib.Path(__file__).resolve().parent / "schemas"


# -------------------- Schema loading utilities -------------------- #

@lru_cache(maxsize=64)
def _load_schema_cached(abs_path: str) -> Dict[str, Any]:
    """Read and parse a JSON schema file once per process."""
    return json.loads(pathlib.Path(abs_path).read_text(encoding="utf-8"))


def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a JSON schema by file name (or by a path relative to the package).

    parameters:
    - name: str – e.g. "agent_output.schema.json" or "schemas/agent_output.schema.json".

    returns:
    - dict – schema as a Python dictionary.

    raises:
    - FileNotFoundError – if the schema is not shipped with the package.
    - json.JSONDecodeError – if the file is not valid JSON.
    """
    p = SCHEMA_DIR / pathlib.Path(name).name
    if not p.exists():
        raise FileNotFoundError(f"Schema not found at: {p}")
    return _load_schema_cached(str(p))


# -------------------- Validation helpers -------------------- #

def validate_with_schema(instance: Dict[str, Any], schema: Dict[str, Any]) -> None:
    """
    Validate a given instance against a provided schema.

    raises:
    - ValidationError – if instance fails to meet schema requirements.
    """
    Draft7Validator(schema).validate(instance)


def validate_allocation_request(payload: Dict[str, Any]) -> None:
    """Check a {user_profile, amount, ...} request before the engine sees it."""
    validate_with_schema(payload, load_schema("allocation_request.schema.json"))


def validate_allocation_result(result: Dict[str, Any]) -> None:
    validate_with_schema(result, load_schema("allocation_result.schema.json"))


def validate_agent_output(agent_output: Dict[str, Any]) -> None:
    """Validate the final agent output returned to chat clients."""
    validate_with_schema(agent_output, load_schema("agent_output.schema.json"))


# -------------------- Message construction helpers -------------------- #

def make_ok_message(content: str) -> Dict[str, str]:
    """Assistant-side chat message."""
    return {"role": "assistant", "content": str(content)}


def make_user_message(content: str) -> Dict[str, str]:
    return {"role": "user", "content": str(content)}


def error_to_string(err: Exception) -> str:
    """
    Convert exceptions into readable strings.

    notes:
    - ValidationError messages include a pointer path showing where validation
      failed (e.g. "-1 is less than the minimum of 0 at $.amount").
    """
    if isinstance(err, ValidationError):
        path = "$" + "".join(f"[{repr(p)}]" if isinstance(p, int) else f".{p}" for p in err.path)
        return f"{err.message} at {path}"
    return f"{type(err).__name__}: {err}"


# -------------------- Public exports -------------------- #

__all__ = [
    "load_schema",
    "validate_with_schema",
    "validate_allocation_request",
    "validate_allocation_result",
    "validate_agent_output",
    "make_ok_message",
    "make_user_message",
    "error_to_string",
]
