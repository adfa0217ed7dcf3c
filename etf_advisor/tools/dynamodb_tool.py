# PURPOSE: Helper functions to interact with DynamoDB for session storage.
# CONTEXT: Used by the state manager to save, fetch and drop intake sessions.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
import os
from typing import Any, Dict, Optional
import boto3
from botocore.exceptions import ClientError


def _table():
    """
    Table handle for the session table.

    notes:
    - Resolved per call so region/table env changes (and moto in tests) apply.
    """
    name = os.getenv("DDB_SESSION_TABLE", "advisor_sessions")
    region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "af-south-1"
    return boto3.resource("dynamodb", region_name=region).Table(name)


def get_item(session_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve one item (by session_id) from DynamoDB.

    returns:
    - dict or None – the stored record, or None if not found.

    raises:
    - RuntimeError – if the DynamoDB request fails (wraps ClientError).
    """
    try:
        res = _table().get_item(Key={"session_id": session_id})
        return res.get("Item")
    except ClientError as e:
        raise RuntimeError(f"DDB get_item failed: {e.response['Error']['Message']}") from e


def put_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert or replace a full record (must include 'session_id').

    returns:
    - dict – {"ok": True} on success.
    """
    try:
        _table().put_item(Item=item)
        return {"ok": True}
    except ClientError as e:
        raise RuntimeError(f"DDB put_item failed: {e.response['Error']['Message']}") from e


def delete_item(session_id: str) -> Dict[str, Any]:
    try:
        _table().delete_item(Key={"session_id": session_id})
        return {"ok": True}
    except ClientError as e:
        raise RuntimeError(f"DDB delete_item failed: {e.response['Error']['Message']}") from e
