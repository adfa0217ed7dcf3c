"""
Session state manager for the advisor chat.

PURPOSE:
- Persists the partially completed UserProfile between chat turns.
- Each session carries a TTL (time-to-live) so abandoned intakes expire on
  their own; nothing ever has to clean them up.

CONTEXT:
- Used by the Agent when a request carries a session_id instead of the profile.
- The profile is stored as a JSON string because DynamoDB rejects Python floats.

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
import json
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from etf_advisor.profile import UserProfile
from etf_advisor.tools import dynamodb_tool as ddb

# Default number of days to retain session records before DynamoDB expiry.
DEFAULT_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "14"))


def _now_epoch() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def _ttl_epoch(days: int = DEFAULT_TTL_DAYS) -> int:
    """
    Unix timestamp (seconds) for DynamoDB TTL expiration.

    parameters:
    - days: int – number of days from now to expire (default 14).
    """
    return int((datetime.now(timezone.utc) + timedelta(days=days)).timestamp())


def load_profile(session_id: str) -> Optional[UserProfile]:
    """
    Fetch the stored profile for a session.

    returns:
    - UserProfile or None – None when the session is unknown or already past its TTL.

    notes:
    - DynamoDB deletes expired items lazily, so the TTL is checked here as well.
    """
    item = ddb.get_item(session_id)
    if not item:
        return None
    if int(item.get("ttl_epoch", 0)) <= _now_epoch():
        return None
    return UserProfile.from_dict(json.loads(item.get("profile") or "{}"))


def save_profile(session_id: str, profile: UserProfile) -> dict:
    """Store the profile and push the session's expiry out by the full TTL."""
    item = {
        "session_id": session_id,
        "profile": json.dumps(profile.to_dict()),
        "ttl_epoch": _ttl_epoch(),
    }
    return ddb.put_item(item)


def clear_session(session_id: str) -> dict:
    return ddb.delete_item(session_id)
